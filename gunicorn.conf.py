"""
Gunicorn configuration for the areuok API.

Env vars that override defaults:
  PORT     — TCP port to bind
  WORKERS  — number of worker processes (default: 1)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# One worker: device_config writes are serialized by an in-process lock only.
# More workers means concurrent writes to the same record, last writer wins.
workers = int(os.environ.get("WORKERS", "1"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Remote API and SMTP calls are bounded well below this.
timeout = 60

# stdout only
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
