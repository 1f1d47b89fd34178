import logging

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from areuok.db.base import get_db
from areuok.core.config import settings
from areuok.core.logging_config import setup_logging
from areuok.routers import checkin as checkin_router
from areuok.routers import device as device_router
from areuok.routers import supervision as supervision_router
from areuok.routers import notifications as notifications_router
from areuok.routers import remote as remote_router
from areuok.core.errors import (
    AreuokException,
    areuok_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="areuok API",
    description=(
        "**Are You OK?** daily check-ins with multi-device supervision.\n\n"
        "Tracks the local owner's check-in streak and lets a supervisor device "
        "request, accept and observe supervised devices.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(AreuokException, areuok_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(checkin_router.router)
app.include_router(device_router.router)
app.include_router(supervision_router.router)
app.include_router(notifications_router.router)
app.include_router(remote_router.router)

logger.info("areuok API ready (env=%s)", settings.APP_ENV)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        logger.exception("Health check: database unreachable")
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
