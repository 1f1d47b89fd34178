"""
Centralized logging configuration.

Stdout only: gunicorn / the container runtime collects it.
"""
import logging
import sys
from typing import Optional

from areuok.core.config import Settings, settings as default_settings

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: Optional[Settings] = None) -> None:
    config = config or default_settings
    level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("areuok").setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
