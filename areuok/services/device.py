"""
Device identity service.

The local device is identified by a UUID generated on first access and
persisted inside the device_config record together with the supervision
ledger. Every other service receives the loaded DeviceConfig explicitly.

Public API
----------
load_or_create_device_config(store)  -> DeviceConfig
save_device_config(store, config)    -> None
device_config_transaction(store)     -> context manager yielding DeviceConfig
set_device_mode(config, mode)        -> DeviceConfig
update_device_name(config, name)     -> DeviceConfig
set_device_imei(config, imei)        -> DeviceConfig
device_imei(config)                  -> str
"""
from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from pydantic import ValidationError

from areuok.core.errors import StorageError
from areuok.schemas.device import DeviceConfig, DeviceInfo, DeviceMode
from areuok.services.storage import RecordKey, RecordStore

logger = logging.getLogger(__name__)

# Serializes read-modify-write cycles on device_config inside this process.
# There is no cross-process lock: run a single worker per device database.
_config_lock = threading.RLock()


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def new_device_config(device_id: str | None = None) -> DeviceConfig:
    device_id = device_id or str(uuid.uuid4())
    return DeviceConfig(
        device=DeviceInfo(
            device_id=device_id,
            device_name=f"Device-{device_id[:8]}",
            mode=DeviceMode.signin,
            created_at=utc_now_iso(),
        ),
    )


def _validate_device_config(payload: dict) -> DeviceConfig:
    try:
        return DeviceConfig.model_validate(payload)
    except ValidationError as exc:
        raise StorageError(RecordKey.DEVICE_CONFIG, "load", str(exc)) from exc


def load_or_create_device_config(store: RecordStore) -> DeviceConfig:
    payload = store.load(RecordKey.DEVICE_CONFIG)
    if payload is not None:
        return _validate_device_config(payload)

    with _config_lock:
        # Another thread may have created it while we waited.
        payload = store.load(RecordKey.DEVICE_CONFIG)
        if payload is not None:
            return _validate_device_config(payload)
        config = new_device_config()
        save_device_config(store, config)
        logger.info("Created device identity %s", config.device.device_id)
        return config


def save_device_config(store: RecordStore, config: DeviceConfig) -> None:
    store.save(RecordKey.DEVICE_CONFIG, config.model_dump(mode="json"))


@contextmanager
def device_config_transaction(store: RecordStore) -> Iterator[DeviceConfig]:
    """
    Load the device config, hand it to the caller and save it afterwards.

    If the block raises, nothing is written: the in-memory changes are
    simply dropped with the object.
    """
    with _config_lock:
        config = load_or_create_device_config(store)
        yield config
        save_device_config(store, config)


# ---------------------------------------------------------------------------
# Identity mutations (in memory; persist via device_config_transaction)
# ---------------------------------------------------------------------------

def set_device_mode(config: DeviceConfig, mode: DeviceMode) -> DeviceConfig:
    if config.device.mode != mode:
        logger.info("Device %s mode %s -> %s", config.device.device_id, config.device.mode.value, mode.value)
    config.device.mode = mode
    return config


def update_device_name(config: DeviceConfig, name: str) -> DeviceConfig:
    config.device.device_name = name
    return config


def set_device_imei(config: DeviceConfig, imei: str) -> DeviceConfig:
    config.device.imei = imei
    return config


def device_imei(config: DeviceConfig) -> str:
    return config.device.imei or config.device.device_id
