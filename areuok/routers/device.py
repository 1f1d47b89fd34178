"""
Device router — the local device identity.

GET /device          — full device config (created on first access)
PUT /device/mode     — switch between "signin" and "supervisor"
PUT /device/name     — rename the device
PUT /device/imei     — store a hardware identifier
GET /device/imei     — stored IMEI, or the device id when none is set
"""
from fastapi import APIRouter, Depends

from areuok.routers.deps import get_store
from areuok.schemas.device import (
    DeviceConfig,
    ImeiResponse,
    RenameRequest,
    SetImeiRequest,
    SetModeRequest,
)
from areuok.services.device import (
    device_config_transaction,
    device_imei,
    load_or_create_device_config,
    set_device_imei,
    set_device_mode,
    update_device_name,
)
from areuok.services.storage import RecordStore

router = APIRouter(prefix="/device", tags=["device"])


@router.get("", response_model=DeviceConfig, summary="Local device config")
def get_device_config(store: RecordStore = Depends(get_store)):
    return load_or_create_device_config(store)


@router.put("/mode", response_model=DeviceConfig, summary="Set device mode")
def put_mode(payload: SetModeRequest, store: RecordStore = Depends(get_store)):
    with device_config_transaction(store) as config:
        set_device_mode(config, payload.mode)
    return config


@router.put("/name", response_model=DeviceConfig, summary="Rename device")
def put_name(payload: RenameRequest, store: RecordStore = Depends(get_store)):
    """
    Renaming does not rewrite existing requests or relationships: their
    names are snapshots taken when they were created.
    """
    with device_config_transaction(store) as config:
        update_device_name(config, payload.name)
    return config


@router.put("/imei", response_model=DeviceConfig, summary="Set IMEI")
def put_imei(payload: SetImeiRequest, store: RecordStore = Depends(get_store)):
    with device_config_transaction(store) as config:
        set_device_imei(config, payload.imei)
    return config


@router.get("/imei", response_model=ImeiResponse, summary="IMEI or device id")
def get_imei(store: RecordStore = Depends(get_store)):
    return ImeiResponse(imei=device_imei(load_or_create_device_config(store)))
