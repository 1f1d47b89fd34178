"""
Supervision router — request lifecycle and supervisor views.

POST   /supervision/requests                 — supervisor sends a request
GET    /supervision/requests/pending         — requests waiting for this device
POST   /supervision/requests/{id}/cancel     — requester cancels
POST   /supervision/requests/{id}/accept     — target accepts (creates relationship)
POST   /supervision/requests/{id}/reject     — target rejects
DELETE /supervision/relationships/{id}       — remove a relationship
GET    /supervision/devices                  — status of supervised devices
GET    /supervision/status                   — supervised devices + outgoing pending requests
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from areuok.core.config import settings
from areuok.routers.deps import get_store
from areuok.schemas.supervision import (
    CreateRequestBody,
    DeviceStatus,
    PendingRequestList,
    SupervisionRelationship,
    SupervisionRequest,
    SupervisorStatus,
)
from areuok.services import ledger
from areuok.services.checkin import load_checkin
from areuok.services.device import device_config_transaction, load_or_create_device_config
from areuok.services.storage import RecordStore
from areuok.services.streak import utc_today
from areuok.services.supervision_view import supervised_devices_for, supervisor_status_for

router = APIRouter(prefix="/supervision", tags=["supervision"])


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

@router.post(
    "/requests",
    response_model=SupervisionRequest,
    status_code=status.HTTP_201_CREATED,
    summary="Send a supervision request",
    responses={403: {"description": "NOT_AUTHORIZED: device is not in supervisor mode."}},
)
def create_request(payload: CreateRequestBody, store: RecordStore = Depends(get_store)):
    with device_config_transaction(store) as config:
        request = ledger.create_request(config, payload.target_device_id)
    return request


@router.get(
    "/requests/pending",
    response_model=PendingRequestList,
    summary="Pending requests addressed to this device",
)
def pending_requests(store: RecordStore = Depends(get_store)):
    config = load_or_create_device_config(store)
    items = ledger.list_pending_for(config, config.device.device_id)
    return PendingRequestList(total=len(items), items=items)


@router.post(
    "/requests/{request_id}/cancel",
    response_model=SupervisionRequest,
    summary="Cancel a request",
    responses={
        404: {"description": "REQUEST_NOT_FOUND"},
        409: {"description": "REQUEST_NOT_PENDING (only when terminal overwrite is disabled)"},
    },
)
def cancel_request(request_id: str, store: RecordStore = Depends(get_store)):
    with device_config_transaction(store) as config:
        request = ledger.cancel_request(
            config, request_id,
            allow_terminal=settings.LEDGER_CANCEL_OVERWRITES_TERMINAL,
        )
    return request


@router.post(
    "/requests/{request_id}/accept",
    response_model=SupervisionRelationship,
    summary="Accept a request addressed to this device",
    responses={
        404: {"description": "REQUEST_NOT_FOUND: unknown or already processed."},
        403: {"description": "WRONG_TARGET: request is for another device."},
    },
)
def accept_request(request_id: str, store: RecordStore = Depends(get_store)):
    with device_config_transaction(store) as config:
        relationship = ledger.accept_request(config, request_id)
    return relationship


@router.post(
    "/requests/{request_id}/reject",
    response_model=SupervisionRequest,
    summary="Reject a request addressed to this device",
    responses={
        404: {"description": "REQUEST_NOT_FOUND: unknown or already processed."},
        403: {"description": "WRONG_TARGET: request is for another device."},
    },
)
def reject_request(request_id: str, store: RecordStore = Depends(get_store)):
    with device_config_transaction(store) as config:
        request = ledger.reject_request(config, request_id)
    return request


# ---------------------------------------------------------------------------
# Relationships and views
# ---------------------------------------------------------------------------

@router.delete(
    "/relationships/{relationship_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a supervision relationship",
    responses={404: {"description": "RELATIONSHIP_NOT_FOUND"}},
)
def remove_relationship(relationship_id: str, store: RecordStore = Depends(get_store)):
    with device_config_transaction(store) as config:
        ledger.remove_relationship(config, relationship_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/devices",
    response_model=list[DeviceStatus],
    summary="Status of devices supervised by this device",
)
def supervised_devices(store: RecordStore = Depends(get_store)):
    config = load_or_create_device_config(store)
    return supervised_devices_for(config, load_checkin(store), utc_today())


@router.get(
    "/status",
    response_model=SupervisorStatus,
    summary="Supervised devices plus outgoing pending requests",
)
def supervisor_status(store: RecordStore = Depends(get_store)):
    config = load_or_create_device_config(store)
    return supervisor_status_for(config, load_checkin(store), utc_today())
