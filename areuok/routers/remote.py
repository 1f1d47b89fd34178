"""
Remote mirror router — thin proxy over RemoteApiClient.

Responses use the canonical shapes; the remote field names never reach the
client. Remote failures surface as 502 REMOTE_ERROR.

POST   /remote/devices/register
GET    /remote/devices/{device_id}
PATCH  /remote/devices/{device_id}/name
POST   /remote/devices/{device_id}/signin
GET    /remote/devices/{device_id}/status
GET    /remote/search/devices?q=
POST   /remote/supervision/request
GET    /remote/supervision/pending/{device_id}
POST   /remote/supervision/accept
POST   /remote/supervision/reject
GET    /remote/supervision/list/{device_id}
DELETE /remote/supervision/{relation_id}
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from areuok.schemas.device import DeviceInfo
from areuok.schemas.remote import (
    RemotePairBody,
    RemoteRegisterBody,
    RemoteRenameBody,
    RemoteSigninResult,
)
from areuok.schemas.supervision import (
    DeviceStatus,
    SupervisionRelationship,
    SupervisionRequest,
)
from areuok.services.remote import RemoteApiClient, get_remote_client
from areuok.services.streak import utc_today

router = APIRouter(
    prefix="/remote",
    tags=["remote"],
    responses={502: {"description": "REMOTE_ERROR: remote API failed or answered garbage."}},
)


# ---------------------------------------------------------------------------
# Devices
# ---------------------------------------------------------------------------

@router.post("/devices/register", response_model=DeviceInfo, summary="Register device remotely")
def register_device(payload: RemoteRegisterBody, remote: RemoteApiClient = Depends(get_remote_client)):
    return remote.register_device(payload.device_name, payload.imei, payload.mode)


@router.get("/devices/{device_id}", response_model=DeviceInfo, summary="Remote device info")
def get_device(device_id: str, remote: RemoteApiClient = Depends(get_remote_client)):
    return remote.get_device(device_id)


@router.patch("/devices/{device_id}/name", response_model=DeviceInfo, summary="Rename remote device")
def rename_device(
    device_id: str,
    payload: RemoteRenameBody,
    remote: RemoteApiClient = Depends(get_remote_client),
):
    return remote.rename_device(device_id, payload.device_name)


@router.post("/devices/{device_id}/signin", response_model=RemoteSigninResult, summary="Remote sign-in")
def signin(device_id: str, remote: RemoteApiClient = Depends(get_remote_client)):
    return RemoteSigninResult(device_id=device_id, streak=remote.signin(device_id))


@router.get("/devices/{device_id}/status", response_model=DeviceStatus, summary="Remote device status")
def device_status(device_id: str, remote: RemoteApiClient = Depends(get_remote_client)):
    return remote.device_status(device_id, utc_today())


@router.get("/search/devices", response_model=list[DeviceInfo], summary="Search remote devices")
def search_devices(
    q: str = Query(min_length=1, description="Name or id fragment."),
    remote: RemoteApiClient = Depends(get_remote_client),
):
    return remote.search_devices(q)


# ---------------------------------------------------------------------------
# Supervision
# ---------------------------------------------------------------------------

@router.post(
    "/supervision/request",
    response_model=SupervisionRequest,
    status_code=status.HTTP_201_CREATED,
    summary="Send a supervision request remotely",
)
def send_request(payload: RemotePairBody, remote: RemoteApiClient = Depends(get_remote_client)):
    return remote.send_request(payload.supervisor_id, payload.target_id)


@router.get(
    "/supervision/pending/{device_id}",
    response_model=list[SupervisionRequest],
    summary="Remote pending requests for a device",
)
def pending(device_id: str, remote: RemoteApiClient = Depends(get_remote_client)):
    return remote.pending_requests(device_id)


@router.post("/supervision/accept", status_code=status.HTTP_204_NO_CONTENT, summary="Accept remotely")
def accept(payload: RemotePairBody, remote: RemoteApiClient = Depends(get_remote_client)):
    remote.accept(payload.supervisor_id, payload.target_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/supervision/reject", status_code=status.HTTP_204_NO_CONTENT, summary="Reject remotely")
def reject(payload: RemotePairBody, remote: RemoteApiClient = Depends(get_remote_client)):
    remote.reject(payload.supervisor_id, payload.target_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/supervision/list/{device_id}",
    response_model=list[SupervisionRelationship],
    summary="Remote relationships of a device",
)
def relationships(device_id: str, remote: RemoteApiClient = Depends(get_remote_client)):
    return remote.relationships(device_id)


@router.delete(
    "/supervision/{relation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a remote relationship",
)
def remove(relation_id: str, remote: RemoteApiClient = Depends(get_remote_client)):
    remote.remove_relationship(relation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
