"""
Remote API client (optional mirror of devices and supervision).

Every public method returns canonical models; the remote field names stop
at the translation helpers below. Non-2xx responses and unparsable bodies
raise RemoteError. No retries.

Devices                                  Supervision
-------                                  -----------
register_device   POST  /devices/register        send_request   POST   /supervision/request
get_device        GET   /devices/{id}            pending        GET    /supervision/pending/{id}
rename_device     PATCH /devices/{id}/name       accept         POST   /supervision/accept
signin            POST  /devices/{id}/signin     reject         POST   /supervision/reject
device_status     GET   /devices/{id}/status     relationships  GET    /supervision/list/{id}
search_devices    GET   /search/devices?q=       remove         DELETE /supervision/{relation_id}
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from areuok.core.config import settings
from areuok.core.errors import RemoteError
from areuok.schemas.device import DeviceInfo, DeviceMode
from areuok.schemas.remote import (
    RemoteDevice,
    RemoteDeviceStatus,
    RemoteSigninResponse,
    RemoteSupervisionRelation,
    RemoteSupervisionRequest,
    RemoteSupervisionStatus,
)
from areuok.schemas.supervision import (
    DeviceStatus,
    RequestStatus,
    SupervisionRelationship,
    SupervisionRequest,
)
from areuok.services.device import utc_now_iso
from areuok.services.streak import DATE_FORMAT

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


# ---------------------------------------------------------------------------
# Translation: remote shape → canonical shape
# ---------------------------------------------------------------------------

_STATUS_FROM_REMOTE = {
    RemoteSupervisionStatus.pending: RequestStatus.pending,
    RemoteSupervisionStatus.accepted: RequestStatus.accepted,
    RemoteSupervisionStatus.rejected: RequestStatus.rejected,
}


def device_from_remote(d: RemoteDevice) -> DeviceInfo:
    return DeviceInfo(
        device_id=d.device_id,
        device_name=d.device_name,
        imei=d.imei,
        mode=d.mode,
        created_at=d.created_at,
    )


def request_from_remote(r: RemoteSupervisionRequest) -> SupervisionRequest:
    return SupervisionRequest(
        request_id=r.request_id,
        supervisor_device_id=r.supervisor_id,
        supervisor_device_name=r.supervisor_name or "",
        target_device_id=r.target_id,
        status=_STATUS_FROM_REMOTE[r.status],
        created_at=r.created_at,
    )


def relationship_from_remote(r: RemoteSupervisionRelation) -> SupervisionRelationship:
    # The server keeps a single timestamp; it is both establishment and last sync.
    return SupervisionRelationship(
        relationship_id=r.relation_id,
        supervisor_device_id=r.supervisor_id,
        supervisor_device_name=r.supervisor_name or "",
        supervised_device_id=r.target_id,
        supervised_device_name=r.target_name or "",
        established_at=r.created_at,
        last_sync_at=r.created_at,
    )


def device_status_from_remote(
    s: RemoteDeviceStatus,
    today: date,
    synced_at: Optional[str] = None,
) -> DeviceStatus:
    last = s.last_signin or ""
    return DeviceStatus(
        device_id=s.device_id,
        device_name=s.device_name,
        last_signin_date=last,
        streak=s.streak,
        is_signed_in_today=bool(last) and last[:10] == today.strftime(DATE_FORMAT),
        last_sync_at=synced_at or utc_now_iso(),
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class RemoteApiClient:
    """HTTP client for the remote mirror."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.REMOTE_API_BASE_URL).rstrip("/")
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout or settings.REMOTE_API_TIMEOUT,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "RemoteApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- transport ---

    def _request(
        self,
        method: str,
        endpoint: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        logger.debug("%s %s - starting API request", method, endpoint)
        try:
            response = self.client.request(method, endpoint, json=json, params=params)
        except httpx.HTTPError as exc:
            logger.error("API request failed for %s %s: %s", method, endpoint, exc)
            raise RemoteError(f"Request failed: {exc}", endpoint=endpoint) from exc

        if not response.is_success:
            logger.error(
                "API request returned %s for %s %s: %s",
                response.status_code, method, endpoint, response.text,
            )
            raise RemoteError(
                f"API error {response.status_code}: {response.text or 'Unknown error'}",
                endpoint=endpoint,
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Failed to parse API response for %s %s: %s", method, endpoint, response.text)
            raise RemoteError(f"Failed to parse response: {exc}", endpoint=endpoint) from exc

    def _parse(self, model: Type[T], data: Any, endpoint: str) -> T:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise RemoteError(f"Unexpected response shape: {exc}", endpoint=endpoint) from exc

    def _parse_list(self, model: Type[T], data: Any, endpoint: str) -> list[T]:
        try:
            return TypeAdapter(list[model]).validate_python(data)
        except ValidationError as exc:
            raise RemoteError(f"Unexpected response shape: {exc}", endpoint=endpoint) from exc

    # --- devices ---

    def register_device(
        self, device_name: str, imei: Optional[str], mode: DeviceMode
    ) -> DeviceInfo:
        logger.info("Registering device: %s (mode: %s)", device_name, mode.value)
        endpoint = "/devices/register"
        data = self._request(
            "POST", endpoint,
            json={"device_name": device_name, "imei": imei, "mode": mode.value},
        )
        return device_from_remote(self._parse(RemoteDevice, data, endpoint))

    def get_device(self, device_id: str) -> DeviceInfo:
        endpoint = f"/devices/{device_id}"
        data = self._request("GET", endpoint)
        return device_from_remote(self._parse(RemoteDevice, data, endpoint))

    def rename_device(self, device_id: str, new_name: str) -> DeviceInfo:
        logger.info("Updating device name: %s -> %s", device_id, new_name)
        endpoint = f"/devices/{device_id}/name"
        data = self._request("PATCH", endpoint, json={"device_name": new_name})
        return device_from_remote(self._parse(RemoteDevice, data, endpoint))

    def signin(self, device_id: str) -> int:
        """Returns the streak the server computed."""
        endpoint = f"/devices/{device_id}/signin"
        data = self._request("POST", endpoint)
        return self._parse(RemoteSigninResponse, data, endpoint).streak

    def device_status(self, device_id: str, today: date) -> DeviceStatus:
        endpoint = f"/devices/{device_id}/status"
        data = self._request("GET", endpoint)
        return device_status_from_remote(self._parse(RemoteDeviceStatus, data, endpoint), today)

    def search_devices(self, query: str) -> list[DeviceInfo]:
        endpoint = "/search/devices"
        data = self._request("GET", endpoint, params={"q": query})
        return [device_from_remote(d) for d in self._parse_list(RemoteDevice, data, endpoint)]

    # --- supervision ---

    def send_request(self, supervisor_id: str, target_id: str) -> SupervisionRequest:
        logger.info("Sending supervision request via API: %s -> %s", supervisor_id, target_id)
        endpoint = "/supervision/request"
        data = self._request(
            "POST", endpoint, json={"supervisor_id": supervisor_id, "target_id": target_id}
        )
        return request_from_remote(self._parse(RemoteSupervisionRequest, data, endpoint))

    def pending_requests(self, device_id: str) -> list[SupervisionRequest]:
        endpoint = f"/supervision/pending/{device_id}"
        data = self._request("GET", endpoint)
        return [
            request_from_remote(r)
            for r in self._parse_list(RemoteSupervisionRequest, data, endpoint)
        ]

    def accept(self, supervisor_id: str, target_id: str) -> None:
        logger.info("Accepting supervision request via API: %s -> %s", supervisor_id, target_id)
        self._request(
            "POST", "/supervision/accept",
            json={"supervisor_id": supervisor_id, "target_id": target_id},
        )

    def reject(self, supervisor_id: str, target_id: str) -> None:
        logger.info("Rejecting supervision request via API: %s -> %s", supervisor_id, target_id)
        self._request(
            "POST", "/supervision/reject",
            json={"supervisor_id": supervisor_id, "target_id": target_id},
        )

    def relationships(self, device_id: str) -> list[SupervisionRelationship]:
        endpoint = f"/supervision/list/{device_id}"
        data = self._request("GET", endpoint)
        return [
            relationship_from_remote(r)
            for r in self._parse_list(RemoteSupervisionRelation, data, endpoint)
        ]

    def remove_relationship(self, relation_id: str) -> None:
        logger.info("Removing supervision relationship via API: %s", relation_id)
        self._request("DELETE", f"/supervision/{relation_id}")


def get_remote_client():
    """FastAPI dependency; closed after the request."""
    client = RemoteApiClient()
    try:
        yield client
    finally:
        client.close()
