"""
Supervision schemas — the canonical in-core shapes.

Persisted inside the device_config record and returned as-is by the API.
Remote-side shapes (different field names, no "cancelled") live in
areuok/schemas/remote.py.
"""
from __future__ import annotations

import enum
from typing import Annotated

from pydantic import BaseModel, Field, field_validator


class RequestStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    cancelled = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.pending


class SupervisionRequest(BaseModel):
    request_id: str
    supervisor_device_id: str
    supervisor_device_name: str = Field(
        description="Supervisor name at the time the request was created."
    )
    target_device_id: str
    status: RequestStatus = RequestStatus.pending
    created_at: str = Field(description="RFC 3339 UTC timestamp.")


class SupervisionRelationship(BaseModel):
    relationship_id: str
    supervisor_device_id: str
    supervisor_device_name: str
    supervised_device_id: str
    supervised_device_name: str
    established_at: str
    last_sync_at: str


class DeviceStatus(BaseModel):
    """What a supervisor sees for one supervised device."""
    device_id: str
    device_name: str
    last_signin_date: str = Field(default="", description='"" when no check-in exists.')
    streak: int = 0
    is_signed_in_today: bool = False
    last_sync_at: str


class SupervisorStatus(BaseModel):
    supervisor_device_id: str
    supervised_devices: list[DeviceStatus]
    pending_requests: list[SupervisionRequest]


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class CreateRequestBody(BaseModel):
    target_device_id: Annotated[str, Field(
        min_length=1,
        max_length=128,
        description="Device id of the device to supervise.",
    )]

    @field_validator("target_device_id", mode="before")
    @classmethod
    def strip_target(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("target_device_id must not be empty")
        return stripped


class PendingRequestList(BaseModel):
    total: int
    items: list[SupervisionRequest]
