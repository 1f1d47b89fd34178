"""
Remote API shapes, exactly as the server sends them.

These differ from the canonical models on purpose (`supervisor_id` vs
`supervisor_device_id`, `relation_id` vs `relationship_id`, no "cancelled"
status). Only areuok/services/remote.py reads them; everything else sees
the canonical schemas.
"""
from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from areuok.schemas.device import DeviceMode


class RemoteSupervisionStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class _RemoteModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RemoteDevice(_RemoteModel):
    device_id: str
    device_name: str
    imei: Optional[str] = None
    mode: DeviceMode
    created_at: str
    last_seen_at: str
    last_name_updated_at: Optional[str] = None


class RemoteSigninResponse(_RemoteModel):
    streak: int


class RemoteDeviceStatus(_RemoteModel):
    device_id: str
    device_name: str
    mode: DeviceMode
    last_signin: Optional[str] = None
    streak: int = 0


class RemoteSupervisionRequest(_RemoteModel):
    request_id: str
    supervisor_id: str
    supervisor_name: Optional[str] = None
    target_id: str
    target_name: Optional[str] = None
    status: RemoteSupervisionStatus
    created_at: str


class RemoteSupervisionRelation(_RemoteModel):
    relation_id: str
    supervisor_id: str
    supervisor_name: Optional[str] = None
    target_id: str
    target_name: Optional[str] = None
    created_at: str


# ---------------------------------------------------------------------------
# Local API bodies for the /remote proxy router
# ---------------------------------------------------------------------------

class RemoteRegisterBody(BaseModel):
    device_name: str = Field(min_length=1, max_length=128)
    imei: Optional[str] = None
    mode: DeviceMode = DeviceMode.signin


class RemoteRenameBody(BaseModel):
    device_name: str = Field(min_length=1, max_length=128)


class RemotePairBody(BaseModel):
    supervisor_id: str = Field(min_length=1)
    target_id: str = Field(min_length=1)


class RemoteSigninResult(BaseModel):
    device_id: str
    streak: int
