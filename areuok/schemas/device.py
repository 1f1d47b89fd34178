"""
Device identity schemas.

DeviceConfig is the single per-device configuration record: the local
identity plus both supervision collections.
"""
from __future__ import annotations

import enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator

from areuok.schemas.supervision import SupervisionRelationship, SupervisionRequest


class DeviceMode(str, enum.Enum):
    signin = "signin"
    supervisor = "supervisor"


class DeviceInfo(BaseModel):
    device_id: str = Field(description="Generated once, never changes.")
    device_name: str
    imei: Optional[str] = None
    mode: DeviceMode = DeviceMode.signin
    created_at: str


class DeviceConfig(BaseModel):
    device: DeviceInfo
    supervision_requests: list[SupervisionRequest] = Field(default_factory=list)
    supervision_relationships: list[SupervisionRelationship] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class SetModeRequest(BaseModel):
    mode: DeviceMode


class RenameRequest(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=128, examples=["Kitchen tablet"])]

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("name must not be empty after stripping whitespace")
        return stripped


class SetImeiRequest(BaseModel):
    imei: Annotated[str, Field(min_length=1, max_length=64)]


class ImeiResponse(BaseModel):
    imei: str = Field(description="The stored IMEI, or the device id when none is set.")
