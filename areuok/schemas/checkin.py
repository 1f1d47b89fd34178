"""
Check-in schemas.

GET/POST/DELETE /checkin → CheckinRecord
GET  /quote              → Quote
GET/PUT /email-config    → EmailConfig
"""
from typing import Annotated, Optional
from pydantic import BaseModel, Field, field_validator


class CheckinRecord(BaseModel):
    """Persisted check-in state for the local owner."""
    name: str
    last_signin_date: str = Field(
        description="YYYY-MM-DD. Kept as text so a corrupt value still loads."
    )
    streak: int = Field(ge=1)
    signin_history: list[str] = Field(default_factory=list)


class CheckinRequest(BaseModel):
    name: Annotated[str, Field(
        min_length=1,
        max_length=128,
        description="Owner name shown in notifications and e-mails.",
        examples=["Ana"],
    )]

    @field_validator("name", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("name must not be empty after stripping whitespace")
        return stripped


class CheckinStateResponse(BaseModel):
    record: Optional[CheckinRecord] = None


class Quote(BaseModel):
    text: str
    author: str


class EmailConfig(BaseModel):
    enabled: bool = False
    to_email: str = ""
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_username: str = ""
    smtp_password: str = ""
    from_email: str = ""
