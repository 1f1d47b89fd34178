"""
StoredRecord — one JSON document per logical key.

Keys in use (see areuok/services/storage.py):
  "checkin"        — the local CheckinRecord
  "device_config"  — DeviceInfo + supervision requests + relationships
  "email_config"   — notification e-mail settings

payload: JSON-encoded object stored as Text. Absence of a row is a valid
state, not an error.
"""
from datetime import datetime
from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from areuok.db.base import Base


class StoredRecord(Base):
    __tablename__ = "records"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
