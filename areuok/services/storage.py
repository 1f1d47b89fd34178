"""
Record store: load / save / delete JSON records by logical key.

Public API
----------
RecordStore(db).load(key)          -> dict | None
RecordStore(db).save(key, payload) -> None   (upsert + commit)
RecordStore(db).delete(key)        -> None   (missing key is a no-op)

Every database failure is re-raised as StorageError; nothing is retried.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from areuok.core.errors import StorageError
from areuok.models.record import StoredRecord

logger = logging.getLogger(__name__)


class RecordKey:
    CHECKIN       = "checkin"
    DEVICE_CONFIG = "device_config"
    EMAIL_CONFIG  = "email_config"


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    def load(self, key: str) -> Optional[dict[str, Any]]:
        try:
            row = self.db.get(StoredRecord, key)
        except SQLAlchemyError as exc:
            raise StorageError(key, "load", str(exc)) from exc
        if row is None:
            return None
        try:
            payload = json.loads(row.payload)
        except ValueError as exc:
            raise StorageError(key, "load", f"invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise StorageError(key, "load", "payload is not a JSON object")
        return payload

    def save(self, key: str, payload: dict[str, Any]) -> None:
        text = json.dumps(payload, ensure_ascii=False)
        try:
            row = self.db.get(StoredRecord, key)
            if row is None:
                self.db.add(StoredRecord(key=key, payload=text))
            else:
                row.payload = text
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(key, "save", str(exc)) from exc
        logger.debug("Saved record %s (%d bytes)", key, len(text))

    def delete(self, key: str) -> None:
        try:
            row = self.db.get(StoredRecord, key)
            if row is not None:
                self.db.delete(row)
                self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(key, "delete", str(exc)) from exc
