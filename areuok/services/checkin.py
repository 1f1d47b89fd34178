"""
Check-in service: load → StreakCalculator → save → best-effort side effects.

Public API
----------
load_checkin(store)                  -> CheckinRecord | None
perform_checkin(store, name, today)  -> CheckinRecord
sign_out(store)                      -> None
load_email_config(store)             -> EmailConfig
save_email_config(store, config)     -> None

Side effects (notification, e-mail) run only after the record is saved and
never turn a successful check-in into an error.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from pydantic import ValidationError

from areuok.core.errors import AreuokException, StorageError
from areuok.schemas.checkin import CheckinRecord, EmailConfig, Quote
from areuok.services import email as email_service
from areuok.services.notification import notify
from areuok.services.quote import quote_or_fallback
from areuok.services.storage import RecordKey, RecordStore
from areuok.services.streak import calculate_checkin, utc_today

logger = logging.getLogger(__name__)


def load_checkin(store: RecordStore) -> Optional[CheckinRecord]:
    payload = store.load(RecordKey.CHECKIN)
    if payload is None:
        return None
    try:
        return CheckinRecord.model_validate(payload)
    except ValidationError as exc:
        raise StorageError(RecordKey.CHECKIN, "load", str(exc)) from exc


def load_email_config(store: RecordStore) -> EmailConfig:
    payload = store.load(RecordKey.EMAIL_CONFIG)
    if payload is None:
        return EmailConfig()
    try:
        return EmailConfig.model_validate(payload)
    except ValidationError as exc:
        raise StorageError(RecordKey.EMAIL_CONFIG, "load", str(exc)) from exc


def save_email_config(store: RecordStore, config: EmailConfig) -> None:
    store.save(RecordKey.EMAIL_CONFIG, config.model_dump(mode="json"))


def perform_checkin(
    store: RecordStore,
    name: str,
    today: Optional[date] = None,
    quote_provider: Callable[[], Quote] = quote_or_fallback,
) -> CheckinRecord:
    previous = load_checkin(store)
    record = calculate_checkin(previous, name, today or utc_today())

    if record is previous:
        logger.debug("Already checked in on %s", record.last_signin_date)
        return record

    store.save(RecordKey.CHECKIN, record.model_dump(mode="json"))
    logger.info("%s checked in on %s (streak %d)", record.name, record.last_signin_date, record.streak)

    notify("Checked in", f"{record.name}, streak: {record.streak}")
    _send_checkin_email(store, record, quote_provider)
    return record


def _send_checkin_email(
    store: RecordStore,
    record: CheckinRecord,
    quote_provider: Callable[[], Quote],
) -> None:
    try:
        config = load_email_config(store)
        if not config.enabled:
            return
        email_service.send_checkin_email(record.name, record.streak, quote_provider(), config)
    except AreuokException as exc:
        logger.warning("Check-in email not sent: %s", exc.message)
    except ValueError as exc:
        # email.policy header checks, non-ASCII SMTP credentials
        logger.warning("Check-in email not sent: %s", exc)


def sign_out(store: RecordStore) -> None:
    store.delete(RecordKey.CHECKIN)
    logger.info("Check-in record deleted")
