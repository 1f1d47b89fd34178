"""
Streak calculator — pure function, no I/O.

Rules, in order
---------------
  1. No previous record           → streak 1, history [today]
  2. last_signin_date == today    → no-op, previous record returned unchanged
  3. last_signin_date == today-1  → streak + 1, today appended to history
  4. anything else                → reset: streak 1, history [today]

"Anything else" covers gaps of two days or more, a last date in the future
(clock moved backwards) and a stored date that does not parse.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from areuok.schemas.checkin import CheckinRecord

DATE_FORMAT = "%Y-%m-%d"


def utc_today() -> date:
    return datetime.now(tz=timezone.utc).date()


def parse_day(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


def calculate_checkin(
    previous: Optional[CheckinRecord],
    name: str,
    today: date,
) -> CheckinRecord:
    """Return the record to persist after checking in on `today`."""
    today_str = today.strftime(DATE_FORMAT)

    if previous is None:
        return CheckinRecord(
            name=name, last_signin_date=today_str, streak=1, signin_history=[today_str]
        )

    if previous.last_signin_date == today_str:
        return previous

    last = parse_day(previous.last_signin_date)
    if last is not None and last == today - timedelta(days=1):
        history = list(previous.signin_history)
        if today_str not in history:
            history.append(today_str)
        return CheckinRecord(
            name=name,
            last_signin_date=today_str,
            streak=previous.streak + 1,
            signin_history=history,
        )

    return CheckinRecord(
        name=name, last_signin_date=today_str, streak=1, signin_history=[today_str]
    )
