"""
Check-in router.

GET    /checkin        — current check-in record (null when signed out)
POST   /checkin        — check in for today (idempotent within a day)
DELETE /checkin        — sign out: delete the check-in record
GET    /quote          — daily quote (502 when the quote API fails)
GET    /email-config   — notification e-mail settings
PUT    /email-config   — replace notification e-mail settings
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from areuok.routers.deps import get_store
from areuok.schemas.checkin import (
    CheckinRecord,
    CheckinRequest,
    CheckinStateResponse,
    EmailConfig,
    Quote,
)
from areuok.services.checkin import (
    load_checkin,
    load_email_config,
    perform_checkin,
    save_email_config,
    sign_out,
)
from areuok.services.quote import fetch_quote
from areuok.services.storage import RecordStore

router = APIRouter(tags=["checkin"])


@router.get(
    "/checkin",
    response_model=CheckinStateResponse,
    summary="Current check-in record",
)
def get_checkin(store: RecordStore = Depends(get_store)):
    return CheckinStateResponse(record=load_checkin(store))


@router.post(
    "/checkin",
    response_model=CheckinRecord,
    summary="Check in for today",
    responses={
        200: {"description": "The record after applying the streak rules."},
        422: {"description": "Validation error (empty name)."},
    },
)
def checkin(payload: CheckinRequest, store: RecordStore = Depends(get_store)):
    """
    Apply the streak rules to the stored record:

    | Previous check-in | Result |
    |---|---|
    | none | streak 1 |
    | today | unchanged (no-op) |
    | yesterday | streak + 1 |
    | older / in the future / unreadable | reset to 1 |

    A notification is raised and, when enabled, an e-mail is sent. Neither
    can fail the check-in.
    """
    return perform_checkin(store, name=payload.name)


@router.delete(
    "/checkin",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out (delete the check-in record)",
)
def delete_checkin(store: RecordStore = Depends(get_store)):
    sign_out(store)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/quote",
    response_model=Quote,
    summary="Daily quote",
    responses={502: {"description": "Quote API unreachable or returned garbage."}},
)
def daily_quote():
    return fetch_quote()


@router.get("/email-config", response_model=EmailConfig, summary="E-mail settings")
def get_email_config(store: RecordStore = Depends(get_store)):
    return load_email_config(store)


@router.put("/email-config", response_model=EmailConfig, summary="Replace e-mail settings")
def put_email_config(payload: EmailConfig, store: RecordStore = Depends(get_store)):
    save_email_config(store, payload)
    return payload
