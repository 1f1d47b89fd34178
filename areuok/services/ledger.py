"""
Supervision ledger — request lifecycle and relationship derivation.

State machine
-------------
  pending ──accept──▶ accepted   (+ one SupervisionRelationship)
          ──reject──▶ rejected
          ──cancel──▶ cancelled

Terminal states absorb accept/reject: both answer REQUEST_NOT_FOUND once a
request has left `pending`. cancel_request does not look at the current
status unless `allow_terminal=False` (LEDGER_CANCEL_OVERWRITES_TERMINAL).

Duplicate pending requests to the same target are accepted; no uniqueness
is enforced.

Every function mutates the DeviceConfig it is given and never touches
storage. Callers wrap them in device_config_transaction() so that a raised
error leaves the persisted record untouched.
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from areuok.core.errors import (
    NotAuthorizedError,
    RelationshipNotFoundError,
    RequestNotFoundError,
    RequestNotPendingError,
    WrongTargetError,
)
from areuok.schemas.device import DeviceConfig, DeviceMode
from areuok.schemas.supervision import (
    RequestStatus,
    SupervisionRelationship,
    SupervisionRequest,
)
from areuok.services.device import utc_now_iso

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

def _find_request(config: DeviceConfig, request_id: str) -> Optional[SupervisionRequest]:
    return next(
        (r for r in config.supervision_requests if r.request_id == request_id),
        None,
    )


def _check_target(config: DeviceConfig, request: SupervisionRequest) -> None:
    if request.target_device_id != config.device.device_id:
        raise WrongTargetError(
            request_id=request.request_id,
            target_device_id=request.target_device_id,
            device_id=config.device.device_id,
        )


# ---------------------------------------------------------------------------
# Requester side
# ---------------------------------------------------------------------------

def create_request(config: DeviceConfig, target_device_id: str) -> SupervisionRequest:
    """Issue a pending request from the local (supervisor) device."""
    if config.device.mode != DeviceMode.supervisor:
        raise NotAuthorizedError(mode=config.device.mode.value)

    request = SupervisionRequest(
        request_id=str(uuid.uuid4()),
        supervisor_device_id=config.device.device_id,
        supervisor_device_name=config.device.device_name,
        target_device_id=target_device_id,
        status=RequestStatus.pending,
        created_at=utc_now_iso(),
    )
    config.supervision_requests.append(request)
    logger.info(
        "Supervision request %s: %s -> %s",
        request.request_id, request.supervisor_device_id, target_device_id,
    )
    return request


def cancel_request(
    config: DeviceConfig,
    request_id: str,
    allow_terminal: bool = True,
) -> SupervisionRequest:
    request = _find_request(config, request_id)
    if request is None:
        raise RequestNotFoundError(request_id)
    if not allow_terminal and request.status.is_terminal:
        raise RequestNotPendingError(request_id, request.status.value)
    if request.status.is_terminal:
        logger.warning(
            "Cancelling request %s that was already %s", request_id, request.status.value
        )
    request.status = RequestStatus.cancelled
    return request


def list_requests_sent_by(config: DeviceConfig, device_id: str) -> list[SupervisionRequest]:
    """Pending requests issued by `device_id`."""
    return [
        r for r in config.supervision_requests
        if r.supervisor_device_id == device_id and r.status == RequestStatus.pending
    ]


# ---------------------------------------------------------------------------
# Target side
# ---------------------------------------------------------------------------

def list_pending_for(config: DeviceConfig, device_id: str) -> list[SupervisionRequest]:
    """Pending requests addressed to `device_id`. Read-only."""
    return [
        r for r in config.supervision_requests
        if r.target_device_id == device_id and r.status == RequestStatus.pending
    ]


def accept_request(config: DeviceConfig, request_id: str) -> SupervisionRelationship:
    """
    Accept a pending request addressed to the local device.

    All checks run before any mutation; the relationship append and the
    status flip then happen together.
    """
    request = _find_request(config, request_id)
    if request is None or request.status != RequestStatus.pending:
        raise RequestNotFoundError(request_id, "Request not found or already processed.")
    _check_target(config, request)

    now = utc_now_iso()
    relationship = SupervisionRelationship(
        relationship_id=str(uuid.uuid4()),
        supervisor_device_id=request.supervisor_device_id,
        supervisor_device_name=request.supervisor_device_name,
        supervised_device_id=config.device.device_id,
        supervised_device_name=config.device.device_name,
        established_at=now,
        last_sync_at=now,
    )
    config.supervision_relationships.append(relationship)
    request.status = RequestStatus.accepted
    logger.info(
        "Request %s accepted, relationship %s established",
        request_id, relationship.relationship_id,
    )
    return relationship


def reject_request(config: DeviceConfig, request_id: str) -> SupervisionRequest:
    request = _find_request(config, request_id)
    if request is None or request.status != RequestStatus.pending:
        raise RequestNotFoundError(request_id, "Request not found or already processed.")
    _check_target(config, request)

    request.status = RequestStatus.rejected
    logger.info("Request %s rejected", request_id)
    return request


# ---------------------------------------------------------------------------
# Relationships
# ---------------------------------------------------------------------------

def remove_relationship(config: DeviceConfig, relationship_id: str) -> None:
    """Delete a relationship permanently. No tombstone is kept."""
    if not any(r.relationship_id == relationship_id for r in config.supervision_relationships):
        raise RelationshipNotFoundError(relationship_id)
    config.supervision_relationships = [
        r for r in config.supervision_relationships
        if r.relationship_id != relationship_id
    ]
    logger.info("Relationship %s removed", relationship_id)
