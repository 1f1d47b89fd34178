"""
Supervision view — read-only projection for the supervisor screen.

The supervised device's check-in state is not replicated: every status row
is joined against the check-in record stored locally. That is only
meaningful when supervisor and supervised share storage (e.g. the remote
mirror); otherwise all rows show the local owner's streak.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from areuok.schemas.checkin import CheckinRecord
from areuok.schemas.device import DeviceConfig
from areuok.schemas.supervision import DeviceStatus, SupervisorStatus
from areuok.services.ledger import list_requests_sent_by
from areuok.services.streak import DATE_FORMAT


def supervised_devices_for(
    config: DeviceConfig,
    checkin: Optional[CheckinRecord],
    today: date,
) -> list[DeviceStatus]:
    today_str = today.strftime(DATE_FORMAT)
    local_id = config.device.device_id
    return [
        DeviceStatus(
            device_id=rel.supervised_device_id,
            device_name=rel.supervised_device_name,
            last_signin_date=checkin.last_signin_date if checkin else "",
            streak=checkin.streak if checkin else 0,
            is_signed_in_today=checkin is not None and checkin.last_signin_date == today_str,
            last_sync_at=rel.last_sync_at,
        )
        for rel in config.supervision_relationships
        if rel.supervisor_device_id == local_id
    ]


def supervisor_status_for(
    config: DeviceConfig,
    checkin: Optional[CheckinRecord],
    today: date,
) -> SupervisorStatus:
    return SupervisorStatus(
        supervisor_device_id=config.device.device_id,
        supervised_devices=supervised_devices_for(config, checkin, today),
        pending_requests=list_requests_sent_by(config, config.device.device_id),
    )
