"""Scan interpreter: turns decoded QR text into the transition to apply.

The pass only proves which request and which student it belongs to. The
transition is always derived from the stored record, never from fields in
the payload.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from ..common.datetime_utils import format_date, format_timestamp
from ..common.validators import normalize_email
from ..core.enums import Action, Position, ScanOutcome
from ..core.exceptions import InvalidPayloadError, InvalidTransitionError, PayloadMismatchError
from .model import LeaveRequest


@dataclass(frozen=True)
class QrPayload:
    request_id: str
    email: str
    from_date: Optional[str] = None
    to_date: Optional[str] = None
    approved_at: Optional[str] = None


@dataclass(frozen=True)
class ScanPlan:
    """Transition derived from a scan; ``action`` is None when nothing should change."""

    action: Optional[Action]
    outcome: ScanOutcome


_PLANS = {
    Position.PENDING: ScanPlan(Action.SCAN_APPROVE, ScanOutcome.APPROVED_IN),
    # Handed to the engine like a pending scan; the engine refuses it because rejected is terminal.
    Position.REJECTED: ScanPlan(Action.SCAN_APPROVE, ScanOutcome.APPROVED_IN),
    Position.APPROVED_IN: ScanPlan(Action.SCAN_EXIT, ScanOutcome.MOVED_OUT),
    Position.APPROVED_OUT: ScanPlan(Action.SCAN_RETURN, ScanOutcome.COMPLETED),
    Position.COMPLETED: ScanPlan(None, ScanOutcome.ALREADY_COMPLETED),
}


def render_payload(request: LeaveRequest) -> str:
    """Text encoded into the student's QR pass."""
    return json.dumps(
        {
            "id": request.request_id,
            "email": request.student_email,
            "from": format_date(request.from_date),
            "to": format_date(request.to_date),
            "approvedAt": format_timestamp(request.approved_at),
        }
    )


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    return None if value is None else str(value)


def parse_payload(text: object) -> QrPayload:
    if not isinstance(text, str):
        raise InvalidPayloadError("QR payload is not readable, please rescan")
    if not text.strip():
        raise InvalidPayloadError("QR payload is empty, please rescan")

    try:
        data = json.loads(text)
    except ValueError:
        raise InvalidPayloadError("QR payload is not readable, please rescan")

    if not isinstance(data, dict):
        raise InvalidPayloadError("QR payload is not readable, please rescan")

    request_id = data.get("id")
    email = data.get("email")
    if not isinstance(request_id, str) or not request_id.strip():
        raise InvalidPayloadError("QR payload has no request id, please rescan")
    if not isinstance(email, str) or not email.strip():
        raise InvalidPayloadError("QR payload has no student email, please rescan")

    return QrPayload(
        request_id=request_id.strip(),
        email=normalize_email(email),
        from_date=_optional_str(data, "from"),
        to_date=_optional_str(data, "to"),
        approved_at=_optional_str(data, "approvedAt"),
    )


class ScanInterpreter:
    def __init__(self, *, auto_approve: bool = True):
        self._auto_approve = bool(auto_approve)

    @property
    def auto_approve(self) -> bool:
        return self._auto_approve

    def interpret(self, payload: QrPayload, stored: Optional[LeaveRequest]) -> ScanPlan:
        if stored is None or not stored.is_owned_by(payload.email):
            raise PayloadMismatchError("Invalid QR code - request not found")

        plan = _PLANS[stored.position]
        if stored.position is Position.PENDING and not self._auto_approve:
            raise InvalidTransitionError("Request has not been approved by a warden yet")
        return plan
