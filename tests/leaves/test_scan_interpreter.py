from __future__ import annotations

import json

import pytest

from conftest import STUDENT, make_request
from src.hostel_pass.hostel_pass.core.enums import Action, Position, ScanOutcome
from src.hostel_pass.hostel_pass.core.exceptions import (
    InvalidPayloadError,
    InvalidTransitionError,
    PayloadMismatchError,
    RescanRequired,
)
from src.hostel_pass.hostel_pass.leaves.scan import QrPayload, ScanInterpreter, parse_payload, render_payload


def _payload(request_id="r1", email=STUDENT.email) -> QrPayload:
    return QrPayload(request_id=request_id, email=email)


def test_render_payload_carries_pass_fields():
    data = json.loads(render_payload(make_request(Position.APPROVED_IN)))

    assert data == {
        "id": "r1",
        "email": STUDENT.email,
        "from": "2024-01-01",
        "to": "2024-01-05",
        "approvedAt": "2024-01-01T10:00:00",
    }


def test_parse_payload_reads_rendered_pass():
    payload = parse_payload(render_payload(make_request(Position.APPROVED_IN)))

    assert payload.request_id == "r1"
    assert payload.email == STUDENT.email
    assert payload.approved_at == "2024-01-01T10:00:00"


def test_parse_payload_normalizes_email():
    payload = parse_payload(json.dumps({"id": " r1 ", "email": " Student@X.com "}))
    assert payload == QrPayload(request_id="r1", email="student@x.com")


@pytest.mark.parametrize(
    "text",
    [
        None,
        123,
        {"id": "r1", "email": "student@x.com"},
        "",
        "   ",
        "not json",
        "[1, 2]",
        '{"email": "a@b.c"}',
        '{"id": "r1"}',
        '{"id": 5, "email": "a@b.c"}',
    ],
)
def test_parse_payload_rejects_unreadable_text(text):
    with pytest.raises(InvalidPayloadError) as exc:
        parse_payload(text)
    assert isinstance(exc.value, RescanRequired)


@pytest.mark.parametrize(
    "position,action,outcome",
    [
        (Position.PENDING, Action.SCAN_APPROVE, ScanOutcome.APPROVED_IN),
        (Position.APPROVED_IN, Action.SCAN_EXIT, ScanOutcome.MOVED_OUT),
        (Position.APPROVED_OUT, Action.SCAN_RETURN, ScanOutcome.COMPLETED),
        (Position.REJECTED, Action.SCAN_APPROVE, ScanOutcome.APPROVED_IN),
        (Position.COMPLETED, None, ScanOutcome.ALREADY_COMPLETED),
    ],
)
def test_plan_follows_stored_position(position, action, outcome):
    plan = ScanInterpreter().interpret(_payload(), make_request(position))

    assert plan.action == action
    assert plan.outcome is outcome


def test_missing_request_is_a_mismatch():
    with pytest.raises(PayloadMismatchError):
        ScanInterpreter().interpret(_payload(), None)


def test_email_of_another_student_is_a_mismatch():
    with pytest.raises(PayloadMismatchError) as exc:
        ScanInterpreter().interpret(_payload(email="other@x.com"), make_request())
    assert str(exc.value) == "Invalid QR code - request not found"


def test_pending_scan_refused_when_auto_approve_is_off():
    interpreter = ScanInterpreter(auto_approve=False)
    assert interpreter.auto_approve is False

    with pytest.raises(InvalidTransitionError):
        interpreter.interpret(_payload(), make_request())

    assert interpreter.interpret(_payload(), make_request(Position.APPROVED_IN)).action is Action.SCAN_EXIT
