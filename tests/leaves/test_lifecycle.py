from __future__ import annotations

from datetime import datetime

import pytest

from conftest import APPROVAL, OTHER_STUDENT, SECURITY, STUDENT, WARDEN, make_request
from src.hostel_pass.hostel_pass.core.enums import Action, LeaveStatus, Movement, Position, Role, TERMINAL_POSITIONS
from src.hostel_pass.hostel_pass.core.exceptions import AccessDeniedError, InvalidTransitionError, ValidationError
from src.hostel_pass.hostel_pass.leaves import lifecycle

NOW = datetime(2024, 1, 3, 12, 0, 0)

ACTORS = {Role.STUDENT: STUDENT, Role.WARDEN: WARDEN, Role.SECURITY: SECURITY}
MOVES = [a for a in Action if a not in {Action.CREATE, Action.DELETE}]


def test_create_builds_pending_request_for_student():
    req = lifecycle.create(actor=STUDENT, request_id="abc", from_date="2024-01-01", to_date="2024-01-05", now=NOW)

    assert req.position is Position.PENDING
    assert req.status is LeaveStatus.PENDING
    assert req.movement is Movement.IN
    assert req.approved_at is None and req.approved_by is None
    assert req.student_email == STUDENT.email
    assert req.created_at == req.updated_at == NOW
    assert req.version == 1


def test_create_allows_single_day_leave():
    req = lifecycle.create(actor=STUDENT, request_id="abc", from_date="2024-01-05", to_date="2024-01-05", now=NOW)
    assert req.from_date == req.to_date


@pytest.mark.parametrize("actor", [WARDEN, SECURITY])
def test_create_is_student_only(actor):
    with pytest.raises(InvalidTransitionError):
        lifecycle.create(actor=actor, request_id="abc", from_date="2024-01-01", to_date="2024-01-05", now=NOW)


@pytest.mark.parametrize(
    "from_date,to_date",
    [(None, "2024-01-05"), ("2024-01-01", ""), ("01/01/2024", "2024-01-05"), ("2024-01-05", "2024-01-01")],
)
def test_create_rejects_bad_dates(from_date, to_date):
    with pytest.raises(ValidationError):
        lifecycle.create(actor=STUDENT, request_id="abc", from_date=from_date, to_date=to_date, now=NOW)


def test_warden_approval_stamps_actor_and_time():
    req = lifecycle.transition(make_request(), actor=WARDEN, action=Action.APPROVE, now=NOW)

    assert req.position is Position.APPROVED_IN
    assert req.approved_at == NOW
    assert req.approved_by == WARDEN.email
    assert req.updated_at == NOW


def test_warden_reject_is_terminal_without_stamp():
    req = lifecycle.transition(make_request(), actor=WARDEN, action=Action.REJECT, now=NOW)

    assert req.position is Position.REJECTED
    assert req.approved_at is None


def test_security_scan_approval_stamps_security_officer():
    req = lifecycle.transition(make_request(), actor=SECURITY, action=Action.SCAN_APPROVE, now=NOW)

    assert req.position is Position.APPROVED_IN
    assert req.approved_by == SECURITY.email


def test_exit_and_return_keep_the_original_approval():
    out = lifecycle.transition(make_request(Position.APPROVED_IN), actor=SECURITY, action=Action.SCAN_EXIT, now=NOW)
    assert out.position is Position.APPROVED_OUT
    assert out.movement is Movement.OUT
    assert out.approval == APPROVAL

    back = lifecycle.transition(out, actor=SECURITY, action=Action.SCAN_RETURN, now=NOW)
    assert back.position is Position.COMPLETED
    assert back.movement is Movement.IN
    assert back.approval == APPROVAL


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("position", list(Position))
@pytest.mark.parametrize("action", MOVES)
def test_only_table_entries_are_allowed(role, position, action):
    request = make_request(position)
    actor = ACTORS[role]

    if (role, position, action) in lifecycle.TRANSITIONS:
        assert lifecycle.transition(request, actor=actor, action=action, now=NOW).version == request.version
    else:
        with pytest.raises(InvalidTransitionError):
            lifecycle.transition(request, actor=actor, action=action, now=NOW)


@pytest.mark.parametrize("position", sorted(TERMINAL_POSITIONS))
@pytest.mark.parametrize("action", MOVES)
def test_terminal_positions_have_no_exit(position, action):
    for actor in ACTORS.values():
        with pytest.raises(InvalidTransitionError):
            lifecycle.transition(make_request(position), actor=actor, action=action, now=NOW)


def test_student_never_moves_someone_elses_request():
    with pytest.raises(AccessDeniedError):
        lifecycle.transition(make_request(), actor=OTHER_STUDENT, action=Action.APPROVE, now=NOW)


def test_invalid_transition_message_names_role_and_state():
    with pytest.raises(InvalidTransitionError) as exc:
        lifecycle.transition(make_request(Position.APPROVED_IN), actor=WARDEN, action=Action.APPROVE, now=NOW)
    assert str(exc.value) == "Warden cannot approve an approved request (movement IN)"


def test_transition_refuses_non_state_actions():
    with pytest.raises(ValueError):
        lifecycle.transition(make_request(), actor=STUDENT, action=Action.DELETE, now=NOW)


def test_student_may_only_remove_own_pending_request():
    lifecycle.authorize_removal(make_request(), actor=STUDENT)

    with pytest.raises(InvalidTransitionError):
        lifecycle.authorize_removal(make_request(Position.APPROVED_IN), actor=STUDENT)
    with pytest.raises(AccessDeniedError):
        lifecycle.authorize_removal(make_request(), actor=OTHER_STUDENT)


@pytest.mark.parametrize("position", list(Position))
def test_privileged_roles_may_remove_in_any_state(position):
    lifecycle.authorize_removal(make_request(position), actor=WARDEN)
    lifecycle.authorize_removal(make_request(position), actor=SECURITY)


def test_roles_for_scan_actions():
    assert lifecycle.roles_for(Action.SCAN_EXIT, Action.SCAN_RETURN) == frozenset({Role.SECURITY})
