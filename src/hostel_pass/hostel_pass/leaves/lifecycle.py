"""Lifecycle engine for leave requests.

Every legal move is one entry of ``TRANSITIONS`` keyed by
``(role, position, action)``. Adding a role or a state is a table edit.
The functions here are pure: they take the current request, the caller and
the clock value, and return the next request or raise. Nothing is stored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from ..common.validators import normalize_email, require_date
from ..core.enums import Action, Movement, Position, Role
from ..core.exceptions import AccessDeniedError, InvalidTransitionError, ValidationError
from .model import Actor, Approval, Approved, Completed, LeaveRequest, LeaveState, Pending, Rejected

Transition = Callable[[LeaveRequest, Actor, datetime], Optional[LeaveState]]


def _approve(request: LeaveRequest, actor: Actor, now: datetime) -> LeaveState:
    return Approved(approval=Approval(approved_at=now, approved_by=actor.email), movement=Movement.IN)


def _reject(request: LeaveRequest, actor: Actor, now: datetime) -> LeaveState:
    return Rejected()


def _mark_out(request: LeaveRequest, actor: Actor, now: datetime) -> LeaveState:
    return Approved(approval=request.state.approval, movement=Movement.OUT)


def _mark_returned(request: LeaveRequest, actor: Actor, now: datetime) -> LeaveState:
    return Completed(approval=request.state.approval)


def _remove(request: LeaveRequest, actor: Actor, now: datetime) -> None:
    return None


PRIVILEGED_ROLES: FrozenSet[Role] = frozenset({Role.WARDEN, Role.SECURITY})

TRANSITIONS: Dict[Tuple[Role, Position, Action], Transition] = {
    (Role.WARDEN, Position.PENDING, Action.APPROVE): _approve,
    (Role.WARDEN, Position.PENDING, Action.REJECT): _reject,
    (Role.SECURITY, Position.PENDING, Action.SCAN_APPROVE): _approve,
    (Role.SECURITY, Position.APPROVED_IN, Action.SCAN_EXIT): _mark_out,
    (Role.SECURITY, Position.APPROVED_OUT, Action.SCAN_RETURN): _mark_returned,
    (Role.STUDENT, Position.PENDING, Action.DELETE): _remove,
}
# Administrative override: privileged roles may remove a request in any state.
TRANSITIONS.update({(role, position, Action.DELETE): _remove for role in PRIVILEGED_ROLES for position in Position})

CREATOR_ROLES: FrozenSet[Role] = frozenset({Role.STUDENT})


def roles_for(*actions: Action) -> FrozenSet[Role]:
    return frozenset(role for (role, _, action) in TRANSITIONS if action in actions)


def _describe(request: LeaveRequest) -> str:
    if request.position in {Position.APPROVED_IN, Position.APPROVED_OUT}:
        return f"an approved request (movement {request.movement.value.upper()})"
    return f"a {request.status.value} request"


def _lookup(request: LeaveRequest, *, actor: Actor, action: Action) -> Transition:
    fn = TRANSITIONS.get((actor.role, request.position, action))
    if fn is None:
        raise InvalidTransitionError(
            f"{actor.role.value.capitalize()} cannot {action.value.replace('_', ' ')} {_describe(request)}"
        )
    return fn


def authorize_read(request: LeaveRequest, *, actor: Actor) -> None:
    if actor.role is Role.STUDENT and not request.is_owned_by(actor.email):
        raise AccessDeniedError("Access denied")


def create(
    *,
    actor: Actor,
    request_id: str,
    from_date: Optional[str],
    to_date: Optional[str],
    now: datetime,
) -> LeaveRequest:
    if actor.role not in CREATOR_ROLES:
        raise InvalidTransitionError("Only students can create leave requests")

    start = require_date(from_date, "From date")
    end = require_date(to_date, "To date")
    if end < start:
        raise ValidationError("To date must be on or after from date")

    return LeaveRequest(
        request_id=request_id,
        student_email=normalize_email(actor.email),
        from_date=start,
        to_date=end,
        state=Pending(),
        created_at=now,
        updated_at=now,
    )


def transition(request: LeaveRequest, *, actor: Actor, action: Action, now: datetime) -> LeaveRequest:
    """Apply ``action`` by ``actor`` and return the request in its next state."""

    if action in {Action.CREATE, Action.DELETE}:
        raise ValueError(f"{action.value} is not a state transition")

    authorize_read(request, actor=actor)
    fn = _lookup(request, actor=actor, action=action)
    return request.with_state(fn(request, actor, now), now=now)


def authorize_removal(request: LeaveRequest, *, actor: Actor) -> None:
    """Raise unless ``actor`` may delete ``request`` in its current state."""

    authorize_read(request, actor=actor)
    _lookup(request, actor=actor, action=Action.DELETE)
