from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Union

from ..common.datetime_utils import format_date, format_timestamp
from ..core.enums import LeaveStatus, Movement, Position, Role


@dataclass(frozen=True)
class Actor:
    """Who is calling: role plus identity (email) taken from the session."""

    role: Role
    email: str
    user_id: Optional[int] = None


@dataclass(frozen=True)
class Approval:
    """Stamp written once, when a request first becomes approved."""

    approved_at: datetime
    approved_by: str


@dataclass(frozen=True)
class Pending:
    @property
    def position(self) -> Position:
        return Position.PENDING


@dataclass(frozen=True)
class Approved:
    approval: Approval
    movement: Movement = Movement.IN

    @property
    def position(self) -> Position:
        return Position.APPROVED_OUT if self.movement is Movement.OUT else Position.APPROVED_IN


@dataclass(frozen=True)
class Rejected:
    @property
    def position(self) -> Position:
        return Position.REJECTED


@dataclass(frozen=True)
class Completed:
    approval: Approval

    @property
    def position(self) -> Position:
        return Position.COMPLETED


LeaveState = Union[Pending, Approved, Rejected, Completed]


def state_from_columns(
    *,
    status: LeaveStatus,
    movement: Movement,
    approved_at: Optional[datetime],
    approved_by: Optional[str],
) -> LeaveState:
    """Rebuild the tagged state from the flat columns kept by the store."""

    if status is LeaveStatus.PENDING:
        return Pending()
    if status is LeaveStatus.REJECTED:
        return Rejected()

    if approved_at is None or not approved_by:
        raise ValueError(f"{status.value} request is missing its approval stamp")
    approval = Approval(approved_at=approved_at, approved_by=approved_by)

    if status is LeaveStatus.APPROVED:
        return Approved(approval=approval, movement=movement)
    return Completed(approval=approval)


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: a student's leave request."""

    request_id: str
    student_email: str
    from_date: date
    to_date: date
    state: LeaveState
    created_at: datetime
    updated_at: datetime
    version: int = 1

    @property
    def position(self) -> Position:
        return self.state.position

    @property
    def status(self) -> LeaveStatus:
        return {
            Pending: LeaveStatus.PENDING,
            Approved: LeaveStatus.APPROVED,
            Rejected: LeaveStatus.REJECTED,
            Completed: LeaveStatus.COMPLETED,
        }[type(self.state)]

    @property
    def movement(self) -> Movement:
        # Only an approved request can be outside; every other state reads as IN.
        if isinstance(self.state, Approved):
            return self.state.movement
        return Movement.IN

    @property
    def approval(self) -> Optional[Approval]:
        return getattr(self.state, "approval", None)

    @property
    def approved_at(self) -> Optional[datetime]:
        return self.approval.approved_at if self.approval else None

    @property
    def approved_by(self) -> Optional[str]:
        return self.approval.approved_by if self.approval else None

    def is_owned_by(self, email: str) -> bool:
        return self.student_email == (email or "").strip().lower()

    def with_state(self, state: LeaveState, *, now: datetime) -> "LeaveRequest":
        return replace(self, state=state, updated_at=now)

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "studentEmail": self.student_email,
            "fromDate": format_date(self.from_date),
            "toDate": format_date(self.to_date),
            "status": self.status.value,
            "movement": self.movement.value,
            "approvedAt": format_timestamp(self.approved_at),
            "approvedBy": self.approved_by,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }
