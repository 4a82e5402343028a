from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used for authorization."""

    STUDENT = "student"
    WARDEN = "warden"
    SECURITY = "security"


class LeaveStatus(str, Enum):
    """Persisted status column of a leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class Movement(str, Enum):
    """Whether the student is recorded inside or outside the hostel."""

    IN = "in"
    OUT = "out"


class Position(str, Enum):
    """Lifecycle position: status and movement folded into one key."""

    PENDING = "pending"
    APPROVED_IN = "approved_in"
    APPROVED_OUT = "approved_out"
    REJECTED = "rejected"
    COMPLETED = "completed"


TERMINAL_POSITIONS = frozenset({Position.REJECTED, Position.COMPLETED})


class Action(str, Enum):
    CREATE = "create"
    APPROVE = "approve"
    REJECT = "reject"
    SCAN_APPROVE = "scan_approve"
    SCAN_EXIT = "scan_exit"
    SCAN_RETURN = "scan_return"
    DELETE = "delete"


class Decision(str, Enum):
    """Warden decision on a pending request."""

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def action(self) -> Action:
        return Action.APPROVE if self is Decision.APPROVE else Action.REJECT


class ScanOutcome(str, Enum):
    """What a scan did, with the message shown to the security desk."""

    APPROVED_IN = "approved_in"
    MOVED_OUT = "moved_out"
    COMPLETED = "completed"
    ALREADY_COMPLETED = "already_completed"

    @property
    def message(self) -> str:
        return {
            ScanOutcome.APPROVED_IN: "Request approved and marked IN",
            ScanOutcome.MOVED_OUT: "Student moved OUT (movement changed IN → OUT)",
            ScanOutcome.COMPLETED: "Request completed - student returned (OUT → IN)",
            ScanOutcome.ALREADY_COMPLETED: "This request is already completed",
        }[self]
