from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    """Record store for leave requests.

    Writes are compare-and-set on ``version``: ``update`` and ``delete`` only
    touch the row when its stored version still equals ``expected_version``
    and report whether they did.
    """

    def insert(self, request: LeaveRequest) -> None:
        raise NotImplementedError

    def get(self, request_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        student_email: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError

    def update(self, request: LeaveRequest, *, expected_version: int) -> bool:
        raise NotImplementedError

    def delete(self, request_id: str, *, expected_version: int) -> bool:
        raise NotImplementedError
