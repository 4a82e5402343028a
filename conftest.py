from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hostel_pass.hostel_pass.core.enums import Movement, Position, Role
from src.hostel_pass.hostel_pass.leaves.model import (
    Actor,
    Approval,
    Approved,
    Completed,
    LeaveRequest,
    Pending,
    Rejected,
)

STUDENT = Actor(role=Role.STUDENT, email="student@x.com", user_id=1)
OTHER_STUDENT = Actor(role=Role.STUDENT, email="other@x.com", user_id=4)
WARDEN = Actor(role=Role.WARDEN, email="warden@x.com", user_id=2)
SECURITY = Actor(role=Role.SECURITY, email="security@x.com", user_id=3)

CREATED_AT = datetime(2024, 1, 1, 9, 0, 0)
APPROVAL = Approval(approved_at=datetime(2024, 1, 1, 10, 0, 0), approved_by=WARDEN.email)


def make_request(position: Position = Position.PENDING, *, request_id: str = "r1", email: str = STUDENT.email) -> LeaveRequest:
    state = {
        Position.PENDING: Pending(),
        Position.APPROVED_IN: Approved(approval=APPROVAL, movement=Movement.IN),
        Position.APPROVED_OUT: Approved(approval=APPROVAL, movement=Movement.OUT),
        Position.REJECTED: Rejected(),
        Position.COMPLETED: Completed(approval=APPROVAL),
    }[position]
    return LeaveRequest(
        request_id=request_id,
        student_email=email,
        from_date=date(2024, 1, 1),
        to_date=date(2024, 1, 5),
        state=state,
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )


class InMemoryLeaveRepository:
    """Compare-and-set store mirroring the MySQL repository contract."""

    def __init__(self, *requests: LeaveRequest):
        self.rows: dict[str, LeaveRequest] = {r.request_id: r for r in requests}
        self.get_calls = 0
        self.writes = 0

    def insert(self, request: LeaveRequest) -> None:
        self.rows[request.request_id] = request

    def get(self, request_id: str) -> Optional[LeaveRequest]:
        self.get_calls += 1
        return self.rows.get(request_id)

    def list(self, *, status=None, student_email=None, limit=200):
        items = [
            r
            for r in self.rows.values()
            if (status is None or r.status == status) and (student_email is None or r.student_email == student_email)
        ]
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items[:limit]

    def update(self, request: LeaveRequest, *, expected_version: int) -> bool:
        current = self.rows.get(request.request_id)
        if current is None or current.version != expected_version:
            return False
        self.rows[request.request_id] = replace(request, version=expected_version + 1)
        self.writes += 1
        return True

    def delete(self, request_id: str, *, expected_version: int) -> bool:
        current = self.rows.get(request_id)
        if current is None or current.version != expected_version:
            return False
        del self.rows[request_id]
        self.writes += 1
        return True


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 2, 8, 30, 0)


@pytest.fixture
def repo() -> InMemoryLeaveRepository:
    return InMemoryLeaveRepository()
