from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LeaveStatus, Movement
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, state_from_columns
from .repository import LeaveRequestRepository

_COLUMNS = """
    request_id, student_email, from_date, to_date, status, movement,
    approved_at, approved_by, created_at, updated_at, version
"""


def _row_to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=str(r["request_id"]),
        student_email=r["student_email"],
        from_date=r["from_date"],
        to_date=r["to_date"],
        state=state_from_columns(
            status=LeaveStatus(r["status"]),
            movement=Movement(r.get("movement") or Movement.IN.value),
            approved_at=r.get("approved_at"),
            approved_by=r.get("approved_by"),
        ),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
        version=int(r["version"]),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, request: LeaveRequest) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    request_id, student_email, from_date, to_date, status, movement,
                    approved_at, approved_by, created_at, updated_at, version
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.request_id,
                    request.student_email,
                    request.from_date,
                    request.to_date,
                    request.status.value,
                    request.movement.value,
                    request.approved_at,
                    request.approved_by,
                    request.created_at,
                    request.updated_at,
                    int(request.version),
                ),
            )

    def get(self, request_id: str) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s",
                (str(request_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return _row_to_request(r)

    def list(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        student_email: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if student_email is not None:
            clauses.append("student_email=%s")
            params.append(student_email)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def update(self, request: LeaveRequest, *, expected_version: int) -> bool:
        # approved_at/approved_by are only written while still NULL: the first approval wins.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, movement=%s,
                    approved_at=COALESCE(approved_at, %s),
                    approved_by=COALESCE(approved_by, %s),
                    updated_at=%s, version=version + 1
                WHERE request_id=%s AND version=%s
                """,
                (
                    request.status.value,
                    request.movement.value,
                    request.approved_at,
                    request.approved_by,
                    request.updated_at,
                    request.request_id,
                    int(expected_version),
                ),
            )
            return cur.rowcount > 0

    def delete(self, request_id: str, *, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM leave_requests WHERE request_id=%s AND version=%s",
                (str(request_id), int(expected_version)),
            )
            return cur.rowcount > 0
