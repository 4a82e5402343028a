from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_CACHE_MAX_SIZE, DEFAULT_CACHE_TTL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .leaves.cache import LeaveRequestCache
from .leaves.mysql_leave_repository import MySQLLeaveRequestRepository
from .leaves.repository import LeaveRequestRepository
from .leaves.scan import ScanInterpreter
from .leaves.service import LeaveService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    leaves_repo: LeaveRequestRepository

    auth_service: AuthService
    leave_service: LeaveService


def build_services(
    *,
    users_repo: UserRepository,
    leaves_repo: LeaveRequestRepository,
    scan_auto_approve: bool = True,
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
    cache_max_size: int = DEFAULT_CACHE_MAX_SIZE,
) -> Container:
    leave_service = LeaveService(
        leaves_repo,
        interpreter=ScanInterpreter(auto_approve=scan_auto_approve),
        cache=LeaveRequestCache(ttl_seconds=cache_ttl_seconds, max_size=cache_max_size),
    )
    return Container(
        users_repo=users_repo,
        leaves_repo=leaves_repo,
        auth_service=AuthService(users_repo),
        leave_service=leave_service,
    )


def build_container(
    *,
    db_config: dict,
    scan_auto_approve: bool = True,
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
    cache_max_size: int = DEFAULT_CACHE_MAX_SIZE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        users_repo=MySQLUserRepository(conn),
        leaves_repo=MySQLLeaveRequestRepository(conn),
        scan_auto_approve=scan_auto_approve,
        cache_ttl_seconds=cache_ttl_seconds,
        cache_max_size=cache_max_size,
    )
