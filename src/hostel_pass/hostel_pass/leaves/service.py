from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional, Sequence, Union

from ..common.datetime_utils import now_utc
from ..common.validators import normalize_email
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Action, Decision, LeaveStatus, Position, Role, ScanOutcome
from ..core.exceptions import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from . import lifecycle
from .cache import LeaveRequestCache
from .model import Actor, LeaveRequest
from .repository import LeaveRequestRepository
from .scan import ScanInterpreter, parse_payload, render_payload

logger = logging.getLogger(__name__)

_DECISION_ALIASES = {
    "approve": Decision.APPROVE,
    "approved": Decision.APPROVE,
    "reject": Decision.REJECT,
    "rejected": Decision.REJECT,
}

SCAN_ROLES = lifecycle.roles_for(Action.SCAN_APPROVE, Action.SCAN_EXIT, Action.SCAN_RETURN)


@dataclass(frozen=True)
class ScanResult:
    request: LeaveRequest
    outcome: ScanOutcome

    @property
    def message(self) -> str:
        return self.outcome.message

    @property
    def changed(self) -> bool:
        return self.outcome is not ScanOutcome.ALREADY_COMPLETED


def _new_request_id() -> str:
    return uuid.uuid4().hex


class LeaveService:
    """Use cases for leave requests: create, decide, scan, remove, read."""

    def __init__(
        self,
        requests: LeaveRequestRepository,
        *,
        interpreter: Optional[ScanInterpreter] = None,
        cache: Optional[LeaveRequestCache] = None,
        clock: Callable[[], datetime] = now_utc,
        id_factory: Callable[[], str] = _new_request_id,
    ):
        self._requests = requests
        self._interpreter = interpreter if interpreter is not None else ScanInterpreter()
        # Empty caches are falsy.
        self._cache = cache if cache is not None else LeaveRequestCache()
        self._clock = clock
        self._id_factory = id_factory

    @staticmethod
    def _parse_status(value: Union[LeaveStatus, str, None]) -> Optional[LeaveStatus]:
        if value is None or isinstance(value, LeaveStatus):
            return value
        v = value.strip().lower()
        if not v:
            return None
        try:
            return LeaveStatus(v)
        except ValueError:
            raise ValidationError(f"Unknown status: {value}")

    @staticmethod
    def _parse_decision(value: Union[Decision, str, None]) -> Decision:
        if isinstance(value, Decision):
            return value
        decision = _DECISION_ALIASES.get((value or "").strip().lower())
        if decision is None:
            raise ValidationError("Decision must be 'approve' or 'reject'")
        return decision

    def _load(self, request_id: str) -> LeaveRequest:
        """Fresh read from the store; mutations always start from here, never from the cache."""
        request = self._requests.get(str(request_id))
        if request is None:
            raise NotFoundError("Request not found")
        return request

    def _save(self, current: LeaveRequest, updated: LeaveRequest, *, actor: Actor) -> LeaveRequest:
        ok = self._requests.update(updated, expected_version=current.version)
        self._cache.invalidate(current.request_id)
        if not ok:
            logger.warning("Concurrent update lost on request %s (version %s)", current.request_id, current.version)
            raise ConflictError("Request was changed by someone else, please retry")

        logger.info(
            "Request %s: %s -> %s by %s %s",
            current.request_id,
            current.position.value,
            updated.position.value,
            actor.role.value,
            actor.email,
        )
        return replace(updated, version=current.version + 1)

    def create(self, *, actor: Actor, from_date: Optional[str], to_date: Optional[str]) -> LeaveRequest:
        request = lifecycle.create(
            actor=actor,
            request_id=self._id_factory(),
            from_date=from_date,
            to_date=to_date,
            now=self._clock(),
        )
        self._requests.insert(request)
        logger.info("Request %s created by %s (%s..%s)", request.request_id, request.student_email, from_date, to_date)
        return request

    def get(self, *, actor: Actor, request_id: str) -> LeaveRequest:
        request = self._cache.get(str(request_id), self._requests.get)
        if request is None:
            raise NotFoundError("Request not found")
        lifecycle.authorize_read(request, actor=actor)
        return request

    def list_for(
        self,
        *,
        actor: Actor,
        status: Union[LeaveStatus, str, None] = None,
        student_email: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[LeaveRequest]:
        # Students only ever see their own requests, whatever filter they pass.
        if actor.role is Role.STUDENT:
            email: Optional[str] = normalize_email(actor.email)
        else:
            email = normalize_email(student_email) or None

        return self._requests.list(status=self._parse_status(status), student_email=email, limit=int(limit))

    def decide(self, *, actor: Actor, request_id: str, decision: Union[Decision, str, None]) -> LeaveRequest:
        action = self._parse_decision(decision).action
        current = self._load(request_id)
        updated = lifecycle.transition(current, actor=actor, action=action, now=self._clock())
        return self._save(current, updated, actor=actor)

    def apply_scan(self, *, actor: Actor, payload_text: Optional[str]) -> ScanResult:
        if actor.role not in SCAN_ROLES:
            raise InvalidTransitionError("Only security staff can scan passes")

        payload = parse_payload(payload_text)
        stored = self._requests.get(payload.request_id)
        plan = self._interpreter.interpret(payload, stored)

        if plan.action is None:
            logger.info("Scan of completed request %s ignored", stored.request_id)
            return ScanResult(request=stored, outcome=plan.outcome)

        updated = lifecycle.transition(stored, actor=actor, action=plan.action, now=self._clock())
        return ScanResult(request=self._save(stored, updated, actor=actor), outcome=plan.outcome)

    def remove(self, *, actor: Actor, request_id: str) -> None:
        current = self._load(request_id)
        lifecycle.authorize_removal(current, actor=actor)

        ok = self._requests.delete(current.request_id, expected_version=current.version)
        self._cache.invalidate(current.request_id)
        if not ok:
            raise ConflictError("Request was changed by someone else, please retry")
        logger.info("Request %s deleted by %s %s", current.request_id, actor.role.value, actor.email)

    def qr_payload(self, *, actor: Actor, request_id: str) -> str:
        request = self.get(actor=actor, request_id=request_id)
        if request.position not in {Position.APPROVED_IN, Position.APPROVED_OUT}:
            raise ValidationError("Only approved requests have a pass")
        return render_payload(request)
