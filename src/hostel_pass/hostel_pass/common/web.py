"""Helpers shared by the Flask controllers (JSON responses, session guards)."""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..leaves.model import Actor


def json_error(message: str, status: int, **extra):
    return jsonify({"success": False, "message": message, **extra}), status


def json_body() -> dict:
    """Request JSON as a dict; anything else (missing, malformed, array) reads as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def current_actor() -> Optional[Actor]:
    if "user_id" not in session:
        return None
    return Actor(role=Role(session["role"]), email=session["email"], user_id=int(session["user_id"]))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return json_error("Please log in to continue", 401)
            if session.get("role") not in allowed:
                return json_error("Access denied", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator
