"""Helpers shared by the JSON controllers.

The session is filled by the external login flow with `user_id`, `role`
and, for seniors, `assigned_division`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    MismatchError,
    NoOpError,
    NotFoundError,
    StoreError,
    TransactionError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    user_id: int
    role: Role
    division: Optional[str] = None

    def require_division(self) -> str:
        if not self.division:
            raise AuthorizationError("No division assigned to this account")
        return self.division


def current_actor() -> Actor:
    return Actor(
        user_id=int(session["user_id"]),
        role=Role(session["role"]),
        division=(session.get("assigned_division") or None),
    )


def ok(data=None, *, message: Optional[str] = None, status: int = 200):
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def fail(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def payload() -> dict:
    """JSON body of the request, falling back to form fields."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def error_response(exc: DomainError):
    if isinstance(exc, MismatchError):
        return fail(str(exc), 503, retryable=True, expected=exc.expected, written=exc.written)
    if isinstance(exc, TransactionError):
        return fail(str(exc), 409, kind=exc.kind.value)
    if isinstance(exc, ConflictError):
        return fail(str(exc), 409)
    if isinstance(exc, (ValidationError, NoOpError)):
        return fail(str(exc), 400)
    if isinstance(exc, AuthorizationError):
        return fail(str(exc), 403)
    if isinstance(exc, NotFoundError):
        return fail(str(exc), 404)
    if isinstance(exc, StoreError):
        logger.error("Store failure: %s", exc)
        return fail("Database error. Please try again later.", 500)
    return fail(str(exc), 400)


def role_required(*roles: Role):
    """Require a logged-in user holding one of `roles`; map domain errors to JSON."""

    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Login required", 401)
            if allowed and session.get("role") not in allowed:
                return fail("You do not have access to this resource", 403)

            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return error_response(e)
            except Exception:
                logger.exception("Unhandled error in %s", view.__name__)
                return fail("Internal server error", 500)

        return wrapper

    return decorator
