from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def current_role() -> Optional[Role]:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            return fail("Silakan masuk terlebih dahulu", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    """Gate a view on the session role.

    The gate is advisory: services repeat the capability check and the
    permit repository repeats the status guard on every write.
    """

    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "uid" not in session:
                return fail("Silakan masuk terlebih dahulu", 401)
            if session.get("role") not in allowed:
                return fail("Anda tidak memiliki akses ke halaman ini", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def domain_error_response(e: DomainError):
    """Map synchronous domain failures to HTTP codes."""
    if isinstance(e, AuthorizationError):
        return fail(str(e), 403)
    if isinstance(e, AuthenticationError):
        return fail(str(e), 401)
    if isinstance(e, NotFoundError):
        return fail(str(e), 404)
    if isinstance(e, (InvalidTransitionError, PreconditionError)):
        return fail(str(e), 409)
    if isinstance(e, ValidationError):
        return fail(str(e), 400)
    return fail(str(e), 400)


def wants_wait() -> bool:
    """``?wait=1`` asks a write endpoint to await the backend outcome."""
    return (request.args.get("wait") or "").lower() in {"1", "true", "yes"}


def write_response(handle, *, message: str, timeout: float = 10.0):
    """Answer a dispatched write.

    By default the write is detached and the client gets an optimistic 202;
    failures surface on the error channel. With ``?wait=1`` the outcome is
    awaited and reported.
    """

    if not wants_wait():
        handle.detach()
        return jsonify({"success": True, "message": message, "pending": True}), 202

    result = handle.wait(timeout=timeout)
    if result.ok:
        body = {"success": True, "message": message, "pending": False}
        if result.value is not None:
            body["result"] = result.value
        return jsonify(body), 200
    if result.conflict:
        return fail("Data telah diubah oleh pengguna lain, silakan muat ulang", 409)
    logger.warning("Awaited write failed: %s", result.error)
    return fail("Gagal menyimpan data", 500)
