"""Flask glue shared by the feature controllers.

Identity comes from the session (written by the external auth layer) and is
turned into an explicit RequestContext before any service is called.
"""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.context import RequestContext
from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    PolicyError,
    ValidationError,
)
from .datetime_utils import parse_iso_date
from .validators import optional_id

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (AuthorizationError, 403),
    (ValidationError, 400),
    (PolicyError, 400),
)


def status_for(error: DomainError) -> int:
    for cls, code in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return code
    return 400


def current_context() -> RequestContext:
    return RequestContext(
        user_id=int(session["user_id"]),
        role=Role(session["role"]),
        school_id=int(session["school_id"]),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "school_id" not in session:
            return jsonify({"error": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "school_id" not in session:
            return jsonify({"error": "Authentication required"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"error": "Admin access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def date_arg(name: str, *, source: Optional[dict] = None) -> Optional[date]:
    value = (source if source is not None else request.args).get(name)
    return parse_iso_date(value) if value else None


def int_arg(name: str, *, source: Optional[dict] = None) -> Optional[int]:
    value = (source if source is not None else request.args).get(name)
    return optional_id(value, name)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        code = status_for(e)
        if code >= 403:
            logger.info("%s %s -> %d: %s", request.method, request.path, code, e)
        return jsonify({"error": str(e)}), code

    @app.errorhandler(Exception)
    def unexpected_error(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500
