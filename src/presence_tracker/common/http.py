from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    StateConflictError,
    StoreError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (StateConflictError, 409),
)


def auth_required(container, role: Optional[Role] = None):
    """Resolve the bearer token into ``g.identity``; optionally require a role."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = container.gate.bearer_token(request.headers.get("Authorization"))
            identity = container.gate.authenticate(token)
            if role is not None:
                container.gate.ensure_role(identity, role)
            g.identity = identity
            return view(*args, **kwargs)

        return wrapper

    return decorator


def to_json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return value


def query_date(name: str, default: Optional[date] = None) -> date:
    raw = request.args.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"Query parameter '{name}' is required")
        return default
    return parse_iso_date(raw)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        for cls, status in _STATUS_BY_ERROR:
            if isinstance(exc, cls):
                return jsonify({"error": type(exc).__name__, "message": str(exc)}), status
        return jsonify({"error": type(exc).__name__, "message": str(exc)}), 400

    @app.errorhandler(StoreError)
    def handle_store_error(exc: StoreError):
        logger.exception("Store failure while handling %s %s", request.method, request.path)
        return jsonify({"error": "StoreError", "message": "Storage is unavailable"}), 503
