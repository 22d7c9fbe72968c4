from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import jsonify, request

from ..core.enums import Role
from ..core.exceptions import ConflictError, DomainError, NotFoundError, StoreError, ValidationError, error_kind
from .datetime_utils import parse_iso_date

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreError, 503),
)


def status_for(exc: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 400


def error_response(exc: DomainError):
    body = {
        "success": False,
        "error": error_kind(exc),
        "message": str(exc),
        "fields": list(getattr(exc, "fields", ())),
    }
    return jsonify(body), status_for(exc)


def ok(data: Any = None, status: int = 200):
    body: dict = {"success": True}
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_date(name: str) -> Optional[date]:
    value = (request.args.get(name) or "").strip()
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)", fields=(name,))


def query_role(name: str = "role") -> Optional[Role]:
    value = (request.args.get(name) or "").strip().lower()
    if not value:
        return None
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(f"Unknown role: {value}", fields=(name,))


def query_int(name: str, default: Optional[int]) -> Optional[int]:
    value = (request.args.get(name) or "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer", fields=(name,))
