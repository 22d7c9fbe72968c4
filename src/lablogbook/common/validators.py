from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", fields=(field_name,))
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def missing_fields(fields: Mapping[str, object], required: Sequence[str]) -> list[str]:
    """Names from `required` whose value is absent or blank, in declaration order."""
    missing: list[str] = []
    for name in required:
        value = fields.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def require_positive_id(value: object, field_name: str) -> int:
    try:
        as_int = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", fields=(field_name,))
    if as_int <= 0:
        raise ValidationError(f"{field_name} must be positive", fields=(field_name,))
    return as_int
