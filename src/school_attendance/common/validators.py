from __future__ import annotations

import re
from typing import Optional

from ..core.enums import Gender
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_MOBILE_RE = re.compile(r"^(\+91)?[6-9]\d{9}$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_email(value: Optional[str], field_name: str = "Parent email") -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError("Please enter a valid email address")
    email = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")
    return email


def optional_mobile(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("Please enter a valid 10-digit Indian mobile number")
    if not value.strip():
        return None
    cleaned = re.sub(r"[\s\-]", "", value)
    if not _MOBILE_RE.match(cleaned):
        raise ValidationError("Please enter a valid 10-digit Indian mobile number")
    return cleaned


def optional_text(value) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


def require_gender(value: Optional[str]) -> Gender:
    if not isinstance(value, str):
        raise ValidationError("Gender must be either male or female")
    try:
        return Gender(value.strip().lower())
    except ValueError:
        raise ValidationError("Gender must be either male or female")


def require_ids(values, field_name: str) -> list[int]:
    """Coerce a non-empty list of ids, collapsing duplicates while keeping order."""

    if not values:
        raise ValidationError(f"{field_name} are required")
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list")
    out: list[int] = []
    seen: set[int] = set()
    for v in values:
        i = require_id(v, field_name)
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out


def require_id(value, field_name: str) -> int:
    """Coerce one id from request data; bools and non-numeric text are rejected."""

    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def optional_id(value, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_id(value, field_name)
