from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..core.constants import CATEGORIES, DIVISIONS
from ..core.exceptions import ValidationError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def require_text(value, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value


def require_non_empty(value: str, field_name: str) -> str:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    value = require_text(value, field_name)
    if not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value, field_name: str) -> Optional[str]:
    """Stripped text, or None when missing or blank."""

    if value is None:
        return None
    return require_text(value, field_name).strip() or None


def parse_bool(value, field_name: str) -> bool:
    """Booleans from JSON or form fields ("true" / "false", "1" / "0", ...)."""

    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        flag = value.strip().lower()
        if flag in _TRUE:
            return True
        if flag in _FALSE:
            return False
    raise ValidationError(f"{field_name} must be true or false")


def require_category(value: str) -> str:
    category = require_non_empty(value, "Category").upper()
    if category not in CATEGORIES:
        raise ValidationError(f"Unknown category: {category}")
    return category


def require_division(value: str) -> str:
    division = require_non_empty(value, "Division").upper()
    if division not in DIVISIONS:
        raise ValidationError(f"Unknown division: {division}")
    return division


def require_categories(values: Iterable[str]) -> tuple[str, ...]:
    """Normalize a category selection, keeping the canonical order."""

    if values is None:
        values = []
    if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple, set, frozenset)):
        raise ValidationError("Categories must be a list")
    selected = {require_category(v) for v in values}
    if not selected:
        raise ValidationError("Select at least one category.")
    return tuple(c for c in CATEGORIES if c in selected)


def require_mapping(value, field_name: str) -> Mapping:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(f"{field_name} must be an object")
    return value


def optional_filter(value, normalize):
    """Treat empty / "ALL" as no filter, otherwise normalize the value."""

    if value is None:
        return None
    if isinstance(value, str) and value.strip().upper() in {"", "ALL"}:
        return None
    return normalize(value)
