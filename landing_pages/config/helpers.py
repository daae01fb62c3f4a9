"""Utility helpers shared by the site configuration loader."""

from __future__ import annotations

import typing as typ

from .models import SiteConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _required_str(payload: typ.Mapping[str, typ.Any], key: str, section: str) -> str:
    """Return ``payload[key]`` as a stripped string or raise when missing."""
    value = _optional_str(payload.get(key))
    if value is None:
        msg = f"Site configuration '{section}' is missing '{key}'."
        raise SiteConfigError(msg)
    return value


def _normalize_keywords(value: str | list[object] | None) -> list[str]:
    """Normalize keywords given as a comma-separated string or a list."""
    if isinstance(value, str):
        return [segment.strip() for segment in value.split(",") if segment.strip()]
    if isinstance(value, list):
        normalized: list[str] = []
        for segment in value:
            text = str(segment).strip()
            if text:
                normalized.append(text)
        return normalized
    return []


def _coerce_bool(value: object, *, default: bool) -> bool:
    """Interpret YAML and environment style booleans."""
    match value:
        case None:
            return default
        case bool():
            return value
        case str() as text:
            return text.strip().lower() in {"1", "true", "yes", "on"}
        case _:
            return bool(value)


def _coerce_number(
    value: object, *, default: float, key: str, cast: type[int] | type[float]
) -> typ.Any:
    """Convert ``value`` with ``cast`` or raise a configuration error."""
    if value is None or value == "":
        return cast(default)
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        msg = f"Contact configuration '{key}' must be numeric."
        raise SiteConfigError(msg) from exc


__all__ = [
    "_coerce_bool",
    "_coerce_number",
    "_normalize_keywords",
    "_optional_str",
    "_required_str",
]
