"""Detect whether fragments are being rendered by the ahead-of-time build.

Only the fragment templates that emit plain-text attributes care about this:
the build strips markup with a regular expression, while hydration extracts
text the way a DOM would. Callers may always pass ``sanitize`` explicitly;
:func:`resolve_sanitize` supplies the default when they do not.
"""

from __future__ import annotations

import contextlib
import contextvars
import os
import typing as typ

BUILD_ENV_VAR = "LANDING_PAGES_BUILD"

_IN_BUILD: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "landing_pages_in_build", default=False
)


def is_build_environment() -> bool:
    """Return ``True`` when running inside the static build."""
    if _IN_BUILD.get():
        return True
    flag = os.getenv(BUILD_ENV_VAR, "").strip().lower()
    return flag in {"1", "true", "yes", "on"}


@contextlib.contextmanager
def build_environment() -> typ.Iterator[None]:
    """Mark the current context as the static build for the ``with`` body."""
    token = _IN_BUILD.set(True)
    try:
        yield
    finally:
        _IN_BUILD.reset(token)


def resolve_sanitize(sanitize: bool | None) -> bool:
    """Return ``sanitize`` when given, otherwise the detected environment."""
    if sanitize is None:
        return is_build_environment()
    return sanitize


__all__ = [
    "BUILD_ENV_VAR",
    "build_environment",
    "is_build_environment",
    "resolve_sanitize",
]
