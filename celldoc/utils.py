"""
Utility functions and environment configuration for celldoc.
"""

from __future__ import annotations

import os


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def _env_limit(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    if raw.strip().lower() == "none":
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer or 'none'; got {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{name} must be >= 0; got {value}")
    return value


# Environment variable to control interpreter step tracing
DEBUG_INTERPRETER = _env_flag("CELLDOC_DEBUG")

# Default limit for truncating reprs in log lines.
# This keeps a single log record small when a program carries a large document.
DEFAULT_REPR_LIMIT = 200

REPR_LIMIT = _env_limit("CELLDOC_REPR_LIMIT", DEFAULT_REPR_LIMIT)


def truncate_repr(obj: object, limit: int | None = None) -> str:
    """
    Return a truncated repr of obj.

    Args:
        obj: The object to represent.
        limit: Maximum length of the repr string. Defaults to ``REPR_LIMIT``;
            ``None`` disables truncation when ``REPR_LIMIT`` is also ``None``.
    """
    if limit is None:
        limit = REPR_LIMIT
    text = repr(obj)
    if limit is None or len(text) <= limit:
        return text
    return f"{text[: max(0, limit)]}... [truncated {len(text) - limit} chars]"


__all__ = ["DEBUG_INTERPRETER", "DEFAULT_REPR_LIMIT", "REPR_LIMIT", "truncate_repr"]
