"""Configuration utilities for jarscout.

All configuration comes from environment variables. Helpers take the
environment mapping explicitly so callers and tests can inject their own.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Mapping


SCRIPT_CLASSPATH_KEY = "KOTLIN_SCRIPT_CLASSPATH"
COMPILER_CLASSPATH_KEY = "KOTLIN_COMPILER_CLASSPATH"
COMPILER_JAR_KEY = "KOTLIN_COMPILER_JAR"
STDLIB_JAR_KEY = "KOTLIN_STDLIB_JAR"
REFLECT_JAR_KEY = "KOTLIN_REFLECT_JAR"
# Obsolete name for the stdlib override, still honoured
RUNTIME_JAR_KEY = "KOTLIN_RUNTIME_JAR"
SCRIPT_RUNTIME_JAR_KEY = "KOTLIN_SCRIPT_RUNTIME_JAR"
LOCK_TIMEOUT_MS_KEY = "KOTLIN_JAR_COLLECTIONS_UNPACK_CACHE_LOCK_TIMEOUT_MS"
ENVIRONMENT_CLASSPATH_KEY = "CLASSPATH"
CACHE_DIR_KEY = "JARSCOUT_CACHE_DIR"

LOCK_TIMEOUT_MS_DEFAULT = 10_000
LOCK_TIMEOUT_MS_MAX = 600_000


def _environ(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def read_path(environ: Mapping[str, str] | None, key: str) -> Path | None:
    """Read a single path override.

    Args:
        environ: Environment mapping. None uses os.environ.
        key: Variable name.

    Returns:
        The path if the variable is set and non-empty, None otherwise.
        Existence is not checked.
    """
    value = _environ(environ).get(key)
    return Path(value) if value else None


def read_path_list(environ: Mapping[str, str] | None, key: str) -> list[Path] | None:
    """Read an os.pathsep separated path list.

    Empty segments are dropped.

    Returns:
        The list of paths, or None if the variable is unset or empty.
    """
    value = _environ(environ).get(key)
    if not value:
        return None
    return [Path(part) for part in value.split(os.pathsep) if part]


def lock_timeout_ms(environ: Mapping[str, str] | None = None) -> int:
    """Return the cache lock timeout in milliseconds.

    The value is clamped to [0, LOCK_TIMEOUT_MS_MAX]. Unset or
    non-numeric values give LOCK_TIMEOUT_MS_DEFAULT.
    """
    raw = _environ(environ).get(LOCK_TIMEOUT_MS_KEY)
    if raw is None:
        return LOCK_TIMEOUT_MS_DEFAULT
    try:
        value = int(raw.strip())
    except ValueError:
        return LOCK_TIMEOUT_MS_DEFAULT
    return min(max(value, 0), LOCK_TIMEOUT_MS_MAX)


def lock_timeout_seconds(environ: Mapping[str, str] | None = None) -> float:
    """Return the cache lock timeout in seconds."""
    return lock_timeout_ms(environ) / 1000


def default_cache_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the default unpack cache root.

    Uses JARSCOUT_CACHE_DIR when set, otherwise XDG_CACHE_HOME/jarscout,
    falling back to ~/.cache/jarscout.

    Example:
        >>> from jarscout.config import default_cache_dir
        >>> cache_dir = default_cache_dir()
    """
    env = _environ(environ)
    explicit = env.get(CACHE_DIR_KEY)
    if explicit:
        return Path(explicit)
    xdg = env.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / "jarscout"
