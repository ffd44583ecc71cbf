"""Version-tolerant library name matching.

These functions contain no I/O and are safe to use in the core domain.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import PurePath


@lru_cache(maxsize=256)
def _versioned_pattern(base_name: str) -> re.Pattern[str]:
    """Compile <stem>(-<digit>...)?<suffix> for a base name."""
    base = PurePath(base_name)
    return re.compile(re.escape(base.stem) + r"(-\d.*)?" + re.escape(base.suffix))


def matches_versioned(candidate: str | PurePath, base_name: str) -> bool:
    """Check whether a file name is base_name, possibly with a version suffix.

    Args:
        candidate: A file name or path; only the final component is used.
        base_name: The unversioned library name, e.g. "kotlin-stdlib.jar".

    Returns:
        True if the name equals base_name, equals base_name without its
        extension (class directories), or matches
        "<stem>-<version>.<ext>" where version starts with a digit.

    Examples:
        >>> matches_versioned("runtime-1.3.0.jar", "runtime.jar")
        True
        >>> matches_versioned("runtime-extra.jar", "runtime.jar")
        False
    """
    name = PurePath(candidate).name
    if name == base_name or name == PurePath(base_name).stem:
        return True
    return _versioned_pattern(base_name).fullmatch(name) is not None


def has_parent_named(path: PurePath, base_name: str) -> bool:
    """Check whether path or any of its ancestors is named base_name.

    The comparison accepts base_name with or without its extension, so
    "kotlin-stdlib.jar" finds ".../kotlin-stdlib/classes".
    """
    names = {base_name, PurePath(base_name).stem}
    return any(part.name in names for part in (path, *path.parents))
