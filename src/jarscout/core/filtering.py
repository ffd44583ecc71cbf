"""Reduction of a candidate classpath against required library names."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jarscout.core.matching import has_parent_named, matches_versioned
from jarscout.core.models import ClasspathMode


if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


def entry_matches(entry: Path, name: str) -> bool:
    """Check a classpath entry against one required name.

    An entry matches when its file name is a versioned match of name, or
    when it is a directory whose own name or an ancestor's name is name.
    """
    return matches_versioned(entry, name) or (entry.is_dir() and has_parent_named(entry, name))


def take_if_contains_all(classpath: Sequence[Path], names: Sequence[str]) -> list[Path] | None:
    """Return the whole classpath if every name matches some entry."""
    if all(any(entry_matches(e, name) for e in classpath) for name in names):
        return list(classpath)
    return None


def filter_if_contains_all(classpath: Sequence[Path], names: Sequence[str]) -> list[Path] | None:
    """Return exactly one entry per name, in the order the names are given.

    Each name takes the first entry that matches it and has not already
    been taken by an earlier name.

    Returns:
        The selected entries, or None if any name stays unmatched.
    """
    selected: list[Path] = []
    for name in names:
        match = next(
            (e for e in classpath if e not in selected and entry_matches(e, name)),
            None,
        )
        if match is None:
            return None
        selected.append(match)
    return selected


def take_if_contains_any(classpath: Sequence[Path], names: Sequence[str]) -> list[Path] | None:
    """Return the whole classpath if at least one name matches some entry."""
    if any(entry_matches(e, name) for name in names for e in classpath):
        return list(classpath)
    return None


def apply_mode(
    classpath: Sequence[Path],
    names: Sequence[str],
    mode: ClasspathMode,
) -> list[Path] | None:
    """Filter a classpath with the given mode.

    Args:
        classpath: Flat candidate list.
        names: Required library names (e.g. "kotlin-stdlib.jar").
        mode: See ClasspathMode.

    Returns:
        The filtered classpath, or None when nothing satisfies the
        requirement (including an empty classpath).
    """
    if not classpath:
        return None
    if mode is ClasspathMode.ALL:
        return take_if_contains_all(classpath, names)
    if mode is ClasspathMode.ANY:
        return take_if_contains_any(classpath, names)
    return filter_if_contains_all(classpath, names)
