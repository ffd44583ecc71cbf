"""Core domain models for jarscout.

These models are plain dataclasses. Apart from the small stat/exists
helpers on CandidateEntry, CollectionKey and CacheSlot, they carry no
I/O behaviour.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Self


if TYPE_CHECKING:
    from jarscout.core.ports import LoadingContext


# File extensions accepted as classpath archives (directories are always accepted)
CLASSPATH_EXTENSIONS = frozenset({"jar", "zip"})


class EntryKind(StrEnum):
    """Kind of a classpath entry on disk."""

    DIRECTORY = "directory"
    ARCHIVE = "archive"


class ClasspathMode(StrEnum):
    """How a candidate list is reduced against required names.

    - ALL: every name must match; the whole list is returned.
    - MINIMAL: every name must match; one entry per name is returned.
    - ANY: at least one name must match; the whole list is returned.
    """

    ALL = "all"
    MINIMAL = "minimal"
    ANY = "any"


class SlotState(StrEnum):
    """Observed state of a cache slot."""

    VALID = "valid"
    LOCKED = "locked"
    INCOMPLETE = "incomplete"

    @property
    def color(self) -> str:
        """Rich style used to display this state."""
        return _SLOT_STATE_COLORS[self]


_SLOT_STATE_COLORS = {
    SlotState.VALID: "green",
    SlotState.LOCKED: "yellow",
    SlotState.INCOMPLETE: "red",
}


def directory_usage(root: Path) -> tuple[int, int]:
    """Return (total bytes, file count) of the files under root.

    A missing root counts as empty. Files vanishing mid-walk are skipped.
    """
    total_size = 0
    file_count = 0
    if not root.is_dir():
        return total_size, file_count
    for path in root.rglob("*"):
        if path.is_file():
            try:
                total_size += path.stat().st_size
            except OSError:
                continue
            file_count += 1
    return total_size, file_count


@dataclass(frozen=True, slots=True)
class CandidateEntry:
    """A resolved filesystem path usable as a classpath entry.

    Attributes:
        path: Absolute or relative path on disk.
        kind: Whether the entry is a directory or an archive file.
    """

    path: Path
    kind: EntryKind

    @classmethod
    def from_path(cls, path: Path) -> Self | None:
        """Build an entry if path is a directory or an allowed archive.

        Args:
            path: Candidate location.

        Returns:
            The entry, or None if path is missing or has the wrong extension.
        """
        if path.is_dir():
            return cls(path, EntryKind.DIRECTORY)
        if path.is_file() and path.suffix.lstrip(".") in CLASSPATH_EXTENSIONS:
            return cls(path, EntryKind.ARCHIVE)
        return None


@dataclass(frozen=True, slots=True)
class CollectionKey:
    """Identity of one cached unpack of a collection archive.

    Combines the archive name, canonical path, length and modification
    time so that a rebuilt archive maps to a fresh slot.

    Attributes:
        name: Archive file name without extension.
        canonical_path: Fully resolved archive path.
        length: Archive size in bytes.
        mtime_ms: Modification time in whole milliseconds.
    """

    name: str
    canonical_path: str
    length: int
    mtime_ms: int

    @classmethod
    def for_archive(cls, archive: Path) -> Self:
        """Compute the key for an archive currently on disk."""
        resolved = archive.resolve()
        stat = resolved.stat()
        return cls(
            name=resolved.stem,
            canonical_path=str(resolved),
            length=stat.st_size,
            mtime_ms=stat.st_mtime_ns // 1_000_000,
        )

    @property
    def derived_name(self) -> str:
        """Directory name used for the slot under the cache root."""
        digest = hashlib.sha1(self.canonical_path.encode("utf-8")).hexdigest()[:12]
        return f"{self.name}_{digest}_{self.length}_{self.mtime_ms}"


@dataclass(frozen=True, slots=True)
class CacheSlot:
    """Filesystem triple backing one CollectionKey.

    Attributes:
        target_dir: Directory holding the extracted contents.
        marker_file: Exists once extraction completed successfully.
        lock_file: Exists while some agent is extracting.
    """

    target_dir: Path
    marker_file: Path
    lock_file: Path

    @classmethod
    def for_key(cls, cache_dir: Path, key: CollectionKey) -> Self:
        """Derive slot paths for a key under cache_dir."""
        name = key.derived_name
        return cls(
            target_dir=cache_dir / name,
            marker_file=cache_dir / f"{name}.cached",
            lock_file=cache_dir / f"{name}.lock",
        )

    @property
    def name(self) -> str:
        """The derived slot name."""
        return self.target_dir.name

    def is_valid(self) -> bool:
        """True when the target directory and marker both exist."""
        return self.target_dir.is_dir() and self.marker_file.exists()

    def size_bytes(self) -> int:
        """Bytes extracted into the target directory."""
        return directory_usage(self.target_dir)[0]

    @property
    def state(self) -> SlotState:
        """Current state as observed on disk."""
        if self.lock_file.exists():
            return SlotState.LOCKED
        if self.is_valid():
            return SlotState.VALID
        return SlotState.INCOMPLETE


@dataclass(frozen=True, slots=True)
class LibraryReference:
    """A single resolved library file.

    Attributes:
        path: The library file on disk.
        source: The override key, required name or marker class that
            located it.
    """

    path: Path
    source: str


@dataclass(frozen=True, slots=True)
class MarkerClass:
    """A class used to locate the library that defines it.

    Attributes:
        name: Fully-qualified class name (e.g. "kotlin.jvm.JvmStatic").
        defining_context: The loading context that defined the class,
            if known.
    """

    name: str
    defining_context: LoadingContext | None = None

    def __post_init__(self) -> None:
        """Validate the class name."""
        if not self.name:
            raise ValueError("Marker class name cannot be empty")

    @property
    def resource_path(self) -> str:
        """Relative resource path of the compiled class file."""
        return f"{self.name.replace('.', '/')}.class"
