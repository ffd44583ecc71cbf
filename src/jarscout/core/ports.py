"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path
    from types import TracebackType

    from jarscout.core.models import CandidateEntry


@dataclass(frozen=True, slots=True)
class SingleParent:
    """A context with one designated parent (linear chain)."""

    parent: LoadingContext


@dataclass(frozen=True, slots=True)
class MultiParent:
    """A context with several parents (plugin-style loader graphs)."""

    parents: tuple[LoadingContext, ...]


ParentLink = SingleParent | MultiParent | None


@runtime_checkable
class LoadingContext(Protocol):
    """A node in the host's loader hierarchy.

    Implementations must hash and compare by identity of the underlying
    host node so that walks can de-duplicate them.
    """

    def parent_link(self) -> ParentLink:
        """Return how this context reaches its parents, or None for a leaf."""
        ...

    def resources(self, name: str) -> Sequence[str]:
        """Look up a relative resource path.

        Args:
            name: Slash-separated path such as "META-INF/MANIFEST.MF".

        Returns:
            Zero or more URIs ("file:..." or "jar:file:...!/name").
        """
        ...

    def source_uris(self) -> Sequence[str] | None:
        """URIs this context natively loads from, or None if not tracked."""
        ...


@runtime_checkable
class FileLockPort(Protocol):
    """Cross-process mutex bound to a lock file path.

    acquire() waits at most the configured timeout and raises
    LockTimeoutError when it elapses. release() is safe to call once
    after a successful acquire().
    """

    path: Path

    def acquire(self) -> None:
        """Block until the lock is held or the timeout elapses."""
        ...

    def release(self) -> None:
        """Give the lock up."""
        ...

    def __enter__(self) -> FileLockPort:
        """Acquire on entry."""
        ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Release on exit."""
        ...


@runtime_checkable
class CollectionCachePort(Protocol):
    """Unpacks collection archives into a shared cache directory."""

    def unpack(self, archive: Path) -> list[CandidateEntry]:
        """Return the class directories and library files bundled in archive."""
        ...
