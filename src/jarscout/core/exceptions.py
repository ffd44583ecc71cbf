"""Domain exceptions for jarscout.

All library errors inherit from JarscoutError, allowing users to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class JarscoutError(Exception):
    """Base class for all jarscout exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class ClasspathNotFoundError(JarscoutError):
    """Raised when no classpath satisfying the required names was found.

    Attributes:
        names: The required library names.
        property_key: Environment key that can be set to bypass discovery.
    """

    def __init__(self, names: Sequence[str], property_key: str) -> None:
        self.names = list(names)
        self.property_key = property_key
        super().__init__(
            "Unable to get script compilation classpath from context"
            f" (required: {', '.join(self.names) or '<none>'})"
        )

    @property
    def recovery_hint(self) -> str:
        """Name the override that skips discovery."""
        return f"Specify an explicit classpath via the {self.property_key} environment variable"


class LibraryNotFoundError(JarscoutError):
    """Raised when a well-known library cannot be located.

    Attributes:
        library: Human-readable library name (e.g. "kotlin stdlib").
        property_key: Environment key naming the file directly.
    """

    def __init__(self, library: str, property_key: str) -> None:
        self.library = library
        self.property_key = property_key
        super().__init__(f"Unable to find {library}")

    @property
    def recovery_hint(self) -> str:
        """Name the override that points at the library."""
        return f"Set the {self.property_key} environment variable to its location"


class CacheError(JarscoutError):
    """Base class for unpack cache errors."""

    pass


class LockTimeoutError(CacheError):
    """Raised when a cache slot lock could not be acquired in time.

    Attributes:
        path: The contended lock file.
        elapsed: Seconds spent waiting.
    """

    def __init__(self, path: Path, elapsed: float) -> None:
        self.path = path
        self.elapsed = elapsed
        super().__init__(
            f"Jar collections unpacking lock timeout ({int(elapsed * 1000)}ms) on file: {path}"
        )

    @property
    def recovery_hint(self) -> str:
        """Suggest removing a stale lock or waiting longer."""
        return (
            f"If no other process is unpacking, delete {self.path.name};"
            " otherwise raise KOTLIN_JAR_COLLECTIONS_UNPACK_CACHE_LOCK_TIMEOUT_MS"
        )


class UnsafeArchiveEntryError(CacheError):
    """Raised when an archive entry would be extracted outside its slot.

    Attributes:
        archive: The collection archive being unpacked.
        entry: The offending entry name.
    """

    def __init__(self, archive: Path, entry: str) -> None:
        self.archive = archive
        self.entry = entry
        super().__init__(f"Refusing to extract '{entry}' from {archive}")

    @property
    def recovery_hint(self) -> str:
        """Point at the archive that needs rebuilding."""
        return f"Rebuild {self.archive.name} without absolute or '..' entry paths"
