"""Error handling patterns with recovery hints.

This example demonstrates how to handle common errors and use
the recovery_hint property to provide actionable guidance.
"""

from pathlib import Path

from jarscout import (
    ClasspathDiscovery,
    # Exceptions
    ClasspathNotFoundError,
    CollectionCache,
    JarscoutError,
    KnownLibraryResolver,
    LibraryNotFoundError,
    LockTimeoutError,
    PathListContext,
    UnsafeArchiveEntryError,
)


context = PathListContext([Path("./build/libs/app.war")])


# Pattern 1: Fall back when no classpath satisfies the requirement
def script_classpath(names: list[str]) -> list[Path]:
    """Discover a classpath, falling back to the standard script jars."""
    discovery = ClasspathDiscovery()
    try:
        return discovery.discover_or_raise(context, names, cache_dir=Path("./.jarscout"))
    except ClasspathNotFoundError as e:
        # recovery_hint names KOTLIN_SCRIPT_CLASSPATH
        print(f"Required: {e.names}")
        print(f"Hint: {e.recovery_hint}")
        return discovery.resolver.script_standard_jars()


# Pattern 2: Report which variable would locate a missing library
def stdlib_or_exit() -> Path:
    """Locate the stdlib or stop with guidance."""
    try:
        return KnownLibraryResolver().stdlib()
    except LibraryNotFoundError as e:
        print(f"{e}. Hint: {e.recovery_hint}")
        raise SystemExit(1) from None


# Pattern 3: Another process holds the unpack lock
def unpack_patiently(archive: Path) -> list[Path]:
    """Unpack with a long timeout, reporting contention."""
    cache = CollectionCache(Path("./.jarscout"), lock_timeout=60)
    try:
        return [entry.path for entry in cache.unpack(archive)]
    except LockTimeoutError as e:
        print(f"Waited {e.elapsed:.1f}s for {e.path}")
        print(f"Hint: {e.recovery_hint}")
        return []
    except UnsafeArchiveEntryError as e:
        print(f"Malicious entry {e.entry!r} in {e.archive}")
        return []


# Pattern 4: Catch-all for any library error
def discover_safe(names: list[str]) -> list[Path] | None:
    """Discover with comprehensive error handling."""
    try:
        return ClasspathDiscovery().discover_or_raise(context, names)
    except JarscoutError as e:
        print(f"Error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return None
