"""jarscout - Locate the classpath for an embedded Kotlin compiler.

This library finds the archives needed to run the Kotlin compiler or
script runtime from inside an arbitrary host, by walking the host's
loading contexts, unpacking nested collection archives (web applications,
Spring Boot jars) into a shared cache, and matching library names with
version tolerance.

Example:
    >>> from pathlib import Path
    >>> from jarscout import ClasspathDiscovery, PathListContext
    >>> context = PathListContext(["lib/app.war"])
    >>> discovery = ClasspathDiscovery()
    >>> classpath = discovery.discover(
    ...     context,
    ...     ["kotlin-stdlib.jar", "kotlin-script-runtime.jar"],
    ...     cache_dir=Path("./.jarscout"),
    ... )
"""

from jarscout.adapters.cache import CollectionCache
from jarscout.adapters.contexts import (
    HostObjectContext,
    PathListContext,
    adapt,
    default_context,
)
from jarscout.adapters.lock import FlockFileLock, PollingFileLock
from jarscout.core.exceptions import (
    CacheError,
    ClasspathNotFoundError,
    JarscoutError,
    LibraryNotFoundError,
    LockTimeoutError,
    UnsafeArchiveEntryError,
)
from jarscout.core.matching import has_parent_named, matches_versioned
from jarscout.core.models import (
    CacheSlot,
    CandidateEntry,
    ClasspathMode,
    CollectionKey,
    EntryKind,
    LibraryReference,
    MarkerClass,
)
from jarscout.core.ports import (
    CollectionCachePort,
    FileLockPort,
    LoadingContext,
    MultiParent,
    SingleParent,
)
from jarscout.core.resolver import KnownLibraryResolver
from jarscout.core.services import ClasspathDiscovery
from jarscout.discovery import discover_classpath, resolve_known_library


__version__ = "0.1.0"

__all__ = [
    "CacheError",
    "CacheSlot",
    "CandidateEntry",
    "ClasspathDiscovery",
    "ClasspathMode",
    "ClasspathNotFoundError",
    "CollectionCache",
    "CollectionCachePort",
    "CollectionKey",
    "EntryKind",
    "FileLockPort",
    "FlockFileLock",
    "HostObjectContext",
    "JarscoutError",
    "KnownLibraryResolver",
    "LibraryNotFoundError",
    "LibraryReference",
    "LoadingContext",
    "LockTimeoutError",
    "MarkerClass",
    "MultiParent",
    "PathListContext",
    "PollingFileLock",
    "SingleParent",
    "UnsafeArchiveEntryError",
    "__version__",
    "adapt",
    "default_context",
    "discover_classpath",
    "has_parent_named",
    "matches_versioned",
    "resolve_known_library",
]
