"""Core domain module for jarscout.

This module contains the domain models, port definitions and the
discovery logic. It depends on adapters only through the ports.
"""

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


__all__ = [
    "CacheSlot",
    "CandidateEntry",
    "ClasspathMode",
    "CollectionCachePort",
    "CollectionKey",
    "EntryKind",
    "FileLockPort",
    "LibraryReference",
    "LoadingContext",
    "MarkerClass",
    "MultiParent",
    "SingleParent",
]
