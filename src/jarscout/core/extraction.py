"""Candidate classpath entries for a single loading context.

A context is asked, in priority order, for:

1. collection archives (packaged web applications and similar) when an
   unpack cache is available;
2. the source URIs it natively tracks;
3. URIs returned by a get_urls-style accessor on the host object;
4. the archives or directories that contain a JAR manifest.

The first strategy that produces entries wins for that context.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING
from urllib.parse import urlparse
from urllib.request import url2pathname

from jarscout.core.models import CandidateEntry
from jarscout.core.walker import iter_related_contexts


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from jarscout.core.ports import CollectionCachePort, LoadingContext


logger = logging.getLogger(__name__)

COLLECTION_CLASSES_PATHS = ("BOOT-INF/classes", "WEB-INF/classes")
COLLECTION_LIB_PATHS = ("BOOT-INF/lib", "WEB-INF/lib")
COLLECTION_KEY_PATHS = COLLECTION_CLASSES_PATHS + COLLECTION_LIB_PATHS
COLLECTION_EXTENSIONS = frozenset({"jar", "war", "zip"})
MANIFEST_RESOURCE = "META-INF/MANIFEST.MF"

# Accessor names probed on host objects that do not track URIs natively
URL_ACCESSOR_NAMES = ("get_urls", "getUrls")


def uri_to_path(uri: str) -> Path | None:
    """Convert a file or jar URI to the filesystem path it designates.

    "jar:file:/a/app.war!/WEB-INF/lib" maps to the archive "/a/app.war".
    Strings without a scheme are taken as plain paths.

    Args:
        uri: A URI or plain path.

    Returns:
        The path, or None for schemes other than file/jar.
    """
    if uri.startswith("jar:"):
        uri = uri[len("jar:") :].split("!/", 1)[0]

    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    # Single letters are Windows drive letters, not schemes
    if not parsed.scheme or len(parsed.scheme) == 1:
        return Path(uri)
    return None


def resource_root(uri: str, resource_name: str) -> Path | None:
    """Return the archive or directory that contains a resource URI.

    Args:
        uri: Where the resource was found.
        resource_name: The relative resource path that was looked up.

    Returns:
        The archive for "jar:" URIs, the directory the resource path is
        relative to for "file:" URIs, or None if neither applies.
    """
    path = uri_to_path(uri)
    if path is None or uri.startswith("jar:"):
        return path

    depth = len(PurePosixPath(resource_name).parts)
    if depth == 0 or len(path.parents) < depth:
        return None
    return path.parents[depth - 1]


def find_resource_root(context: LoadingContext, resource_name: str) -> Path | None:
    """Locate the archive or directory providing a resource.

    Searches context and then its parents, like a delegating class
    loader, and returns the first root that exists on disk.
    """
    for related in iter_related_contexts(context):
        for uri in _safe_resources(related, resource_name):
            root = resource_root(uri, resource_name)
            if root is not None and root.exists():
                return root
    return None


def to_classpath_entries(uris: Iterable[object]) -> list[CandidateEntry]:
    """Convert URIs to valid classpath entries, dropping anything else."""
    entries: list[CandidateEntry] = []
    for uri in uris:
        path = uri_to_path(str(uri))
        if path is None:
            continue
        entry = CandidateEntry.from_path(path)
        if entry is not None:
            entries.append(entry)
    return entries


def _distinct(items: Iterable[CandidateEntry]) -> list[CandidateEntry]:
    return list(dict.fromkeys(items))


def _safe_resources(context: LoadingContext, name: str) -> Sequence[str]:
    try:
        return context.resources(name)
    except Exception as e:
        logger.debug("Resource lookup of %s failed on %r: %s", name, context, e)
        return ()


class CandidateExtractor:
    """Produces candidate classpath entries from loading contexts.

    Attributes:
        collection_cache: Cache used to unpack collection archives. When
            None, collection archives are not unpacked and the context
            falls through to the other strategies.
    """

    def __init__(self, collection_cache: CollectionCachePort | None = None) -> None:
        self.collection_cache = collection_cache

    def candidates(self, context: LoadingContext) -> list[CandidateEntry]:
        """Return the entries of the first strategy that yields any."""
        strategies: tuple[Callable[[LoadingContext], list[CandidateEntry]], ...] = (
            self._from_collections,
            self._from_source_uris,
            self._from_url_accessor,
            self._from_manifests,
        )
        for strategy in strategies:
            entries = strategy(context)
            if entries:
                return _distinct(entries)
        return []

    def _from_collections(self, context: LoadingContext) -> list[CandidateEntry]:
        if self.collection_cache is None:
            return []

        archives: dict[Path, None] = {}
        for key_path in COLLECTION_KEY_PATHS:
            for uri in _safe_resources(context, key_path):
                path = uri_to_path(uri)
                if path is not None and path.suffix.lstrip(".") in COLLECTION_EXTENSIONS:
                    archives[path] = None

        entries: list[CandidateEntry] = []
        for archive in archives:
            logger.debug("Found collection archive %s", archive)
            entries.extend(self.collection_cache.unpack(archive))
        return [e for e in entries if CandidateEntry.from_path(e.path) is not None]

    def _from_source_uris(self, context: LoadingContext) -> list[CandidateEntry]:
        try:
            uris = context.source_uris()
        except Exception as e:
            logger.debug("Cannot read source URIs of %r: %s", context, e)
            return []
        if uris is None:
            return []
        return to_classpath_entries(uris)

    def _from_url_accessor(self, context: LoadingContext) -> list[CandidateEntry]:
        host = getattr(context, "host", context)
        for name in URL_ACCESSOR_NAMES:
            accessor = getattr(host, name, None)
            if not callable(accessor):
                continue
            try:
                urls = list(accessor())
            except Exception as e:
                logger.debug("%s() failed on %r: %s", name, host, e)
                return []
            return to_classpath_entries(urls)
        return []

    def _from_manifests(self, context: LoadingContext) -> list[CandidateEntry]:
        entries: list[CandidateEntry] = []
        for uri in dict.fromkeys(_safe_resources(context, MANIFEST_RESOURCE)):
            root = resource_root(uri, MANIFEST_RESOURCE)
            if root is None:
                continue
            entry = CandidateEntry.from_path(root)
            if entry is not None:
                entries.append(entry)
        return entries
