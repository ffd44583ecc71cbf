"""Core domain services for jarscout."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from jarscout.config import (
    ENVIRONMENT_CLASSPATH_KEY,
    SCRIPT_CLASSPATH_KEY,
    lock_timeout_seconds,
    read_path_list,
)
from jarscout.core.exceptions import ClasspathNotFoundError
from jarscout.core.extraction import CandidateExtractor, find_resource_root
from jarscout.core.filtering import apply_mode
from jarscout.core.models import ClasspathMode, MarkerClass
from jarscout.core.ports import CollectionCachePort, LoadingContext
from jarscout.core.walker import iter_related_contexts


if TYPE_CHECKING:
    from jarscout.core.resolver import KnownLibraryResolver


logger = logging.getLogger(__name__)


class ClasspathDiscovery:
    """Orchestrates classpath discovery across a loading-context graph."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        cache_factory: Callable[[Path], CollectionCachePort] | None = None,
        resolver: KnownLibraryResolver | None = None,
    ) -> None:
        """Initialize discovery.

        Args:
            environ: Environment used for overrides. None reads os.environ
                on each call.
            cache_factory: Builds the unpack cache for a cache directory.
                Defaults to CollectionCache with the configured lock timeout.
            resolver: Known-library resolver used by discover_or_standard().
                Created on first use if not given.
        """
        self._environ = environ
        self._cache_factory = cache_factory
        self._resolver = resolver

    @property
    def resolver(self) -> KnownLibraryResolver:
        """The known-library resolver sharing this discovery's environment."""
        if self._resolver is None:
            from jarscout.core.resolver import KnownLibraryResolver

            self._resolver = KnownLibraryResolver(environ=self._environ, discovery=self)
        return self._resolver

    def _cache_for(self, cache_dir: Path) -> CollectionCachePort:
        if self._cache_factory is not None:
            return self._cache_factory(cache_dir)

        from jarscout.adapters.cache import CollectionCache

        return CollectionCache(cache_dir, lock_timeout=lock_timeout_seconds(self._environ))

    def classpath_from_context(
        self,
        context: LoadingContext,
        cache_dir: Path | None = None,
    ) -> list[Path] | None:
        """Collect candidate entries from context and everything it reaches.

        Args:
            context: Root loading context.
            cache_dir: Where to unpack collection archives. Without it,
                collection archives are not unpacked.

        Returns:
            De-duplicated paths in discovery order, or None if empty.

        Raises:
            LockTimeoutError: If a collection slot stays locked too long.
        """
        extractor = CandidateExtractor(
            self._cache_for(cache_dir) if cache_dir is not None else None
        )
        paths: dict[Path, None] = {}
        for related in iter_related_contexts(context):
            for entry in extractor.candidates(related):
                paths[entry.path] = None
        logger.debug("Found %d classpath candidates from %r", len(paths), context)
        return list(paths) or None

    def classpath_from_environment(self) -> list[Path] | None:
        """The flat list from the CLASSPATH environment variable."""
        return read_path_list(self._environ, ENVIRONMENT_CLASSPATH_KEY)

    def classpath_from_marker(self, context: LoadingContext, class_name: str) -> list[Path] | None:
        """The archive or directory defining class_name, as a one-entry list."""
        root = find_resource_root(context, MarkerClass(class_name).resource_path)
        return [root] if root is not None else None

    def discover(
        self,
        context: LoadingContext,
        names: Sequence[str],
        mode: ClasspathMode = ClasspathMode.MINIMAL,
        cache_dir: Path | None = None,
    ) -> list[Path] | None:
        """Find a classpath containing the required library names.

        An explicit KOTLIN_SCRIPT_CLASSPATH is returned as-is. Otherwise
        the context graph is searched, falling back to CLASSPATH.

        Args:
            context: Root loading context.
            names: Required library names, e.g. ["kotlin-stdlib.jar"].
            mode: How the candidates are reduced (see ClasspathMode).
            cache_dir: Where to unpack collection archives, if anywhere.

        Returns:
            The classpath, or None if nothing satisfies names.
        """
        explicit = read_path_list(self._environ, SCRIPT_CLASSPATH_KEY)
        if explicit is not None:
            return explicit

        from_context = self.classpath_from_context(context, cache_dir)
        if from_context is not None:
            result = apply_mode(from_context, names, mode)
            if result is not None:
                return result

        from_environment = self.classpath_from_environment()
        if from_environment is not None:
            return apply_mode(from_environment, names, mode)
        return None

    def discover_or_raise(
        self,
        context: LoadingContext,
        names: Sequence[str],
        mode: ClasspathMode = ClasspathMode.MINIMAL,
        cache_dir: Path | None = None,
    ) -> list[Path]:
        """Like discover(), but raise when nothing is found.

        Raises:
            ClasspathNotFoundError: Naming the KOTLIN_SCRIPT_CLASSPATH override.
        """
        result = self.discover(context, names, mode, cache_dir)
        if result is None:
            raise ClasspathNotFoundError(names, SCRIPT_CLASSPATH_KEY)
        return result

    def discover_or_standard(
        self,
        context: LoadingContext,
        names: Sequence[str],
        mode: ClasspathMode = ClasspathMode.MINIMAL,
        cache_dir: Path | None = None,
    ) -> list[Path]:
        """Like discover(), falling back to the standard script jars."""
        result = self.discover(context, names, mode, cache_dir)
        if result is None:
            return self.resolver.script_standard_jars()
        return result
