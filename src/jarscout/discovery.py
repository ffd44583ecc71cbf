"""One-call entry points for classpath discovery.

These wrap ClasspathDiscovery and KnownLibraryResolver for callers that
do not need to keep a service instance around.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jarscout.adapters.contexts import adapt, default_context
from jarscout.core.models import ClasspathMode, MarkerClass
from jarscout.core.resolver import KnownLibraryResolver
from jarscout.core.services import ClasspathDiscovery


if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path


def discover_classpath(
    context: object | None,
    names: Sequence[str],
    mode: ClasspathMode | str = ClasspathMode.MINIMAL,
    cache_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[Path] | None:
    """Find a classpath containing the required library names.

    Args:
        context: A LoadingContext or a host loader object to adapt. None
            uses the current process's import path and CLASSPATH.
        names: Required library names, e.g. ["kotlin-stdlib.jar"].
        mode: "all", "minimal" or "any" (see ClasspathMode).
        cache_dir: Where to unpack collection archives, if anywhere.
        environ: Environment for overrides. None uses os.environ.

    Returns:
        The classpath, or None if nothing satisfies names.

    Example:
        >>> from jarscout import discover_classpath
        >>> cp = discover_classpath(None, ["kotlin-stdlib.jar"], mode="any")
    """
    root = default_context(environ) if context is None else adapt(context)
    return ClasspathDiscovery(environ=environ).discover(
        root, names, ClasspathMode(mode), cache_dir
    )


def resolve_known_library(
    override_key: str,
    fallback_name: str,
    marker: MarkerClass | str,
    context: object | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Resolve a single well-known library file.

    Args:
        override_key: Environment variable naming the file directly.
        fallback_name: File name matched against KOTLIN_COMPILER_CLASSPATH.
        marker: Fully-qualified name of a class the library defines.
        context: Context or host loader for the marker lookup.
        environ: Environment for overrides. None uses os.environ.

    Returns:
        The library path, or None if not found.
    """
    resolver = KnownLibraryResolver(
        environ=environ,
        context=adapt(context) if context is not None else None,
    )
    found = resolver.resolve(override_key, fallback_name, marker)
    return found.path if found else None
