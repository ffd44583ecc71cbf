"""Duck-typed adapter for loader objects owned by a foreign host.

Hosts such as a JVM reached through a Python bridge hand out class
loader objects with Java-style accessors (getParent(), getURLs(),
getResources()). This adapter probes for those accessors, and their
snake_case spellings, and presents the result as a LoadingContext.
Any probe that fails is treated as "not available".
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jarscout.core.ports import LoadingContext, MultiParent, SingleParent


if TYPE_CHECKING:
    from collections.abc import Iterator

    from jarscout.core.ports import ParentLink


logger = logging.getLogger(__name__)

PARENT_ATTRIBUTES = ("parent", "getParent")
# e.g. plugin class loaders that delegate to several parents
MULTI_PARENT_ATTRIBUTES = ("parents", "my_parents", "myParents")
RESOURCE_ATTRIBUTES = ("get_resources", "getResources")
SOURCE_ATTRIBUTES = ("urls", "getURLs")


def _iterate(value: object) -> Iterator[object]:
    """Iterate Python iterables and Java-style enumerations alike."""
    if hasattr(value, "hasMoreElements"):
        while value.hasMoreElements():  # type: ignore[attr-defined]
            yield value.nextElement()  # type: ignore[attr-defined]
    else:
        yield from value  # type: ignore[misc]


def adapt(host: object) -> LoadingContext:
    """Return host itself if it is a LoadingContext, otherwise wrap it."""
    if isinstance(host, LoadingContext):
        return host
    return HostObjectContext(host)


class HostObjectContext:
    """LoadingContext over an arbitrary host loader object.

    Two adapters wrapping the same host object compare equal, so walks
    de-duplicate host nodes even though adapters are created on the fly.

    Attributes:
        host: The wrapped loader object.
    """

    def __init__(self, host: object) -> None:
        self.host = host

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HostObjectContext) and other.host is self.host

    def __hash__(self) -> int:
        return id(self.host)

    def __repr__(self) -> str:
        return f"HostObjectContext({self.host!r})"

    def _probe(self, names: tuple[str, ...]) -> object | None:
        for name in names:
            value = getattr(self.host, name, None)
            if callable(value):
                value = value()
            if value is not None:
                return value
        return None

    def parent_link(self) -> ParentLink:
        """Probe for a single parent first, then for a parent collection."""
        try:
            parent = self._probe(PARENT_ATTRIBUTES)
            if parent is not None:
                return SingleParent(adapt(parent))
            parents = self._probe(MULTI_PARENT_ATTRIBUTES)
            if parents is not None:
                adapted = tuple(adapt(p) for p in _iterate(parents) if p is not None)
                if adapted:
                    return MultiParent(adapted)
        except Exception as e:
            logger.debug("Parent probe failed on %r: %s", self.host, e)
        return None

    def resources(self, name: str) -> list[str]:
        """URIs returned by the host's resource lookup, as strings."""
        for attr in RESOURCE_ATTRIBUTES:
            lookup = getattr(self.host, attr, None)
            if not callable(lookup):
                continue
            try:
                return [str(uri) for uri in _iterate(lookup(name))]
            except Exception as e:
                logger.debug("%s(%r) failed on %r: %s", attr, name, self.host, e)
                return []
        return []

    def source_uris(self) -> list[str] | None:
        """URIs the host natively tracks, or None if it exposes none."""
        try:
            urls = self._probe(SOURCE_ATTRIBUTES)
            if urls is None:
                return None
            return [str(url) for url in _iterate(urls)]
        except Exception as e:
            logger.debug("Source probe failed on %r: %s", self.host, e)
            return None
