"""Traversal of the host's loading-context graph."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jarscout.core.ports import MultiParent, SingleParent


if TYPE_CHECKING:
    from collections.abc import Iterator

    from jarscout.core.ports import LoadingContext, ParentLink


logger = logging.getLogger(__name__)


def _parent_link(context: LoadingContext) -> ParentLink:
    """Ask a context for its parents, treating adapter failures as a leaf."""
    try:
        return context.parent_link()
    except Exception as e:
        logger.debug("Cannot read parents of %r, treating as leaf: %s", context, e)
        return None


def iter_related_contexts(
    context: LoadingContext,
    visited: set[LoadingContext] | None = None,
) -> Iterator[LoadingContext]:
    """Yield context and every context reachable through its parents.

    Traversal is depth-first and pre-order: a context is yielded before
    its parents, and parents are explored in the order the context lists
    them. Each context is yielded at most once, so cycles terminate.

    Args:
        context: Root of the walk.
        visited: Contexts already seen. Updated in place, which lets
            several walks share de-duplication.

    Yields:
        Loading contexts, lazily.
    """
    if visited is None:
        visited = set()

    pending: list[LoadingContext] = [context]
    while pending:
        current = pending.pop()
        if current in visited:
            continue
        visited.add(current)
        yield current

        link = _parent_link(current)
        if isinstance(link, SingleParent):
            pending.append(link.parent)
        elif isinstance(link, MultiParent):
            # Reversed so the first parent is popped first
            pending.extend(reversed(link.parents))
