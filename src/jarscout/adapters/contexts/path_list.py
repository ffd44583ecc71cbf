"""Loading context backed by an explicit list of directories and archives."""

from __future__ import annotations

import sys
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING

from jarscout.config import ENVIRONMENT_CLASSPATH_KEY, read_path_list
from jarscout.core.extraction import uri_to_path
from jarscout.core.ports import MultiParent, SingleParent


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from jarscout.core.ports import LoadingContext, ParentLink


class PathListContext:
    """A loading context that searches a fixed list of locations.

    Behaves like a URL class loader: it natively tracks its sources, and
    resources are looked up in directories and inside zip/jar archives.

    Attributes:
        entries: Directories and archives, in lookup order.
        parents: Parent contexts. One parent forms a chain, several form
            a graph.
        label: Name used in repr().

    Example:
        >>> app = PathListContext(["lib/app.jar"], label="app")
        >>> plugin = PathListContext(["plugins/x.jar"], parents=[app])
    """

    def __init__(
        self,
        entries: Iterable[str | Path],
        parents: Sequence[LoadingContext] = (),
        label: str | None = None,
    ) -> None:
        self.entries: list[Path] = []
        for entry in entries:
            path = entry if isinstance(entry, Path) else uri_to_path(entry)
            if path is not None:
                self.entries.append(path)
        self.parents: list[LoadingContext] = list(parents)
        self.label = label
        self._archive_names: dict[Path, frozenset[str]] = {}

    @classmethod
    def from_sys_path(cls, parents: Sequence[LoadingContext] = ()) -> PathListContext:
        """Context over the running interpreter's import path."""
        return cls([p for p in sys.path if p], parents=parents, label="sys.path")

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        parents: Sequence[LoadingContext] = (),
    ) -> PathListContext:
        """Context over the CLASSPATH environment variable."""
        entries = read_path_list(environ, ENVIRONMENT_CLASSPATH_KEY) or []
        return cls(entries, parents=parents, label=ENVIRONMENT_CLASSPATH_KEY)

    def __repr__(self) -> str:
        label = self.label or f"{len(self.entries)} entries"
        return f"PathListContext({label})"

    def parent_link(self) -> ParentLink:
        """Single parent for one entry in parents, multiple otherwise."""
        if not self.parents:
            return None
        if len(self.parents) == 1:
            return SingleParent(self.parents[0])
        return MultiParent(tuple(self.parents))

    def source_uris(self) -> list[str]:
        """File URIs of every entry."""
        return [entry.absolute().as_uri() for entry in self.entries]

    def _names_in(self, archive: Path) -> frozenset[str]:
        names = self._archive_names.get(archive)
        if names is None:
            with zipfile.ZipFile(archive) as zf:
                names = frozenset(zf.namelist())
            self._archive_names[archive] = names
        return names

    def resources(self, name: str) -> list[str]:
        """URIs of name in every directory and archive that contains it.

        Inside archives, a directory resource is found even when the
        archive has no explicit directory entry for it.
        """
        name = name.strip("/")
        found: list[str] = []
        for entry in self.entries:
            if entry.is_dir():
                candidate = entry / name
                if candidate.exists():
                    found.append(candidate.absolute().as_uri())
            elif entry.is_file() and zipfile.is_zipfile(entry):
                names = self._names_in(entry)
                prefix = f"{name}/"
                if name in names or any(n.startswith(prefix) for n in names):
                    found.append(f"jar:{entry.absolute().as_uri()}!/{name}")
        return found


def default_context(environ: Mapping[str, str] | None = None) -> PathListContext:
    """The ambient context of the current process.

    The interpreter's import path, with the CLASSPATH list from environ
    (os.environ when None) as its parent.
    """
    return PathListContext.from_sys_path(parents=[PathListContext.from_environment(environ)])
