"""Discovering a classpath from a foreign host's loader objects.

Hosts bridged into Python (for example a JVM reached through JPype) hand
out class loaders with Java-style accessors. discover_classpath() wraps
them automatically: getParent(), getURLs() and getResources() are probed,
along with their snake_case spellings and a parents collection for
plugin-style loader graphs.
"""

from pathlib import Path

from jarscout import HostObjectContext, adapt, discover_classpath


class PluginLoader:
    """Stand-in for a loader that delegates to several parents."""

    def __init__(self, urls: list[str], parents: list[object]) -> None:
        self._urls = urls
        self.parents = parents

    def getURLs(self) -> list[str]:
        return self._urls


class AppLoader:
    """Stand-in for a single-parent loader."""

    def __init__(self, urls: list[str], parent: object | None = None) -> None:
        self._urls = urls
        self._parent = parent

    def getParent(self) -> object | None:
        return self._parent

    def getURLs(self) -> list[str]:
        return self._urls


system = AppLoader(["file:///opt/kotlin/lib/kotlin-stdlib-1.9.0.jar"])
core = AppLoader(["file:///opt/ide/lib/core.jar"], parent=system)
plugin = PluginLoader(["file:///opt/ide/plugins/scripting.jar"], parents=[core, system])

# Loaders are walked depth-first; shared ancestors are visited once
classpath = discover_classpath(plugin, ["kotlin-stdlib.jar"], cache_dir=Path("./.jarscout"))
print(f"Classpath: {classpath}")

# Wrapping by hand gives access to the LoadingContext interface
context = adapt(plugin)
assert isinstance(context, HostObjectContext)
print(context.parent_link())
