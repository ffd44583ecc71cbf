"""Tests validating that example code patterns work correctly.

These tests ensure the examples in the examples/ directory represent
working, copy-pasteable code patterns.
"""

import zipfile
from pathlib import Path

import pytest

from jarscout import (
    ClasspathDiscovery,
    ClasspathMode,
    ClasspathNotFoundError,
    CollectionCache,
    JarscoutError,
    KnownLibraryResolver,
    PathListContext,
    adapt,
    discover_classpath,
    resolve_known_library,
)


@pytest.mark.core
class TestBasicUsage:
    """Tests for basic_usage.py example pattern."""

    def test_discover_through_parent_and_war(self, tmp_path: Path) -> None:
        """The stdlib comes from the platform, the runtime from the war."""
        stdlib = tmp_path / "platform" / "kotlin-stdlib-1.9.0.jar"
        stdlib.parent.mkdir()
        stdlib.write_bytes(b"")
        war = tmp_path / "build" / "app.war"
        war.parent.mkdir()
        with zipfile.ZipFile(war, "w") as zf:
            zf.writestr("WEB-INF/lib/kotlin-script-runtime-1.9.0.jar", b"runtime")

        platform = PathListContext([stdlib], label="platform")
        application = PathListContext([war], parents=[platform], label="app")

        classpath = ClasspathDiscovery(environ={}).discover(
            application,
            ["kotlin-stdlib.jar", "kotlin-script-runtime.jar"],
            mode=ClasspathMode.MINIMAL,
            cache_dir=tmp_path / ".jarscout",
        )

        assert classpath is not None
        assert classpath[0] == stdlib
        assert classpath[1].name == "kotlin-script-runtime-1.9.0.jar"

    def test_one_call_helper_with_override(self) -> None:
        """discover_classpath() honours the explicit classpath."""
        environ = {"KOTLIN_SCRIPT_CLASSPATH": "/opt/kotlin/lib/kotlin-stdlib.jar"}

        classpath = discover_classpath(None, ["kotlin-stdlib.jar"], mode="any", environ=environ)

        assert classpath == [Path("/opt/kotlin/lib/kotlin-stdlib.jar")]


@pytest.mark.core
class TestKnownLibraries:
    """Tests for known_libraries.py example pattern."""

    def test_scoped_resolver(self, tmp_path: Path) -> None:
        """A resolver over a distribution's jars finds compiler and stdlib."""
        lib = tmp_path / "kotlinc" / "lib"
        lib.mkdir(parents=True)
        for name in ("kotlin-compiler.jar", "kotlin-stdlib.jar", "kotlin-reflect.jar"):
            with zipfile.ZipFile(lib / name, "w") as zf:
                zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        with zipfile.ZipFile(lib / "kotlin-stdlib.jar", "a") as zf:
            zf.writestr("kotlin/jvm/JvmStatic.class", b"")

        dist = PathListContext(sorted(lib.glob("*.jar")), label="kotlinc")
        scoped = KnownLibraryResolver(environ={}, context=dist)

        assert scoped.stdlib() == lib / "kotlin-stdlib.jar"
        assert scoped.compiler_classpath() == [
            lib / "kotlin-compiler.jar",
            lib / "kotlin-reflect.jar",
            lib / "kotlin-stdlib.jar",
        ]

    def test_resolve_any_library(self, tmp_path: Path) -> None:
        """resolve_known_library() accepts any override, name and marker."""
        jar = tmp_path / "kotlinx-coroutines-core-1.8.0.jar"
        with zipfile.ZipFile(jar, "w") as zf:
            zf.writestr("kotlinx/coroutines/CoroutineScope.class", b"")

        found = resolve_known_library(
            "KOTLINX_COROUTINES_JAR",
            "kotlinx-coroutines-core.jar",
            "kotlinx.coroutines.CoroutineScope",
            context=PathListContext([jar]),
            environ={},
        )

        assert found == jar


@pytest.mark.core
class TestErrorHandling:
    """Tests for error_handling.py example pattern."""

    def test_fallback_to_standard_jars(self, tmp_path: Path) -> None:
        """A failed discovery can fall back to the resolver's standard jars."""
        stdlib = tmp_path / "kotlin-stdlib.jar"
        stdlib.write_bytes(b"")
        discovery = ClasspathDiscovery(environ={"KOTLIN_STDLIB_JAR": str(stdlib)})
        context = PathListContext([tmp_path / "missing.war"])

        with pytest.raises(ClasspathNotFoundError) as exc_info:
            discovery.discover_or_raise(context, ["my-lib.jar"])

        assert exc_info.value.recovery_hint
        assert discovery.resolver.script_standard_jars() == [stdlib]

    def test_catch_all(self, tmp_path: Path) -> None:
        """Every failure is a JarscoutError with a hint."""
        archive = tmp_path / "evil.war"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("../../outside.txt", b"x")

        with pytest.raises(JarscoutError) as exc_info:
            CollectionCache(tmp_path / ".jarscout", lock_timeout=1).unpack(archive)

        assert exc_info.value.recovery_hint


@pytest.mark.core
class TestHostLoaders:
    """Tests for host_loaders.py example pattern."""

    def test_plugin_loader_graph(self, tmp_path: Path) -> None:
        """A multi-parent host graph is walked to the system loader."""
        stdlib = tmp_path / "kotlin-stdlib-1.9.0.jar"
        stdlib.write_bytes(b"")

        class AppLoader:
            def __init__(self, urls, parent=None):
                self._urls = urls
                self._parent = parent

            def getParent(self):
                return self._parent

            def getURLs(self):
                return self._urls

        class PluginLoader:
            def __init__(self, urls, parents):
                self._urls = urls
                self.parents = parents

            def getURLs(self):
                return self._urls

        system = AppLoader([stdlib.as_uri()])
        core = AppLoader([], parent=system)
        plugin = PluginLoader([], parents=[core, system])

        classpath = discover_classpath(plugin, ["kotlin-stdlib.jar"], environ={})

        assert classpath == [stdlib]
        assert adapt(plugin).parent_link() is not None
