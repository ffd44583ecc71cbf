"""Unit tests for KnownLibraryResolver."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from jarscout.adapters.contexts import PathListContext
from jarscout.core.exceptions import LibraryNotFoundError
from jarscout.core.models import MarkerClass
from jarscout.core.resolver import (
    COMPILER_MARKER,
    REFLECT_MARKER,
    STDLIB_MARKER,
    KnownLibraryResolver,
)


if TYPE_CHECKING:
    from collections.abc import Callable

    ArchiveFactory = Callable[[str, dict[str, bytes]], Path]


def touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


def class_dir(root: Path, class_name: str) -> Path:
    """Create a class directory defining class_name."""
    touch(root / MarkerClass(class_name).resource_path)
    return root


EMPTY = PathListContext([], label="empty")


@pytest.mark.core
@pytest.mark.tra("Service.Resolver")
@pytest.mark.tier(1)
class TestResolveSingleLibrary:
    """Tests for resolve() and the per-library accessors."""

    def test_override_key_wins(self, tmp_path: Path) -> None:
        """An existing file named by the override key is used directly."""
        reflect = touch(tmp_path / "custom-reflect.jar")
        resolver = KnownLibraryResolver(environ={"KOTLIN_REFLECT_JAR": str(reflect)}, context=EMPTY)

        assert resolver.reflect_or_none() == reflect

    def test_missing_override_falls_through(self, tmp_path: Path) -> None:
        """An override pointing nowhere is ignored."""
        environ = {"KOTLIN_REFLECT_JAR": str(tmp_path / "gone.jar")}
        context = PathListContext([class_dir(tmp_path / "reflect", REFLECT_MARKER)])

        assert KnownLibraryResolver(environ=environ, context=context).reflect_or_none() == (
            tmp_path / "reflect"
        )

    def test_obsolete_runtime_key_locates_stdlib(self, tmp_path: Path) -> None:
        """KOTLIN_RUNTIME_JAR is honoured when KOTLIN_STDLIB_JAR is unset."""
        stdlib = touch(tmp_path / "kotlin-runtime.jar")
        resolver = KnownLibraryResolver(environ={"KOTLIN_RUNTIME_JAR": str(stdlib)}, context=EMPTY)

        assert resolver.stdlib() == stdlib

    def test_stdlib_key_preferred_over_runtime_key(self, tmp_path: Path) -> None:
        """KOTLIN_STDLIB_JAR is checked first."""
        stdlib = touch(tmp_path / "kotlin-stdlib.jar")
        runtime = touch(tmp_path / "kotlin-runtime.jar")
        environ = {"KOTLIN_STDLIB_JAR": str(stdlib), "KOTLIN_RUNTIME_JAR": str(runtime)}

        assert KnownLibraryResolver(environ=environ, context=EMPTY).stdlib() == stdlib

    def test_explicit_compiler_classpath_by_name(self, tmp_path: Path) -> None:
        """Libraries are picked from KOTLIN_COMPILER_CLASSPATH by versioned name."""
        compiler = touch(tmp_path / "kotlin-compiler-1.9.0.jar")
        reflect = touch(tmp_path / "kotlin-reflect-1.9.0.jar")
        environ = {"KOTLIN_COMPILER_CLASSPATH": f"{compiler}{os.pathsep}{reflect}"}

        assert KnownLibraryResolver(environ=environ, context=EMPTY).reflect_or_none() == reflect

    def test_marker_in_directory(self, tmp_path: Path) -> None:
        """A class directory defining the marker is the library."""
        classes = class_dir(tmp_path / "stdlib-classes", STDLIB_MARKER)
        context = PathListContext([tmp_path / "other", classes])

        assert KnownLibraryResolver(environ={}, context=context).stdlib() == classes

    def test_marker_in_archive(self, make_archive: ArchiveFactory) -> None:
        """An archive defining the marker is the library."""
        jar = make_archive(
            "lib/kotlin-stdlib-2.0.0.jar", {MarkerClass(STDLIB_MARKER).resource_path: b""}
        )
        context = PathListContext([jar])

        assert KnownLibraryResolver(environ={}, context=context).stdlib() == jar

    def test_marker_defining_context_fallback(self, tmp_path: Path) -> None:
        """The marker's own defining context is searched last."""
        classes = class_dir(tmp_path / "reflect", REFLECT_MARKER)
        marker = MarkerClass(REFLECT_MARKER, defining_context=PathListContext([classes]))
        resolver = KnownLibraryResolver(environ={}, context=EMPTY)

        found = resolver.resolve("KOTLIN_REFLECT_JAR", "kotlin-reflect.jar", marker)

        assert found is not None
        assert found.path == classes
        assert found.source == REFLECT_MARKER

    def test_explicit_context_argument(self, tmp_path: Path) -> None:
        """resolve() searches the given context instead of the ambient one."""
        classes = class_dir(tmp_path / "runtime", "a.b.C")
        resolver = KnownLibraryResolver(environ={}, context=EMPTY)

        found = resolver.resolve("X_JAR", "x.jar", "a.b.C", context=PathListContext([classes]))

        assert found is not None
        assert found.path == classes

    def test_each_explicit_context_is_searched(self, tmp_path: Path) -> None:
        """A later call with another context does not reuse an earlier answer."""
        first = class_dir(tmp_path / "first", "a.b.C")
        second = class_dir(tmp_path / "second", "a.b.C")
        resolver = KnownLibraryResolver(environ={}, context=EMPTY)

        assert resolver.resolve("X_JAR", "x.jar", "a.b.C") is None
        from_first = resolver.resolve("X_JAR", "x.jar", "a.b.C", context=PathListContext([first]))
        from_second = resolver.resolve(
            "X_JAR", "x.jar", "a.b.C", context=PathListContext([second])
        )

        assert from_first is not None
        assert from_first.path == first
        assert from_second is not None
        assert from_second.path == second
        assert resolver.resolve("X_JAR", "x.jar", "a.b.C") is None

    def test_not_found(self) -> None:
        """Nothing found gives None, and the raising accessors raise."""
        resolver = KnownLibraryResolver(environ={}, context=EMPTY)

        assert resolver.reflect_or_none() is None
        assert resolver.script_standard_jars() == []
        with pytest.raises(LibraryNotFoundError) as stdlib_error:
            resolver.stdlib()
        with pytest.raises(LibraryNotFoundError) as runtime_error:
            resolver.script_runtime()

        assert "KOTLIN_STDLIB_JAR" in stdlib_error.value.recovery_hint
        assert runtime_error.value.property_key == "KOTLIN_SCRIPT_RUNTIME_JAR"

    def test_results_are_memoised_per_instance(self, tmp_path: Path) -> None:
        """One resolver keeps its answer; a fresh resolver looks again."""
        reflect = touch(tmp_path / "kotlin-reflect.jar")
        environ = {"KOTLIN_REFLECT_JAR": str(reflect)}
        first = KnownLibraryResolver(environ=environ, context=EMPTY)

        assert first.reflect_or_none() == reflect
        reflect.unlink()

        assert first.reflect_or_none() == reflect
        assert KnownLibraryResolver(environ=environ, context=EMPTY).reflect_or_none() is None


@pytest.mark.core
@pytest.mark.tra("Service.Resolver")
@pytest.mark.tier(1)
class TestCompilerClasspath:
    """Tests for compiler_classpath() and compiler_with_scripting_classpath()."""

    @pytest.fixture
    def distribution(self, tmp_path: Path) -> list[Path]:
        """A compiler distribution's lib directory, sorted."""
        names = [
            "annotations-13.0.jar",
            "kotlin-compiler-embeddable-1.9.0.jar",
            "kotlin-scripting-jvm-1.9.0.jar",
            "kotlin-stdlib-1.9.0.jar",
            "trove4j.jar",
        ]
        return [touch(tmp_path / "dist" / name) for name in names]

    def test_explicit_classpath_is_unfiltered(self, tmp_path: Path) -> None:
        """KOTLIN_COMPILER_CLASSPATH is returned as given."""
        environ = {"KOTLIN_COMPILER_CLASSPATH": f"/opt/a.jar{os.pathsep}/opt/b.jar"}
        resolver = KnownLibraryResolver(environ=environ, context=EMPTY)

        assert resolver.compiler_classpath() == [Path("/opt/a.jar"), Path("/opt/b.jar")]

    def test_compiler_jar_key(self, tmp_path: Path) -> None:
        """An existing KOTLIN_COMPILER_JAR is a one-entry classpath."""
        jar = touch(tmp_path / "kotlin-compiler.jar")
        resolver = KnownLibraryResolver(environ={"KOTLIN_COMPILER_JAR": str(jar)}, context=EMPTY)

        assert resolver.explicit_compiler_classpath == [jar]
        assert resolver.compiler_classpath() == [jar]

    def test_missing_compiler_jar_key_is_ignored(self, tmp_path: Path) -> None:
        """A KOTLIN_COMPILER_JAR pointing nowhere is no explicit classpath."""
        environ = {"KOTLIN_COMPILER_JAR": str(tmp_path / "gone.jar")}

        resolver = KnownLibraryResolver(environ=environ, context=EMPTY)

        assert resolver.explicit_compiler_classpath is None

    def test_filters_context_to_known_jars(self, distribution: list[Path]) -> None:
        """Unrelated jars and scripting jars are dropped from the plain variant."""
        _, compiler, scripting, stdlib, trove = distribution
        resolver = KnownLibraryResolver(environ={}, context=PathListContext(distribution))

        assert resolver.compiler_classpath() == [compiler, stdlib, trove]
        assert resolver.compiler_with_scripting_classpath() == [compiler, scripting, stdlib, trove]

    def test_compiler_found_by_marker_and_environment(
        self, make_archive: ArchiveFactory, tmp_path: Path
    ) -> None:
        """The compiler's archive and CLASSPATH entries are combined."""
        compiler = make_archive(
            "boot/kotlin-compiler-1.9.0.jar", {MarkerClass(COMPILER_MARKER).resource_path: b""}
        )
        stdlib = touch(tmp_path / "env" / "kotlin-stdlib-1.9.0.jar")
        resolver = KnownLibraryResolver(
            environ={"CLASSPATH": str(stdlib)},
            context=PathListContext([compiler]),
        )

        assert resolver.compiler_classpath() == [compiler, stdlib]

    def test_missing_compiler_raises(self, tmp_path: Path) -> None:
        """Libraries without a compiler jar are not a compiler classpath."""
        stdlib = touch(tmp_path / "kotlin-stdlib.jar")
        resolver = KnownLibraryResolver(environ={}, context=PathListContext([stdlib]))

        with pytest.raises(LibraryNotFoundError) as exc_info:
            resolver.compiler_classpath()

        assert exc_info.value.property_key == "KOTLIN_COMPILER_CLASSPATH"

    def test_memoised_per_variant(self, distribution: list[Path]) -> None:
        """Each variant is computed once per resolver."""
        resolver = KnownLibraryResolver(environ={}, context=PathListContext(distribution))

        first = resolver.compiler_classpath()
        for path in distribution:
            path.unlink()

        assert resolver.compiler_classpath() is first
        with pytest.raises(LibraryNotFoundError):
            resolver.compiler_with_scripting_classpath()
