"""Resolution of well-known Kotlin libraries.

Each library is looked up through a chain of fallbacks: an explicit
environment override, the explicit compiler classpath, a marker class
looked up through a loading context, and finally the marker's own
defining context. Lookups through the resolver's own context are
memoised per resolver instance.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from jarscout.config import (
    COMPILER_CLASSPATH_KEY,
    COMPILER_JAR_KEY,
    REFLECT_JAR_KEY,
    RUNTIME_JAR_KEY,
    SCRIPT_RUNTIME_JAR_KEY,
    STDLIB_JAR_KEY,
    read_path,
    read_path_list,
)
from jarscout.core.exceptions import LibraryNotFoundError
from jarscout.core.extraction import find_resource_root
from jarscout.core.matching import matches_versioned
from jarscout.core.models import LibraryReference, MarkerClass
from jarscout.core.services import ClasspathDiscovery


if TYPE_CHECKING:
    from jarscout.core.ports import LoadingContext


logger = logging.getLogger(__name__)

STDLIB_JAR = "kotlin-stdlib.jar"
REFLECT_JAR = "kotlin-reflect.jar"
SCRIPT_RUNTIME_JAR = "kotlin-script-runtime.jar"
TROVE4J_JAR = "trove4j.jar"
COMPILER_JAR = "kotlin-compiler.jar"
COMPILER_EMBEDDABLE_JAR = "kotlin-compiler-embeddable.jar"
SCRIPTING_COMPILER_JAR = "kotlin-scripting-compiler.jar"
SCRIPTING_COMPILER_EMBEDDABLE_JAR = "kotlin-scripting-compiler-embeddable.jar"
SCRIPTING_COMPILER_IMPL_JAR = "kotlin-scripting-compiler-impl.jar"
SCRIPTING_COMPILER_IMPL_EMBEDDABLE_JAR = "kotlin-scripting-compiler-impl-embeddable.jar"
SCRIPTING_COMMON_JAR = "kotlin-scripting-common.jar"
SCRIPTING_JVM_JAR = "kotlin-scripting-jvm.jar"

COMPILER_JARS = (COMPILER_JAR, COMPILER_EMBEDDABLE_JAR)
LIB_JARS = (STDLIB_JAR, REFLECT_JAR, SCRIPT_RUNTIME_JAR, TROVE4J_JAR)
SCRIPTING_JARS = (
    SCRIPTING_COMPILER_JAR,
    SCRIPTING_COMPILER_EMBEDDABLE_JAR,
    SCRIPTING_COMPILER_IMPL_JAR,
    SCRIPTING_COMPILER_IMPL_EMBEDDABLE_JAR,
    SCRIPTING_COMMON_JAR,
    SCRIPTING_JVM_JAR,
)

COMPILER_MARKER = "org.jetbrains.kotlin.cli.jvm.K2JVMCompiler"
STDLIB_MARKER = "kotlin.jvm.JvmStatic"
# A class that only ships in kotlin-reflect.jar
REFLECT_MARKER = "kotlin.reflect.full.KClasses"
SCRIPT_RUNTIME_MARKER = "kotlin.script.templates.standard.ScriptTemplateWithArgs"


class KnownLibraryResolver:
    """Locates the Kotlin compiler, stdlib, reflect and script runtime.

    Every ambient lookup is memoised on the instance, so one resolver answers
    consistently for its lifetime while separate resolvers (e.g. in tests)
    stay independent.

    Example:
        >>> resolver = KnownLibraryResolver()
        >>> stdlib = resolver.stdlib()
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        context: LoadingContext | None = None,
        discovery: ClasspathDiscovery | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            environ: Environment used for overrides. None uses os.environ.
            context: Ambient loading context for marker lookups. Defaults
                to the current process's import path and CLASSPATH.
            discovery: Discovery service used for the compiler classpath.
        """
        self._environ = environ
        self._context = context
        self._discovery = discovery or ClasspathDiscovery(environ=environ, resolver=self)
        self._memo: dict[tuple[str, ...], LibraryReference | None] = {}
        self._compiler_classpaths: dict[bool, list[Path]] = {}
        self._explicit_compiler_classpath: list[Path] | None = None
        self._explicit_loaded = False

    @property
    def context(self) -> LoadingContext:
        """The ambient loading context."""
        if self._context is None:
            from jarscout.adapters.contexts import default_context

            self._context = default_context(self._environ)
        return self._context

    @property
    def explicit_compiler_classpath(self) -> list[Path] | None:
        """KOTLIN_COMPILER_CLASSPATH, or an existing KOTLIN_COMPILER_JAR."""
        if not self._explicit_loaded:
            explicit = read_path_list(self._environ, COMPILER_CLASSPATH_KEY)
            if explicit is None:
                jar = read_path(self._environ, COMPILER_JAR_KEY)
                explicit = [jar] if jar is not None and jar.exists() else None
            self._explicit_compiler_classpath = explicit
            self._explicit_loaded = True
        return self._explicit_compiler_classpath

    def _existing(self, path: Path | None, source: str) -> LibraryReference | None:
        if path is not None and path.exists():
            return LibraryReference(path, source)
        return None

    def _explicit(self, override_key: str, fallback_name: str) -> LibraryReference | None:
        found = self._existing(read_path(self._environ, override_key), override_key)
        if found is not None:
            return found
        for path in self.explicit_compiler_classpath or ():
            if matches_versioned(path, fallback_name):
                return self._existing(path, fallback_name)
        return None

    def _by_marker(
        self, marker: MarkerClass, context: LoadingContext | None
    ) -> LibraryReference | None:
        requested = context if context is not None else self.context
        if requested != marker.defining_context:
            found = self._existing(find_resource_root(requested, marker.resource_path), marker.name)
            if found is not None:
                return found
        if marker.defining_context is not None:
            return self._existing(
                find_resource_root(marker.defining_context, marker.resource_path), marker.name
            )
        return None

    def resolve(
        self,
        override_key: str,
        fallback_name: str,
        marker: MarkerClass | str,
        context: LoadingContext | None = None,
    ) -> LibraryReference | None:
        """Resolve one library file.

        Args:
            override_key: Environment variable naming the file directly.
            fallback_name: Library file name matched against the explicit
                compiler classpath, e.g. "kotlin-reflect.jar".
            marker: A class defined by the library, by name or with its
                defining context.
            context: Context for the marker lookup. Defaults to the
                resolver's ambient context. Only lookups without an
                explicit context or defining context are memoised.

        Returns:
            The library reference, or None if no existing file was found.
        """
        if isinstance(marker, str):
            marker = MarkerClass(marker)
        key = (override_key, fallback_name, marker.name)
        # Only lookups through the ambient context are memoised
        ambient = context is None and marker.defining_context is None
        if ambient and key in self._memo:
            return self._memo[key]
        found = self._explicit(override_key, fallback_name) or self._by_marker(marker, context)
        logger.debug("Resolved %s -> %s", fallback_name, found.path if found else None)
        if ambient:
            self._memo[key] = found
        return found

    def stdlib_or_none(self) -> Path | None:
        """The Kotlin standard library, if it can be found."""
        key = (STDLIB_JAR_KEY,)
        if key not in self._memo:
            self._memo[key] = self._existing(
                read_path(self._environ, STDLIB_JAR_KEY), STDLIB_JAR_KEY
            ) or self.resolve(RUNTIME_JAR_KEY, STDLIB_JAR, STDLIB_MARKER)
        found = self._memo[key]
        return found.path if found else None

    def stdlib(self) -> Path:
        """The Kotlin standard library.

        Raises:
            LibraryNotFoundError: Naming KOTLIN_STDLIB_JAR.
        """
        found = self.stdlib_or_none()
        if found is None:
            raise LibraryNotFoundError("kotlin stdlib", STDLIB_JAR_KEY)
        return found

    def reflect_or_none(self) -> Path | None:
        """kotlin-reflect, if it can be found."""
        found = self.resolve(REFLECT_JAR_KEY, REFLECT_JAR, REFLECT_MARKER)
        return found.path if found else None

    def script_runtime_or_none(self) -> Path | None:
        """The Kotlin script runtime, if it can be found."""
        found = self.resolve(SCRIPT_RUNTIME_JAR_KEY, SCRIPT_RUNTIME_JAR, SCRIPT_RUNTIME_MARKER)
        return found.path if found else None

    def script_runtime(self) -> Path:
        """The Kotlin script runtime.

        Raises:
            LibraryNotFoundError: Naming KOTLIN_SCRIPT_RUNTIME_JAR.
        """
        found = self.script_runtime_or_none()
        if found is None:
            raise LibraryNotFoundError("kotlin script runtime", SCRIPT_RUNTIME_JAR_KEY)
        return found

    def script_standard_jars(self) -> list[Path]:
        """Whichever of stdlib and script runtime could be found."""
        return [p for p in (self.stdlib_or_none(), self.script_runtime_or_none()) if p is not None]

    def compiler_classpath(self) -> list[Path]:
        """Compiler jars plus the libraries it needs."""
        return self._find_compiler_classpath(with_scripting=False)

    def compiler_with_scripting_classpath(self) -> list[Path]:
        """compiler_classpath() plus the scripting plugin jars."""
        return self._find_compiler_classpath(with_scripting=True)

    def _find_compiler_classpath(self, with_scripting: bool) -> list[Path]:
        """Build the compiler classpath, memoised per variant.

        An explicit classpath is used unfiltered. Otherwise the compiler's
        own archive, the ambient context's classpath and CLASSPATH are
        combined and reduced to the known compiler and library jars, and
        at least one compiler jar must be among them.

        Raises:
            LibraryNotFoundError: Naming KOTLIN_COMPILER_CLASSPATH.
        """
        if with_scripting in self._compiler_classpaths:
            return self._compiler_classpaths[with_scripting]

        explicit = self.explicit_compiler_classpath
        if explicit is not None:
            classpath = explicit
        else:
            base_jars = COMPILER_JARS + LIB_JARS + (SCRIPTING_JARS if with_scripting else ())
            candidates: dict[Path, None] = {}
            for found in (
                self._discovery.classpath_from_marker(self.context, COMPILER_MARKER),
                self._discovery.classpath_from_context(self.context),
                self._discovery.classpath_from_environment(),
            ):
                candidates.update(dict.fromkeys(found or ()))
            classpath = [p for p in candidates if any(matches_versioned(p, j) for j in base_jars)]
            if not any(matches_versioned(p, j) for p in classpath for j in COMPILER_JARS):
                raise LibraryNotFoundError("kotlin compiler jar", COMPILER_CLASSPATH_KEY)

        self._compiler_classpaths[with_scripting] = classpath
        return classpath
