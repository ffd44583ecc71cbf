"""Locating the Kotlin compiler and its standard libraries.

KnownLibraryResolver finds well-known jars through environment overrides,
the explicit compiler classpath, or the archive that defines a marker
class. Each resolver memoises its answers.
"""

from pathlib import Path

from jarscout import KnownLibraryResolver, PathListContext, resolve_known_library


# The ambient context defaults to sys.path with CLASSPATH as its parent
resolver = KnownLibraryResolver()

# Optional libraries return None when absent
reflect = resolver.reflect_or_none()
print(f"kotlin-reflect: {reflect}")

# Required libraries raise LibraryNotFoundError naming the override variable
stdlib = resolver.stdlib()
script_runtime = resolver.script_runtime()

# Everything an embedded compiler needs, optionally with the scripting plugin
compiler = resolver.compiler_classpath()
compiler_with_scripting = resolver.compiler_with_scripting_classpath()

# Search a specific set of locations instead
dist = PathListContext(sorted(Path("/opt/kotlinc/lib").glob("*.jar")), label="kotlinc")
scoped = KnownLibraryResolver(context=dist)

# Any library, given its override variable, file name and a class it defines
coroutines = resolve_known_library(
    "KOTLINX_COROUTINES_JAR",
    "kotlinx-coroutines-core.jar",
    "kotlinx.coroutines.CoroutineScope",
    context=dist,
)
