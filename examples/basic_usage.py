"""Basic classpath discovery example.

This example shows the simplest usage pattern: describe where the host
loads code from, ask for the libraries the script compiler needs, and
get back a classpath. Collection archives such as web applications are
unpacked into a shared cache automatically.
"""

from pathlib import Path

from jarscout import ClasspathDiscovery, ClasspathMode, PathListContext, discover_classpath


# Describe the host: an application jar whose parent is the platform libraries
platform = PathListContext([Path("/opt/platform/lib/kotlin-stdlib-1.9.0.jar")], label="platform")
application = PathListContext([Path("./build/libs/app.war")], parents=[platform], label="app")

# Option 1: Service object (reuse across lookups, inject environment in tests)
discovery = ClasspathDiscovery()
classpath = discovery.discover(
    application,
    ["kotlin-stdlib.jar", "kotlin-script-runtime.jar"],
    mode=ClasspathMode.MINIMAL,  # one entry per required name
    cache_dir=Path("./.jarscout"),  # where app.war gets unpacked
)
print(f"Classpath: {classpath}")

# Option 2: One-call helper (None means this process's sys.path and CLASSPATH)
classpath = discover_classpath(None, ["kotlin-stdlib.jar"], mode="any")

# KOTLIN_SCRIPT_CLASSPATH short-circuits discovery entirely:
#   KOTLIN_SCRIPT_CLASSPATH=/opt/kotlin/lib/kotlin-stdlib.jar python basic_usage.py
