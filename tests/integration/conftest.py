"""Shared fixtures for integration tests."""

from __future__ import annotations

import zipfile
from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def boot_archive(tmp_path: Path) -> Path:
    """A Spring Boot style executable jar with many bundled libraries."""
    path = tmp_path / "dist" / "service.jar"
    path.parent.mkdir(parents=True)
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\nMain-Class: Launcher\n")
        zf.writestr("BOOT-INF/classes/com/example/Service.class", b"\xca\xfe\xba\xbe")
        zf.writestr("BOOT-INF/lib/kotlin-stdlib-1.9.0.jar", b"stdlib")
        zf.writestr("BOOT-INF/lib/kotlin-script-runtime-1.9.0.jar", b"runtime")
        zf.writestr("BOOT-INF/lib/kotlin-reflect-1.9.0.jar", b"reflect")
        for i in range(40):
            zf.writestr(f"BOOT-INF/lib/dependency-{i}-1.0.jar", bytes(4096))
    return path
