"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fixtures for building archives and loading contexts.
"""

from __future__ import annotations

import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest


ArchiveFactory = Callable[[str, dict[str, bytes]], Path]

MANIFEST = b"Manifest-Version: 1.0\n"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, matching, walking and filtering")
    config.addinivalue_line("markers", "contexts: Loading-context host adapters")
    config.addinivalue_line("markers", "cache: Collection unpack cache")
    config.addinivalue_line("markers", "lock: Lock-file adapters")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


@pytest.fixture
def make_archive(tmp_path: Path) -> ArchiveFactory:
    """Build a zip archive under tmp_path from a name -> bytes mapping."""

    def _make(name: str, entries: dict[str, bytes]) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as zf:
            for entry_name, data in entries.items():
                zf.writestr(entry_name, data)
        return path

    return _make


@pytest.fixture
def webapp_archive(make_archive: ArchiveFactory) -> Path:
    """A packaged web application bundling classes and two libraries."""
    return make_archive(
        "apps/app.war",
        {
            "META-INF/MANIFEST.MF": MANIFEST,
            "WEB-INF/web.xml": b"<web-app/>",
            "WEB-INF/classes/com/example/App.class": b"\xca\xfe\xba\xbe",
            "WEB-INF/classes/application.properties": b"name=app",
            "WEB-INF/lib/kotlin-stdlib-1.9.0.jar": b"stdlib",
            "WEB-INF/lib/kotlin-script-runtime-1.9.0.jar": b"runtime",
        },
    )


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """An unpack cache root that does not exist yet."""
    return tmp_path / "cache"
