"""Unpack cache for collection archives implementing CollectionCachePort."""

from __future__ import annotations

import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from jarscout.adapters.lock.polling import PollingFileLock
from jarscout.config import lock_timeout_seconds
from jarscout.core.exceptions import UnsafeArchiveEntryError
from jarscout.core.extraction import COLLECTION_CLASSES_PATHS, COLLECTION_LIB_PATHS
from jarscout.core.models import (
    CacheSlot,
    CandidateEntry,
    CollectionKey,
    EntryKind,
    directory_usage,
)


if TYPE_CHECKING:
    from collections.abc import Callable

    from jarscout.core.ports import FileLockPort


logger = logging.getLogger(__name__)


def _lib_dir_of(entry_name: str) -> str | None:
    """Return the library directory an entry sits directly in, if any."""
    parent = str(PurePosixPath(entry_name).parent)
    return parent if parent in COLLECTION_LIB_PATHS else None


def _classes_dir_of(entry_name: str) -> str | None:
    """Return the class directory an entry sits anywhere under, if any."""
    for classes_dir in COLLECTION_CLASSES_PATHS:
        if entry_name.startswith(f"{classes_dir}/"):
            return classes_dir
    return None


class CollectionCache:
    """Unpacks each collection archive at most once into a shared directory.

    Each archive maps to a slot named after its CollectionKey. A slot is
    guarded by a lock file so that concurrent processes sharing cache_dir
    extract it only once; the marker file records a completed extraction.

    Attributes:
        cache_dir: Root directory holding all slots.
        lock_timeout: Seconds to wait for a slot lock.
    """

    def __init__(
        self,
        cache_dir: Path,
        lock_timeout: float | None = None,
        lock_factory: Callable[[Path, float], FileLockPort] = PollingFileLock,
    ) -> None:
        """Initialize the cache.

        Args:
            cache_dir: Root directory for slots. Created on first unpack.
            lock_timeout: Seconds to wait for a slot lock. None reads the
                timeout from the environment.
            lock_factory: Builds the lock for a slot; PollingFileLock by
                default, FlockFileLock where an OS lock is preferred.
        """
        self.cache_dir = cache_dir
        self.lock_timeout = lock_timeout_seconds() if lock_timeout is None else lock_timeout
        self._lock_factory = lock_factory

    def slot_for(self, archive: Path) -> CacheSlot:
        """Return the slot an archive currently maps to."""
        return CacheSlot.for_key(self.cache_dir, CollectionKey.for_archive(archive))

    def unpack(self, archive: Path) -> list[CandidateEntry]:
        """Return the class directories and library files bundled in archive.

        Extracts the archive on the first call for its key; later calls
        read the existing slot.

        Args:
            archive: A collection archive (war, jar or zip).

        Returns:
            Class directories in marker order, then library files sorted
            by path.

        Raises:
            LockTimeoutError: If another agent holds the slot lock too long.
            UnsafeArchiveEntryError: If an entry would escape the slot.
            OSError: On I/O failures during extraction.
        """
        slot = self.slot_for(archive)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        with self._lock_factory(slot.lock_file, self.lock_timeout):
            if slot.is_valid():
                logger.debug("Reusing unpacked %s from %s", archive, slot.target_dir)
                return self._read_slot(slot)
            entries = self._extract(archive, slot)
            slot.marker_file.touch()
        return entries

    @staticmethod
    def _ordered(classes_dirs: set[str], libs: list[Path], slot: CacheSlot) -> list[CandidateEntry]:
        entries = [
            CandidateEntry(slot.target_dir / classes_dir, EntryKind.DIRECTORY)
            for classes_dir in COLLECTION_CLASSES_PATHS
            if classes_dir in classes_dirs
        ]
        entries.extend(CandidateEntry(path, EntryKind.ARCHIVE) for path in sorted(libs))
        return entries

    def _read_slot(self, slot: CacheSlot) -> list[CandidateEntry]:
        classes_dirs = {d for d in COLLECTION_CLASSES_PATHS if (slot.target_dir / d).is_dir()}
        libs: list[Path] = []
        for lib_dir in COLLECTION_LIB_PATHS:
            directory = slot.target_dir / lib_dir
            if directory.is_dir():
                libs.extend(p for p in directory.iterdir() if p.is_file())
        return self._ordered(classes_dirs, libs, slot)

    def _extract(self, archive: Path, slot: CacheSlot) -> list[CandidateEntry]:
        """Stream every entry of archive into the slot's target directory.

        Entries under a class directory contribute that directory; files
        directly inside a library directory are returned individually;
        everything else is extracted but not returned.

        On any failure the target directory is deleted before the
        exception propagates, so no unmarked partial slot survives.
        """
        logger.info("Unpacking %s into %s", archive, slot.target_dir)
        # Leftovers of a killed extraction have no marker and are discarded
        shutil.rmtree(slot.target_dir, ignore_errors=True)
        target_root = slot.target_dir.resolve()
        classes_dirs: set[str] = set()
        libs: list[Path] = []
        try:
            with zipfile.ZipFile(archive) as zf:
                for info in zf.infolist():
                    if info.is_dir():
                        continue
                    dest = (slot.target_dir / info.filename).resolve()
                    if not dest.is_relative_to(target_root):
                        raise UnsafeArchiveEntryError(archive, info.filename)

                    classes_dir = _classes_dir_of(info.filename)
                    if classes_dir is not None:
                        classes_dirs.add(classes_dir)
                    elif _lib_dir_of(info.filename) is not None:
                        libs.append(slot.target_dir / info.filename)

                    dest.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(info) as src, dest.open("wb") as out:
                        shutil.copyfileobj(src, out)
        except BaseException:
            shutil.rmtree(slot.target_dir, ignore_errors=True)
            raise
        return self._ordered(classes_dirs, libs, slot)

    def slots(self) -> list[CacheSlot]:
        """List slots present under cache_dir, sorted by name.

        A slot is present if any of its directory, marker or lock exists.
        """
        if not self.cache_dir.exists():
            return []
        names: set[str] = set()
        for path in self.cache_dir.iterdir():
            if path.is_dir():
                names.add(path.name)
            elif path.suffix in (".cached", ".lock"):
                names.add(path.stem)
        return [
            CacheSlot(
                target_dir=self.cache_dir / name,
                marker_file=self.cache_dir / f"{name}.cached",
                lock_file=self.cache_dir / f"{name}.lock",
            )
            for name in sorted(names)
        ]

    def statistics(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with 'slot_count', 'valid_count', 'total_size'
            (bytes) and 'file_count'.
        """
        slots = self.slots()
        total_size, file_count = directory_usage(self.cache_dir)
        return {
            "slot_count": len(slots),
            "valid_count": sum(1 for s in slots if s.is_valid()),
            "total_size": total_size,
            "file_count": file_count,
        }
