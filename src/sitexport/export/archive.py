"""Deterministic archive assembly.

An ``Archive`` collects every generated file in memory, keyed by its path
inside the deliverable.  Entries are ordered by category, then by the
order they were added, so two runs over the same input produce
byte-identical zip files.
"""

from __future__ import annotations

import io
import shutil
import zipfile
from dataclasses import dataclass
from enum import IntEnum
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from sitexport._errors import ExportError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sitexport.observability import DiagnosticCollector

# Earliest timestamp the zip format can store
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


class Category(IntEnum):
    """Archive sections, in the order they are written."""

    BUILD = 0
    SOURCE = 1
    CONFIG = 2
    DOCUMENT = 3
    ASSET = 4
    DOCS = 5


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """One file of the deliverable."""

    path: str
    data: bytes
    category: Category

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class Archive:
    """Ordered, collision-checked set of archive entries.

    Args:
        collector: Optional diagnostic sink; each added file is recorded
            as a ``FileEmitted`` event.

    """

    __slots__ = ("_collector", "_entries")

    def __init__(self, collector: DiagnosticCollector | None = None) -> None:
        self._entries: dict[str, ArchiveEntry] = {}
        self._collector = collector

    def add(self, path: str, data: str | bytes, category: Category) -> ArchiveEntry:
        """Add a file.

        Raises:
            ExportError: If *path* is not a clean relative path or is
                already taken.

        """
        path = _check_path(path)
        if path in self._entries:
            msg = f"Archive already contains {path!r}"
            raise ExportError(msg)
        payload = data.encode("utf-8") if isinstance(data, str) else data
        entry = ArchiveEntry(path=path, data=payload, category=category)
        self._entries[path] = entry
        if self._collector is not None:
            self._collector.record_file(path, category.name.lower(), entry.size_bytes)
        return entry

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ArchiveEntry]:
        return iter(self.entries())

    def __getitem__(self, path: str) -> ArchiveEntry:
        return self._entries[path]

    def entries(self) -> tuple[ArchiveEntry, ...]:
        """Entries ordered by category, then insertion order."""
        return tuple(sorted(self._entries.values(), key=lambda e: e.category))

    def paths(self) -> tuple[str, ...]:
        return tuple(e.path for e in self.entries())

    def text(self, path: str) -> str:
        """Decoded content of a text entry."""
        return self._entries[path].data.decode("utf-8")

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_zip(self) -> bytes:
        """Serialize to zip bytes with fixed timestamps and permissions."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for entry in self.entries():
                info = zipfile.ZipInfo(entry.path, date_time=_ZIP_EPOCH)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                zf.writestr(info, entry.data)
        return buffer.getvalue()

    def write_zip(self, path: Path) -> int:
        """Write the zip to *path*; returns its size in bytes."""
        data = self.to_zip()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            msg = f"Cannot write archive {path}: {exc}"
            raise ExportError(msg) from exc
        return len(data)

    def write_tree(self, output_dir: Path) -> None:
        """Remove and recreate *output_dir*, then write every entry into it."""
        try:
            if output_dir.exists():
                shutil.rmtree(output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
            for entry in self.entries():
                target = output_dir / entry.path
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(entry.data)
        except OSError as exc:
            msg = f"Cannot write export to {output_dir}: {exc}"
            raise ExportError(msg) from exc


def _check_path(path: str) -> str:
    pure = PurePosixPath(path)
    if not path or pure.is_absolute() or ".." in pure.parts or "\\" in path:
        msg = f"Invalid archive path {path!r}"
        raise ExportError(msg)
    return str(pure)
