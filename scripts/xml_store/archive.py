"""Export a workspace to a single ZIP archive and import it back."""

from __future__ import annotations

import os
import shutil
import threading
import zipfile
from datetime import datetime
from pathlib import Path

from . import conf
from .errors import FormatError, InvalidArgumentError, NotFoundError
from .events import EventHub, EventKind, StoreEvent
from .log import store_log
from .workspace import WorkspaceManager, normalize_directory


class ArchiveManager:
    """Archive I/O runs under the same lock as every container read and write."""

    def __init__(self, workspace: WorkspaceManager, lock: threading.Lock, events: EventHub):
        self._workspace = workspace
        self._lock = lock
        self._events = events

    def export(self, dest_dir: str | os.PathLike, filename: str, ext: str = conf.ARCHIVE_EXTENSION) -> Path:
        """Write the whole workspace tree to ``dest_dir/filename+ext``, replacing any existing file."""
        source = self._workspace.workspace_path
        if source is None:
            raise InvalidArgumentError("No workspace has been set")
        if not filename:
            raise InvalidArgumentError("Cannot export to an empty filename")
        dest = Path(normalize_directory(dest_dir))
        dest.mkdir(parents=True, exist_ok=True)
        archive_path = dest / f"{filename}{ext}"
        resolved_archive = archive_path.resolve()

        with self._lock:
            archive_path.unlink(missing_ok=True)
            with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for root, dirs, files in os.walk(source):
                    dirs.sort()
                    for name in sorted(files):
                        file_path = Path(root) / name
                        # Exporting into the workspace itself must not archive the archive.
                        if file_path.resolve() == resolved_archive:
                            continue
                        zf.write(file_path, file_path.relative_to(source).as_posix())

        store_log(f"Exported {source} to {archive_path}")
        self._events.emit(StoreEvent(EventKind.EXPORTED, str(archive_path), datetime.now()))
        return archive_path

    def import_(self, archive_path: str | os.PathLike, dest_dir: str | os.PathLike) -> list[Path]:
        """Extract every entry of *archive_path* under *dest_dir*, replacing existing files."""
        archive_path = Path(archive_path)
        if not archive_path.is_file():
            raise NotFoundError(f"No archive at {archive_path}", path=archive_path)
        dest_root = Path(dest_dir).resolve()
        extracted: list[Path] = []

        with self._lock:
            try:
                zf = zipfile.ZipFile(archive_path, "r")
            except zipfile.BadZipFile as e:
                raise FormatError(f"{archive_path} is not a valid archive: {e}", path=archive_path) from e
            with zf:
                for entry in zf.infolist():
                    target = (dest_root / entry.filename).resolve()
                    if not target.is_relative_to(dest_root):
                        raise FormatError(
                            f"Archive entry {entry.filename!r} escapes {dest_root}",
                            path=archive_path,
                        )
                    if entry.is_dir():
                        target.mkdir(parents=True, exist_ok=True)
                        continue
                    if target.is_file():
                        target.unlink()
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(entry) as src, open(target, "wb") as dst:
                        shutil.copyfileobj(src, dst)
                    extracted.append(target)

        last = str(extracted[-1]) if extracted else str(dest_root)
        store_log(f"Imported {archive_path} into {dest_root} ({len(extracted)} file(s))")
        self._events.emit(StoreEvent(EventKind.IMPORTED, last, datetime.now()))
        return extracted
