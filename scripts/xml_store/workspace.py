"""Workspace directory, registered types and per-container document paths."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable

from . import conf
from .errors import InvalidArgumentError, ResolutionError, TypeMismatchError
from .events import EventHub
from .log import store_log
from .records import Container, Record, is_container_type, is_record_type
from .type_info import TypeInfo, resolve_type_info
from .watcher import DirectoryWatcher


def normalize_directory(path: str | os.PathLike) -> str:
    """Return *path* as a string ending with exactly one directory separator."""
    text = os.fspath(path)
    return os.path.join(text, "")


class WorkspaceManager:
    """Owns the workspace root, the path table and the directory watch.

    Layout::

        {workspace}/
            {ContainerTypeName}.xml    # one document per container type
    """

    def __init__(self, events: EventHub | None = None, watch_interval: float | None = None):
        self.events = events or EventHub()
        self.watch_interval = watch_interval
        self._workspace: str | None = None
        self._types: tuple[type, ...] = ()
        self._paths: dict[type[Container], Path] = {}
        self._type_infos: dict[type[Record], TypeInfo] = {}
        self._watcher: DirectoryWatcher | None = None

    # -- Properties --

    @property
    def workspace(self) -> str | None:
        """The workspace directory, always ending with a separator."""
        return self._workspace

    @property
    def workspace_path(self) -> Path | None:
        return Path(self._workspace) if self._workspace else None

    @property
    def registered_types(self) -> tuple[type, ...]:
        return self._types

    @property
    def paths(self) -> dict[type[Container], Path]:
        return dict(self._paths)

    @property
    def is_watching(self) -> bool:
        return self._watcher is not None and self._watcher.is_running

    @property
    def watcher(self) -> DirectoryWatcher | None:
        return self._watcher

    # -- Setup / teardown --

    def set_workspace(self, path: str | os.PathLike | None, types: Iterable[type]) -> str:
        """Point the manager at *path* and build the path table for *types*."""
        if path is None or not os.fspath(path):
            raise InvalidArgumentError("Cannot have an empty workspace path")
        types = tuple(types or ())
        for item in types:
            if not (is_container_type(item) or is_record_type(item)):
                raise TypeMismatchError(
                    f"The type {item!r} is neither a Container nor a Record",
                    type=item,
                )

        # Resolve everything before touching the filesystem so a bad type
        # leaves the previous workspace intact.
        paths: dict[type[Container], Path] = {}
        type_infos: dict[type[Record], TypeInfo] = {}
        workspace = normalize_directory(path)
        for item in types:
            if is_record_type(item):
                info = resolve_type_info(item)
                type_infos[item] = info
                container_type = info.container_type
            else:
                container_type = item
            paths[container_type] = Path(workspace + container_type.__name__ + conf.DOCUMENT_EXTENSION)

        self._stop_watching()
        Path(workspace).mkdir(parents=True, exist_ok=True)

        self._workspace = workspace
        self._types = types
        self._paths = paths
        self._type_infos = type_infos
        self._start_watching(workspace)
        store_log(f"Workspace set to {workspace} with {len(paths)} container(s)")
        return workspace

    def clear(self) -> None:
        """Stop watching, delete the workspace directory and forget every registration."""
        self._stop_watching()
        if self._workspace and os.path.isdir(self._workspace):
            shutil.rmtree(self._workspace)
            store_log(f"Deleted workspace {self._workspace}")
        self._workspace = None
        self._types = ()
        self._paths = {}
        self._type_infos = {}
        self.events.clear()

    # -- Lookups --

    def type_info_for(self, record_type: type[Record]) -> TypeInfo:
        info = self._type_infos.get(record_type)
        if info is None:
            if not is_record_type(record_type):
                raise TypeMismatchError(f"{record_type!r} is not a Record type", type=record_type)
            info = resolve_type_info(record_type)
            self._type_infos[record_type] = info
        return info

    def container_type_for(self, model_type: type) -> type[Container]:
        if is_container_type(model_type):
            return model_type
        return self.type_info_for(model_type).container_type

    def path_for(self, model_type: type) -> Path:
        """Document path of a container type, or of the container owning a record type."""
        container_type = self.container_type_for(model_type)
        path = self._paths.get(container_type)
        if path is None:
            raise ResolutionError(
                f"No workspace path registered for {container_type.__name__}",
                container_type=container_type.__name__,
                workspace=self._workspace,
            )
        return path

    # -- Watch --

    def _start_watching(self, workspace: str) -> None:
        self._watcher = DirectoryWatcher(workspace, self.events, self.watch_interval)
        self._watcher.start()

    def _stop_watching(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None
