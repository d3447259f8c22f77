"""Directory-backed storage backend.

Emulates a cluster's file-based datastores on the local filesystem so the
reconciler can be driven end to end without a cluster.

Layout: ``{root}/{node}{datastore.path}/{content_dir}/{file_name}``, where
``content_dir`` follows the usual on-disk conventions (``template/iso``,
``template/cache``, ``dump``, ``snippets``, ``import``, ``images``).
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from fileforge.backend.protocol import BackendFile, DatastoreInfo, FileUploadRequest
from fileforge.core.errors import (
    MalformedIdentityError,
    NotFoundError,
    NoDestinationPathError,
    UploadFailedError,
)
from fileforge.models.content import BackendVersion
from fileforge.models.identity import VolumeIdentity

logger = logging.getLogger(__name__)

# content type -> directory below the datastore path
CONTENT_DIRS: dict[str, str] = {
    "iso": "template/iso",
    "vztmpl": "template/cache",
    "backup": "dump",
    "dump": "dump",
    "snippets": "snippets",
    "import": "import",
    "images": "images",
}

# directory -> content type reported in listings
_DIR_CONTENT_TYPES: dict[str, str] = {
    "template/iso": "iso",
    "template/cache": "vztmpl",
    "dump": "backup",
    "snippets": "snippets",
    "import": "import",
    "images": "images",
}


class LocalDatastore(BaseModel):
    """Static definition of one emulated datastore."""

    model_config = ConfigDict(frozen=True)

    path: str | None = "/var/lib/vz"
    content: list[str] = ["backup", "import", "iso", "snippets", "vztmpl"]


DEFAULT_DATASTORES: dict[str, LocalDatastore] = {
    "local": LocalDatastore(),
    "local-lvm": LocalDatastore(path=None, content=["images", "rootdir"]),
}


class LocalDirectoryBackend:
    """``StorageBackend`` implementation over a local directory tree.

    Parameters
    ----------
    root:
        Directory holding one subdirectory per node.
    datastores:
        Datastore definitions, keyed by datastore ID.
    version:
        Version string reported by ``get_version``.
    """

    def __init__(
        self,
        root: Path,
        *,
        datastores: dict[str, LocalDatastore] | None = None,
        version: str = "8.4.0",
    ) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)
        self._datastores = dict(datastores if datastores is not None else DEFAULT_DATASTORES)
        self._version = BackendVersion.parse(version)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _datastore(self, datastore: str) -> LocalDatastore:
        try:
            return self._datastores[datastore]
        except KeyError:
            raise NotFoundError(f"datastore {datastore!r} does not exist") from None

    def _node_path(self, node: str, path: str) -> Path:
        """Map an absolute node path onto the local tree."""
        return self._root / node / path.lstrip("/")

    def _datastore_root(self, node: str, datastore: str) -> Path:
        ds = self._datastore(datastore)
        if not ds.path:
            raise NoDestinationPathError(f"datastore {datastore!r} has no filesystem path")
        return self._node_path(node, ds.path)

    def _file_path(self, node: str, datastore: str, content_type: str, file_name: str) -> Path:
        content_dir = CONTENT_DIRS.get(content_type)
        if content_dir is None:
            raise UploadFailedError(f"content type {content_type!r} is not file based")
        return self._datastore_root(node, datastore) / content_dir / file_name

    # ------------------------------------------------------------------
    # StorageBackend
    # ------------------------------------------------------------------

    def list_files(self, node: str, datastore: str) -> list[BackendFile]:
        ds = self._datastore(datastore)
        if not ds.path:
            return []
        base = self._node_path(node, ds.path)
        files: list[BackendFile] = []
        for content_dir, content_type in sorted(_DIR_CONTENT_TYPES.items()):
            directory = base / content_dir
            if not directory.is_dir():
                continue
            for entry in sorted(directory.iterdir()):
                if entry.is_file():
                    files.append(
                        BackendFile(
                            volume_id=f"{datastore}:{content_type}/{entry.name}",
                            content_type=content_type,
                            size=entry.stat().st_size,
                        )
                    )
        return files

    def upload_via_api(
        self,
        node: str,
        datastore: str,
        request: FileUploadRequest,
        *,
        timeout: float | None = None,
    ) -> str:
        dest = self._file_path(node, datastore, request.content_type, request.file_name)
        self._copy(request.local_path, dest)
        logger.info("Uploaded %s to %s via API", request.file_name, dest)
        return f"{datastore}:{request.content_type}/{request.file_name}"

    def get_datastore(self, datastore: str) -> DatastoreInfo:
        ds = self._datastore(datastore)
        return DatastoreInfo(storage=datastore, path=ds.path, content=list(ds.content))

    def stream_upload(
        self,
        node: str,
        datastore_path: str,
        request: FileUploadRequest,
        *,
        timeout: float | None = None,
    ) -> None:
        dest = self._node_path(node, datastore_path) / request.content_type / request.file_name
        self._copy(request.local_path, dest)
        if request.mode:
            os.chmod(dest, int(request.mode, 8))
        logger.info("Streamed %s to %s", request.file_name, dest)

    def delete_file(self, node: str, datastore: str, volume_id: str) -> None:
        try:
            vol = VolumeIdentity.parse(volume_id)
        except MalformedIdentityError as exc:
            raise NotFoundError(str(exc)) from exc
        path = self._file_path(node, datastore, vol.content_type, vol.file_name)
        if not path.is_file():
            raise NotFoundError(f"file {volume_id!r} does not exist on {node}")
        path.unlink()
        logger.info("Deleted %s from %s", volume_id, node)

    def get_version(self) -> BackendVersion:
        return self._version

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _copy(src: Path, dest: Path) -> None:
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dest)
        except OSError as exc:
            raise UploadFailedError(f"failed to write {dest}: {exc}") from exc

    def __repr__(self) -> str:
        return f"LocalDirectoryBackend(root={str(self._root)!r})"
