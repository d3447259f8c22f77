"""Storage backend contract.

Defines the ``StorageBackend`` Protocol that backend clients must satisfy
along with the request/response models exchanged over it.  The real
cluster API client and SSH client live outside this package; any object
with these methods can be handed to the ``Reconciler``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from fileforge.models.content import BackendVersion


class BackendFile(BaseModel):
    """One entry of a datastore file listing."""

    model_config = ConfigDict(frozen=True)

    volume_id: str  # "datastore_id:content_type/file_name"
    content_type: str
    size: int = 0


class DatastoreInfo(BaseModel):
    """What a datastore advertises about itself."""

    model_config = ConfigDict(frozen=True)

    storage: str
    path: str | None = None  # filesystem path on the node, if any
    content: list[str] = []  # supported content types


class FileUploadRequest(BaseModel):
    """A file to place on a datastore."""

    model_config = ConfigDict(frozen=True)

    content_type: str
    file_name: str
    local_path: Path
    mode: str = ""  # octal file mode, privileged users only


@runtime_checkable
class StorageBackend(Protocol):
    """Protocol for storage backend clients.

    ``delete_file`` must raise ``fileforge.core.errors.NotFoundError`` when
    the file is absent.  Upload methods should raise
    ``fileforge.core.errors.UploadFailedError`` on failure.
    """

    def list_files(self, node: str, datastore: str) -> list[BackendFile]:
        ...

    def upload_via_api(
        self,
        node: str,
        datastore: str,
        request: FileUploadRequest,
        *,
        timeout: float | None = None,
    ) -> str:
        """Upload through the backend API; returns the new volume ID."""
        ...

    def get_datastore(self, datastore: str) -> DatastoreInfo:
        ...

    def stream_upload(
        self,
        node: str,
        datastore_path: str,
        request: FileUploadRequest,
        *,
        timeout: float | None = None,
    ) -> None:
        """Stream the file to ``{datastore_path}/{content_type}/{file_name}`` on the node."""
        ...

    def delete_file(self, node: str, datastore: str, volume_id: str) -> None:
        ...

    def get_version(self) -> BackendVersion:
        ...
