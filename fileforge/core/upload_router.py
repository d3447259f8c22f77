"""Upload routing — picks the backend transport for a content type.

Two transports satisfy the ``UploadTransport`` Protocol:

1. **ApiUploadTransport** — the backend's upload API, used for ``iso``,
   ``vztmpl`` and ``import``.  The backend decides where the file lands.
2. **StreamingUploadTransport** — a direct file transfer to the node,
   used for everything else.  Needs the datastore's filesystem path and
   writes below ``{path}/{content_type}/``; backups go to ``dump``.

Before any upload the router checks the datastore listing for a file of
the same name and refuses to clobber it unless overwrite is enabled.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from fileforge.backend.protocol import FileUploadRequest, StorageBackend
from fileforge.core.deadline import Deadline
from fileforge.core.errors import (
    AlreadyExistsError,
    FileForgeError,
    MalformedIdentityError,
    NoDestinationPathError,
    UploadFailedError,
)
from fileforge.models.content import API_UPLOAD_CONTENT_TYPES, ContentType
from fileforge.models.diagnostics import Diagnostics
from fileforge.models.identity import VolumeIdentity
from fileforge.models.source import ResolvedArtifact

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class UploadTransport(Protocol):
    """Protocol for upload transports.

    Implementations may add warnings to *diagnostics*; failures are raised.
    """

    def upload(
        self,
        node: str,
        datastore: str,
        request: FileUploadRequest,
        *,
        diagnostics: Diagnostics,
        deadline: Deadline,
    ) -> None:
        ...


# ---------------------------------------------------------------------------
# Transports
# ---------------------------------------------------------------------------


class ApiUploadTransport:
    """Single-call upload through the backend API."""

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend

    def upload(
        self,
        node: str,
        datastore: str,
        request: FileUploadRequest,
        *,
        diagnostics: Diagnostics,
        deadline: Deadline,
    ) -> None:
        logger.info(
            "Uploading %s (%s) to %s/%s via API",
            request.file_name,
            request.content_type,
            node,
            datastore,
        )
        self._backend.upload_via_api(node, datastore, request, timeout=deadline.remaining())


class StreamingUploadTransport:
    """Streams the file to the datastore path on the node."""

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend

    def upload(
        self,
        node: str,
        datastore: str,
        request: FileUploadRequest,
        *,
        diagnostics: Diagnostics,
        deadline: Deadline,
    ) -> None:
        info = self._backend.get_datastore(datastore)
        if not info.path:
            raise NoDestinationPathError(
                f"failed to determine the datastore path of {datastore!r}"
            )

        supported = sorted(info.content)
        if request.content_type not in supported:
            # The backend is authoritative; attempt the upload anyway.
            diagnostics.warn(
                f"the datastore {info.storage!r} does not support content type "
                f"{request.content_type!r}; supported content types are: {supported}"
            )

        if request.content_type == ContentType.BACKUP.value:
            request = request.model_copy(update={"content_type": ContentType.DUMP.value})

        logger.info(
            "Streaming %s to %s:%s/%s",
            request.file_name,
            node,
            info.path,
            request.content_type,
        )
        self._backend.stream_upload(node, info.path, request, timeout=deadline.remaining())


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------


class UploadRouter:
    """Checks for collisions and dispatches uploads by content type.

    Parameters
    ----------
    backend:
        The storage backend.
    api_transport / stream_transport:
        Override the default transports (e.g. in tests).
    """

    def __init__(
        self,
        backend: StorageBackend,
        *,
        api_transport: UploadTransport | None = None,
        stream_transport: UploadTransport | None = None,
    ) -> None:
        self._backend = backend
        self._api = api_transport or ApiUploadTransport(backend)
        self._stream = stream_transport or StreamingUploadTransport(backend)

    def transport_for(self, content_type: str) -> UploadTransport:
        if content_type in API_UPLOAD_CONTENT_TYPES:
            return self._api
        return self._stream

    def check_collision(
        self,
        node: str,
        datastore: str,
        file_name: str,
        *,
        overwrite: bool,
        diagnostics: Diagnostics,
    ) -> None:
        """Look for an existing file named *file_name* on the datastore.

        Raises
        ------
        AlreadyExistsError
            If one exists and *overwrite* is false.
        """
        for entry in self._backend.list_files(node, datastore):
            try:
                existing = VolumeIdentity.parse(entry.volume_id)
            except MalformedIdentityError as exc:
                logger.warning("failed to parse volume ID %r: %s", entry.volume_id, exc)
                continue

            if existing.file_name != file_name:
                continue
            if not overwrite:
                raise AlreadyExistsError(str(existing))
            diagnostics.warn(
                f'the existing file "{existing}" has been overwritten by the resource'
            )

    def upload(
        self,
        node: str,
        datastore: str,
        content_type: str,
        artifact: ResolvedArtifact,
        *,
        file_mode: str = "",
        diagnostics: Diagnostics,
        deadline: Deadline,
    ) -> None:
        """Upload *artifact* through the transport for *content_type*."""
        request = FileUploadRequest(
            content_type=content_type,
            file_name=artifact.file_name,
            local_path=artifact.local_path,
            mode=file_mode,
        )
        transport = self.transport_for(content_type)
        try:
            transport.upload(node, datastore, request, diagnostics=diagnostics, deadline=deadline)
        except FileForgeError:
            raise
        except Exception as exc:
            raise UploadFailedError(
                f"failed to upload {artifact.file_name!r} to {node}/{datastore}: {exc}"
            ) from exc
