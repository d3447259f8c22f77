"""Source resolution — turns a source descriptor into a local file.

A source is one of:

1. **Local file** (``SourceFile`` with a filesystem path): used in place.
2. **URL** (``SourceFile`` with an ``http(s)://`` path): downloaded into a
   temporary file first, since the backend upload needs a complete local
   file.
3. **Raw payload** (``SourceRaw``): written to a temporary file, optionally
   right-padded with spaces to a fixed size.

``SourceResolver.resolve`` is a context manager: temporary files exist only
inside the ``with`` block and are removed on every exit path.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import unquote, urlsplit

import httpx

from fileforge.core.deadline import Deadline
from fileforge.core.errors import (
    ChecksumMismatchError,
    DownloadFailedError,
    ResizeTooSmallError,
    ScratchFileError,
    UnreadableSourceError,
    UnresolvableFileNameError,
)
from fileforge.core.hasher import checksums_match, sha256_file
from fileforge.core.http import HttpClientFactory
from fileforge.core.tempfiles import TempFileFactory
from fileforge.models.source import ResolvedArtifact, SourceDescriptor, SourceFile, SourceRaw

logger = logging.getLogger(__name__)


def resolve_file_name(source: SourceDescriptor) -> str:
    """Return the name the file will have on the datastore.

    An explicit ``file_name`` wins.  Otherwise URLs use the last segment of
    their path and filesystem paths use their base name.
    """
    if isinstance(source, SourceRaw):
        return source.file_name

    if source.file_name:
        return source.file_name

    if source.is_url:
        name = unquote(urlsplit(source.path).path.split("/")[-1])
        if not name:
            raise UnresolvableFileNameError(
                f'failed to determine file name from the URL "{source.path}"'
            )
        return name

    name = os.path.basename(source.path.rstrip("/"))
    if not name:
        raise UnresolvableFileNameError(
            f'failed to determine file name from the path "{source.path}"'
        )
    return name


def pad_raw_data(data: bytes, resize: int) -> bytes:
    """Right-pad *data* with spaces to exactly *resize* bytes.

    A *resize* of zero leaves the data untouched.  Padding never truncates.
    """
    if resize <= 0:
        return data
    if len(data) >= resize:
        raise ResizeTooSmallError(f"cannot resize {len(data)} bytes to {resize} bytes")
    return data.ljust(resize, b" ")


class SourceResolver:
    """Materializes sources as local files.

    Parameters
    ----------
    temp_files:
        Factory for scoped temporary files.
    http:
        Factory for TLS-configured HTTP clients.
    chunk_size:
        Download chunk size in bytes.
    """

    def __init__(
        self,
        temp_files: TempFileFactory,
        http: HttpClientFactory,
        *,
        chunk_size: int = 1024 * 1024,
    ) -> None:
        self._temp_files = temp_files
        self._http = http
        self._chunk_size = chunk_size

    # ------------------------------------------------------------------
    # Resolve
    # ------------------------------------------------------------------

    @contextmanager
    def resolve(
        self, source: SourceDescriptor, deadline: Deadline | None = None
    ) -> Iterator[ResolvedArtifact]:
        """Yield a ``ResolvedArtifact`` for *source*.

        Raises
        ------
        DownloadFailedError
            If a URL source cannot be fetched.
        ChecksumMismatchError
            If the materialized bytes do not match ``source.checksum``.
        UnreadableSourceError
            If a local source is missing or cannot be read.
        ScratchFileError
            If a temporary file cannot be created or written.
        ResizeTooSmallError
            If a raw payload cannot be padded to its ``resize`` target.
        """
        deadline = deadline or Deadline()
        file_name = resolve_file_name(source)

        if isinstance(source, SourceRaw):
            data = pad_raw_data(source.data, source.resize)
            with self._temp_files.create("raw") as tmp:
                try:
                    tmp.write_bytes(data)
                except OSError as exc:
                    raise ScratchFileError(f"failed to write raw data to {tmp}: {exc}") from exc
                yield ResolvedArtifact(local_path=tmp, file_name=file_name, is_temporary=True)
            return

        if source.is_url:
            with self._temp_files.create("download") as tmp:
                self._download(source, tmp, deadline)
                self._verify_checksum(source, tmp)
                yield ResolvedArtifact(local_path=tmp, file_name=file_name, is_temporary=True)
            return

        local = Path(source.path)
        if not local.is_file():
            raise UnreadableSourceError(f'source file "{local}" does not exist')
        self._verify_checksum(source, local)
        yield ResolvedArtifact(local_path=local, file_name=file_name)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _download(self, source: SourceFile, dest: Path, deadline: Deadline) -> None:
        """Stream *source.path* into *dest*."""
        logger.debug("Downloading file from URL %s", source.path)
        try:
            with self._http.client(min_tls=source.min_tls, insecure=source.insecure) as client:
                with client.stream("GET", source.path, timeout=deadline.remaining()) as res:
                    res.raise_for_status()
                    with open(dest, "wb") as fh:
                        for chunk in res.iter_bytes(self._chunk_size):
                            deadline.check()
                            fh.write(chunk)
        except httpx.HTTPError as exc:
            raise DownloadFailedError(
                f'failed to download "{source.path}": {exc}'
            ) from exc
        except OSError as exc:
            raise ScratchFileError(f"failed to write download to {dest}: {exc}") from exc
        logger.debug("Downloaded %s (%d bytes)", source.path, dest.stat().st_size)

    def _verify_checksum(self, source: SourceFile, local: Path) -> None:
        """Compare the SHA-256 of *local* against ``source.checksum``, if set."""
        if not source.checksum:
            return
        try:
            calculated = sha256_file(local, self._chunk_size)
        except OSError as exc:
            raise UnreadableSourceError(f'failed to read source file "{local}": {exc}') from exc
        logger.debug("Calculated checksum source=%s sha256=%s", source.path, calculated)
        if not checksums_match(calculated, source.checksum):
            raise ChecksumMismatchError(calculated, source.checksum)
