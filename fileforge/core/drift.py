"""Drift detection for sources that live outside the datastore.

Local files are stat'ed; URLs get a HEAD request.  Either way the result is
an ``ObservedMetadata`` triple (modification date, size, tag) that is
compared against the triple recorded at the previous read.

Raw payloads are never checked: the desired state owns their bytes.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx

from fileforge.core.deadline import Deadline
from fileforge.core.errors import InvalidDateHeaderError, MetadataFetchFailedError
from fileforge.core.http import HttpClientFactory
from fileforge.models.metadata import ObservedMetadata
from fileforge.models.source import SourceFile

logger = logging.getLogger(__name__)

_RFC3339_UTC = "%Y-%m-%dT%H:%M:%SZ"


def format_rfc3339(moment: datetime) -> str:
    """Format *moment* as an RFC3339 UTC timestamp (second precision)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(_RFC3339_UTC)


def parse_http_date(value: str) -> datetime:
    """Parse a ``Last-Modified`` header value into an aware UTC datetime.

    Accepts RFC 1123 dates with a zone name (``GMT``, ``EST``, ...) or a
    numeric offset.  Zone-less or ``-0000`` dates are taken as UTC.
    """
    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError) as exc:
        raise InvalidDateHeaderError(
            f"failed to parse Last-Modified header: {value!r}"
        ) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_etag(value: str) -> str:
    """Return the first quoted segment of an ``ETag`` header, or ``""``."""
    parts = value.split('"')
    return parts[1] if len(parts) > 1 else ""


def has_changed(previous: ObservedMetadata, current: ObservedMetadata) -> bool:
    """Whether the source drifted since *previous* was recorded.

    Without a complete baseline (any recorded field empty or zero) there is
    nothing to compare against and the answer is ``False``.
    """
    if not previous.is_complete:
        return False
    return (
        previous.modification_date != current.modification_date
        or previous.size != current.size
        or previous.tag != current.tag
    )


def read_file_metadata(path: str) -> ObservedMetadata:
    """Stat a local file; a missing file yields unknown metadata.

    Raises
    ------
    MetadataFetchFailedError
        If the file exists but cannot be stat'ed.
    """
    try:
        st = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return ObservedMetadata()
    except OSError as exc:
        raise MetadataFetchFailedError(f"failed to stat {path!r}: {exc}") from exc

    mtime = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
    return ObservedMetadata(
        modification_date=format_rfc3339(mtime),
        size=st.st_size,
        tag=f"{int(mtime.timestamp()):x}-{st.st_size:x}",
    )


class DriftDetector:
    """Observes source metadata and decides whether it changed.

    Parameters
    ----------
    http:
        Factory for HTTP clients used by HEAD requests.
    """

    def __init__(self, http: HttpClientFactory) -> None:
        self._http = http

    def observe(self, source: SourceFile, deadline: Deadline | None = None) -> ObservedMetadata:
        """Return the current metadata of *source*."""
        if source.is_url:
            return self._read_url(source, deadline or Deadline())
        return read_file_metadata(source.path)

    def refresh(
        self,
        source: SourceFile,
        recorded: ObservedMetadata,
        deadline: Deadline | None = None,
    ) -> tuple[ObservedMetadata, bool]:
        """Observe *source* and compare it with *recorded*.

        Returns ``(metadata_to_record, changed)``.  When nothing could be
        observed the recorded metadata is kept.
        """
        current = self.observe(source, deadline)
        changed = has_changed(recorded, current)
        if changed:
            logger.info(
                "Source %s changed: recorded=%s observed=%s",
                source.path,
                recorded.model_dump(),
                current.model_dump(),
            )
        return (recorded if current.is_unknown else current), changed

    def _read_url(self, source: SourceFile, deadline: Deadline) -> ObservedMetadata:
        try:
            with self._http.client(min_tls=source.min_tls, insecure=source.insecure) as client:
                res = client.head(source.path, timeout=deadline.remaining())
        except httpx.HTTPError as exc:
            raise MetadataFetchFailedError(f"failed to HEAD the URL: {exc}") from exc

        modification_date = ""
        last_modified = res.headers.get("Last-Modified", "")
        if last_modified:
            modification_date = format_rfc3339(parse_http_date(last_modified))

        try:
            size = int(res.headers.get("Content-Length", "0"))
        except ValueError:
            logger.warning("Ignoring invalid Content-Length from %s", source.path)
            size = 0

        return ObservedMetadata(
            modification_date=modification_date,
            size=size,
            tag=parse_etag(res.headers.get("ETag", "")),
        )
