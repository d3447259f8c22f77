"""Source descriptors — where the bytes of a file come from."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from fileforge.core.errors import ConflictingSourceError, MissingSourceError

_URL_PREFIXES = ("http://", "https://")


class SourceFile(BaseModel):
    """A local file or an ``http(s)://`` URL.

    ``changed`` is computed on read and signals drift of the source.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(min_length=1)
    checksum: str = ""  # SHA-256 hex, case-insensitive
    file_name: str = ""  # overrides the name derived from path
    insecure: bool = False  # skip TLS verification for HTTPS sources
    min_tls: str = ""  # "1.0" | "1.1" | "1.2" | "1.3"; "" means 1.3
    changed: bool = False

    @property
    def is_url(self) -> bool:
        return self.path.startswith(_URL_PREFIXES)


class SourceRaw(BaseModel):
    """Inline file content owned entirely by the desired state."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    file_name: str = Field(min_length=1)
    resize: int = Field(default=0, ge=0)  # pad with spaces up to this many bytes


SourceDescriptor = Union[SourceFile, SourceRaw]


def select_source(
    source_file: SourceFile | None, source_raw: SourceRaw | None
) -> SourceDescriptor:
    """Return the single populated source variant.

    Raises
    ------
    ConflictingSourceError
        If both variants are populated.
    MissingSourceError
        If neither is.
    """
    if source_file is not None and source_raw is not None:
        raise ConflictingSourceError(
            'please specify "source_file.path" or "source_raw" - not both'
        )
    if source_file is not None:
        return source_file
    if source_raw is not None:
        return source_raw
    raise MissingSourceError('missing argument "source_file.path" or "source_raw"')


class ResolvedArtifact(BaseModel):
    """A source materialized as a locally readable file.

    Only valid inside the ``SourceResolver.resolve`` context that produced it;
    temporary backing files are removed when that context exits.
    """

    model_config = ConfigDict(frozen=True)

    local_path: Path
    file_name: str
    is_temporary: bool = False
