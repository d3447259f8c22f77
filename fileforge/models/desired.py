"""Desired and observed state records exchanged with the host framework."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from fileforge.models.metadata import ObservedMetadata
from fileforge.models.source import SourceDescriptor, SourceFile, SourceRaw, select_source

DEFAULT_UPLOAD_TIMEOUT = 1800


class DesiredFile(BaseModel):
    """Desired state of one file on a datastore.

    Every field except ``timeout_upload`` (and the recorded metadata, which
    is carried over from the previous observation) forces recreation when
    it changes.
    """

    model_config = ConfigDict(frozen=True)

    node_name: str = Field(min_length=1)
    datastore_id: str = Field(min_length=1)
    content_type: str = ""  # inferred from the file name when empty
    source_file: SourceFile | None = None
    source_raw: SourceRaw | None = None
    file_mode: str = Field(default="", pattern=r"^([0-7]{3,4})?$")  # octal, privileged
    overwrite: bool = True
    timeout_upload: int = Field(default=DEFAULT_UPLOAD_TIMEOUT, gt=0)

    # Last observed source metadata, as persisted by the host framework
    file_modification_date: str = ""
    file_size: int = 0
    file_tag: str = ""

    def source(self) -> SourceDescriptor:
        """Return the single active source variant."""
        return select_source(self.source_file, self.source_raw)

    @property
    def recorded_metadata(self) -> ObservedMetadata:
        return ObservedMetadata(
            modification_date=self.file_modification_date,
            size=self.file_size,
            tag=self.file_tag,
        )


class ObservedFile(BaseModel):
    """Observed state of a file, as reported back to the host framework."""

    model_config = ConfigDict(frozen=True)

    id: str
    node_name: str
    datastore_id: str
    content_type: str
    file_name: str
    file_modification_date: str = ""
    file_size: int = 0
    file_tag: str = ""
    source_changed: bool = False
