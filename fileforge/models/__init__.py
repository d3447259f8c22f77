"""Fileforge data models — Pydantic v2, frozen (immutable)."""

from fileforge.models.content import API_UPLOAD_CONTENT_TYPES, BackendVersion, ContentType
from fileforge.models.desired import DesiredFile, ObservedFile
from fileforge.models.diagnostics import Diagnostic, Diagnostics, Severity
from fileforge.models.identity import VolumeIdentity, parse_import_id
from fileforge.models.metadata import ObservedMetadata
from fileforge.models.source import (
    ResolvedArtifact,
    SourceDescriptor,
    SourceFile,
    SourceRaw,
    select_source,
)

__all__ = [
    # identity
    "VolumeIdentity",
    "parse_import_id",
    # content
    "ContentType",
    "API_UPLOAD_CONTENT_TYPES",
    "BackendVersion",
    # source
    "SourceFile",
    "SourceRaw",
    "SourceDescriptor",
    "ResolvedArtifact",
    "select_source",
    # metadata
    "ObservedMetadata",
    # state
    "DesiredFile",
    "ObservedFile",
    # diagnostics
    "Severity",
    "Diagnostic",
    "Diagnostics",
]
