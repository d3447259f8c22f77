"""Content types and backend version capability."""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict


class ContentType(str, Enum):
    """Content types a datastore can hold."""

    BACKUP = "backup"
    DUMP = "dump"
    IMAGES = "images"
    IMPORT = "import"
    ISO = "iso"
    ROOTDIR = "rootdir"
    SNIPPETS = "snippets"
    VZTMPL = "vztmpl"


# Content types uploaded through the backend's upload API; everything else
# is streamed to the datastore path on the node.
API_UPLOAD_CONTENT_TYPES: frozenset[str] = frozenset(
    {ContentType.ISO.value, ContentType.VZTMPL.value, ContentType.IMPORT.value}
)

_VERSION_RE = re.compile(r"^\s*(\d+)(?:\.(\d+))?(?:[.-](\d+))?")


class BackendVersion(BaseModel):
    """Storage backend release, used for capability checks."""

    model_config = ConfigDict(frozen=True)

    major: int
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, version: str) -> BackendVersion:
        """Parse ``"8.4.1"``, ``"8.2-4"`` or ``"8"`` style version strings."""
        match = _VERSION_RE.match(version)
        if match is None:
            raise ValueError(f"unrecognized backend version: {version!r}")
        major, minor, patch = match.groups()
        return cls(major=int(major), minor=int(minor or 0), patch=int(patch or 0))

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def supports_import_content_type(self) -> bool:
        """The ``import`` content type exists from release 8.4 onwards."""
        return self.as_tuple() >= (8, 4, 0)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
