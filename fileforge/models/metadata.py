"""Source metadata recorded for drift detection."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ObservedMetadata(BaseModel):
    """Modification date, size and tag of an externally-owned source.

    "Unknown" is all-empty (``""``, ``0``, ``""``), never ``None``.
    """

    model_config = ConfigDict(frozen=True)

    modification_date: str = ""  # RFC3339, UTC
    size: int = 0
    tag: str = ""

    @property
    def is_unknown(self) -> bool:
        """True when no field carries a value."""
        return not self.modification_date and self.size == 0 and not self.tag

    @property
    def is_complete(self) -> bool:
        """True when every field carries a value."""
        return bool(self.modification_date) and self.size != 0 and bool(self.tag)
