"""Volume identity — the ``datastore_id:content_type/file_name`` key."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from fileforge.core.errors import MalformedIdentityError

_VOLUME_ID_FORMAT = "datastore_id:content_type/file_name"
_IMPORT_ID_FORMAT = "node/datastore_id:content_type/file_name"


def _split_pair(value: str, sep: str, raw: str, expected: str) -> tuple[str, str]:
    """Split *value* on the first *sep*; both halves must be non-empty."""
    head, found, tail = value.partition(sep)
    if not found or not head or not tail:
        raise MalformedIdentityError(
            f"unexpected format of ID ({raw}), expected {expected}"
        )
    return head, tail


class VolumeIdentity(BaseModel):
    """Addresses one file on a datastore.

    The string form carries no escaping, so ``content_type`` must not
    contain ``/`` and ``datastore_id`` must not contain ``:``.
    """

    model_config = ConfigDict(frozen=True)

    datastore_id: str = Field(min_length=1)
    content_type: str = Field(min_length=1)
    file_name: str = Field(min_length=1)

    @classmethod
    def parse(cls, volume_id: str) -> VolumeIdentity:
        """Parse ``datastore_id:content_type/file_name``.

        Raises
        ------
        MalformedIdentityError
            If a delimiter is missing or any part is empty.
        """
        datastore_id, rest = _split_pair(volume_id, ":", volume_id, _VOLUME_ID_FORMAT)
        content_type, file_name = _split_pair(rest, "/", volume_id, _VOLUME_ID_FORMAT)
        return cls(
            datastore_id=datastore_id,
            content_type=content_type,
            file_name=file_name,
        )

    def format(self) -> str:
        return f"{self.datastore_id}:{self.content_type}/{self.file_name}"

    def __str__(self) -> str:
        return self.format()


def parse_import_id(import_id: str) -> tuple[str, VolumeIdentity]:
    """Parse an import ID of the form ``node/datastore_id:content_type/file_name``.

    Returns ``(node_name, volume_identity)``.
    """
    node, volume_id = _split_pair(import_id, "/", import_id, _IMPORT_ID_FORMAT)
    return node, VolumeIdentity.parse(volume_id)
