"""Content type inference from file names and backend capability."""

from __future__ import annotations

import logging
import os

from fileforge.core.errors import UndeterminedClassificationError, UnknownClassificationError
from fileforge.models.content import BackendVersion, ContentType

logger = logging.getLogger(__name__)

KNOWN_CONTENT_TYPES: frozenset[str] = frozenset(ct.value for ct in ContentType)

_TEMPLATE_SUFFIXES = (".tar.gz", ".tar.xz")
_IMPORT_SUFFIXES = (".qcow2", ".raw", ".vmdk")
_EXTENSION_CONTENT_TYPES: dict[str, str] = {
    "img": ContentType.ISO.value,
    "iso": ContentType.ISO.value,
    "yaml": ContentType.SNIPPETS.value,
    "yml": ContentType.SNIPPETS.value,
}


def validate_content_type(content_type: str) -> str:
    """Return *content_type* unchanged if it is a known value."""
    if content_type not in KNOWN_CONTENT_TYPES:
        raise UnknownClassificationError(
            f"invalid content type {content_type!r}, "
            f"expected one of: {', '.join(sorted(KNOWN_CONTENT_TYPES))}"
        )
    return content_type


def infer_content_type(file_name: str, *, supports_import: bool) -> str:
    """Infer the content type from *file_name*.

    Rules, in order: ``.tar.gz``/``.tar.xz`` is ``vztmpl``; if the backend
    supports it, ``.qcow2``/``.raw``/``.vmdk`` is ``import``; otherwise the
    lower-cased extension picks ``iso`` (``img``, ``iso``) or ``snippets``
    (``yaml``, ``yml``).
    """
    if file_name.endswith(_TEMPLATE_SUFFIXES):
        return ContentType.VZTMPL.value

    if supports_import and file_name.endswith(_IMPORT_SUFFIXES):
        return ContentType.IMPORT.value

    ext = os.path.splitext(file_name)[1].lower().lstrip(".")
    content_type = _EXTENSION_CONTENT_TYPES.get(ext)
    if content_type is None:
        raise UndeterminedClassificationError(
            f'cannot determine the content type of source "{file_name}" - '
            f'Please manually define the "content_type" argument'
        )
    return content_type


class ContentClassifier:
    """Decides the content type of a file about to be uploaded.

    Parameters
    ----------
    backend_version:
        Version of the storage backend; gates the ``import`` content type.
    """

    def __init__(self, backend_version: BackendVersion) -> None:
        self._version = backend_version

    @property
    def supports_import(self) -> bool:
        return self._version.supports_import_content_type()

    def classify(self, file_name: str, explicit: str = "") -> str:
        """Return *explicit* if given and valid, else infer from *file_name*."""
        if explicit:
            return validate_content_type(explicit)
        content_type = infer_content_type(file_name, supports_import=self.supports_import)
        logger.debug(
            "Inferred content type %s for %s (backend %s)",
            content_type,
            file_name,
            self._version,
        )
        return content_type
