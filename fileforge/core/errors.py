"""Error taxonomy for file reconciliation.

The core only raises these exceptions; the Reconciler turns them into
diagnostics and the CLI formats them.  Families:

- ``ConfigurationError`` — the desired state must be fixed, no retry.
- ``IntegrityError`` — checksum mismatch, no retry without new input.
- ``CollisionError`` — file name already taken and overwrite is off.
- ``TransportError`` — download/upload/HEAD failures; the caller decides
  whether to retry.
- ``NotFoundError`` — the backend object is absent (swallowed by delete).
"""

from __future__ import annotations


class FileForgeError(RuntimeError):
    """Base class for all fileforge errors."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(FileForgeError):
    """Raised when the desired state itself is invalid."""


class MalformedIdentityError(ConfigurationError):
    """Raised when a volume or import ID does not have the expected shape."""


class ConflictingSourceError(ConfigurationError):
    """Raised when both a source file and a raw source are specified."""


class MissingSourceError(ConfigurationError):
    """Raised when neither a source file nor a raw source is specified."""


class UnresolvableFileNameError(ConfigurationError):
    """Raised when no file name can be derived from the source."""


class UnknownClassificationError(ConfigurationError):
    """Raised when an explicit content type is not a known value."""


class UndeterminedClassificationError(ConfigurationError):
    """Raised when the content type cannot be inferred from the file name."""


class ResizeTooSmallError(ConfigurationError):
    """Raised when a raw payload is already at or above its resize target."""


class InvalidTLSVersionError(ConfigurationError):
    """Raised when the requested minimum TLS version is not supported."""


class UnreadableSourceError(ConfigurationError):
    """Raised when a local source file is missing or cannot be read."""


# ---------------------------------------------------------------------------
# Integrity and collisions
# ---------------------------------------------------------------------------


class IntegrityError(FileForgeError):
    """Raised when materialized bytes fail an integrity check."""


class ChecksumMismatchError(IntegrityError):
    """Raised when the computed SHA-256 differs from the expected checksum."""

    def __init__(self, calculated: str, expected: str) -> None:
        self.calculated = calculated
        self.expected = expected
        super().__init__(
            f'the calculated SHA256 checksum "{calculated}" does not match '
            f'source checksum "{expected}"'
        )


class CollisionError(FileForgeError):
    """Raised when an upload would clobber an existing backend file."""


class AlreadyExistsError(CollisionError):
    """Raised when a same-named file exists and overwrite is disabled."""

    def __init__(self, volume_id: str) -> None:
        self.volume_id = volume_id
        super().__init__(f'file "{volume_id}" already exists')


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class TransportError(FileForgeError):
    """Raised when a network or backend transfer fails."""


class DownloadFailedError(TransportError):
    """Raised when a source URL cannot be downloaded."""


class UploadFailedError(TransportError):
    """Raised when the backend rejects or aborts an upload."""


class MetadataFetchFailedError(TransportError):
    """Raised when a HEAD request for drift metadata fails."""


class InvalidDateHeaderError(TransportError):
    """Raised when a Last-Modified header matches no supported HTTP date format."""


class NoDestinationPathError(TransportError):
    """Raised when a datastore does not advertise a filesystem path."""


class DeadlineExceededError(TransportError):
    """Raised when an operation outlives its upload timeout."""


class ScratchFileError(TransportError):
    """Raised when a temporary file cannot be created or written."""


class NotFoundError(FileForgeError):
    """Raised by a backend when the addressed file does not exist."""
