"""Storage backend contract and the local directory implementation."""

from fileforge.backend.local import DEFAULT_DATASTORES, LocalDatastore, LocalDirectoryBackend
from fileforge.backend.protocol import (
    BackendFile,
    DatastoreInfo,
    FileUploadRequest,
    StorageBackend,
)

__all__ = [
    "StorageBackend",
    "BackendFile",
    "DatastoreInfo",
    "FileUploadRequest",
    "LocalDirectoryBackend",
    "LocalDatastore",
    "DEFAULT_DATASTORES",
]
