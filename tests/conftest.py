"""Shared test fixtures for Fileforge."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from fileforge.backend.local import LocalDirectoryBackend
from fileforge.config import ProdConfig
from fileforge.core.http import HttpClientFactory
from fileforge.core.reconciler import Reconciler
from fileforge.core.resolver import SourceResolver
from fileforge.core.tempfiles import TempFileFactory
from fileforge.models.content import BackendVersion
from fileforge.models.desired import DesiredFile


class UnreachableVersionBackend(LocalDirectoryBackend):
    """Local backend whose version endpoint always fails."""

    def get_version(self) -> BackendVersion:
        raise ConnectionError("version endpoint unreachable")


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test files."""
    return tmp_path


@pytest.fixture
def temp_area(tmp_dir: Path) -> Path:
    """Directory that holds the resolver's temporary files."""
    path = tmp_dir / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def temp_files(temp_area: Path) -> TempFileFactory:
    return TempFileFactory(temp_area)


@pytest.fixture
def http_factory() -> HttpClientFactory:
    return HttpClientFactory()


@pytest.fixture
def resolver(temp_files: TempFileFactory, http_factory: HttpClientFactory) -> SourceResolver:
    return SourceResolver(temp_files, http_factory, chunk_size=4)


@pytest.fixture
def backend(tmp_dir: Path) -> LocalDirectoryBackend:
    """Provide a fresh local backend reporting version 8.4.0."""
    return LocalDirectoryBackend(tmp_dir / "storage")


@pytest.fixture
def unreachable_backend(tmp_dir: Path) -> UnreachableVersionBackend:
    return UnreachableVersionBackend(tmp_dir / "storage")


@pytest.fixture
def settings(temp_area: Path) -> ProdConfig:
    return ProdConfig(temp_dir=temp_area)


@pytest.fixture
def reconciler(backend: LocalDirectoryBackend, settings: ProdConfig) -> Reconciler:
    return Reconciler(backend, settings=settings)


@pytest.fixture
def source_path(tmp_dir: Path) -> Path:
    """A small local ISO image."""
    path = tmp_dir / "src" / "alpine.iso"
    path.parent.mkdir()
    path.write_bytes(b"iso-image-bytes")
    return path


# ---------------------------------------------------------------------------
# Desired state factory
# ---------------------------------------------------------------------------


@pytest.fixture
def make_desired() -> Callable[..., DesiredFile]:
    """Factory fixture: build a DesiredFile with sensible defaults."""

    def _factory(**overrides: Any) -> DesiredFile:
        defaults: dict[str, Any] = {
            "node_name": "pve",
            "datastore_id": "local",
        }
        defaults.update(overrides)
        return DesiredFile(**defaults)

    return _factory
