"""Tests for LocalDirectoryBackend — layout, listing and deletion."""

from __future__ import annotations

from pathlib import Path

import pytest

from fileforge.backend.local import LocalDirectoryBackend
from fileforge.backend.protocol import FileUploadRequest, StorageBackend
from fileforge.core.errors import NotFoundError


def _request(path: Path, content_type: str) -> FileUploadRequest:
    return FileUploadRequest(content_type=content_type, file_name=path.name, local_path=path)


class TestLocalDirectoryBackend:
    def test_satisfies_protocol(self, backend: LocalDirectoryBackend):
        assert isinstance(backend, StorageBackend)

    def test_api_upload_layout(
        self, backend: LocalDirectoryBackend, source_path: Path, tmp_dir: Path
    ):
        volume_id = backend.upload_via_api("pve", "local", _request(source_path, "iso"))
        assert volume_id == "local:iso/alpine.iso"
        assert (tmp_dir / "storage/pve/var/lib/vz/template/iso/alpine.iso").is_file()

    def test_listing_reports_backups(self, backend: LocalDirectoryBackend, source_path: Path):
        backend.stream_upload("pve", "/var/lib/vz", _request(source_path, "dump"))
        listing = backend.list_files("pve", "local")
        assert [(f.volume_id, f.content_type) for f in listing] == [
            ("local:backup/alpine.iso", "backup")
        ]
        assert listing[0].size == source_path.stat().st_size

    def test_listing_is_per_node(self, backend: LocalDirectoryBackend, source_path: Path):
        backend.upload_via_api("pve1", "local", _request(source_path, "iso"))
        assert backend.list_files("pve2", "local") == []

    def test_listing_without_path(self, backend: LocalDirectoryBackend):
        assert backend.list_files("pve", "local-lvm") == []

    def test_unknown_datastore(self, backend: LocalDirectoryBackend):
        with pytest.raises(NotFoundError):
            backend.get_datastore("ceph")

    def test_delete(self, backend: LocalDirectoryBackend, source_path: Path):
        backend.upload_via_api("pve", "local", _request(source_path, "vztmpl"))
        backend.delete_file("pve", "local", "local:vztmpl/alpine.iso")
        assert backend.list_files("pve", "local") == []

    def test_delete_missing(self, backend: LocalDirectoryBackend):
        with pytest.raises(NotFoundError):
            backend.delete_file("pve", "local", "local:iso/missing.iso")

    def test_version(self, tmp_dir: Path):
        backend = LocalDirectoryBackend(tmp_dir / "s", version="8.3.2")
        assert backend.get_version().as_tuple() == (8, 3, 2)
