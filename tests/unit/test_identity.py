"""Tests for VolumeIdentity — parsing, formatting and import IDs."""

from __future__ import annotations

import pytest

from fileforge.core.errors import MalformedIdentityError
from fileforge.models.identity import VolumeIdentity, parse_import_id


class TestVolumeIdentity:
    def test_format(self):
        vol = VolumeIdentity(datastore_id="local", content_type="iso", file_name="alpine.iso")
        assert vol.format() == "local:iso/alpine.iso"
        assert str(vol) == "local:iso/alpine.iso"

    def test_parse(self):
        vol = VolumeIdentity.parse("local:snippets/cloud-init.yaml")
        assert vol.datastore_id == "local"
        assert vol.content_type == "snippets"
        assert vol.file_name == "cloud-init.yaml"

    @pytest.mark.parametrize(
        ("datastore_id", "content_type", "file_name"),
        [
            ("local", "iso", "alpine.iso"),
            ("nfs-backup", "backup", "vzdump-qemu-100.vma.zst"),
            ("a", "b", "c"),
        ],
    )
    def test_round_trip(self, datastore_id: str, content_type: str, file_name: str):
        vol = VolumeIdentity(
            datastore_id=datastore_id, content_type=content_type, file_name=file_name
        )
        assert VolumeIdentity.parse(vol.format()) == vol

    def test_file_name_keeps_later_separators(self):
        """Only the first ':' and first '/' are delimiters."""
        vol = VolumeIdentity.parse("local:iso/sub/dir:x.iso")
        assert vol.content_type == "iso"
        assert vol.file_name == "sub/dir:x.iso"

    @pytest.mark.parametrize("raw", ["", "a", "a:", "a:b", "a:b/", ":/x", "a:/x", ":b/x"])
    def test_parse_rejects_malformed(self, raw: str):
        with pytest.raises(MalformedIdentityError, match="datastore_id:content_type/file_name"):
            VolumeIdentity.parse(raw)

    def test_error_names_offending_input(self):
        with pytest.raises(MalformedIdentityError, match=r"\(a:b\)"):
            VolumeIdentity.parse("a:b")

    def test_frozen(self):
        vol = VolumeIdentity.parse("local:iso/a.iso")
        with pytest.raises(Exception):
            vol.file_name = "b.iso"  # type: ignore[misc]


class TestParseImportId:
    def test_parse(self):
        node, vol = parse_import_id("pve/local:iso/alpine.iso")
        assert node == "pve"
        assert vol == VolumeIdentity.parse("local:iso/alpine.iso")

    @pytest.mark.parametrize("raw", ["", "pve", "pve/", "/local:iso/a.iso"])
    def test_rejects_missing_node(self, raw: str):
        with pytest.raises(MalformedIdentityError, match="node/datastore_id"):
            parse_import_id(raw)

    def test_rejects_malformed_volume(self):
        with pytest.raises(MalformedIdentityError):
            parse_import_id("pve/local:iso")
