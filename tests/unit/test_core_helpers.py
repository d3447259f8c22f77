"""Unit tests for hashing, deadlines, temporary files and diagnostics."""

from __future__ import annotations

import hashlib
import time
from pathlib import Path

import pytest
from pydantic import ValidationError

from fileforge.core.deadline import Deadline
from fileforge.core.errors import ChecksumMismatchError, DeadlineExceededError
from fileforge.core.hasher import checksums_match, sha256_file, sha256_hex
from fileforge.core.tempfiles import TempFileFactory
from fileforge.models.content import BackendVersion
from fileforge.models.desired import DesiredFile
from fileforge.models.diagnostics import Diagnostics, Severity
from fileforge.models.metadata import ObservedMetadata


class TestHasher:
    def test_file_digest_matches_bytes_digest(self, tmp_dir: Path):
        path = tmp_dir / "blob"
        path.write_bytes(b"x" * 10_000)
        assert sha256_file(path, chunk_size=333) == sha256_hex(b"x" * 10_000)
        assert sha256_hex(b"") == hashlib.sha256(b"").hexdigest()

    def test_match_ignores_case_and_whitespace(self):
        digest = sha256_hex(b"abc")
        assert checksums_match(digest, f" {digest.upper()}\n")
        assert not checksums_match(digest, sha256_hex(b"abd"))


class TestDeadline:
    def test_unbounded(self):
        deadline = Deadline()
        assert deadline.remaining() is None
        assert deadline.expired is False
        deadline.check()

    def test_bounded_counts_down(self):
        remaining = Deadline(60).remaining()
        assert remaining is not None
        assert 0 < remaining <= 60

    def test_expired_raises(self):
        deadline = Deadline(0.001)
        time.sleep(0.01)
        assert deadline.expired
        with pytest.raises(DeadlineExceededError, match="timeout"):
            deadline.check()


class TestTempFileFactory:
    def test_removed_on_exit(self, temp_files: TempFileFactory, temp_area: Path):
        with temp_files.create("raw") as path:
            assert path.parent == temp_area
            assert path.name.startswith("raw")
            path.write_bytes(b"payload")
        assert not path.exists()

    def test_removed_on_error(self, temp_files: TempFileFactory, temp_area: Path):
        with pytest.raises(RuntimeError):
            with temp_files.create("download"):
                raise RuntimeError("boom")
        assert list(temp_area.iterdir()) == []

    def test_creates_missing_directory(self, tmp_dir: Path):
        factory = TempFileFactory(tmp_dir / "nested" / "tmp")
        assert factory.temp_dir is not None
        assert factory.temp_dir.is_dir()


class TestDiagnostics:
    def test_warnings_do_not_fail(self):
        diags = Diagnostics()
        diags.warn("careful")
        assert not diags.has_error
        assert len(diags) == 1

    def test_from_exception_records_cause(self):
        diags = Diagnostics()
        try:
            try:
                raise OSError("disk full")
            except OSError as exc:
                raise ChecksumMismatchError("aa", "bb") from exc
        except ChecksumMismatchError as exc:
            diags.from_exception(exc)

        (diag,) = diags.errors
        assert diag.severity == Severity.ERROR
        assert "does not match" in diag.summary
        assert "disk full" in diag.detail

    def test_extend_keeps_order(self):
        first = Diagnostics()
        first.warn("one")
        second = Diagnostics()
        second.error("two")
        first.extend(second)
        assert [d.summary for d in first] == ["one", "two"]
        assert repr(first) == "Diagnostics(errors=1, warnings=1)"


class TestBackendVersion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("8.4.1", (8, 4, 1)), ("8.2-4", (8, 2, 4)), ("8", (8, 0, 0))],
    )
    def test_parse(self, raw: str, expected: tuple[int, int, int]):
        assert BackendVersion.parse(raw).as_tuple() == expected

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            BackendVersion.parse("pve-manager")

    def test_import_gate(self):
        assert not BackendVersion.parse("8.3.5").supports_import_content_type()
        assert BackendVersion.parse("8.4").supports_import_content_type()
        assert BackendVersion.parse("9.0").supports_import_content_type()


class TestStateModels:
    def test_recorded_metadata(self):
        desired = DesiredFile(
            node_name="pve",
            datastore_id="local",
            file_modification_date="2024-01-01T00:00:00Z",
            file_size=10,
            file_tag="abc",
        )
        assert desired.recorded_metadata.is_complete
        assert DesiredFile(node_name="pve", datastore_id="local").recorded_metadata.is_unknown

    def test_partial_metadata_is_neither(self):
        partial = ObservedMetadata(size=5)
        assert not partial.is_unknown
        assert not partial.is_complete

    @pytest.mark.parametrize("mode", ["0644", "755", ""])
    def test_valid_file_mode(self, mode: str):
        assert DesiredFile(node_name="pve", datastore_id="local", file_mode=mode).file_mode == mode

    @pytest.mark.parametrize("mode", ["rw-r--r--", "0999", "64"])
    def test_invalid_file_mode(self, mode: str):
        with pytest.raises(ValidationError):
            DesiredFile(node_name="pve", datastore_id="local", file_mode=mode)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            DesiredFile(node_name="pve", datastore_id="local", timeout_upload=0)
