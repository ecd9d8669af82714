"""Tests for atomic writes and the staging directory."""

import pytest

from conftest import make_product, page
from memsig.core.errors import EmptyInputError, MissingBinaryError, PartReadError, is_fatal_io_error
from memsig.utils.files import atomic_write_bytes, atomic_write_text, staging_directory


class TestAtomicWrite:

    def test_creates_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "out.bin"
        atomic_write_bytes(target, b"data")
        assert target.read_bytes() == b"data"
        assert [p.name for p in target.parent.iterdir()] == ["out.bin"]

    def test_replaces_existing(self, tmp_path):
        target = tmp_path / "out.txt"
        target.write_text("old")
        atomic_write_text(target, "new")
        assert target.read_text() == "new"

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(PartReadError) as exc_info:
            atomic_write_bytes(blocker / "out.bin", b"data")
        assert exc_info.value.path == blocker / "out.bin"


class TestStagingDirectory:

    def test_renamed_on_success(self, tmp_path):
        target = tmp_path / "parts"
        with staging_directory(target) as staging:
            (staging / "0.seg").write_bytes(b"x")
            assert not target.exists()
        assert (target / "0.seg").read_bytes() == b"x"
        assert [p.name for p in tmp_path.iterdir()] == ["parts"]

    def test_discarded_on_error(self, tmp_path):
        target = tmp_path / "parts"
        with pytest.raises(RuntimeError):
            with staging_directory(target) as staging:
                (staging / "0.seg").write_bytes(b"x")
                raise RuntimeError("extractor failed")
        assert not any(tmp_path.iterdir())


class TestSignatureFile:

    def test_raw_concatenation(self, tmp_path):
        product = make_product({"1.0": [1, 2, 3], "1.1": [2]})
        sig = product.generate_signature([product.version("1.0")])
        path = sig.write_to_file(tmp_path / "demo-1.0.sig")
        assert path.read_bytes() == page(1) + page(3)
        assert path.stat().st_size == sig.number_of_pages() * 16


class TestErrorClassification:

    def test_io_errors(self, tmp_path):
        assert is_fatal_io_error(PartReadError(tmp_path / "x", "denied"))
        assert is_fatal_io_error(MissingBinaryError(tmp_path / "bin", "1.0"))
        assert not is_fatal_io_error(EmptyInputError("nothing"))

    def test_details(self, tmp_path):
        error = MissingBinaryError(tmp_path / "bin", version="1.0")
        assert error.details == {"path": str(tmp_path / "bin"), "version": "1.0"}
        assert "1.0" in error.message
