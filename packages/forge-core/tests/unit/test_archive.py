"""Unit tests for zip packaging."""

from __future__ import annotations

import stat
import zipfile
from pathlib import Path

import pytest

from forge_core.archive import FIXED_DATE_TIME, ZipArchiver
from forge_core.errors import ToolInvocationError


@pytest.fixture
def binary(tmp_path: Path) -> Path:
    """Create an executable stand-in for a compiled binary."""
    path = tmp_path / "bootstrap"
    path.write_bytes(b"\x7fELF" + b"\x00" * 64)
    path.chmod(0o755)
    return path


class TestZipArchiver:
    """Tests for ZipArchiver."""

    def test_archives_single_file(self, binary: Path) -> None:
        """The binary is stored at the archive root."""
        archive = binary.with_name("bootstrap.zip")

        result = ZipArchiver().archive(binary, archive)

        assert result.succeeded is True
        assert result.stdout == "adding: bootstrap"
        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["bootstrap"]
            assert zf.read("bootstrap") == binary.read_bytes()

    def test_preserves_executable_bit(self, binary: Path) -> None:
        """Lambda needs bootstrap to stay executable."""
        archive = binary.with_name("bootstrap.zip")
        ZipArchiver().archive(binary, archive)

        with zipfile.ZipFile(archive) as zf:
            mode = zf.getinfo("bootstrap").external_attr >> 16
        assert mode & stat.S_IXUSR

    def test_fixed_timestamps(self, binary: Path) -> None:
        """Entries carry a fixed timestamp."""
        archive = binary.with_name("bootstrap.zip")
        ZipArchiver().archive(binary, archive)

        with zipfile.ZipFile(archive) as zf:
            assert zf.getinfo("bootstrap").date_time == FIXED_DATE_TIME

    def test_rebuild_is_byte_identical(self, binary: Path) -> None:
        """Re-archiving an unchanged binary overwrites with identical bytes."""
        archive = binary.with_name("bootstrap.zip")
        ZipArchiver().archive(binary, archive)
        first = archive.read_bytes()

        binary.touch()
        ZipArchiver().archive(binary, archive)

        assert archive.read_bytes() == first

    def test_overwrites_existing_archive(self, binary: Path) -> None:
        """An existing archive is replaced."""
        archive = binary.with_name("bootstrap.zip")
        archive.write_bytes(b"stale")

        ZipArchiver().archive(binary, archive)

        assert zipfile.is_zipfile(archive)
        assert not archive.with_name("bootstrap.zip.tmp").exists()

    def test_recurses_into_directories(self, tmp_path: Path) -> None:
        """Directory outputs are archived recursively."""
        out = tmp_path / "dist"
        (out / "lib").mkdir(parents=True)
        (out / "bootstrap").write_bytes(b"bin")
        (out / "lib" / "data.json").write_text("{}")
        archive = tmp_path / "bundle.zip"

        ZipArchiver().archive(out, archive)

        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["dist/bootstrap", "dist/lib/data.json"]

    def test_missing_source(self, tmp_path: Path) -> None:
        """Archiving a binary that was never produced is an invocation error."""
        with pytest.raises(ToolInvocationError) as exc_info:
            ZipArchiver().archive(tmp_path / "bootstrap", tmp_path / "bootstrap.zip")

        assert exc_info.value.tool == "zip"
        assert not (tmp_path / "bootstrap.zip").exists()
