"""Unit tests for build unit discovery."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from forge_core.discovery import discover_units
from forge_core.errors import DirectoryNotFoundError


class TestDiscoverUnits:
    """Tests for discover_units."""

    def test_finds_each_directory(self, units_root: Path) -> None:
        """Every function directory becomes a unit."""
        units = discover_units(units_root)
        assert [u.name for u in units] == ["alpha", "beta"]
        assert units[0].path == units_root / "alpha"

    def test_order_is_sorted(self, tmp_path: Path, make_unit: Callable[..., Path]) -> None:
        """Units are returned sorted regardless of creation order."""
        root = tmp_path / "lambda"
        for name in ("zeta", "alpha", "mu"):
            make_unit(root, name)

        assert [u.name for u in discover_units(root)] == ["alpha", "mu", "zeta"]

    def test_ignores_files(self, units_root: Path) -> None:
        """Stray files next to the function directories are skipped."""
        (units_root / "README.md").write_text("functions")
        assert [u.name for u in discover_units(units_root)] == ["alpha", "beta"]

    def test_pattern_filters(self, units_root: Path) -> None:
        """The glob pattern narrows the selection."""
        assert [u.name for u in discover_units(units_root, "b*")] == ["beta"]

    def test_empty_root(self, tmp_path: Path) -> None:
        """An empty root yields no units."""
        root = tmp_path / "lambda"
        root.mkdir()
        assert discover_units(root) == []

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root raises DirectoryNotFoundError."""
        with pytest.raises(DirectoryNotFoundError) as exc_info:
            discover_units(tmp_path / "lambda")
        assert exc_info.value.path == tmp_path / "lambda"

    def test_root_is_a_file(self, tmp_path: Path) -> None:
        """A file in place of the root is treated as missing."""
        root = tmp_path / "lambda"
        root.write_text("")
        with pytest.raises(DirectoryNotFoundError):
            discover_units(root)

    def test_skips_hidden_directories(self, units_root: Path) -> None:
        """Dot-directories such as tool caches are not build units."""
        (units_root / ".aws-sam").mkdir()
        (units_root / ".idea").mkdir()

        assert [u.name for u in discover_units(units_root)] == ["alpha", "beta"]

    def test_dot_pattern_selects_hidden(self, units_root: Path) -> None:
        """A pattern starting with a dot opts into hidden directories."""
        (units_root / ".staging").mkdir()

        assert [u.name for u in discover_units(units_root, ".*")] == [".staging"]
