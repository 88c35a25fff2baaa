"""Tests for forge init command."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner
import pytest
import yaml

from forge_cli.commands.init import init


class TestInitCommand:
    """Tests for init command."""

    def test_init_creates_forge_yaml(self, isolated_runner: CliRunner) -> None:
        """Test init creates forge.yaml."""
        result = isolated_runner.invoke(init)
        assert result.exit_code == 0
        assert Path("forge.yaml").exists()
        assert "created" in result.output.lower()

    def test_init_writes_defaults(self, isolated_runner: CliRunner) -> None:
        """The written file holds the default settings."""
        isolated_runner.invoke(init)

        data = yaml.safe_load(Path("forge.yaml").read_text())
        assert data["root"] == "lambda"
        assert data["goos"] == "linux"
        assert data["goarch"] == "amd64"
        assert data["cgo_enabled"] is False
        assert data["archive_name"] == "bootstrap.zip"

    def test_init_goarch(self, isolated_runner: CliRunner) -> None:
        """--goarch is written to the file."""
        result = isolated_runner.invoke(init, ["--goarch", "arm64", "--root", "functions"])
        assert result.exit_code == 0

        data = yaml.safe_load(Path("forge.yaml").read_text())
        assert data["goarch"] == "arm64"
        assert data["root"] == "functions"

    def test_init_ignores_environment(
        self, isolated_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """FORGE_* variables do not leak into the written defaults."""
        monkeypatch.setenv("FORGE_GO_BINARY", "/opt/go/bin/go")

        isolated_runner.invoke(init)

        assert yaml.safe_load(Path("forge.yaml").read_text())["go_binary"] == "go"

    def test_written_file_loads(self, isolated_runner: CliRunner) -> None:
        """The generated file is accepted by the config loader."""
        from forge_core.config import BuildConfig

        isolated_runner.invoke(init)

        config = BuildConfig.from_yaml(Path("forge.yaml"))
        assert config.entry_point == "main.go"


class TestInitExistingFile:
    """Tests for existing forge.yaml handling."""

    def test_init_refuses_overwrite(self, isolated_runner: CliRunner) -> None:
        """An existing file is left alone without --force."""
        Path("forge.yaml").write_text("root: custom\n")

        result = isolated_runner.invoke(init)

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert Path("forge.yaml").read_text() == "root: custom\n"

    def test_init_force(self, isolated_runner: CliRunner) -> None:
        """--force overwrites the file."""
        Path("forge.yaml").write_text("root: custom\n")

        result = isolated_runner.invoke(init, ["--force"])

        assert result.exit_code == 0
        assert "Overwrote" in result.output
        assert yaml.safe_load(Path("forge.yaml").read_text())["root"] == "lambda"
