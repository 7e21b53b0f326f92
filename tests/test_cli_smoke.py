"""
CLI smoke tests against the in-memory registry.

Validates that all commands can be invoked, talk to the store, and map
failures to exit codes.
"""
from __future__ import annotations

import pytest
from typer.testing import CliRunner

from ocistore import cli
from ocistore.cli import app
from ocistore.cli_context import CLIContext
from ocistore.storage.oci_errors import OciConfigError
from tests.storage.fakes.fake_registry import FakeRegistry

KEY = "ab" * 32


@pytest.fixture
def registry(monkeypatch):
    registry = FakeRegistry()
    monkeypatch.setattr(
        cli, "_context",
        lambda: CLIContext.from_env(transport=registry.transport()),
    )
    return registry


@pytest.fixture
def runner():
    return CliRunner()


class TestCLIContext:
    """Test store construction for CLI commands."""

    def test_store_opened_by_scheme(self):
        context = CLIContext(config={"location": "s3://bucket/prefix"})
        with pytest.raises(OciConfigError, match="Unknown store scheme: s3"):
            context.store

    def test_store_reused_until_closed(self, monkeypatch):
        monkeypatch.setenv("OCISTORE_LOCATION", "oci://localhost:5000/demo")
        context = CLIContext.from_env()
        store = context.store
        assert context.store is store
        assert store.location == "oci://localhost:5000/demo"
        context.close()
        assert context._store is None


class TestCLISmokeTests:
    """Smoke tests for CLI commands."""

    def test_create_and_open(self, runner, registry, tmp_path):
        config_file = tmp_path / "config.bin"
        config_file.write_bytes(b"\x00config\xff")

        result = runner.invoke(app, ["create", str(config_file)])
        assert result.exit_code == 0
        assert "Created oci://localhost:5000/demo" in result.stdout

        output = tmp_path / "out.bin"
        result = runner.invoke(app, ["open", "-o", str(output)])
        assert result.exit_code == 0
        assert output.read_bytes() == b"\x00config\xff"

    def test_put_list_get_delete(self, runner, registry, tmp_path):
        source = tmp_path / "pack"
        source.write_bytes(b"0123456789")

        result = runner.invoke(app, ["put", "packfile", KEY, str(source)])
        assert result.exit_code == 0
        assert f"Stored {KEY} (10 bytes)" in result.stdout

        result = runner.invoke(app, ["list", "packfile"])
        assert result.exit_code == 0
        assert result.stdout.split() == [KEY]

        result = runner.invoke(app, ["get", "packfile", KEY])
        assert result.exit_code == 0
        assert result.stdout_bytes == b"0123456789"

        result = runner.invoke(app, ["get", "packfile", KEY, "--offset", "2", "--length", "3"])
        assert result.exit_code == 0
        assert result.stdout_bytes == b"234"

        result = runner.invoke(app, ["delete", "packfile", KEY])
        assert result.exit_code == 0

        result = runner.invoke(app, ["get", "packfile", KEY])
        assert result.exit_code == 1

    def test_info(self, runner, registry):
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "Repository: demo" in result.stdout
        assert registry.requests == []

    def test_ping(self, runner, registry):
        result = runner.invoke(app, ["ping"])
        assert result.exit_code == 0
        assert "OK http://localhost:5000" in result.stdout

    def test_invalid_key(self, runner, registry):
        result = runner.invoke(app, ["delete", "lock", "abcd"])
        assert result.exit_code == 2
        assert registry.requests == []

    def test_unknown_resource_rejected(self, runner, registry):
        result = runner.invoke(app, ["list", "snapshots"])
        assert result.exit_code != 0
        assert registry.requests == []

    def test_length_required_with_offset(self, runner, registry):
        result = runner.invoke(app, ["get", "packfile", KEY, "--offset", "2"])
        assert result.exit_code == 2

    def test_missing_location(self, runner, monkeypatch):
        monkeypatch.delenv("OCISTORE_LOCATION")
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 2
