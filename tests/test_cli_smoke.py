"""
CLI smoke tests with fake storage.

Tests basic CLI functionality and command wiring without a real object
store. The session factory hook is patched to hand out the fake storage.
"""
from __future__ import annotations

import pytest
from typer.testing import CliRunner

from swiftfs import cli
from swiftfs.cli import app

CREDS = ["--token", "cli-token", "--storage-url", "https://swift.example.com/v1/AUTH_test"]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def fake_factory(monkeypatch, factory):
    """Route every CLI command to the fake storage."""
    monkeypatch.setattr(cli, "_session_factory", lambda settings: factory)
    return factory


class TestCLISmokeTests:
    """Smoke tests for CLI commands with fake storage."""

    def test_put_and_cat(self, runner, container, tmp_path):
        """Test uploading a file then printing it."""
        src = tmp_path / "hello.txt"
        src.write_bytes(b"hello world\n")

        result = runner.invoke(app, ["put", "swift://photos/hello.txt", str(src), *CREDS])
        assert result.exit_code == 0
        assert "Wrote 12 B to swift://photos/hello.txt" in result.stdout
        assert container.content("hello.txt") == b"hello world\n"

        result = runner.invoke(app, ["cat", "swift://photos/hello.txt", *CREDS])
        assert result.exit_code == 0
        assert result.stdout == "hello world\n"

    def test_put_from_stdin(self, runner, container):
        """Test uploading stdin."""
        result = runner.invoke(app, ["put", "swift://photos/in.txt", *CREDS], input="piped")
        assert result.exit_code == 0
        assert container.content("in.txt") == b"piped"

    def test_put_append(self, runner, container):
        """Test append mode."""
        container.put("log", b"one\n")
        result = runner.invoke(app, ["put", "swift://photos/log", "--mode", "a", *CREDS], input="two\n")
        assert result.exit_code == 0
        assert container.content("log") == b"one\ntwo\n"

    def test_put_exclusive_conflict(self, runner, container):
        """Test x mode on an existing object exits with the conflict code."""
        container.put("a", b"x")
        result = runner.invoke(app, ["put", "swift://photos/a", "--mode", "x", *CREDS], input="new")
        assert result.exit_code == 5
        assert container.content("a") == b"x"

    def test_stat(self, runner, storage):
        """Test stat output."""
        storage.container("www").put("index.html", b"<html></html>")
        result = runner.invoke(app, ["stat", "swift://www/index.html", *CREDS])
        assert result.exit_code == 0
        assert "File: swift://www/index.html" in result.stdout
        assert "Size: 13 B (13 bytes)" in result.stdout
        assert "Mode: 0o100775 (-rwxrwxr-x)" in result.stdout

    def test_stat_missing(self, runner):
        """Test stat of a missing object exits with the not-found code."""
        result = runner.invoke(app, ["stat", "swift://photos/missing", *CREDS])
        assert result.exit_code == 1

    def test_rm(self, runner, container):
        """Test deleting an object."""
        container.put("a", b"x")
        result = runner.invoke(app, ["rm", "swift://photos/a", *CREDS])
        assert result.exit_code == 0
        assert "Deleted swift://photos/a" in result.stdout
        assert "a" not in container

    def test_cat_missing(self, runner):
        """Test cat of a missing object."""
        result = runner.invoke(app, ["cat", "swift://photos/missing", *CREDS])
        assert result.exit_code == 1

    def test_missing_object_name(self, runner, fake_factory):
        """Test an incomplete locator exits with the usage code."""
        result = runner.invoke(app, ["rm", "swift://photos", *CREDS])
        assert result.exit_code == 2
        assert fake_factory.calls == 0

    def test_no_credentials(self, runner):
        """Test commands without any credentials."""
        result = runner.invoke(app, ["cat", "swift://photos/a"])
        assert result.exit_code == 4

    def test_credentials_from_environment(self, runner, container, monkeypatch, fake_factory):
        """Test credentials are read from the environment when no options are given."""
        monkeypatch.setenv("SWIFT_TOKEN", "env-token")
        monkeypatch.setenv("SWIFT_STORAGE_URL", "https://env.example.com/v1/AUTH_env")
        container.put("a", b"env")

        result = runner.invoke(app, ["cat", "swift://photos/a"])
        assert result.exit_code == 0
        assert result.stdout == "env"
        assert fake_factory.token_calls == [("env-token", "https://env.example.com/v1/AUTH_env")]

    def test_help(self, runner):
        """Test every command is registered."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("cat", "put", "stat", "rm"):
            assert command in result.stdout

    def test_invalid_locator_encoding(self, runner, fake_factory):
        """Test a locator with undecodable escapes exits with the usage code."""
        result = runner.invoke(app, ["stat", "swift://photos/%FFa", *CREDS])
        assert result.exit_code == 2
        assert fake_factory.calls == 0
