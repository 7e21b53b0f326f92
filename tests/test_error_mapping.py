"""
Test error mapping and CLI exit code functionality.

Validates that exceptions are correctly mapped to exit codes and that
the run_and_exit wrapper handles errors appropriately for CLI commands.
"""
from __future__ import annotations

import httpx
import pytest
import typer

from ocistore.operations.mappers import EXIT_CODES, exit_code_for, run_and_exit
from ocistore.storage.oci_errors import (
    OciAuthError,
    OciConfigError,
    OciError,
    OciManifestError,
    OciNotFound,
    OciProtocolError,
    UnsupportedOperation,
)


class TestExitCodeMapping:
    """Test exception to exit code mapping."""

    def test_known_exceptions_mapped_correctly(self):
        assert exit_code_for(OciNotFound("GET", "u", 404)) == 1
        assert exit_code_for(OciConfigError("bad")) == 2
        assert exit_code_for(ValueError("bad")) == 2
        assert exit_code_for(OciError("x")) == 3
        assert exit_code_for(UnsupportedOperation("x")) == 4

    def test_subclasses_inherit_parent_code(self):
        """Test that unmapped subclasses use their nearest mapped base."""
        assert exit_code_for(OciAuthError("GET", "u", 401)) == 3
        assert exit_code_for(OciProtocolError("x")) == 3
        assert exit_code_for(OciManifestError("x")) == 3

    def test_transport_errors(self):
        assert exit_code_for(httpx.ConnectError("refused")) == 3
        assert exit_code_for(httpx.ReadTimeout("slow")) == 3

    def test_unknown_exception_maps_to_fallback(self):
        assert exit_code_for(RuntimeError("test")) == 3
        assert exit_code_for(KeyError("test")) == 3

    def test_exit_code_constants(self):
        assert EXIT_CODES["OciNotFound"] == 1
        assert EXIT_CODES["UnsupportedOperation"] == 4


class TestRunAndExit:
    """Test run_and_exit wrapper functionality."""

    def test_successful_function_returns_result(self):
        assert run_and_exit(lambda: "success result") == "success result"

    def test_function_exception_raises_typer_exit(self):
        def failing_func():
            raise OciNotFound("GET", "http://r/v2/demo/manifests/x", 404, "Not Found")

        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(failing_func)

        assert exc_info.value.exit_code == 1

    def test_exception_chaining_preserved(self):
        original_error = ValueError("original error")

        def failing_func():
            raise original_error

        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(failing_func)

        assert exc_info.value.__cause__ is original_error
