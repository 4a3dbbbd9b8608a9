"""
Test error taxonomy and CLI exit code mapping.

Validates the error kind discriminants and that run_and_exit maps each
kind to its exit code.
"""
from __future__ import annotations

import pytest
import typer

from seaweed_blobs.errors import (
    ConfigError,
    DecodeError,
    ErrorKind,
    NotFound,
    RequestError,
    SeaweedError,
)
from seaweed_blobs.operations.mappers import EXIT_CODES, exit_code_for, run_and_exit


class TestErrorKinds:
    """Test each error carries its discriminant."""
    
    @pytest.mark.parametrize("cls, kind", [
        (ConfigError, ErrorKind.CONFIG),
        (DecodeError, ErrorKind.DECODE),
        (NotFound, ErrorKind.NOT_FOUND),
        (RequestError, ErrorKind.REQUEST),
    ])
    def test_kind(self, cls, kind):
        err = cls("boom")
        assert isinstance(err, SeaweedError)
        assert err.kind is kind
    
    def test_request_error_carries_response_details(self):
        err = RequestError("bad", status_code=500, headers={"X-Test": "1"})
        assert err.status_code == 500
        assert err.headers == {"X-Test": "1"}
    
    def test_request_error_defaults(self):
        err = RequestError("bad")
        assert err.status_code is None
        assert err.headers is None
    
    def test_kind_values(self):
        assert {k.value for k in ErrorKind} == {"config", "decode", "not_found", "request"}


class TestExitCodeMapping:
    """Test exception to exit code mapping."""
    
    def test_known_errors_mapped_correctly(self):
        assert exit_code_for(NotFound("x")) == 1
        assert exit_code_for(DecodeError("x")) == 2
        assert exit_code_for(RequestError("x")) == 3
        assert exit_code_for(ConfigError("x")) == 4
    
    def test_standard_exceptions(self):
        """Test that standard Python exceptions map sensibly."""
        assert exit_code_for(ValueError("test")) == 2
        assert exit_code_for(RuntimeError("test")) == 3
        assert exit_code_for(FileNotFoundError("test")) == 3
    
    def test_exit_code_completeness(self):
        """Test that every error kind is mapped."""
        assert set(EXIT_CODES) == set(ErrorKind)


class TestRunAndExit:
    """Test run_and_exit wrapper functionality."""
    
    def test_successful_function_returns_result(self):
        assert run_and_exit(lambda: "success result") == "success result"
    
    def test_error_raises_typer_exit(self):
        def failing_func():
            raise NotFound("gone")
        
        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(failing_func)
        
        assert exc_info.value.exit_code == 1
        assert isinstance(exc_info.value.__cause__, NotFound)
    
    def test_unknown_error_uses_fallback(self):
        def failing_func():
            raise RuntimeError("unexpected")
        
        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(failing_func)
        
        assert exc_info.value.exit_code == 3
