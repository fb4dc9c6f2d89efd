"""Tests for exit codes and the exceptions that carry them."""

from __future__ import annotations

import pytest

from shadfocus_cli.exceptions import (
    AppError,
    GatewayError,
    InvalidInputError,
    LastProjectError,
    NotFoundError,
    TimerAlreadyActiveError,
)
from shadfocus_cli.utils.exit_codes import (
    ERROR_CONFLICT,
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NOT_FOUND,
    ERROR_STORAGE,
    SUCCESS,
    get_exit_code_description,
    get_exit_code_name,
)

ALL_CODES = [SUCCESS, ERROR_GENERAL, ERROR_INVALID_ARGS, ERROR_NOT_FOUND, ERROR_CONFLICT, ERROR_STORAGE]


class TestExitCodes:
    def test_codes_are_distinct(self):
        assert len(set(ALL_CODES)) == len(ALL_CODES)

    def test_success_is_zero(self):
        assert SUCCESS == 0

    @pytest.mark.parametrize("code", ALL_CODES)
    def test_every_code_has_name_and_description(self, code):
        assert not get_exit_code_name(code).startswith("UNKNOWN")
        assert get_exit_code_description(code) != "Unknown exit code"

    def test_unknown_code(self):
        assert get_exit_code_name(99) == "UNKNOWN(99)"
        assert get_exit_code_description(99) == "Unknown exit code"


class TestExceptionExitCodes:
    @pytest.mark.parametrize(
        ("exc_type", "code"),
        [
            (AppError, ERROR_GENERAL),
            (GatewayError, ERROR_STORAGE),
            (NotFoundError, ERROR_NOT_FOUND),
            (TimerAlreadyActiveError, ERROR_CONFLICT),
            (LastProjectError, ERROR_CONFLICT),
            (InvalidInputError, ERROR_INVALID_ARGS),
        ],
    )
    def test_default_exit_code(self, exc_type, code):
        error = exc_type("boom")
        assert isinstance(error, AppError)
        assert error.exit_code == code
        assert str(error) == "boom"

    def test_explicit_exit_code(self):
        assert GatewayError("boom", exit_code=ERROR_GENERAL).exit_code == ERROR_GENERAL
