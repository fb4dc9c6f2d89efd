"""Exception hierarchy for ShadFocus CLI."""

from __future__ import annotations

from shadfocus_cli.utils import exit_codes


class AppError(Exception):
    """Custom application error with exit code."""

    exit_code = exit_codes.ERROR_GENERAL

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class GatewayError(AppError):
    """A persistence gateway read or write failed."""

    exit_code = exit_codes.ERROR_STORAGE


class NotFoundError(AppError):
    """Requested project or session does not exist."""

    exit_code = exit_codes.ERROR_NOT_FOUND


class TimerAlreadyActiveError(AppError):
    """Start was requested while the user already has an active timer.

    Callers are expected to route to pause/resume instead, so this is a
    contract violation rather than something to recover from silently.
    """

    exit_code = exit_codes.ERROR_CONFLICT


class LastProjectError(AppError):
    """Deleting the project would leave the user without any project."""

    exit_code = exit_codes.ERROR_CONFLICT


class InvalidInputError(AppError):
    """User supplied values failed validation."""

    exit_code = exit_codes.ERROR_INVALID_ARGS
