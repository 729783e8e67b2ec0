"""Custom exception hierarchy."""

from __future__ import annotations

from typing import Sequence


class HwReportError(Exception):
    """Base exception for the hwreport package."""


class ValidationError(HwReportError):
    """Raised when configuration validation fails."""


class TreeDecodeError(ValidationError):
    """Raised when command output does not decode into the expected tree."""


class NotFoundError(HwReportError):
    """Raised when no line of a stream matches a filter pattern."""


class CommandError(HwReportError):
    """Raised when an external command fails to start or exits non-zero."""

    def __init__(self, args: Sequence[str], cause: BaseException | str) -> None:
        self.command = list(args)
        self.cause = cause
        super().__init__(f"{self.command!r} returned an error: {cause}")
