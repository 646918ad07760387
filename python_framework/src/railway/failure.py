"""
Failure description — structured error information for the failure track.

An ErrorCode classifies what went wrong; a FailureDescription carries the
code, a human-readable message, the originating exception (if any) and the
moment the failure was recorded.

Severity is NOT encoded here. Whether a failure aborts a run or only skips
one unit of work is decided by the caller that observes it.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """
    Structured error codes for the failure track.

    Grouped by origin:
    - Document shape: VALIDATION_ERROR, NOT_FOUND
    - Encoding: DECODE_ERROR, CERTIFICATE_ERROR, PARSE_ERROR
    - Environment: IO_ERROR, CONFIGURATION_ERROR, UNKNOWN_ERROR
    """

    # --- Document shape ---
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Wrong type, missing field or otherwise malformed structure."""

    NOT_FOUND = "NOT_FOUND"
    """A file, section or key that should exist does not."""

    # --- Encoding ---
    DECODE_ERROR = "DECODE_ERROR"
    """Text could not be decoded (invalid base64 alphabet or padding)."""

    CERTIFICATE_ERROR = "CERTIFICATE_ERROR"
    """Bytes are not a structurally valid X.509 certificate."""

    PARSE_ERROR = "PARSE_ERROR"
    """Document syntax error (JSON, YAML)."""

    # --- Environment ---
    IO_ERROR = "IO_ERROR"
    """File could not be read, written or created."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Invalid or missing settings."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    """Unexpected/unclassified failures."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception, and timestamp.

    >>> desc = FailureDescription(ErrorCode.DECODE_ERROR, "Incorrect padding")
    >>> desc.code
    <ErrorCode.DECODE_ERROR: 'DECODE_ERROR'>
    >>> desc.message
    'Incorrect padding'
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @staticmethod
    def create(
        code: ErrorCode,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> FailureDescription:
        return FailureDescription(code=code, message=message, exception=exception)

    def detail(self) -> str:
        """Message followed by the exception text, when there is one."""
        if self.exception is None:
            return self.message
        return f"{self.message}: {self.exception}"

    def full_stack_trace(self) -> str:
        """Message followed by the formatted exception chain (if any)."""
        if self.exception is None:
            return self.message
        tb = "".join(traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__))
        return f"{self.message}\n{tb}"

    def __str__(self) -> str:
        return f"{self.code.value}: {self.detail()}"
