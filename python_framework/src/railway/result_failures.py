"""
Exception mapping for the failure track.

Adapters that catch library exceptions turn them into failures here, so
the ErrorCode follows from the exception type:

    try:
        return Result.success(path.read_bytes())
    except OSError as e:
        return ResultFailures.from_exception(f"Error opening {path}", e)
"""

from __future__ import annotations

import binascii

from railway.failure import ErrorCode
from railway.result import Result


class ResultFailures:
    """Build failures from caught exceptions."""

    @staticmethod
    def from_exception(message: str, exception: BaseException) -> Result:
        """
        Auto-map a Python exception to the appropriate ErrorCode.

        Mapping:
          - FileNotFoundError                     → NOT_FOUND
          - binascii.Error                        → DECODE_ERROR
          - UnicodeDecodeError, other ValueError  → PARSE_ERROR
          - TypeError, KeyError                   → VALIDATION_ERROR
          - OSError (incl. PermissionError)       → IO_ERROR
          - Everything else                       → UNKNOWN_ERROR
        """
        code = _map_exception_to_code(exception)
        return Result.failure(code, message, exception)


def _map_exception_to_code(exception: BaseException) -> ErrorCode:
    """Map a Python exception type to the most appropriate ErrorCode."""
    match exception:
        case FileNotFoundError():
            return ErrorCode.NOT_FOUND
        case binascii.Error():
            return ErrorCode.DECODE_ERROR
        case ValueError():
            return ErrorCode.PARSE_ERROR
        case TypeError() | KeyError():
            return ErrorCode.VALIDATION_ERROR
        case OSError():
            return ErrorCode.IO_ERROR
        case _:
            return ErrorCode.UNKNOWN_ERROR
