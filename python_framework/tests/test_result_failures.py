"""Tests for ResultFailures exception mapping."""

import binascii
import json

import pytest

from railway import ErrorCode, ResultFailures


class TestFromException:
    @pytest.mark.parametrize(
        ("exception", "code"),
        [
            (FileNotFoundError("nope"), ErrorCode.NOT_FOUND),
            (binascii.Error("Incorrect padding"), ErrorCode.DECODE_ERROR),
            (json.JSONDecodeError("Expecting value", "", 0), ErrorCode.PARSE_ERROR),
            (UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"), ErrorCode.PARSE_ERROR),
            (KeyError("rawBytes"), ErrorCode.VALIDATION_ERROR),
            (TypeError("not a mapping"), ErrorCode.VALIDATION_ERROR),
            (PermissionError("denied"), ErrorCode.IO_ERROR),
            (IsADirectoryError("dir"), ErrorCode.IO_ERROR),
            (RuntimeError("?"), ErrorCode.UNKNOWN_ERROR),
        ],
    )
    def test_maps_exception_types(self, exception, code):
        result = ResultFailures.from_exception("failed", exception)
        assert result.error().code == code
        assert result.error().message == "failed"
        assert result.error().exception is exception
