"""Typed access to nodes of an untyped JSON/YAML tree."""

from __future__ import annotations

from typing import Any, TypeVar

from railway import ErrorCode
from railway.result import Result

N = TypeVar("N")


def require_node(
    node: Any,
    expected: type[N],
    message: str,
    code: ErrorCode = ErrorCode.VALIDATION_ERROR,
) -> Result[N]:
    """Succeed with `node` when it is an instance of `expected`, fail with `message` otherwise."""
    if isinstance(node, expected):
        return Result.success(node)
    return Result.failure(code, message)
