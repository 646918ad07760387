"""
Railway-Oriented Programming (ROP) toolkit.

Explicit, composable error handling — fallible steps return Result[T]
instead of raising.

    from railway import Result, ErrorCode

    def require_mapping(node: object) -> Result[dict]:
        if not isinstance(node, dict):
            return Result.failure(ErrorCode.VALIDATION_ERROR, "Expected a mapping")
        return Result.success(node)

    result = (
        Result.success({"certChain": {"certificates": []}})
        .flat_map(require_mapping)
        .map(lambda node: node["certChain"])
    )
"""

from railway.result import Result, Success, Failure
from railway.failure import ErrorCode, FailureDescription
from railway.execution import (
    ExecutionContext,
    NoOpExecutionContext,
    LoggingExecutionContext,
)
from railway.result_failures import ResultFailures
from railway.assertions import ResultAssertions

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ExecutionContext",
    "NoOpExecutionContext",
    "LoggingExecutionContext",
    "ResultFailures",
    "ResultAssertions",
]

__version__ = "1.1.0"
