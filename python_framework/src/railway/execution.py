"""
Execution contexts — separate WHAT (pure logic) from HOW (side effects).

A pipeline describes what should happen and returns Result[T]. An execution
context decides how it runs: with timing and logging, or with nothing at all
(tests). The two are never mixed inside the pipeline stages.

    result = LoggingExecutionContext(operation="TrustRootAssembly").execute(
        lambda: run_assembly(...)
    )
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol, TypeVar, runtime_checkable

from railway.failure import ErrorCode, FailureDescription
from railway.result import Failure, Result

T = TypeVar("T")
logger = logging.getLogger("railway.execution")


@runtime_checkable
class ExecutionContext(Protocol):
    """Anything with execute(computation) -> Result is an execution context."""

    def execute(self, computation: Callable[[], Result[T]]) -> Result[T]:
        ...


class NoOpExecutionContext:
    """
    Passthrough execution context — runs computation without any wrapper.

    Intended for unit tests and for callers that want no instrumentation.
    """

    def execute(self, computation: Callable[[], Result[T]]) -> Result[T]:
        return computation()


class LoggingExecutionContext:
    """
    Execution context that logs entry, exit, duration, and result state.

    Wraps another context (decorator pattern). An exception escaping the
    computation is logged and returned as an UNKNOWN_ERROR failure.

        ctx = LoggingExecutionContext(operation="TrustRootAssembly")
    """

    def __init__(
        self,
        inner: ExecutionContext | None = None,
        operation: str = "unknown",
        log_level: int = logging.INFO,
    ) -> None:
        self._inner = inner or NoOpExecutionContext()
        self._operation = operation
        self._log_level = log_level

    def execute(self, computation: Callable[[], Result[T]]) -> Result[T]:
        logger.log(self._log_level, "[%s] Starting execution", self._operation)
        start = time.monotonic()

        try:
            result = self._inner.execute(computation)
        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "[%s] Execution failed after %.3fs: %s",
                self._operation,
                elapsed,
                e,
            )
            return Failure(
                FailureDescription(
                    ErrorCode.UNKNOWN_ERROR,
                    f"Execution failed: {e}",
                    e,
                )
            )

        elapsed = time.monotonic() - start
        state = "SUCCESS" if result.is_success() else "FAILURE"
        logger.log(
            self._log_level,
            "[%s] Completed in %.3fs — %s",
            self._operation,
            elapsed,
            state,
        )
        return result
