"""
Retry executor

Runs a remote operation under its RetryPolicy:

- every attempt races a timeout timer (``policy.timeout``; None disables it)
- a timed-out attempt is abandoned, not cancelled; its late outcome is dropped
- SERVER and TIMEOUT failures are retried up to ``max_retries`` times with
  exponential backoff ``backoff_base * 2 ** attempt_index``
- every other failure propagates immediately
- once retries are used up the last error is wrapped in ExhaustedError
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from nano_creator.core.exceptions import (
    AttemptTimeoutError,
    ExhaustedError,
    GenerationError,
)
from nano_creator.core.logging import get_logger, set_operation
from nano_creator.models.generation import GenerationTask, RetryPolicy
from nano_creator.services.infrastructure.llm.errors import to_generation_error

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
RetryCallback = Callable[[int, GenerationError], None]
Sleep = Callable[[float], Awaitable[None]]

logger = get_logger(__name__, component="retry_executor")


def backoff_delay(base: float, attempt_index: int) -> float:
    """Wait before the attempt following ``attempt_index`` (0-based)."""
    return base * (2 ** attempt_index)


def is_retryable(error: BaseException) -> bool:
    return isinstance(error, GenerationError) and error.retryable


@dataclass
class RetryState:
    """Mutable progress of one task; owned by a single execute call."""
    attempt: int = 0
    last_error: Optional[GenerationError] = None
    elapsed_backoff: float = 0.0


def _discard_late_outcome(task: "asyncio.Future") -> None:
    # Abandoned attempt finished after its timeout; nobody awaits it anymore
    if not task.cancelled():
        task.exception()


async def _run_attempt(operation: Operation, timeout: Optional[float]):
    if timeout is None:
        return await operation()

    task = asyncio.ensure_future(operation())
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout)
    except asyncio.TimeoutError:
        task.add_done_callback(_discard_late_outcome)
        raise AttemptTimeoutError(timeout) from None


async def execute_with_retry(
    operation: Operation,
    policy: RetryPolicy,
    *,
    on_retry: Optional[RetryCallback] = None,
    sleep: Sleep = asyncio.sleep,
    should_retry: Callable[[BaseException], bool] = is_retryable,
    label: str = "operation",
):
    """Invoke ``operation`` at most ``policy.max_retries + 1`` times.

    Args:
        operation: Zero-argument coroutine factory performing one attempt
        policy: Timeout / retry / backoff profile
        on_retry: Called with (next attempt number, error) before each backoff wait
        sleep: Awaitable sleep used for backoff; injectable for tests
        should_retry: Predicate deciding whether a failure is worth another attempt
        label: Operation name used in logs

    Returns:
        The first successful attempt's value

    Raises:
        GenerationError: the classified non-retryable error, or ExhaustedError
    """
    state = RetryState()
    total_attempts = policy.max_retries + 1

    while True:
        started = time.monotonic()
        try:
            result = await _run_attempt(operation, policy.timeout)
        except Exception as e:
            error = to_generation_error(e)
            state.last_error = error
            logger.warning(
                f"{label} attempt {state.attempt + 1}/{total_attempts} failed: {error.message}",
                extra={
                    "error_kind": error.kind.value,
                    "attempt": state.attempt + 1,
                    "duration_ms": round((time.monotonic() - started) * 1000, 2),
                },
            )

            if not should_retry(error):
                if error is e:
                    raise
                raise error from e

            if state.attempt >= policy.max_retries:
                logger.error(
                    f"{label} exhausted after {total_attempts} attempts",
                    extra={"error_kind": error.kind.value, "attempts": total_attempts},
                )
                raise ExhaustedError(error, total_attempts) from e

            delay = backoff_delay(policy.backoff_base, state.attempt)
            state.attempt += 1
            if on_retry is not None:
                on_retry(state.attempt, error)
            logger.info(f"{label} retrying in {delay:g}s (attempt {state.attempt + 1}/{total_attempts})")
            await sleep(delay)
            state.elapsed_backoff += delay
            continue

        if state.attempt:
            logger.info(f"{label} succeeded on attempt {state.attempt + 1}")
        return result


class RetryExecutor:
    """Runs GenerationTasks with an injected sleep function."""

    def __init__(self, sleep: Sleep = asyncio.sleep):
        self._sleep = sleep

    async def run(
        self,
        task: GenerationTask,
        operation: Operation,
        on_retry: Optional[RetryCallback] = None,
    ):
        set_operation(task.label)
        try:
            return await execute_with_retry(
                operation,
                task.policy,
                on_retry=on_retry,
                sleep=self._sleep,
                label=task.label,
            )
        finally:
            set_operation(None)


__all__ = [
    "backoff_delay",
    "is_retryable",
    "RetryState",
    "execute_with_retry",
    "RetryExecutor",
]
