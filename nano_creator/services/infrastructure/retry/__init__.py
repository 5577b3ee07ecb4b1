"""Timeout, retry and backoff around remote operations."""

from .executor import (
    backoff_delay,
    is_retryable,
    RetryState,
    execute_with_retry,
    RetryExecutor,
)

__all__ = [
    "backoff_delay",
    "is_retryable",
    "RetryState",
    "execute_with_retry",
    "RetryExecutor",
]
