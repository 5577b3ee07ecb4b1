"""
Batch / partial-failure aggregator

Runs one async call per input in fixed-size windows. Calls inside a window
run concurrently; the next window starts only after every call of the
current window has settled. Every input yields exactly one outcome and a
failing item never aborts the batch. Retries are the caller's business.
"""

import asyncio
from dataclasses import dataclass
from typing import (
    Awaitable,
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

from nano_creator.core.logging import get_logger

logger = get_logger(__name__, component="batch")

I = TypeVar("I")
O = TypeVar("O")


@dataclass(frozen=True)
class Success(Generic[I, O]):
    index: int
    input: I
    value: O

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure(Generic[I]):
    index: int
    input: I
    error: Exception

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Success, Failure]


class BatchResult(Generic[I, O]):
    """Outcomes in input order, one per input."""

    def __init__(self, outcomes: List[Outcome]):
        self.outcomes = outcomes

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self) -> Iterator[Outcome]:
        return iter(self.outcomes)

    def __getitem__(self, index: int) -> Outcome:
        return self.outcomes[index]

    @property
    def successes(self) -> List[Success]:
        return [o for o in self.outcomes if isinstance(o, Success)]

    @property
    def failures(self) -> List[Failure]:
        return [o for o in self.outcomes if isinstance(o, Failure)]

    @property
    def success_count(self) -> int:
        return len(self.successes)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def values(self) -> List[O]:
        return [o.value for o in self.successes]

    def __repr__(self) -> str:
        return f"BatchResult(successes={self.success_count}, failures={self.failure_count})"


def _notify_settled(
    callback: Optional[Callable[[Outcome], None]],
    outcome: Outcome,
    label: str,
) -> None:
    """A raising callback is logged; the batch carries on."""
    if callback is None:
        return
    try:
        callback(outcome)
    except Exception:
        logger.exception(f"{label}: settlement callback failed for item {outcome.index}")


async def run_batch(
    inputs: Sequence[I],
    fn: Callable[[I], Awaitable[O]],
    *,
    window_size: int = 3,
    on_item_settled: Optional[Callable[[Outcome], None]] = None,
    pause_between_windows: float = 0.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    label: str = "batch",
) -> BatchResult[I, O]:
    """Apply ``fn`` to every input, window by window.

    Args:
        inputs: Items to process
        fn: Async call producing the value for one item
        window_size: Maximum number of calls in flight at once
        on_item_settled: Called once per item in settlement order; exceptions it
            raises are logged and do not stop the batch
        pause_between_windows: Seconds to wait between consecutive windows
        sleep: Awaitable sleep used for the pause; injectable for tests
        label: Name used in logs

    Returns:
        BatchResult with one outcome per input, in input order
    """
    if window_size < 1:
        raise ValueError("window_size must be at least 1")

    outcomes: List[Optional[Outcome]] = [None] * len(inputs)

    for start in range(0, len(inputs), window_size):
        if start and pause_between_windows > 0:
            await sleep(pause_between_windows)

        window = range(start, min(start + window_size, len(inputs)))
        logger.debug(f"{label}: window {start // window_size + 1} with {len(window)} items")

        # Done callbacks fire in completion order; the queue keeps that order
        settled: "asyncio.Queue[asyncio.Future]" = asyncio.Queue()
        indexes: Dict["asyncio.Future", int] = {}
        for index in window:
            task = asyncio.ensure_future(fn(inputs[index]))
            task.add_done_callback(settled.put_nowait)
            indexes[task] = index

        for _ in window:
            task = await settled.get()
            index = indexes[task]
            try:
                outcome: Outcome = Success(index, inputs[index], task.result())
            except Exception as e:
                logger.warning(f"{label}: item {index} failed: {e}")
                outcome = Failure(index, inputs[index], e)
            outcomes[index] = outcome
            _notify_settled(on_item_settled, outcome, label)

    result = BatchResult(list(outcomes))
    logger.info(
        f"{label}: {result.success_count} succeeded, {result.failure_count} failed",
        extra={"total": len(result)},
    )
    return result


__all__ = ["Success", "Failure", "Outcome", "BatchResult", "run_batch"]
