"""
Debounced autosave

Every mutation of research text, script text or keywords reschedules a
single pending write; the write happens once no mutation arrived for the
quiet period. Timers come from a scheduler exposing
``call_later(delay, callback) -> handle`` where ``handle.cancel()`` drops the
timer. The running asyncio loop satisfies that interface.
"""

import asyncio
import time
from datetime import datetime
from typing import Any, Callable, Optional, Protocol

from nano_creator.core.exceptions import PersistenceError
from nano_creator.core.logging import get_logger
from nano_creator.models.pipeline import StateSnapshot
from nano_creator.models.session import SavedSession

from .session_store import JsonFileSessionStore

logger = get_logger(__name__, component="autosave")


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class LoopScheduler:
    """Schedules on the running asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class Debouncer:
    """Runs ``callback`` once, ``delay`` seconds after the last ``trigger``."""

    def __init__(self, delay: float, callback: Callable[[], Any], scheduler: Optional[Scheduler] = None):
        self.delay = delay
        self._callback = callback
        self._scheduler = scheduler or LoopScheduler()
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._scheduler.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self._callback()

    def flush(self) -> bool:
        """Run the pending callback now. Returns whether one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class AutoSaver:
    """Keeps the latest snapshot and writes it after the quiet period."""

    def __init__(
        self,
        store: JsonFileSessionStore,
        delay: float = 10.0,
        clock: Callable[[], int] = _epoch_ms,
        scheduler: Optional[Scheduler] = None,
        on_saved: Optional[Callable[[datetime], None]] = None,
    ):
        self._store = store
        self._clock = clock
        self._on_saved = on_saved
        self._snapshot: Optional[StateSnapshot] = None
        self._debouncer = Debouncer(delay, self._save, scheduler)
        self.write_count = 0

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def schedule(self, snapshot: StateSnapshot) -> None:
        self._snapshot = snapshot
        self._debouncer.trigger()

    def flush(self) -> bool:
        return self._debouncer.flush()

    def cancel(self) -> None:
        self._debouncer.cancel()
        self._snapshot = None

    def _save(self) -> None:
        snapshot, self._snapshot = self._snapshot, None
        if snapshot is None:
            return
        timestamp = self._clock()
        record = SavedSession(
            research_text=snapshot.research_text,
            script_text=snapshot.script_text,
            keywords=list(snapshot.keywords),
            timestamp=timestamp,
        )
        try:
            self._store.write(record)
        except PersistenceError as e:
            # Timer callback context; log only
            logger.error(f"Auto-save failed: {e}")
            return
        self.write_count += 1
        saved_at = datetime.fromtimestamp(timestamp / 1000)
        logger.info(f"Auto-saved at {saved_at:%H:%M:%S}")
        if self._on_saved is not None:
            self._on_saved(saved_at)


__all__ = ["TimerHandle", "Scheduler", "LoopScheduler", "Debouncer", "AutoSaver"]
