from types import SimpleNamespace
from typing import Any, Callable, List, Optional

import pytest

from nano_creator.config.settings import StudioConfig
from nano_creator.core.logging import clear_context


# ---------------------------------------------------------------------------
# Fake transport and SDK-shaped responses
# ---------------------------------------------------------------------------

def text_response(text, sources=()):
    chunks = [SimpleNamespace(web=SimpleNamespace(uri=uri, title=title)) for uri, title in sources]
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=[SimpleNamespace(text=text, inline_data=None)]),
        grounding_metadata=SimpleNamespace(grounding_chunks=chunks),
    )
    return SimpleNamespace(text=text, candidates=[candidate])


def inline_response(*payloads, mime_type="audio/L16;rate=24000"):
    parts = [
        SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))
        for data in payloads
    ]
    candidate = SimpleNamespace(content=SimpleNamespace(parts=parts), grounding_metadata=None)
    return SimpleNamespace(text=None, candidates=[candidate])


class FakeTransport:
    """Stands in for GeminiClient. Replies come from a queue or a handler.

    A reply that is an exception instance is raised instead of returned.
    """

    def __init__(self, handler: Optional[Callable[..., Any]] = None):
        self.handler = handler
        self.queue: List[Any] = []
        self.calls: List[SimpleNamespace] = []

    def push(self, *replies: Any) -> "FakeTransport":
        self.queue.extend(replies)
        return self

    async def generate_content(self, model, contents, config=None):
        call = SimpleNamespace(model=model, contents=contents, config=config)
        self.calls.append(call)
        reply = self.handler(call) if self.handler is not None else self.queue.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class RecordingSleep:
    """Awaitable sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class _Timer:
    def __init__(self, when: float, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic ``call_later`` driven by ``advance``."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start
        self._timers: List[_Timer] = []

    def call_later(self, delay, callback):
        timer = _Timer(self.now + delay, callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def clock_ms(self) -> int:
        return int(self.now * 1000)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self._timers if not t.cancelled and t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self._timers.remove(timer)
            self.now = timer.when
            timer.callback()
        self.now = target


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep real credentials and log context out of tests."""
    for name in ("GEMINI_API_KEY", "API_KEY", "NANO_CREATOR_STORAGE_DIR", "NANO_CREATOR_OUTPUT_DIR",
                 "NANO_CREATOR_AUTOSAVE_SECONDS", "LOG_LEVEL", "LOG_JSON", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    yield
    clear_context()


@pytest.fixture
def studio_config(tmp_path):
    return StudioConfig(
        api_key="test-key",
        storage_dir=tmp_path / "store",
        output_dir=tmp_path / "out",
        persona_pause=1.0,
        conversation_pause=2.0,
    )


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def responses():
    return SimpleNamespace(text=text_response, inline=inline_response)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def transport_factory():
    return FakeTransport
