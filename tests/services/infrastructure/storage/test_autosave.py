"""Tests for debounced autosave"""

import pytest

from nano_creator.models import StateSnapshot
from nano_creator.services.infrastructure.storage import AutoSaver, Debouncer, JsonFileSessionStore


def _snapshot(research="R", script="", keywords=()):
    return StateSnapshot(research_text=research, script_text=script, keywords=list(keywords))


@pytest.fixture
def slot(tmp_path):
    return JsonFileSessionStore(tmp_path / "store", "autosave")


class TestDebouncer:
    def test_fires_once_after_quiet_period(self, scheduler):
        fired = []
        debouncer = Debouncer(2.0, lambda: fired.append(scheduler.now), scheduler)
        start = scheduler.now

        debouncer.trigger()
        scheduler.advance(1.0)
        debouncer.trigger()
        scheduler.advance(1.5)
        assert fired == []

        scheduler.advance(0.5)
        assert fired == [start + 3.0]
        assert not debouncer.pending

    def test_flush_runs_pending_now(self, scheduler):
        fired = []
        debouncer = Debouncer(5.0, lambda: fired.append(True), scheduler)
        debouncer.trigger()
        assert debouncer.flush() is True
        assert fired == [True]
        assert scheduler.pending == 0
        assert debouncer.flush() is False

    def test_cancel(self, scheduler):
        fired = []
        debouncer = Debouncer(5.0, lambda: fired.append(True), scheduler)
        debouncer.trigger()
        debouncer.cancel()
        scheduler.advance(10.0)
        assert fired == []


class TestAutoSaver:
    def test_burst_of_mutations_writes_once(self, slot, scheduler):
        saver = AutoSaver(slot, delay=10.0, clock=scheduler.clock_ms, scheduler=scheduler)
        start = scheduler.now

        for i in range(5):
            saver.schedule(_snapshot(research=f"R{i}"))
            scheduler.advance(0.25)
        last_mutation = start + 1.0

        scheduler.advance(9.0)
        assert saver.write_count == 0
        assert slot.read() is None

        scheduler.advance(2.0)
        assert saver.write_count == 1
        saved = slot.read()
        assert saved.research_text == "R4"
        assert saved.timestamp == int((last_mutation + 10.0) * 1000)

    def test_on_saved_receives_save_time(self, slot, scheduler):
        saved_at = []
        saver = AutoSaver(slot, delay=1.0, clock=scheduler.clock_ms, scheduler=scheduler, on_saved=saved_at.append)
        saver.schedule(_snapshot(keywords=["a"]))
        scheduler.advance(1.0)
        assert len(saved_at) == 1
        assert saved_at[0].timestamp() == pytest.approx(scheduler.now, abs=0.001)

    def test_flush_writes_immediately(self, slot, scheduler):
        saver = AutoSaver(slot, delay=10.0, clock=scheduler.clock_ms, scheduler=scheduler)
        saver.schedule(_snapshot(script="S"))
        assert saver.flush() is True
        assert slot.read().script_text == "S"
        scheduler.advance(20.0)
        assert saver.write_count == 1

    def test_cancel_drops_pending_write(self, slot, scheduler):
        saver = AutoSaver(slot, delay=10.0, clock=scheduler.clock_ms, scheduler=scheduler)
        saver.schedule(_snapshot())
        saver.cancel()
        scheduler.advance(20.0)
        assert saver.write_count == 0
        assert slot.read() is None

    def test_write_failure_is_logged_not_raised(self, tmp_path, scheduler, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        saver = AutoSaver(JsonFileSessionStore(blocker, "slot"), delay=1.0, clock=scheduler.clock_ms,
                          scheduler=scheduler)
        saver.schedule(_snapshot())
        scheduler.advance(1.0)
        assert saver.write_count == 0
        assert any("Auto-save failed" in r.getMessage() for r in caplog.records)
