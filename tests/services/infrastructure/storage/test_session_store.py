"""Tests for the JSON session slot"""

import json

import pytest

from nano_creator.core.exceptions import PersistenceError
from nano_creator.models import SavedSession
from nano_creator.services.infrastructure.storage import JsonFileSessionStore


@pytest.fixture
def slot(tmp_path):
    return JsonFileSessionStore(tmp_path / "store", "nano-creator-autosave")


def test_missing_slot_reads_none(slot):
    assert slot.read() is None


def test_write_uses_wire_shape(slot):
    slot.write(SavedSession(research_text="R", script_text="S", keywords=["k"], timestamp=1700000000000))
    assert slot.path.name == "nano-creator-autosave.json"
    assert json.loads(slot.path.read_text(encoding="utf-8")) == {
        "researchText": "R",
        "scriptText": "S",
        "keywords": ["k"],
        "timestamp": 1700000000000,
    }


def test_write_then_read(slot):
    slot.write(SavedSession(research_text="분석", timestamp=42))
    saved = slot.read()
    assert saved.research_text == "분석"
    assert saved.timestamp == 42


def test_write_replaces_previous_record(slot):
    slot.write(SavedSession(research_text="old", timestamp=1))
    slot.write(SavedSession(research_text="new", timestamp=2))
    assert slot.read().research_text == "new"
    assert not slot.path.with_suffix(".json.tmp").exists()


def test_corrupt_slot_reads_none(slot):
    slot.path.parent.mkdir(parents=True)
    slot.path.write_text("{broken", encoding="utf-8")
    assert slot.read() is None


def test_wrong_shape_reads_none(slot):
    slot.path.parent.mkdir(parents=True)
    slot.path.write_text('{"keywords": "not a list"}', encoding="utf-8")
    assert slot.read() is None


def test_delete(slot):
    assert slot.delete() is False
    slot.write(SavedSession(timestamp=1))
    assert slot.delete() is True
    assert slot.read() is None


def test_unwritable_directory_raises_persistence_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    with pytest.raises(PersistenceError):
        JsonFileSessionStore(blocker, "slot").write(SavedSession())
