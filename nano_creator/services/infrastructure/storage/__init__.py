"""Storage - transient handles, the session slot and debounced autosave."""

from .handles import HandleStore, TempFileHandleStore
from .session_store import JsonFileSessionStore
from .autosave import Scheduler, LoopScheduler, Debouncer, AutoSaver

__all__ = [
    "HandleStore",
    "TempFileHandleStore",
    "JsonFileSessionStore",
    "Scheduler",
    "LoopScheduler",
    "Debouncer",
    "AutoSaver",
]
