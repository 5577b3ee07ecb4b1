"""
Session slot persistence

A single JSON file ``<key>.json`` holds the latest SavedSession. A missing
or unreadable slot reads as "nothing saved".
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from nano_creator.core.exceptions import PersistenceError
from nano_creator.core.logging import get_logger
from nano_creator.models.session import SavedSession

logger = get_logger(__name__, component="session_store")


class JsonFileSessionStore:
    def __init__(self, directory: Path, key: str):
        self._directory = Path(directory)
        self._key = key

    @property
    def path(self) -> Path:
        return self._directory / f"{self._key}.json"

    def read(self) -> Optional[SavedSession]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return SavedSession.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable saved session {self.path}: {e}")
            return None

    def write(self, record: SavedSession) -> None:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".json.tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(record.to_record(), f, indent=2, ensure_ascii=False)
            tmp_path.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Could not save session to {self.path}: {e}") from e

    def delete(self) -> bool:
        """Remove the slot. Returns whether a record existed."""
        try:
            if self.path.exists():
                self.path.unlink()
                return True
            return False
        except OSError as e:
            raise PersistenceError(f"Could not delete saved session {self.path}: {e}") from e


__all__ = ["JsonFileSessionStore"]
