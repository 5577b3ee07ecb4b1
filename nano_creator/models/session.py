"""
Persisted session record

Wire shape of the single autosave slot:
``{"researchText", "scriptText", "keywords", "timestamp"}`` where timestamp is
epoch milliseconds.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SavedSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    research_text: str = Field(default="", alias="researchText")
    script_text: str = Field(default="", alias="scriptText")
    keywords: List[str] = Field(default_factory=list)
    timestamp: int = 0

    def has_content(self) -> bool:
        return bool(self.research_text or self.script_text or self.keywords)

    def minutes_since(self, now_ms: int) -> int:
        """Whole minutes elapsed since the save, rounded down."""
        return max(0, (now_ms - self.timestamp) // 60000)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)
