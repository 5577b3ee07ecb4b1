"""
Stage and operation enumerations.

Centralized definitions to replace magic strings throughout the codebase.
"""

from enum import Enum


class Stage(Enum):
    """Phases of the content pipeline, in workflow order."""

    PLANNING = "Planning"
    SCRIPTING = "Scripting"
    VISUALS = "Visuals"
    VIDEO = "Video"
    EXPANSION = "Expansion"
    CARD_NEWS = "CardNews"

    @property
    def label(self) -> str:
        return STAGE_LABELS[self]

    def produces_state(self) -> bool:
        """Whether running this stage writes into the shared pipeline state."""
        return self in (Stage.PLANNING, Stage.SCRIPTING, Stage.VISUALS)


STAGE_LABELS = {
    Stage.PLANNING: "1. Planning & Analysis",
    Stage.SCRIPTING: "2. Script & Audio",
    Stage.VISUALS: "3. Visual Generation",
    Stage.VIDEO: "4. Video Production",
    Stage.EXPANSION: "5. Expansion (Shorts)",
    Stage.CARD_NEWS: "6. Expansion (Card News)",
}


class OperationKind(Enum):
    """Kinds of remote generation operations."""

    RESEARCH = "research"
    SCRIPT_GEN = "script_generation"
    SCRIPT_OPTIMIZE = "script_optimization"
    SPEECH_SINGLE = "speech_single"
    SPEECH_MULTI = "speech_multi"
    IMAGE_GEN = "image_generation"
    KEYWORD_EXTRACT = "keyword_extraction"
    IMAGE_PROMPTS = "image_prompts"
    CARD_NEWS_GEN = "card_news_generation"


__all__ = [
    "Stage",
    "STAGE_LABELS",
    "OperationKind",
]
