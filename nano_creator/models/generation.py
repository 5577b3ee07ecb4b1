"""
Schemas for generation operations

Requests, validated response shapes and per-invocation task records.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .status import OperationKind


class RetryPolicy(BaseModel):
    """Timeout / retry / backoff profile of one operation kind.

    ``timeout`` and ``backoff_base`` are in seconds; ``timeout=None`` disables
    the timeout race.
    """
    max_retries: int = Field(default=3, ge=0)
    timeout: Optional[float] = Field(default=60.0, gt=0)
    backoff_base: float = Field(default=1.0, ge=0)


@dataclass(frozen=True)
class GenerationTask:
    """One remote operation instance. Immutable; discarded after resolution."""
    kind: OperationKind
    policy: RetryPolicy
    payload: str = ""  # short description of the input, for logs

    @property
    def label(self) -> str:
        return self.kind.value


class ResearchRequest(BaseModel):
    """Input of the Planning stage"""
    topic: str
    instructions: str = ""
    raw_data: str = ""
    analyze_news: bool = False


class ResearchSource(BaseModel):
    """A grounding source returned alongside research text"""
    uri: str = ""
    title: str = ""


class ResearchResult(BaseModel):
    text: str
    sources: List[ResearchSource] = Field(default_factory=list)


class CardNews(BaseModel):
    """A single card of the card-news story"""
    title: str
    content: str
    image_prompt: str


class CardNewsPayload(BaseModel):
    """Expected JSON shape of the card-news response"""
    cards: List[CardNews]


class GeneratedCard(BaseModel):
    """A card with its rendered image, or a placeholder when generation failed"""
    title: str
    content: str
    image_prompt: str
    image_data: Optional[bytes] = Field(default=None, exclude=True)
    image_url: Optional[str] = None
    generation_failed: bool = False

    def to_export(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


__all__ = [
    "RetryPolicy",
    "GenerationTask",
    "ResearchRequest",
    "ResearchSource",
    "ResearchResult",
    "CardNews",
    "CardNewsPayload",
    "GeneratedCard",
]
