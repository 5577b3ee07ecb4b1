"""Data models shared across the studio."""

from .status import Stage, STAGE_LABELS, OperationKind
from .persona import Persona
from .generation import (
    RetryPolicy,
    GenerationTask,
    ResearchRequest,
    ResearchSource,
    ResearchResult,
    CardNews,
    CardNewsPayload,
    GeneratedCard,
)
from .pipeline import (
    Handle,
    AssetKind,
    AudioTrack,
    VisualAsset,
    TimelineItem,
    StateSnapshot,
    PipelineState,
    VideoComposition,
)
from .session import SavedSession

__all__ = [
    "Stage",
    "STAGE_LABELS",
    "OperationKind",
    "Persona",
    "RetryPolicy",
    "GenerationTask",
    "ResearchRequest",
    "ResearchSource",
    "ResearchResult",
    "CardNews",
    "CardNewsPayload",
    "GeneratedCard",
    "Handle",
    "AssetKind",
    "AudioTrack",
    "VisualAsset",
    "TimelineItem",
    "StateSnapshot",
    "PipelineState",
    "VideoComposition",
    "SavedSession",
]
