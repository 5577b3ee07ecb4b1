"""
Pipeline state models

The top-level mutable aggregate of one project's progress plus the value
types it holds. Only the session controller mutates a PipelineState.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from .generation import ResearchSource


@dataclass(frozen=True)
class Handle:
    """Opaque transient reference to binary content; must be released once."""
    id: str
    uri: str
    mime_type: str
    size: int = 0


class AssetKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class AudioTrack:
    handle: Handle
    duration: Optional[float] = None  # None: duration not measured


@dataclass(frozen=True)
class VisualAsset:
    id: str
    kind: AssetKind
    handle: Handle
    prompt: str
    keyword: str = ""


@dataclass(frozen=True)
class TimelineItem:
    id: str
    asset: VisualAsset
    start_time: float
    duration: float


@dataclass(frozen=True)
class StateSnapshot:
    """The persisted subset of PipelineState."""
    research_text: str
    script_text: str
    keywords: List[str]


@dataclass
class PipelineState:
    research_text: str = ""
    research_sources: List[ResearchSource] = field(default_factory=list)
    script_text: str = ""
    keywords: List[str] = field(default_factory=list)
    audio_tracks: Dict[str, AudioTrack] = field(default_factory=dict)
    conversation_track: Optional[AudioTrack] = None
    visual_assets: List[VisualAsset] = field(default_factory=list)
    last_persisted_at: Optional[datetime] = None
    # Set once any non-empty research text has been held
    research_seen: bool = False

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            research_text=self.research_text,
            script_text=self.script_text,
            keywords=list(self.keywords),
        )

    def held_handles(self) -> List[Handle]:
        """Every handle currently owned by this state, each listed once."""
        handles: List[Handle] = [track.handle for track in self.audio_tracks.values()]
        if self.conversation_track is not None:
            handles.append(self.conversation_track.handle)
        handles.extend(asset.handle for asset in self.visual_assets)
        return handles

    def is_empty(self) -> bool:
        return not (
            self.research_text
            or self.script_text
            or self.keywords
            or self.audio_tracks
            or self.conversation_track
            or self.visual_assets
        )


@dataclass(frozen=True)
class VideoComposition:
    """Read-only view of prior outputs assembled for the Video stage."""
    script_text: str
    audio_tracks: Dict[str, AudioTrack]
    conversation_track: Optional[AudioTrack]
    assets: List[VisualAsset]
    timeline: List[TimelineItem]

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_tracks) or self.conversation_track is not None

    @property
    def total_duration(self) -> float:
        if not self.timeline:
            return 0.0
        last = self.timeline[-1]
        return last.start_time + last.duration


__all__ = [
    "Handle",
    "AssetKind",
    "AudioTrack",
    "VisualAsset",
    "TimelineItem",
    "StateSnapshot",
    "PipelineState",
    "VideoComposition",
]
