"""
Video stage - read-only composition of prior outputs.

Lays the visual assets out on a timeline with a fixed slot per asset. Never
mutates the pipeline state.
"""

from typing import List

from nano_creator.models.pipeline import PipelineState, TimelineItem, VideoComposition


class VideoStage:
    def __init__(self, slot_seconds: float = 5.0):
        self.slot_seconds = slot_seconds

    def build_timeline(self, state: PipelineState) -> List[TimelineItem]:
        return [
            TimelineItem(
                id=f"clip_{i}_{asset.id}",
                asset=asset,
                start_time=i * self.slot_seconds,
                duration=self.slot_seconds,
            )
            for i, asset in enumerate(state.visual_assets)
        ]

    def compose(self, state: PipelineState) -> VideoComposition:
        return VideoComposition(
            script_text=state.script_text,
            audio_tracks=dict(state.audio_tracks),
            conversation_track=state.conversation_track,
            assets=list(state.visual_assets),
            timeline=self.build_timeline(state),
        )
