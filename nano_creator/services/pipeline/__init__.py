"""
Pipeline stages: Planning -> Scripting -> Visuals -> Video -> Expansion / CardNews.

Stages compute results; only the session controller applies them to the
pipeline state.
"""

from .planning import PlanningStage
from .scripting import ScriptingStage
from .visuals import VisualsStage, VisualsResult, GeneratedImage, prompt_entries
from .video import VideoStage
from .card_news import CardNewsStage

__all__ = [
    "PlanningStage",
    "ScriptingStage",
    "VisualsStage",
    "VisualsResult",
    "GeneratedImage",
    "prompt_entries",
    "VideoStage",
    "CardNewsStage",
]
