"""
Configuration package

Re-exports settings, model/retry profiles, constants and prompts.
"""

from .settings import StudioConfig, parse_bool_env, DEFAULT_STORAGE_DIR
from .models import (
    ModelConfig,
    TEXT_MODEL,
    TTS_MODEL,
    IMAGE_MODEL,
    DEFAULT_RETRY_POLICIES,
    NO_RETRY,
    get_model_config,
)
from .constants import (
    AUTOSAVE_KEY,
    PERSONAS,
    SANITIZE_SUBSTITUTIONS,
    KEYWORD_COUNT,
    PLACEHOLDER_CARD_IMAGE_URL,
    LANDSCAPE_ASPECT_RATIO,
    PORTRAIT_ASPECT_RATIO,
    TTS_SAMPLE_RATE,
    TTS_CHANNELS,
    TTS_BITS_PER_SAMPLE,
    CARD_NEWS_TRUNCATION_MARKER,
)

__all__ = [
    "StudioConfig",
    "parse_bool_env",
    "DEFAULT_STORAGE_DIR",
    "ModelConfig",
    "TEXT_MODEL",
    "TTS_MODEL",
    "IMAGE_MODEL",
    "DEFAULT_RETRY_POLICIES",
    "NO_RETRY",
    "get_model_config",
    "AUTOSAVE_KEY",
    "PERSONAS",
    "SANITIZE_SUBSTITUTIONS",
    "KEYWORD_COUNT",
    "PLACEHOLDER_CARD_IMAGE_URL",
    "LANDSCAPE_ASPECT_RATIO",
    "PORTRAIT_ASPECT_RATIO",
    "TTS_SAMPLE_RATE",
    "TTS_CHANNELS",
    "TTS_BITS_PER_SAMPLE",
    "CARD_NEWS_TRUNCATION_MARKER",
]
