"""
Constants configuration

Personas, substitution tables and fixed values used by the pipeline.
"""

from typing import List, Tuple

from nano_creator.models.persona import Persona

AUTOSAVE_KEY = "nano-creator-autosave"

PERSONAS: List[Persona] = [
    Persona(
        id="q",
        name="Q (Analyst)",
        description="Expert sports data analyst",
        voice_id="Puck",
        avatar="https://i.pravatar.cc/150?u=q_analyst",
    ),
    Persona(
        id="jiyoung",
        name="지영 (Host)",
        description="Engaging podcast host",
        voice_id="Achernar",
        avatar="https://i.pravatar.cc/150?u=jiyoung_host",
    ),
]

# Literal substitutions applied to every free-text input before it is sent.
# Betting vocabulary trips content-safety filters; neutral analytical terms
# carry the same meaning for the model. No replacement contains any target.
SANITIZE_SUBSTITUTIONS: List[Tuple[str, str]] = [
    ("핸디캡", "기준점"),
    ("언더오버", "총점"),
    ("언오버", "총점"),
    ("베팅", "분석"),
    ("에디터 픽", "주요 관전 포인트"),
    ("handicap", "baseline"),
    ("Handicap", "Baseline"),
    ("over/under", "total points"),
    ("Over/Under", "Total points"),
    ("betting", "analysis"),
    ("Betting", "Analysis"),
    ("editor's pick", "key viewing point"),
    ("Editor's pick", "Key viewing point"),
]

KEYWORD_COUNT = 10

# Image shown for a card whose image could not be generated
PLACEHOLDER_CARD_IMAGE_URL = "https://picsum.photos/seed/placeholder/360/640"

LANDSCAPE_ASPECT_RATIO = "16:9"
PORTRAIT_ASPECT_RATIO = "9:16"

# Gemini TTS returns 24 kHz, 16-bit, mono PCM
TTS_SAMPLE_RATE = 24000
TTS_CHANNELS = 1
TTS_BITS_PER_SAMPLE = 16

CARD_NEWS_TRUNCATION_MARKER = "\n\n[... script truncated ...]"

__all__ = [
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
