"""
Model Configuration for Generation Operations

Each remote operation has its own model and its own timeout / retry / backoff
profile. The policies below are the defaults copied into every StudioConfig;
a config may override any of them.

=== RETRY PROFILES ===

    Operation            retries  timeout  backoff base
    research                2       90s       1s
    script generation       0        -         -
    script optimization     2      300s       3s
    single-speaker speech   3      360s       3s
    multi-speaker speech    3      480s       5s
    image generation        3       60s       2s
    keyword extraction      0        -         -
    image prompts           0        -         -
    card news               2       60s       3s
"""

from dataclasses import dataclass
from typing import Dict

from nano_creator.models.generation import RetryPolicy
from nano_creator.models.status import OperationKind


@dataclass(frozen=True)
class ModelConfig:
    """Configuration for a single model"""
    model_name: str
    description: str = ""


TEXT_MODEL = ModelConfig(
    model_name="gemini-2.5-pro",
    description="Research, script writing and structured extraction",
)

TTS_MODEL = ModelConfig(
    model_name="gemini-2.5-flash-preview-tts",
    description="Single and multi-speaker speech (Flash is more stable than Pro for TTS)",
)

IMAGE_MODEL = ModelConfig(
    model_name="gemini-2.5-flash-image",
    description="B-roll and card-news images",
)

OPERATION_MODELS: Dict[OperationKind, ModelConfig] = {
    OperationKind.RESEARCH: TEXT_MODEL,
    OperationKind.SCRIPT_GEN: TEXT_MODEL,
    OperationKind.SCRIPT_OPTIMIZE: TEXT_MODEL,
    OperationKind.SPEECH_SINGLE: TTS_MODEL,
    OperationKind.SPEECH_MULTI: TTS_MODEL,
    OperationKind.IMAGE_GEN: IMAGE_MODEL,
    OperationKind.KEYWORD_EXTRACT: TEXT_MODEL,
    OperationKind.IMAGE_PROMPTS: TEXT_MODEL,
    OperationKind.CARD_NEWS_GEN: TEXT_MODEL,
}

# Backoff base used when an operation does not specify one
DEFAULT_BACKOFF_BASE = 1.0

# Operations without retries make a single attempt with no timeout race
NO_RETRY = RetryPolicy(max_retries=0, timeout=None, backoff_base=0.0)

DEFAULT_RETRY_POLICIES: Dict[OperationKind, RetryPolicy] = {
    OperationKind.RESEARCH: RetryPolicy(max_retries=2, timeout=90.0, backoff_base=DEFAULT_BACKOFF_BASE),
    OperationKind.SCRIPT_GEN: NO_RETRY,
    OperationKind.SCRIPT_OPTIMIZE: RetryPolicy(max_retries=2, timeout=300.0, backoff_base=3.0),
    OperationKind.SPEECH_SINGLE: RetryPolicy(max_retries=3, timeout=360.0, backoff_base=3.0),
    OperationKind.SPEECH_MULTI: RetryPolicy(max_retries=3, timeout=480.0, backoff_base=5.0),
    OperationKind.IMAGE_GEN: RetryPolicy(max_retries=3, timeout=60.0, backoff_base=2.0),
    OperationKind.KEYWORD_EXTRACT: NO_RETRY,
    OperationKind.IMAGE_PROMPTS: NO_RETRY,
    OperationKind.CARD_NEWS_GEN: RetryPolicy(max_retries=2, timeout=60.0, backoff_base=3.0),
}


def get_model_config(kind: OperationKind) -> ModelConfig:
    return OPERATION_MODELS[kind]


__all__ = [
    "ModelConfig",
    "TEXT_MODEL",
    "TTS_MODEL",
    "IMAGE_MODEL",
    "OPERATION_MODELS",
    "DEFAULT_BACKOFF_BASE",
    "NO_RETRY",
    "DEFAULT_RETRY_POLICIES",
    "get_model_config",
]
