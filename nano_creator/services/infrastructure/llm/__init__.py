"""LLM infrastructure - Gemini transport and remote error classification."""

from .errors import classify_remote_error, to_generation_error
from .gemini import GeminiClient, GenerationConfig

__all__ = ["classify_remote_error", "to_generation_error", "GeminiClient", "GenerationConfig"]
