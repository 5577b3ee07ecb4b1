"""
Gemini AI transport

Usage:
    from nano_creator.services.infrastructure.llm.gemini import GeminiClient, GenerationConfig
"""

from .client import GeminiClient, GenerationConfig

__all__ = [
    "GeminiClient",
    "GenerationConfig",
]
