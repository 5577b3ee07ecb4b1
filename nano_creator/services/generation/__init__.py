"""Generation services - typed operations over the remote generation API."""

from .client import (
    GenerationTransport,
    GenerationClient,
    estimate_tokens,
    normalize_keywords,
    truncate_script,
)

__all__ = [
    "GenerationTransport",
    "GenerationClient",
    "estimate_tokens",
    "normalize_keywords",
    "truncate_script",
]
