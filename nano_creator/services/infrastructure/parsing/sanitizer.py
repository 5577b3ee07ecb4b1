"""
Input sanitization

Replaces betting vocabulary with neutral analytical terms before any free
text is sent to the API. Substitutions are literal; since no replacement
contains any target, applying them is idempotent and order-independent.
"""

from typing import Iterable, Optional, Tuple

from nano_creator.config.constants import SANITIZE_SUBSTITUTIONS


def sanitize_for_api(
    text: Optional[str],
    substitutions: Iterable[Tuple[str, str]] = SANITIZE_SUBSTITUTIONS,
) -> str:
    if not text:
        return ""
    for target, replacement in substitutions:
        text = text.replace(target, replacement)
    return text


__all__ = ["sanitize_for_api"]
