"""
Parsing utilities for model responses and outgoing text.
"""

from .json_parser import (
    unwrap_code_fence,
    JsonParseResult,
    ParseOutcome,
    parse_json_strict,
    validate_payload,
)
from .sanitizer import sanitize_for_api
from .payloads import decode_inline_payload

__all__ = [
    "unwrap_code_fence",
    "JsonParseResult",
    "ParseOutcome",
    "parse_json_strict",
    "validate_payload",
    "sanitize_for_api",
    "decode_inline_payload",
]
