"""
JSON response parsing

Model responses requested as JSON still arrive as text, sometimes wrapped in
a markdown code fence. Parsing unwraps the fence, decodes strictly and
validates the shape with pydantic. The result is a tagged outcome so callers
decide whether a mismatch is fatal.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from nano_creator.core.exceptions import ParseError

T = TypeVar("T")

_FENCE_RE = re.compile(r"```(json)?\s*([\s\S]*?)\s*```")


def unwrap_code_fence(text: str) -> str:
    """Return the body of the first markdown code fence, or the stripped text."""
    if not text:
        return ""
    match = _FENCE_RE.search(text)
    body = match.group(2) if match else text
    return body.strip()


@dataclass(frozen=True)
class JsonParseResult(Generic[T]):
    """Tagged parse outcome: ``value`` when ok, ``error`` otherwise."""
    value: Optional[T] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the captured ParseError."""
        if self.error is not None:
            raise self.error
        return self.value


def parse_json_strict(text: str) -> JsonParseResult[Any]:
    """Decode fenced or bare JSON without any repair."""
    body = unwrap_code_fence(text)
    if not body:
        return JsonParseResult(error=ParseError("Empty response where JSON was expected", raw=text))
    try:
        return JsonParseResult(value=json.loads(body))
    except json.JSONDecodeError as e:
        return JsonParseResult(error=ParseError(f"Invalid JSON: {e.msg} (line {e.lineno})", raw=text))


def validate_payload(
    text: str,
    shape: Union[Type[BaseModel], TypeAdapter, Any],
    what: str = "response",
) -> JsonParseResult:
    """Parse ``text`` and validate it against a pydantic model or type.

    Args:
        text: Raw response text
        shape: pydantic model class, TypeAdapter, or a plain type such as ``List[str]``
        what: Name of the payload used in error messages

    Returns:
        JsonParseResult holding the validated value or a ParseError
    """
    parsed = parse_json_strict(text)
    if not parsed.ok:
        return parsed

    adapter = shape if isinstance(shape, TypeAdapter) else TypeAdapter(shape)
    try:
        return JsonParseResult(value=adapter.validate_python(parsed.value, strict=True))
    except ValidationError as e:
        return JsonParseResult(
            error=ParseError(
                f"API returned data in an unexpected format for {what} ({e.error_count()} errors)",
                raw=text,
            )
        )


ParseOutcome = JsonParseResult

__all__ = [
    "unwrap_code_fence",
    "JsonParseResult",
    "ParseOutcome",
    "parse_json_strict",
    "validate_payload",
]
