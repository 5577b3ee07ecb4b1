"""
Remote error classification

Maps whatever the remote call raised onto the error taxonomy. The rules, in
order of precedence:

    already a GenerationError            -> unchanged
    message mentions the API key,
      a permission problem or NOT_FOUND  -> AUTH
    HTTP-like status 4xx                 -> AUTH
    HTTP-like status 5xx                 -> SERVER
    JSON decode / pydantic validation    -> PARSE
    asyncio timeout                      -> TIMEOUT
    connection / OS level failure        -> SERVER
    anything else                        -> UNKNOWN
"""

import asyncio
import json
from typing import Optional

from google.genai import errors as genai_errors
from pydantic import ValidationError

from nano_creator.core.exceptions import (
    AttemptTimeoutError,
    AuthError,
    ErrorKind,
    GenerationError,
    ParseError,
    ServerError,
    UnknownRemoteError,
)

AUTH_MESSAGE_MARKERS = ("API key", "PERMISSION_DENIED", "permission denied", "NOT_FOUND")


def _status_of(error: BaseException) -> Optional[int]:
    if isinstance(error, genai_errors.APIError):
        return error.code
    for attr in ("status", "code", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    return None


def _message_of(error: BaseException) -> str:
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error) or type(error).__name__


def classify_remote_error(error: BaseException) -> ErrorKind:
    """Return the ErrorKind for an exception raised by a remote call."""
    if isinstance(error, GenerationError):
        return error.kind

    message = _message_of(error)
    if any(marker in message for marker in AUTH_MESSAGE_MARKERS):
        return ErrorKind.AUTH

    status = _status_of(error)
    if status is not None:
        if 400 <= status < 500:
            return ErrorKind.AUTH
        if status >= 500:
            return ErrorKind.SERVER

    if isinstance(error, (json.JSONDecodeError, ValidationError)):
        return ErrorKind.PARSE
    if isinstance(error, asyncio.TimeoutError):
        return ErrorKind.TIMEOUT
    if isinstance(error, (ConnectionError, OSError)):
        return ErrorKind.SERVER
    return ErrorKind.UNKNOWN


def to_generation_error(error: BaseException) -> GenerationError:
    """Wrap ``error`` in the taxonomy class matching its classification."""
    if isinstance(error, GenerationError):
        return error

    kind = classify_remote_error(error)
    message = _message_of(error)
    status = _status_of(error)

    if kind is ErrorKind.AUTH:
        if "NOT_FOUND" in message:
            detail = "The API key may not have the required model enabled or the model name is incorrect"
        else:
            detail = "The API key may be invalid or lack permissions"
        return AuthError(f"{detail}: {message}", status=status)
    if kind is ErrorKind.SERVER:
        return ServerError(f"Remote server error, possibly temporary: {message}", status=status)
    if kind is ErrorKind.PARSE:
        return ParseError(f"Malformed response: {message}")
    if kind is ErrorKind.TIMEOUT:
        return AttemptTimeoutError(getattr(error, "timeout", 0.0) or 0.0)
    return UnknownRemoteError(f"Unexpected error: {message}", status=status)


__all__ = [
    "AUTH_MESSAGE_MARKERS",
    "classify_remote_error",
    "to_generation_error",
]
