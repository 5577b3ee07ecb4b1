"""
Core Exceptions
Standardized exception taxonomy for the studio.

Every failure raised at the remote-call boundary is mapped into one of the
GenerationError subclasses below before it reaches the retry executor or the
batch aggregator, so callers branch on ``error.kind`` instead of messages.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification of a generation failure."""
    AUTH = "auth"
    SERVER = "server"
    PARSE = "parse"
    TIMEOUT = "timeout"
    INPUT_TOO_LARGE = "input_too_large"
    UNKNOWN = "unknown"


class StudioError(Exception):
    """Base exception for all application errors."""
    pass


class PipelineError(StudioError):
    """Base exception for pipeline stage errors."""
    pass


class PreconditionError(PipelineError):
    """A stage was invoked before the inputs it consumes exist."""
    pass


class InfrastructureError(StudioError):
    """Base exception for infrastructure errors (LLM, Storage, etc)."""
    pass


class GenerationError(InfrastructureError):
    """Base exception for failures of a remote generation operation."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def retryable(self) -> bool:
        return self.kind in (ErrorKind.SERVER, ErrorKind.TIMEOUT)


class RemoteError(GenerationError):
    """The remote call itself failed (transport or API status)."""
    pass


class AuthError(RemoteError):
    """Credential or permission problem. Retrying will not help."""
    kind = ErrorKind.AUTH


class ServerError(RemoteError):
    """Transient 5xx-equivalent fault on the remote side."""
    kind = ErrorKind.SERVER


class UnknownRemoteError(RemoteError):
    """A remote failure that could not be classified."""
    kind = ErrorKind.UNKNOWN


class AttemptTimeoutError(GenerationError):
    """A single attempt exceeded its time budget."""
    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout: float):
        super().__init__(f"Request timed out ({timeout:g}s)")
        self.timeout = timeout


class ParseError(GenerationError):
    """The call succeeded but returned a malformed payload."""
    kind = ErrorKind.PARSE

    def __init__(self, message: str, *, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class InputTooLargeError(GenerationError):
    """Pre-flight rejection: the prompt is over the token-estimate ceiling."""
    kind = ErrorKind.INPUT_TOO_LARGE

    def __init__(self, estimated_tokens: int, limit: int):
        super().__init__(
            f"Prompt is too long ({estimated_tokens:,} tokens, limit {limit:,}). "
            "Shorten the research data."
        )
        self.estimated_tokens = estimated_tokens
        self.limit = limit


class ExhaustedError(GenerationError):
    """All attempts were consumed; wraps the last underlying error."""

    def __init__(self, last_error: BaseException, attempts: int):
        detail = getattr(last_error, "message", None) or str(last_error) or type(last_error).__name__
        super().__init__(f"All {attempts} attempts failed: {detail}")
        self.last_error = last_error
        self.attempts = attempts
        if isinstance(last_error, GenerationError):
            self.kind = last_error.kind
            self.status = last_error.status

    @property
    def retryable(self) -> bool:
        return False


class ResourceError(InfrastructureError):
    """Misuse of a transient resource handle (unknown or already released)."""
    pass


class PersistenceError(InfrastructureError):
    """The durable session slot could not be written or deleted."""
    pass
