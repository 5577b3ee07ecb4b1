"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Error taxonomy shared by every layer
    - notifications.py: User-facing notification channel
    - files.py: Artifact export helpers

Usage:
    from nano_creator.core import get_logger, NotificationChannel
"""

from .logging import (
    setup_logging,
    get_logger,
    set_session_id,
    set_operation,
    clear_context,
    LogTimer,
)

from .exceptions import (
    ErrorKind,
    StudioError,
    PipelineError,
    PreconditionError,
    InfrastructureError,
    GenerationError,
    RemoteError,
    AuthError,
    ServerError,
    UnknownRemoteError,
    AttemptTimeoutError,
    ParseError,
    InputTooLargeError,
    ExhaustedError,
    ResourceError,
    PersistenceError,
)

from .notifications import (
    Notification,
    NotificationKind,
    NotificationChannel,
)

from .files import (
    create_timestamp,
    ensure_directory,
    export_text,
    export_json,
    export_bytes,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_session_id",
    "set_operation",
    "clear_context",
    "LogTimer",
    # Exceptions
    "ErrorKind",
    "StudioError",
    "PipelineError",
    "PreconditionError",
    "InfrastructureError",
    "GenerationError",
    "RemoteError",
    "AuthError",
    "ServerError",
    "UnknownRemoteError",
    "AttemptTimeoutError",
    "ParseError",
    "InputTooLargeError",
    "ExhaustedError",
    "ResourceError",
    "PersistenceError",
    # Notifications
    "Notification",
    "NotificationKind",
    "NotificationChannel",
    # Files
    "create_timestamp",
    "ensure_directory",
    "export_text",
    "export_json",
    "export_bytes",
]
