"""
Transient binary handles

Generated audio and images are held as handles: opaque references to bytes
that must be released exactly once. ``TempFileHandleStore`` keeps each blob
in a file under a per-session directory; the handle URI is that file's path.
"""

import uuid
from pathlib import Path
from threading import RLock
from typing import Dict, Protocol, runtime_checkable

from nano_creator.core.exceptions import ResourceError
from nano_creator.core.logging import get_logger
from nano_creator.models.pipeline import Handle

logger = get_logger(__name__, component="handles")

_EXTENSIONS = {
    "audio/wav": ".wav",
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "video/mp4": ".mp4",
}


@runtime_checkable
class HandleStore(Protocol):
    def create(self, data: bytes, mime_type: str) -> Handle: ...

    def read(self, handle: Handle) -> bytes: ...

    def release(self, handle: Handle) -> None: ...

    @property
    def live_count(self) -> int: ...


class TempFileHandleStore:
    """File-backed handle store. Releasing deletes the file."""

    def __init__(self, directory: Path):
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)
        self._live: Dict[str, Handle] = {}
        self._lock = RLock()

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def live_count(self) -> int:
        return len(self._live)

    def create(self, data: bytes, mime_type: str) -> Handle:
        handle_id = uuid.uuid4().hex
        path = self._directory / f"{handle_id}{_EXTENSIONS.get(mime_type, '.bin')}"
        try:
            path.write_bytes(data)
        except OSError as e:
            raise ResourceError(f"Could not store {mime_type} content: {e}") from e
        handle =Handle(id=handle_id, uri=str(path), mime_type=mime_type, size=len(data))
        with self._lock:
            self._live[handle_id] = handle
        logger.debug(f"Created handle {handle_id} ({mime_type}, {len(data)} bytes)")
        return handle

    def is_live(self, handle: Handle) -> bool:
        return handle.id in self._live

    def read(self, handle: Handle) -> bytes:
        if handle.id not in self._live:
            raise ResourceError(f"Handle {handle.id} is not live")
        return Path(handle.uri).read_bytes()

    def release(self, handle: Handle) -> None:
        with self._lock:
            if self._live.pop(handle.id, None) is None:
                raise ResourceError(f"Handle {handle.id} was already released or never created")
        Path(handle.uri).unlink(missing_ok=True)
        logger.debug(f"Released handle {handle.id}")


__all__ = ["HandleStore", "TempFileHandleStore"]
