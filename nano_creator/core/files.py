"""
File utilities - exporting generated artifacts to disk
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


def create_timestamp(now: Optional[datetime] = None) -> str:
    """Filesystem-safe timestamp, e.g. ``2025-04-28T09-15-02``."""
    now = now or datetime.now()
    return now.strftime("%Y-%m-%dT%H-%M-%S")


def ensure_directory(dir_path: Path) -> Path:
    """Ensure directory exists, creating if necessary

    Args:
        dir_path: Directory path

    Returns:
        The directory path
    """
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def export_text(content: str, directory: Path, filename: str) -> Path:
    """Write UTF-8 text into ``directory/filename``."""
    path = ensure_directory(directory) / filename
    path.write_text(content, encoding="utf-8")
    return path


def export_json(data: Any, directory: Path, filename: str) -> Path:
    """Write pretty-printed JSON into ``directory/filename``."""
    path = ensure_directory(directory) / filename
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


def export_bytes(data: bytes, directory: Path, filename: str) -> Path:
    """Write raw bytes (audio, images) into ``directory/filename``."""
    path = ensure_directory(directory) / filename
    path.write_bytes(data)
    return path
