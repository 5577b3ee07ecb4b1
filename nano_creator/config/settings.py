"""
Studio settings

One explicit configuration object per session, handed to the session
controller and everything it builds. Nothing in the package reads the
environment except ``StudioConfig.from_env``.

Environment Variables:
    GEMINI_API_KEY: API key for the Gemini API (falls back to API_KEY)
    GEMINI_API_VERSION: API version (default: v1alpha, required by the TTS models)
    NANO_CREATOR_STORAGE_DIR: directory holding the autosave slot and handle files
    NANO_CREATOR_OUTPUT_DIR: directory receiving exported artifacts
    NANO_CREATOR_AUTOSAVE_SECONDS: autosave quiet period (default: 10)
    LOG_LEVEL / LOG_JSON / LOG_FILE: logging setup
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

from nano_creator.models.generation import RetryPolicy
from nano_creator.models.persona import Persona
from nano_creator.models.status import OperationKind

from .constants import AUTOSAVE_KEY, PERSONAS
from .models import DEFAULT_RETRY_POLICIES

DEFAULT_STORAGE_DIR = Path.home() / ".nano-creator"


def parse_bool_env(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float, minimum: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(float(raw), minimum)
    except (TypeError, ValueError):
        return default


@dataclass
class StudioConfig:
    """Configuration for one studio session"""
    api_key: Optional[str] = None
    api_version: str = "v1alpha"
    autosave_key: str = AUTOSAVE_KEY
    storage_dir: Path = DEFAULT_STORAGE_DIR
    output_dir: Path = Path("outputs")
    autosave_delay: float = 10.0
    batch_window_size: int = 3
    card_window_size: int = 1
    persona_pause: float = 1.0
    conversation_pause: float = 2.0
    script_token_ceiling: int = 30000
    card_news_script_limit: int = 10000
    timeline_slot_seconds: float = 5.0
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Optional[Path] = None
    personas: List[Persona] = field(default_factory=lambda: list(PERSONAS))
    retry_policies: Dict[OperationKind, RetryPolicy] = field(
        default_factory=lambda: dict(DEFAULT_RETRY_POLICIES)
    )

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None, **overrides) -> "StudioConfig":
        """Build a config from the process environment (after loading ``.env``)."""
        load_dotenv(dotenv_path=env_file)
        storage_dir = os.getenv("NANO_CREATOR_STORAGE_DIR")
        output_dir = os.getenv("NANO_CREATOR_OUTPUT_DIR")
        log_file = os.getenv("LOG_FILE")
        config = cls(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            api_version=os.getenv("GEMINI_API_VERSION", "v1alpha"),
            storage_dir=Path(storage_dir) if storage_dir else DEFAULT_STORAGE_DIR,
            output_dir=Path(output_dir) if output_dir else Path("outputs"),
            autosave_delay=_env_float("NANO_CREATOR_AUTOSAVE_SECONDS", 10.0, 0.0),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=parse_bool_env(os.getenv("LOG_JSON")),
            log_file=Path(log_file) if log_file else None,
        )
        return replace(config, **overrides) if overrides else config

    def policy_for(self, kind: OperationKind) -> RetryPolicy:
        return self.retry_policies.get(kind, DEFAULT_RETRY_POLICIES[kind])

    def persona(self, persona_id: str) -> Optional[Persona]:
        return next((p for p in self.personas if p.id == persona_id), None)

    @property
    def persona_ids(self) -> List[str]:
        return [p.id for p in self.personas]

    @property
    def handle_dir(self) -> Path:
        return self.storage_dir / "handles"
