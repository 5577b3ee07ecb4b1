"""
Persona schema

A configured speaker identity used for speech synthesis.
"""

from pydantic import BaseModel, ConfigDict


class Persona(BaseModel):
    """A podcast speaker: stable id, display name and Gemini voice."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str  # e.g. "Q (Analyst)"; the first token is the speaker label
    description: str = ""
    voice_id: str
    avatar: str = ""

    @property
    def speaker_label(self) -> str:
        return self.name.split(" ")[0]
