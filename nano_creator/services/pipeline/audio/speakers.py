"""
Speaker line extraction

Podcast scripts label each turn with the speaker, e.g. ``Q: ...`` or
``지영 (Host): ...``. Lines without a label continue the current turn.
"""

import re
from typing import List, Pattern, Sequence

from nano_creator.models.persona import Persona

_QUOTES_RE = re.compile(r"""^["']|["']$""")


def speaker_label(persona: Persona) -> str:
    """The label used for a persona in scripts: first token of its name."""
    return persona.speaker_label


def _label_pattern(label: str) -> Pattern[str]:
    return re.compile(rf"^{re.escape(label)}(\s*\([^)]*\))?:\s*")


def extract_speaker_lines(script: str, persona: Persona, personas: Sequence[Persona]) -> str:
    """Return only ``persona``'s dialogue, labels and wrapping quotes removed.

    Lines are joined with spaces. Returns an empty string when the persona
    never speaks.
    """
    own = _label_pattern(speaker_label(persona))
    others = [
        _label_pattern(speaker_label(p))
        for p in personas
        if speaker_label(p) != speaker_label(persona)
    ]

    lines: List[str] = []
    speaking = False
    for line in script.splitlines():
        match = own.match(line)
        if match:
            speaking = True
            dialogue = _QUOTES_RE.sub("", line[match.end():].strip()).strip()
            if dialogue:
                lines.append(dialogue)
        elif any(pattern.match(line) for pattern in others):
            speaking = False
        elif speaking and line.strip():
            lines.append(line.strip())

    return " ".join(lines)


__all__ = ["speaker_label", "extract_speaker_lines"]
