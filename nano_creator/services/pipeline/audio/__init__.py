"""Audio helpers - WAV container encoding and per-speaker script extraction."""

from .wav import WAV_HEADER_SIZE, encode_wav
from .speakers import speaker_label, extract_speaker_lines

__all__ = [
    "WAV_HEADER_SIZE",
    "encode_wav",
    "speaker_label",
    "extract_speaker_lines",
]
