"""
WAV container encoding

Gemini TTS returns raw little-endian PCM. Wrapping it in a RIFF/WAVE
container (44-byte header) makes it playable. Pure and deterministic.
"""

import io
import wave

from nano_creator.config.constants import (
    TTS_BITS_PER_SAMPLE,
    TTS_CHANNELS,
    TTS_SAMPLE_RATE,
)

WAV_HEADER_SIZE = 44


def encode_wav(
    pcm: bytes,
    sample_rate: int = TTS_SAMPLE_RATE,
    channels: int = TTS_CHANNELS,
    bits_per_sample: int = TTS_BITS_PER_SAMPLE,
) -> bytes:
    """Wrap raw PCM samples in a RIFF/WAVE container.

    Raises:
        ValueError: empty input, a bit depth other than 8, 16, 24 or 32, or a
            sample buffer that does not hold whole frames
    """
    if not pcm:
        raise ValueError("PCM data is empty")
    if sample_rate <= 0 or channels <= 0:
        raise ValueError("sample_rate and channels must be positive")
    if bits_per_sample <= 0 or bits_per_sample % 8 or bits_per_sample > 32:
        raise ValueError(f"bits_per_sample must be 8, 16, 24 or 32, got {bits_per_sample}")
    block_align = channels * bits_per_sample // 8
    if len(pcm) % block_align:
        raise ValueError(f"PCM length {len(pcm)} is not a multiple of the block align {block_align}")

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(bits_per_sample // 8)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return buffer.getvalue()


__all__ = ["WAV_HEADER_SIZE", "encode_wav"]
