"""
Inline binary payloads

Audio and image parts arrive as raw bytes from the SDK, or as base64 text
when the response was serialized. Both decode to bytes here.
"""

import base64
import binascii
from typing import Union


def decode_inline_payload(data: Union[bytes, bytearray, str]) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Inline payload is not valid base64: {e}") from e


__all__ = ["decode_inline_payload"]
