"""
Gemini API transport

Thin async wrapper around ``google.genai``. Responsibilities:

1. Build the SDK client lazily from the studio config (API key + version)
2. Translate our GenerationConfig into ``types.GenerateContentConfig``
3. Run the synchronous SDK call in a worker thread
4. Convert every exception into the error taxonomy before it leaves

Responses are returned as the SDK produced them; interpreting text, inline
binary parts and grounding metadata is the generation client's job.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from nano_creator.config.settings import StudioConfig
from nano_creator.core.exceptions import AuthError
from nano_creator.core.logging import get_logger
from nano_creator.services.infrastructure.llm.errors import to_generation_error

logger = get_logger(__name__, component="gemini_client")


@dataclass
class GenerationConfig:
    """Configuration for content generation"""
    temperature: Optional[float] = None
    response_mime_type: Optional[str] = None
    response_modalities: Optional[List[str]] = None  # e.g. ["AUDIO"], ["IMAGE"]
    voice_name: Optional[str] = None  # single-speaker speech
    speaker_voices: Dict[str, str] = field(default_factory=dict)  # speaker label -> voice
    tools: List[str] = field(default_factory=list)  # e.g. ["google_search"]


class GeminiClient:
    """
    Gemini API transport used by the generation client.

    Usage:
        client = GeminiClient(StudioConfig.from_env())
        response = await client.generate_content(
            model="gemini-2.5-pro",
            contents="Hello!",
            config=GenerationConfig(response_mime_type="application/json"),
        )
    """

    def __init__(self, config: StudioConfig):
        self.config = config
        self._client = None  # Lazy init

    def _get_client(self):
        if self._client is None:
            if not self.config.api_key:
                raise AuthError("GEMINI_API_KEY is not set. Add it to the environment or a .env file")
            from google import genai
            from google.genai import types

            self._client = genai.Client(
                api_key=self.config.api_key,
                http_options=types.HttpOptions(api_version=self.config.api_version),
            )
        return self._client

    @staticmethod
    def build_config(config: Optional[GenerationConfig]):
        """Translate a GenerationConfig into the SDK's GenerateContentConfig."""
        if config is None:
            return None
        from google.genai import types

        gen_config_dict: Dict[str, Any] = {}
        if config.temperature is not None:
            gen_config_dict["temperature"] = config.temperature
        if config.response_mime_type:
            gen_config_dict["response_mime_type"] = config.response_mime_type
        if config.response_modalities:
            gen_config_dict["response_modalities"] = list(config.response_modalities)

        if config.speaker_voices:
            gen_config_dict["speech_config"] = types.SpeechConfig(
                multi_speaker_voice_config=types.MultiSpeakerVoiceConfig(
                    speaker_voice_configs=[
                        types.SpeakerVoiceConfig(
                            speaker=speaker,
                            voice_config=types.VoiceConfig(
                                prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                            ),
                        )
                        for speaker, voice in config.speaker_voices.items()
                    ]
                )
            )
        elif config.voice_name:
            gen_config_dict["speech_config"] = types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=config.voice_name),
                )
            )

        tools = []
        for tool in config.tools:
            if tool == "google_search":
                tools.append(types.Tool(google_search=types.GoogleSearch()))
            else:
                raise ValueError(f"Unsupported tool: {tool}")
        if tools:
            gen_config_dict["tools"] = tools

        return types.GenerateContentConfig(**gen_config_dict)

    async def generate_content(
        self,
        model: str,
        contents: Union[str, List[Any]],
        config: Optional[GenerationConfig] = None,
    ):
        """
        Generate content with the Gemini API.

        Args:
            model: Model name (e.g., "gemini-2.5-pro")
            contents: Text prompt or list of content parts
            config: Generation configuration

        Returns:
            The SDK response object

        Raises:
            GenerationError: classified failure of the call
        """
        started = time.monotonic()
        logger.debug(
            f"Gemini request to {model}",
            extra={
                "model": model,
                "payload_chars": len(contents) if isinstance(contents, str) else None,
                "modalities": config.response_modalities if config else None,
                "tools": config.tools if config else None,
            },
        )
        try:
            client = self._get_client()
            gen_config = self.build_config(config)
            # The google-genai SDK is not async-native
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=model,
                contents=contents,
                config=gen_config,
            )
        except Exception as e:
            error = to_generation_error(e)
            logger.error(
                f"Gemini request to {model} failed: {error.message}",
                extra={"model": model, "error_kind": error.kind.value, "status": error.status},
            )
            if error is e:
                raise
            raise error from e

        logger.debug(
            f"Gemini response from {model}",
            extra={"model": model, "duration_ms": round((time.monotonic() - started) * 1000, 2)},
        )
        return response


__all__ = ["GenerationConfig", "GeminiClient"]
