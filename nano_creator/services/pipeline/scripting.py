"""
Scripting stage

Turns research into a podcast script, optimizes it for speech synthesis and
renders audio: one multi-speaker conversation track plus one track per
persona built from that persona's own lines.

Per-persona synthesis runs one request at a time with a short pause between
requests to stay under the TTS rate limit.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Sequence

from nano_creator.config.settings import StudioConfig
from nano_creator.core.exceptions import ParseError, PreconditionError
from nano_creator.core.logging import get_logger
from nano_creator.models.persona import Persona
from nano_creator.services.generation.client import GenerationClient, RetryCallback
from nano_creator.services.infrastructure.orchestration import BatchResult, Outcome, run_batch

from .audio import encode_wav, extract_speaker_lines

logger = get_logger(__name__, component="scripting")


def _to_wav(pcm: bytes) -> bytes:
    try:
        return encode_wav(pcm)
    except ValueError as e:
        raise ParseError(f"Unusable audio payload: {e}") from e


class ScriptingStage:
    def __init__(
        self,
        client: GenerationClient,
        config: StudioConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.config = config
        self._sleep = sleep

    async def generate_script(self, research_text: str) -> str:
        if not research_text.strip():
            raise PreconditionError("Run the research step first")
        script = await self.client.generate_script(research_text)
        logger.info(f"Script generated: {len(script):,} chars")
        return script

    async def optimize_script(self, script: str, on_retry: Optional[RetryCallback] = None) -> str:
        if not script.strip():
            raise PreconditionError("There is no script to optimize")
        return await self.client.optimize_script(script, on_retry=on_retry)

    async def generate_conversation(
        self,
        script: str,
        personas: Sequence[Persona],
        on_retry: Optional[RetryCallback] = None,
    ) -> bytes:
        """Full multi-speaker track as WAV bytes."""
        if not script.strip():
            raise PreconditionError("Generate a script first")
        pcm = await self.client.synthesize_conversation(script, personas, on_retry=on_retry)
        return _to_wav(pcm)

    async def generate_persona_track(
        self,
        script: str,
        persona: Persona,
        personas: Sequence[Persona],
        on_retry: Optional[RetryCallback] = None,
    ) -> bytes:
        """One persona's lines as WAV bytes."""
        lines = extract_speaker_lines(script, persona, personas)
        if not lines:
            raise PreconditionError(f"No lines for {persona.name} were found in the script")
        logger.debug(f"{persona.name}: {len(lines):,} chars of dialogue")
        pcm = await self.client.synthesize_speech(lines, persona, on_retry=on_retry)
        return _to_wav(pcm)

    async def generate_persona_tracks(
        self,
        script: str,
        personas: Sequence[Persona],
        on_item_settled: Optional[Callable[[Outcome], None]] = None,
        on_retry: Optional[Callable[[Persona, int], None]] = None,
    ) -> BatchResult:
        """Tracks for every persona; a failed persona does not stop the others."""
        if not script.strip():
            raise PreconditionError("Generate a script first")

        async def render(persona: Persona) -> bytes:
            def report_retry(attempt, _error):
                if on_retry is not None:
                    on_retry(persona, attempt)

            return await self.generate_persona_track(script, persona, personas, on_retry=report_retry)

        return await run_batch(
            list(personas),
            render,
            window_size=1,
            on_item_settled=on_item_settled,
            pause_between_windows=self.config.persona_pause,
            sleep=self._sleep,
            label="persona_tracks",
        )
