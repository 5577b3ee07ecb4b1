"""
Remote generation client

One method per remote operation. Each method:

1. sanitizes free-text input
2. builds the request (model, contents, GenerationConfig)
3. runs it through the RetryExecutor under the operation's RetryPolicy
4. interprets the response inside the attempt, so a malformed payload
   surfaces as ParseError from the attempt that received it

The transport is anything with ``async generate_content(model, contents,
config)``; production uses GeminiClient, tests pass a fake.
"""

import json
import math
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Sequence

from nano_creator.config import prompts
from nano_creator.config.constants import (
    CARD_NEWS_TRUNCATION_MARKER,
    KEYWORD_COUNT,
    LANDSCAPE_ASPECT_RATIO,
)
from nano_creator.config.models import get_model_config
from nano_creator.config.settings import StudioConfig
from nano_creator.core.exceptions import GenerationError, InputTooLargeError, ParseError
from nano_creator.core.logging import get_logger
from nano_creator.models.generation import (
    CardNews,
    CardNewsPayload,
    GenerationTask,
    ResearchResult,
    ResearchSource,
)
from nano_creator.models.persona import Persona
from nano_creator.models.status import OperationKind
from nano_creator.services.infrastructure.llm.gemini import GenerationConfig
from nano_creator.services.infrastructure.parsing import decode_inline_payload, sanitize_for_api, validate_payload
from nano_creator.services.infrastructure.retry import RetryExecutor

logger = get_logger(__name__, component="generation_client")

RetryCallback = Callable[[int, GenerationError], None]

JSON_MIME_TYPE = "application/json"


class GenerationTransport(Protocol):
    async def generate_content(self, model: str, contents: Any, config: Optional[GenerationConfig] = None) -> Any:
        ...


def estimate_tokens(text: str) -> int:
    """Rough token estimate: four characters per token."""
    return math.ceil(len(text) / 4)


def normalize_keywords(keywords: Sequence[str], count: int = KEYWORD_COUNT) -> List[str]:
    """Return exactly ``count`` keywords: truncate, or pad by cycling.

    Raises:
        ParseError: no usable keyword was extracted
    """
    cleaned = [k.strip() for k in keywords if k and k.strip()]
    if not cleaned:
        raise ParseError("No keywords could be extracted from the script")
    if len(cleaned) >= count:
        return cleaned[:count]
    return [cleaned[i % len(cleaned)] for i in range(count)]


def truncate_script(script: str, limit: int) -> str:
    if len(script) <= limit:
        return script
    return script[:limit] + CARD_NEWS_TRUNCATION_MARKER


# ---------------------------------------------------------------------------
# Response interpretation
# ---------------------------------------------------------------------------

def _first_candidate(response: Any) -> Any:
    candidates = getattr(response, "candidates", None) or []
    return candidates[0] if candidates else None


def response_text(response: Any, what: str) -> str:
    text = getattr(response, "text", None)
    if not isinstance(text, str) or not text.strip():
        raise ParseError(f"Empty {what} response")
    return text


def inline_payloads(response: Any) -> Iterator[bytes]:
    """Yield the inline binary parts of the first candidate, decoded."""
    candidate = _first_candidate(response)
    content = getattr(candidate, "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None) if inline is not None else None
        if data:
            try:
                yield decode_inline_payload(data)
            except ValueError as e:
                raise ParseError(str(e)) from e


def grounding_sources(response: Any) -> List[ResearchSource]:
    candidate = _first_candidate(response)
    metadata = getattr(candidate, "grounding_metadata", None)
    sources = []
    for chunk in getattr(metadata, "grounding_chunks", None) or []:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        sources.append(ResearchSource(uri=getattr(web, "uri", "") or "", title=getattr(web, "title", "") or ""))
    return sources


class GenerationClient:
    """Typed operations over the remote generation API."""

    def __init__(
        self,
        transport: GenerationTransport,
        config: StudioConfig,
        executor: Optional[RetryExecutor] = None,
    ):
        self.transport = transport
        self.config = config
        self.executor = executor or RetryExecutor()

    async def _execute(
        self,
        kind: OperationKind,
        contents: Any,
        interpret: Callable[[Any], Any],
        *,
        gen_config: Optional[GenerationConfig] = None,
        on_retry: Optional[RetryCallback] = None,
        payload: str = "",
    ):
        task = GenerationTask(kind=kind, policy=self.config.policy_for(kind), payload=payload)
        model = get_model_config(kind).model_name

        async def attempt():
            response = await self.transport.generate_content(model, contents, gen_config)
            return interpret(response)

        logger.info(
            f"Running {task.label} on {model}",
            extra={"max_retries": task.policy.max_retries, "timeout": task.policy.timeout, "payload": payload},
        )
        return await self.executor.run(task, attempt, on_retry)

    # ----- planning -----

    async def research(
        self,
        topic: str,
        instructions: str = "",
        raw_data: str = "",
        analyze_news: bool = False,
        on_retry: Optional[RetryCallback] = None,
    ) -> ResearchResult:
        """Grounded research report; search is attached when there is no raw data or news is requested."""
        clean_raw_data = sanitize_for_api(raw_data)
        prompt = prompts.RESEARCH_PROMPT.format(
            topic=sanitize_for_api(topic),
            instructions=sanitize_for_api(instructions),
            news_instruction=prompts.NEWS_ANALYSIS_INSTRUCTION if analyze_news else "",
            raw_data=clean_raw_data or prompts.RESEARCH_NO_RAW_DATA,
        )
        use_search = not raw_data.strip() or analyze_news
        gen_config = GenerationConfig(tools=["google_search"]) if use_search else None

        def interpret(response):
            return ResearchResult(text=response_text(response, "research"), sources=grounding_sources(response))

        return await self._execute(
            OperationKind.RESEARCH,
            prompt,
            interpret,
            gen_config=gen_config,
            on_retry=on_retry,
            payload=f"topic={topic[:60]!r} search={use_search}",
        )

    # ----- scripting -----

    async def generate_script(self, research_text: str) -> str:
        prompt = f"{prompts.ANALYTICAL_SCRIPT_PROMPT}\n\n--- RESEARCH DATA ---\n\n{sanitize_for_api(research_text)}"
        estimated = estimate_tokens(prompt)
        logger.info(f"Script prompt: {len(prompt):,} chars, ~{estimated:,} tokens")
        if estimated > self.config.script_token_ceiling:
            raise InputTooLargeError(estimated, self.config.script_token_ceiling)

        return await self._execute(
            OperationKind.SCRIPT_GEN,
            prompt,
            lambda response: response_text(response, "script"),
            payload=f"{len(prompt)} chars",
        )

    async def optimize_script(self, script: str, on_retry: Optional[RetryCallback] = None) -> str:
        prompt = f"{prompts.PODCAST_OPTIMIZATION_PROMPT}\n\n--- SCRIPT TO OPTIMIZE ---\n\n{sanitize_for_api(script)}"
        return await self._execute(
            OperationKind.SCRIPT_OPTIMIZE,
            prompt,
            lambda response: response_text(response, "optimized script"),
            on_retry=on_retry,
            payload=f"{len(script)} chars",
        )

    # ----- speech -----

    @staticmethod
    def _first_audio(response: Any) -> bytes:
        for data in inline_payloads(response):
            return data
        raise ParseError("No audio data received")

    async def synthesize_speech(
        self,
        text: str,
        persona: Persona,
        on_retry: Optional[RetryCallback] = None,
    ) -> bytes:
        """Single-speaker speech. Returns raw PCM."""
        return await self._execute(
            OperationKind.SPEECH_SINGLE,
            sanitize_for_api(text),
            self._first_audio,
            gen_config=GenerationConfig(response_modalities=["AUDIO"], voice_name=persona.voice_id),
            on_retry=on_retry,
            payload=f"voice={persona.voice_id} {len(text)} chars",
        )

    async def synthesize_conversation(
        self,
        script: str,
        personas: Sequence[Persona],
        on_retry: Optional[RetryCallback] = None,
    ) -> bytes:
        """Multi-speaker speech of the whole script. Returns raw PCM."""
        speaker_voices = {p.speaker_label: p.voice_id for p in personas}
        return await self._execute(
            OperationKind.SPEECH_MULTI,
            sanitize_for_api(script),
            self._first_audio,
            gen_config=GenerationConfig(response_modalities=["AUDIO"], speaker_voices=speaker_voices),
            on_retry=on_retry,
            payload=f"speakers={','.join(speaker_voices)} {len(script)} chars",
        )

    # ----- visuals -----

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = LANDSCAPE_ASPECT_RATIO,
        on_retry: Optional[RetryCallback] = None,
    ) -> bytes:
        final_prompt = f"{sanitize_for_api(prompt)}, {aspect_ratio} aspect ratio"

        def interpret(response):
            for data in inline_payloads(response):
                return data
            raise ParseError("No image data received")

        return await self._execute(
            OperationKind.IMAGE_GEN,
            final_prompt,
            interpret,
            gen_config=GenerationConfig(response_modalities=["IMAGE"]),
            on_retry=on_retry,
            payload=f"aspect={aspect_ratio}",
        )

    async def extract_keywords(self, script: str) -> List[str]:
        prompt = f"{prompts.KEYWORD_EXTRACTION_PROMPT}\n\n--- SCRIPT ---\n{sanitize_for_api(script)}"

        def interpret(response):
            keywords = validate_payload(response_text(response, "keywords"), List[str], "keywords").unwrap()
            return normalize_keywords(keywords)

        return await self._execute(
            OperationKind.KEYWORD_EXTRACT,
            prompt,
            interpret,
            gen_config=GenerationConfig(response_mime_type=JSON_MIME_TYPE),
            payload=f"{len(script)} chars",
        )

    async def generate_image_prompts(self, keywords: Sequence[str]) -> Dict[str, str]:
        prompt = (
            f"{prompts.IMAGE_PROMPT_GENERATION_PROMPT}\n\n--- Input Keywords ---\n"
            f"{json.dumps(list(keywords), ensure_ascii=False)}"
        )

        def interpret(response):
            return validate_payload(response_text(response, "image prompts"), Dict[str, str], "image prompts").unwrap()

        return await self._execute(
            OperationKind.IMAGE_PROMPTS,
            prompt,
            interpret,
            gen_config=GenerationConfig(response_mime_type=JSON_MIME_TYPE),
            payload=f"{len(keywords)} keywords",
        )

    # ----- card news -----

    async def generate_card_news(self, script: str, on_retry: Optional[RetryCallback] = None) -> List[CardNews]:
        script_to_use = truncate_script(sanitize_for_api(script), self.config.card_news_script_limit)
        prompt = f"{prompts.CARD_NEWS_FROM_SCRIPT_PROMPT}\n\n--- PODCAST SCRIPT ---\n{script_to_use}"

        def interpret(response):
            payload = validate_payload(response_text(response, "card news"), CardNewsPayload, "card news").unwrap()
            return list(payload.cards)

        return await self._execute(
            OperationKind.CARD_NEWS_GEN,
            prompt,
            interpret,
            gen_config=GenerationConfig(response_mime_type=JSON_MIME_TYPE),
            on_retry=on_retry,
            payload=f"{len(script)} chars",
        )


__all__ = [
    "GenerationTransport",
    "GenerationClient",
    "estimate_tokens",
    "normalize_keywords",
    "truncate_script",
    "response_text",
    "inline_payloads",
    "grounding_sources",
]
