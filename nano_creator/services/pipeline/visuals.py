"""
Visuals stage

script -> 10 keywords -> keyword/prompt map -> one 16:9 image per prompt,
rendered three at a time. Individual image failures are reported per item
and never abort the rest.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from nano_creator.config.constants import LANDSCAPE_ASPECT_RATIO
from nano_creator.config.settings import StudioConfig
from nano_creator.core.exceptions import PreconditionError
from nano_creator.core.logging import get_logger
from nano_creator.services.generation.client import GenerationClient
from nano_creator.services.infrastructure.orchestration import BatchResult, Outcome, run_batch

logger = get_logger(__name__, component="visuals")

IMAGE_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class GeneratedImage:
    keyword: str
    prompt: str
    data: bytes
    mime_type: str = IMAGE_MIME_TYPE


@dataclass
class VisualsResult:
    keywords: List[str]
    prompts: Dict[str, str] = field(default_factory=dict)
    images: Optional[BatchResult] = None


def prompt_entries(prompt_map: Dict[str, str], keywords: Sequence[str]) -> List[Tuple[str, str]]:
    """(keyword, prompt) pairs in map order; bare keywords when the map is empty."""
    entries = [(k, v) for k, v in prompt_map.items() if v.strip()]
    if not entries:
        entries = [(keyword, keyword) for keyword in keywords]
    return entries


class VisualsStage:
    def __init__(
        self,
        client: GenerationClient,
        config: StudioConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.config = config
        self._sleep = sleep

    async def extract_keywords(self, script: str) -> List[str]:
        if not script.strip():
            raise PreconditionError("Generate a script in the Scripting stage first")
        return await self.client.extract_keywords(script)

    async def build_prompts(self, keywords: Sequence[str]) -> Dict[str, str]:
        return await self.client.generate_image_prompts(keywords)

    async def render_images(
        self,
        entries: Sequence[Tuple[str, str]],
        on_item_settled: Optional[Callable[[Outcome], None]] = None,
    ) -> BatchResult:
        async def render(entry: Tuple[str, str]) -> GeneratedImage:
            keyword, prompt = entry

            def report_retry(attempt, _error):
                logger.info(f'Retrying "{keyword}" image (attempt {attempt})')

            data = await self.client.generate_image(prompt, LANDSCAPE_ASPECT_RATIO, on_retry=report_retry)
            return GeneratedImage(keyword=keyword, prompt=prompt, data=data)

        return await run_batch(
            list(entries),
            render,
            window_size=self.config.batch_window_size,
            on_item_settled=on_item_settled,
            sleep=self._sleep,
            label="images",
        )

    async def run(
        self,
        script: str,
        on_item_settled: Optional[Callable[[Outcome], None]] = None,
        on_keywords: Optional[Callable[[List[str]], None]] = None,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> VisualsResult:
        progress = on_progress or logger.info

        progress("Extracting keywords from the script...")
        keywords = await self.extract_keywords(script)
        if on_keywords is not None:
            on_keywords(keywords)

        progress("Writing image prompts...")
        prompt_map = await self.build_prompts(keywords)
        entries = prompt_entries(prompt_map, keywords)

        progress(f"Generating {len(entries)} images...")
        images = await self.render_images(entries, on_item_settled)
        return VisualsResult(keywords=keywords, prompts=prompt_map, images=images)
