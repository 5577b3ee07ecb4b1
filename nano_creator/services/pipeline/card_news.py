"""
Card news stage

Builds a vertical (9:16) card story from the script. Cards whose image
fails keep their text and show the placeholder image instead. The card list
is returned to the caller and is not part of the pipeline state.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

from nano_creator.config.constants import PLACEHOLDER_CARD_IMAGE_URL, PORTRAIT_ASPECT_RATIO
from nano_creator.config.settings import StudioConfig
from nano_creator.core.exceptions import PreconditionError
from nano_creator.core.logging import get_logger
from nano_creator.models.generation import CardNews, GeneratedCard
from nano_creator.services.generation.client import GenerationClient, RetryCallback
from nano_creator.services.infrastructure.orchestration import Failure, Outcome, run_batch

logger = get_logger(__name__, component="card_news")


class CardNewsStage:
    def __init__(
        self,
        client: GenerationClient,
        config: StudioConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.config = config
        self._sleep = sleep

    async def run(
        self,
        script: str,
        on_item_settled: Optional[Callable[[Outcome], None]] = None,
        on_retry: Optional[RetryCallback] = None,
    ) -> List[GeneratedCard]:
        if not script.strip():
            raise PreconditionError("Generate a script in the Scripting stage first")

        cards = await self.client.generate_card_news(script, on_retry=on_retry)
        logger.info(f"Generated {len(cards)} card news items")

        async def render(card: CardNews) -> bytes:
            return await self.client.generate_image(card.image_prompt, PORTRAIT_ASPECT_RATIO)

        images = await run_batch(
            cards,
            render,
            window_size=self.config.card_window_size,
            on_item_settled=on_item_settled,
            sleep=self._sleep,
            label="card_images",
        )

        generated = []
        for outcome in images:
            card = outcome.input
            if isinstance(outcome, Failure):
                generated.append(
                    GeneratedCard(
                        **card.model_dump(),
                        image_url=PLACEHOLDER_CARD_IMAGE_URL,
                        generation_failed=True,
                    )
                )
            else:
                generated.append(GeneratedCard(**card.model_dump(), image_data=outcome.value))
        return generated
