"""
Planning stage - research synthesis from a topic, instructions and raw data.
"""

from typing import Optional

from nano_creator.core.exceptions import PreconditionError
from nano_creator.core.logging import get_logger
from nano_creator.models.generation import ResearchRequest, ResearchResult
from nano_creator.services.generation.client import GenerationClient, RetryCallback

logger = get_logger(__name__, component="planning")


class PlanningStage:
    def __init__(self, client: GenerationClient):
        self.client = client

    async def run(self, request: ResearchRequest, on_retry: Optional[RetryCallback] = None) -> ResearchResult:
        if not request.topic.strip():
            raise PreconditionError("Enter an analysis topic first")

        result = await self.client.research(
            request.topic,
            request.instructions,
            request.raw_data,
            request.analyze_news,
            on_retry=on_retry,
        )
        logger.info(f"Research complete: {len(result.text):,} chars, {len(result.sources)} sources")
        return result
