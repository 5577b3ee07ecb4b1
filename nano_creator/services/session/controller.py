"""
Session controller

Owns one project's PipelineState and is its only writer. Stages compute
results; the controller applies them, stores binary results as handles,
schedules autosave and reports outcomes on the notification channel.

Lifecycle:
    async with SessionController(StudioConfig.from_env()) as session:
        offer = session.restore_offer()
        ...
    # close() cancels the pending autosave and releases every held handle

Notification rules:
    - a precondition failure emits one warning and no remote call is made
    - every terminal failure emits exactly one error
    - a batch emits one error per failed item and one success naming the
      number of items that succeeded
"""

import asyncio
import time
import uuid
from contextlib import contextmanager
from typing import Awaitable, Callable, Dict, Iterator, List, Optional, Sequence

from nano_creator.config.settings import StudioConfig
from nano_creator.core.exceptions import PreconditionError, StudioError
from nano_creator.core.logging import clear_context, get_logger, set_session_id
from nano_creator.core.notifications import NotificationChannel
from nano_creator.models.generation import GeneratedCard, ResearchRequest, ResearchResult, ResearchSource
from nano_creator.models.persona import Persona
from nano_creator.models.pipeline import (
    AssetKind,
    AudioTrack,
    Handle,
    PipelineState,
    VideoComposition,
    VisualAsset,
)
from nano_creator.models.session import SavedSession
from nano_creator.services.generation.client import GenerationClient
from nano_creator.services.infrastructure.llm.gemini import GeminiClient
from nano_creator.services.infrastructure.orchestration import BatchResult, Failure, Outcome
from nano_creator.services.infrastructure.retry import RetryExecutor
from nano_creator.services.infrastructure.storage import (
    AutoSaver,
    HandleStore,
    JsonFileSessionStore,
    Scheduler,
    TempFileHandleStore,
)
from nano_creator.services.pipeline import (
    CardNewsStage,
    GeneratedImage,
    PlanningStage,
    ScriptingStage,
    VideoStage,
    VisualsStage,
)

logger = get_logger(__name__, component="session")

AUDIO_MIME_TYPE = "audio/wav"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class SessionController:
    """Single writer of the pipeline state for one studio session."""

    def __init__(
        self,
        config: StudioConfig,
        client: Optional[GenerationClient] = None,
        handle_store: Optional[HandleStore] = None,
        session_store: Optional[JsonFileSessionStore] = None,
        notifications: Optional[NotificationChannel] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], int] = _epoch_ms,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_progress: Optional[Callable[[str], None]] = None,
    ):
        self.config = config
        self.session_id = uuid.uuid4().hex[:12]
        self.state = PipelineState()
        self.notifications = notifications or NotificationChannel()
        self.on_progress = on_progress
        self.client = client
        self.handle_store = handle_store
        self.session_store = session_store or JsonFileSessionStore(config.storage_dir, config.autosave_key)
        self._scheduler = scheduler
        self._clock = clock
        self._sleep = sleep
        self._autosaver: Optional[AutoSaver] = None
        self._started = False
        self._closed = False

    # ----- lifecycle -----

    def start(self) -> "SessionController":
        if self._closed:
            raise StudioError("Session was closed; create a new one")
        if self._started:
            return self
        set_session_id(self.session_id)

        if self.client is None:
            self.client = GenerationClient(GeminiClient(self.config), self.config, RetryExecutor(self._sleep))
        if self.handle_store is None:
            self.handle_store = TempFileHandleStore(self.config.handle_dir / self.session_id)
        self._autosaver = AutoSaver(
            self.session_store,
            delay=self.config.autosave_delay,
            clock=self._clock,
            scheduler=self._scheduler,
            on_saved=self._mark_persisted,
        )

        self.planning = PlanningStage(self.client)
        self.scripting = ScriptingStage(self.client, self.config, self._sleep)
        self.visuals = VisualsStage(self.client, self.config, self._sleep)
        self.video = VideoStage(self.config.timeline_slot_seconds)
        self.card_news = CardNewsStage(self.client, self.config, self._sleep)

        self._started = True
        logger.info(f"Session {self.session_id} started")
        return self

    def close(self) -> None:
        """Drop any pending autosave and release every held handle once."""
        if self._closed:
            return
        if self._autosaver is not None:
            self._autosaver.cancel()
        if self._started:
            self._release_all()
        self._closed = True
        logger.info(f"Session {self.session_id} closed")
        clear_context()

    async def __aenter__(self) -> "SessionController":
        return self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _require_started(self) -> None:
        if not self._started or self._closed:
            raise StudioError("Session is not running; call start() first")

    @property
    def personas(self) -> List[Persona]:
        return list(self.config.personas)

    # ----- progress and notifications -----

    def _progress(self, message: str) -> None:
        logger.info(message)
        if self.on_progress is not None:
            self.on_progress(message)

    def _retry_reporter(self, label: str):
        def report(attempt: int, error) -> None:
            self._progress(f"{label}: retrying (attempt {attempt}) after {error.kind.value} error")

        return report

    @contextmanager
    def _operation(self, label: str) -> Iterator[None]:
        """Turn a failure escaping the block into exactly one notification."""
        self._require_started()
        try:
            yield
        except PreconditionError as e:
            self.notifications.warning(str(e))
            raise
        except StudioError as e:
            self.notifications.error(f"{label} failed: {e}")
            raise

    # ----- autosave -----

    def _schedule_autosave(self) -> None:
        if self._autosaver is not None:
            self._autosaver.schedule(self.state.snapshot())

    def _mark_persisted(self, saved_at) -> None:
        self.state.last_persisted_at = saved_at

    def flush_autosave(self) -> bool:
        """Write a pending autosave immediately."""
        return self._autosaver.flush() if self._autosaver is not None else False

    # ----- state mutations -----

    def set_research(self, text: str, sources: Optional[Sequence[ResearchSource]] = None) -> None:
        self.state.research_text = text
        self.state.research_sources = list(sources or [])
        if text.strip():
            self.state.research_seen = True
        self._schedule_autosave()

    def set_script(self, text: str) -> None:
        """Replace the script wholesale (generation, optimization or user edit)."""
        if text.strip() and not (self.state.research_seen or self.state.research_text.strip()):
            raise PreconditionError("A script needs research to derive from")
        self.state.script_text = text
        self._schedule_autosave()

    def set_keywords(self, keywords: Sequence[str]) -> None:
        self.state.keywords = list(keywords)
        self._schedule_autosave()

    def _store(self, data: bytes, mime_type: str) -> Handle:
        self._require_started()
        return self.handle_store.create(data, mime_type)

    def _release(self, handle: Handle) -> None:
        self.handle_store.release(handle)

    def assign_audio(self, persona_id: str, wav: bytes) -> AudioTrack:
        if self.config.persona(persona_id) is None:
            raise PreconditionError(f"Unknown persona: {persona_id}")
        previous = self.state.audio_tracks.pop(persona_id, None)
        if previous is not None:
            self._release(previous.handle)
        track = AudioTrack(handle=self._store(wav, AUDIO_MIME_TYPE))
        self.state.audio_tracks[persona_id] = track
        return track

    def set_conversation_audio(self, wav: bytes) -> AudioTrack:
        self.clear_conversation_audio()
        track = AudioTrack(handle=self._store(wav, AUDIO_MIME_TYPE))
        self.state.conversation_track = track
        return track

    def clear_conversation_audio(self) -> None:
        previous, self.state.conversation_track = self.state.conversation_track, None
        if previous is not None:
            self._release(previous.handle)

    def clear_audio(self, persona_ids: Optional[Sequence[str]] = None) -> None:
        for persona_id in list(persona_ids if persona_ids is not None else self.state.audio_tracks):
            track = self.state.audio_tracks.pop(persona_id, None)
            if track is not None:
                self._release(track.handle)

    def append_visual_asset(self, image: GeneratedImage) -> VisualAsset:
        asset = VisualAsset(
            id=f"img_{uuid.uuid4().hex[:10]}",
            kind=AssetKind.IMAGE,
            handle=self._store(image.data, image.mime_type),
            prompt=image.prompt,
            keyword=image.keyword,
        )
        self.state.visual_assets.append(asset)
        return asset

    def append_visual_assets(self, images: Sequence[GeneratedImage]) -> List[VisualAsset]:
        return [self.append_visual_asset(image) for image in images]

    def clear_visuals(self) -> None:
        assets, self.state.visual_assets = self.state.visual_assets, []
        for asset in assets:
            self._release(asset.handle)

    def _release_all(self) -> None:
        self.clear_audio()
        self.clear_conversation_audio()
        self.clear_visuals()

    def reset(self) -> None:
        """Start over: release every handle, clear the state and the saved record."""
        self._require_started()
        self._release_all()
        self._autosaver.cancel()
        self.state = PipelineState()
        self.session_store.delete()
        self.notifications.info("Started a new project")

    # ----- restore -----

    def restore_offer(self) -> Optional[SavedSession]:
        """The saved record, if it holds anything worth restoring. Not applied."""
        record = self.session_store.read()
        if record is None or not record.has_content():
            return None
        return record

    def restore(self, offer: Optional[SavedSession] = None) -> Optional[int]:
        """Apply a saved record. Returns whole minutes since it was saved."""
        offer = offer or self.restore_offer()
        if offer is None:
            return None
        self.state.research_text = offer.research_text
        self.state.research_seen = self.state.research_seen or bool(offer.research_text.strip())
        self.state.script_text = offer.script_text
        self.state.keywords = list(offer.keywords)
        self._schedule_autosave()

        minutes = offer.minutes_since(self._clock())
        self.notifications.success(f"Restored work saved {minutes} minutes ago")
        return minutes

    def discard_saved(self) -> None:
        self.session_store.delete()
        self.notifications.info("Discarded the saved work")

    # ----- stage operations -----

    async def run_research(self, request: ResearchRequest) -> ResearchResult:
        with self._operation("Research"):
            self._progress("Analyzing data and searching the web...")
            result = await self.planning.run(request, on_retry=self._retry_reporter("Research"))
            self.set_research(result.text, result.sources)
        self.notifications.success("Research complete")
        return result

    async def generate_script(self) -> str:
        with self._operation("Script generation"):
            self._progress("Writing the podcast script...")
            script = await self.scripting.generate_script(self.state.research_text)
            self.set_script(script)
        self.notifications.success("Script generated")
        return script

    async def optimize_script(self) -> str:
        with self._operation("Script optimization"):
            self._progress("Optimizing the script for speech synthesis...")
            script = await self.scripting.optimize_script(
                self.state.script_text,
                on_retry=self._retry_reporter("Script optimization"),
            )
            self.set_script(script)
        self.notifications.success("Script optimized for TTS")
        return script

    def _require_script(self) -> str:
        if not self.state.script_text.strip():
            raise PreconditionError("Generate a script first")
        return self.state.script_text

    async def generate_conversation_audio(self) -> AudioTrack:
        with self._operation("Conversation audio"):
            script = self._require_script()
            self._progress("Generating the full conversation track...")
            wav = await self.scripting.generate_conversation(
                script, self.personas, on_retry=self._retry_reporter("Conversation audio")
            )
            track = self.set_conversation_audio(wav)
        self.notifications.success("Conversation audio generated")
        return track

    async def generate_persona_audio(self, persona_id: str) -> AudioTrack:
        persona = self.config.persona(persona_id)
        label = f"{persona.name if persona else persona_id} audio"
        with self._operation(label):
            if persona is None:
                raise PreconditionError(f"Unknown persona: {persona_id}")
            script = self._require_script()
            self._progress(f"Generating {persona.name} voice...")
            wav = await self.scripting.generate_persona_track(
                script, persona, self.personas, on_retry=self._retry_reporter(label)
            )
            track = self.assign_audio(persona.id, wav)
        self.notifications.success(f"{persona.name} audio generated")
        return track

    async def generate_audio(self) -> BatchResult:
        """Conversation track plus one track per persona.

        Previous tracks are released up front. A failed conversation track or
        persona track is reported and the remaining tracks still run.
        """
        with self._operation("Audio generation"):
            script = self._require_script()
            self.clear_conversation_audio()
            self.clear_audio([p.id for p in self.personas])

            self._progress("Generating the full conversation track...")
            conversation_ok = False
            try:
                wav = await self.scripting.generate_conversation(
                    script, self.personas, on_retry=self._retry_reporter("Conversation audio")
                )
                self.set_conversation_audio(wav)
                conversation_ok = True
            except StudioError as e:
                self.notifications.error(f"Conversation audio failed: {e}")
            await self._sleep(self.config.conversation_pause)

            def settled(outcome: Outcome) -> None:
                persona = outcome.input
                if isinstance(outcome, Failure):
                    self.notifications.error(f"{persona.name} audio failed: {outcome.error}")
                    return
                try:
                    self.assign_audio(persona.id, outcome.value)
                except StudioError as e:
                    self.notifications.error(f"{persona.name} audio could not be stored: {e}")

            def report_retry(persona: Persona, attempt: int) -> None:
                self._progress(f"{persona.name}: retrying (attempt {attempt})")

            self._progress(f"Generating {len(self.personas)} individual voices...")
            result = await self.scripting.generate_persona_tracks(
                script, self.personas, on_item_settled=settled, on_retry=report_retry
            )

        stored = sum(1 for p in self.personas if p.id in self.state.audio_tracks)
        if conversation_ok and stored == len(result):
            self.notifications.success("All audio generated")
        else:
            self.notifications.success(f"Generated {stored} of {len(result)} voice tracks")
        return result

    async def generate_visuals(self) -> BatchResult:
        with self._operation("Visual generation"):
            script = self._require_script()
            stored = 0

            def settled(outcome: Outcome) -> None:
                nonlocal stored
                keyword, _prompt = outcome.input
                if isinstance(outcome, Failure):
                    self.notifications.error(f'"{keyword}" image generation failed: {outcome.error}')
                    return
                try:
                    self.append_visual_asset(outcome.value)
                except StudioError as e:
                    self.notifications.error(f'"{keyword}" image could not be stored: {e}')
                    return
                stored += 1

            result = await self.visuals.run(
                script,
                on_item_settled=settled,
                on_keywords=self.set_keywords,
                on_progress=self._progress,
            )
        self.notifications.success(f"{stored} images generated")
        return result.images

    def compose_video(self) -> VideoComposition:
        self._require_started()
        return self.video.compose(self.state)

    async def generate_card_news(self, label: str = "Card news") -> List[GeneratedCard]:
        with self._operation(label):
            script = self._require_script()
            self._progress("Building card news from the script...")

            def settled(outcome: Outcome) -> None:
                if isinstance(outcome, Failure):
                    self.notifications.error(f'Card "{outcome.input.title}" image generation failed')

            cards = await self.card_news.run(
                script, on_item_settled=settled, on_retry=self._retry_reporter(label)
            )
        images = sum(1 for card in cards if not card.generation_failed)
        self.notifications.success(f"{len(cards)} cards generated, {images} with images")
        return cards

    async def generate_expansion(self) -> List[GeneratedCard]:
        """Expansion shares the card-news input and output shape."""
        return await self.generate_card_news(label="Expansion")

    # ----- inspection -----

    def status(self) -> Dict[str, object]:
        return {
            "session_id": self.session_id,
            "research_chars": len(self.state.research_text),
            "research_sources": len(self.state.research_sources),
            "script_chars": len(self.state.script_text),
            "keywords": list(self.state.keywords),
            "audio_tracks": sorted(self.state.audio_tracks),
            "conversation_track": self.state.conversation_track is not None,
            "visual_assets": len(self.state.visual_assets),
            "last_persisted_at": (
                self.state.last_persisted_at.isoformat() if self.state.last_persisted_at else None
            ),
        }

    def read_handle(self, handle: Handle) -> bytes:
        return self.handle_store.read(handle)
