"""
CLI entrypoint.

  nano-creator research --topic "KBL: SK vs KT" [--raw-data data.txt] [--news]
  nano-creator script | optimize | audio [--persona q] | visuals
  nano-creator video | cardnews [--expansion]
  nano-creator status | restore | discard | reset

Every stage command picks up the saved work, runs one stage, writes its
artifacts to the output directory and saves the text state before exiting.
"""

import argparse
import asyncio
import re
import sys
from pathlib import Path
from typing import List, Optional

from nano_creator.config.settings import StudioConfig
from nano_creator.core.exceptions import StudioError
from nano_creator.core.files import create_timestamp, export_bytes, export_json, export_text
from nano_creator.core.logging import get_logger, setup_logging
from nano_creator.core.notifications import Notification
from nano_creator.models.generation import ResearchRequest
from nano_creator.services.session import SessionController

logger = get_logger(__name__, component="cli")

STAGE_COMMANDS = ("research", "script", "optimize", "audio", "visuals", "video", "cardnews")


def _slug(text: str) -> str:
    return re.sub(r"[^\w-]+", "_", text).strip("_")[:40] or "item"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nano-creator",
        description="Sports-analysis podcast studio: research, script, audio, visuals and card news",
    )
    parser.add_argument("--env-file", type=Path, help="Load environment variables from this file")
    parser.add_argument("--output-dir", type=Path, help="Directory for exported artifacts")
    subparsers = parser.add_subparsers(dest="command", required=True)

    research = subparsers.add_parser("research", help="Run grounded research on a topic")
    research.add_argument("--topic", required=True, help="Analysis topic")
    research.add_argument("--instructions", default="", help="Extra instructions for the analyst")
    research.add_argument("--raw-data", type=Path, help="File with raw data to analyze")
    research.add_argument("--news", action="store_true", help="Supplement with recent news via search")

    subparsers.add_parser("script", help="Generate the podcast script from the research")
    subparsers.add_parser("optimize", help="Add TTS delivery tags to the script")

    audio = subparsers.add_parser("audio", help="Generate conversation and per-persona audio")
    audio_target = audio.add_mutually_exclusive_group()
    audio_target.add_argument("--persona", help="Only regenerate this persona's track")
    audio_target.add_argument("--conversation-only", action="store_true", help="Only the full conversation track")

    subparsers.add_parser("visuals", help="Extract keywords and generate B-roll images")
    subparsers.add_parser("video", help="Show the composed timeline")

    cardnews = subparsers.add_parser("cardnews", help="Generate card news from the script")
    cardnews.add_argument("--expansion", action="store_true", help="Label the run as an expansion")

    subparsers.add_parser("status", help="Show the saved work")
    subparsers.add_parser("restore", help="Report what would be restored and apply it")
    subparsers.add_parser("discard", help="Delete the saved work")
    subparsers.add_parser("reset", help="Start a new project")
    return parser


def _print_notification(notification: Notification) -> None:
    print(f"[{notification.kind.value}] {notification.message}", file=sys.stderr)


def _export_audio(session: SessionController, out_dir: Path, stamp: str) -> List[Path]:
    paths = []
    if session.state.conversation_track is not None:
        data = session.read_handle(session.state.conversation_track.handle)
        paths.append(export_bytes(data, out_dir, f"{stamp}_conversation.wav"))
    for persona_id, track in session.state.audio_tracks.items():
        data = session.read_handle(track.handle)
        paths.append(export_bytes(data, out_dir, f"{stamp}_{persona_id}.wav"))
    return paths


def _export_visuals(session: SessionController, out_dir: Path, stamp: str) -> List[Path]:
    paths = []
    for i, asset in enumerate(session.state.visual_assets, start=1):
        data = session.read_handle(asset.handle)
        paths.append(export_bytes(data, out_dir, f"{stamp}_img_{i:02d}_{_slug(asset.keyword)}.png"))
    return paths


async def _run_stage(session: SessionController, args: argparse.Namespace, out_dir: Path) -> List[Path]:
    stamp = create_timestamp()

    if args.command == "research":
        raw_data = args.raw_data.read_text(encoding="utf-8") if args.raw_data else ""
        result = await session.run_research(
            ResearchRequest(topic=args.topic, instructions=args.instructions, raw_data=raw_data, analyze_news=args.news)
        )
        paths = [export_text(result.text, out_dir, f"{stamp}_research.txt")]
        if result.sources:
            paths.append(export_json([s.model_dump() for s in result.sources], out_dir, f"{stamp}_sources.json"))
        return paths

    if args.command in ("script", "optimize"):
        if args.command == "script":
            script = await session.generate_script()
        else:
            script = await session.optimize_script()
        return [export_text(script, out_dir, f"{stamp}_podcast_script.txt")]

    if args.command == "audio":
        if args.persona:
            await session.generate_persona_audio(args.persona)
        elif args.conversation_only:
            await session.generate_conversation_audio()
        else:
            await session.generate_audio()
        return _export_audio(session, out_dir, stamp)

    if args.command == "visuals":
        await session.generate_visuals()
        paths = _export_visuals(session, out_dir, stamp)
        paths.append(export_json(session.state.keywords, out_dir, f"{stamp}_keywords.json"))
        return paths

    if args.command == "video":
        composition = session.compose_video()
        for item in composition.timeline:
            print(f"{item.start_time:6.1f}s  {item.duration:4.1f}s  {item.asset.keyword or item.asset.prompt[:50]}")
        print(f"Total {composition.total_duration:.1f}s, audio: {'yes' if composition.has_audio else 'no'}")
        return []

    if args.command == "cardnews":
        if args.expansion:
            cards = await session.generate_expansion()
        else:
            cards = await session.generate_card_news()
        paths = [export_json([c.to_export() for c in cards], out_dir, f"{stamp}_card_news.json")]
        for i, card in enumerate(cards, start=1):
            if card.image_data:
                paths.append(export_bytes(card.image_data, out_dir, f"{stamp}_card_{i:02d}.png"))
        return paths

    raise ValueError(f"Unknown stage command: {args.command}")


async def _run(args: argparse.Namespace, config: StudioConfig) -> int:
    async with SessionController(config, on_progress=lambda msg: print(msg, file=sys.stderr)) as session:
        session.notifications.subscribe(_print_notification)

        if args.command == "status":
            offer = session.restore_offer()
            if offer is None:
                print("No saved work")
            else:
                print(f"Research: {len(offer.research_text):,} chars")
                print(f"Script:   {len(offer.script_text):,} chars")
                print(f"Keywords: {', '.join(offer.keywords) or '-'}")
            return 0
        if args.command == "restore":
            minutes = session.restore()
            if minutes is None:
                print("No saved work to restore")
            session.flush_autosave()
            return 0
        if args.command == "discard":
            session.discard_saved()
            return 0
        if args.command == "reset":
            session.reset()
            return 0

        offer = session.restore_offer()
        if offer is not None:
            session.restore(offer)

        try:
            paths = await _run_stage(session, args, config.output_dir)
        except StudioError as e:
            logger.debug(f"{args.command} failed: {e}")
            return 1
        finally:
            session.flush_autosave()

        for path in paths:
            print(path)
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {}
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    config = StudioConfig.from_env(env_file=args.env_file, **overrides)
    setup_logging(config.log_level, config.log_file, config.log_json)

    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    sys.exit(main())
