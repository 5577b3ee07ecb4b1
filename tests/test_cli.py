"""Tests for the command line entrypoint"""

from pathlib import Path

import pytest

from nano_creator import cli
from nano_creator.config import AUTOSAVE_KEY
from nano_creator.models import SavedSession
from nano_creator.services.infrastructure.storage import JsonFileSessionStore


@pytest.fixture
def run_cli(tmp_path, monkeypatch):
    storage = tmp_path / "store"
    monkeypatch.setenv("NANO_CREATOR_STORAGE_DIR", str(storage))
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)

    def run(*argv):
        return cli.main(["--env-file", str(tmp_path / "missing.env"), "--output-dir", str(tmp_path / "out"), *argv])

    run.slot = JsonFileSessionStore(storage, AUTOSAVE_KEY)
    return run


class TestParser:
    def test_research_arguments(self):
        args = cli.build_parser().parse_args(
            ["research", "--topic", "SK vs KT", "--raw-data", "box.txt", "--news"]
        )
        assert args.command == "research"
        assert args.topic == "SK vs KT"
        assert args.raw_data == Path("box.txt")
        assert args.news is True
        assert args.instructions == ""

    def test_research_requires_topic(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["research"])

    def test_audio_targets_are_exclusive(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["audio", "--persona", "q", "--conversation-only"])

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_global_options(self):
        args = cli.build_parser().parse_args(["--output-dir", "exports", "cardnews", "--expansion"])
        assert args.output_dir == Path("exports")
        assert args.expansion is True


class TestMain:
    def test_status_without_saved_work(self, run_cli, capsys):
        assert run_cli("status") == 0
        assert "No saved work" in capsys.readouterr().out

    def test_status_with_saved_work(self, run_cli, capsys):
        run_cli.slot.write(SavedSession(research_text="R" * 1200, keywords=["pace"], timestamp=1))
        assert run_cli("status") == 0
        out = capsys.readouterr().out
        assert "Research: 1,200 chars" in out
        assert "Keywords: pace" in out

    def test_stage_precondition_failure_exits_nonzero(self, run_cli, capsys):
        assert run_cli("script") == 1
        assert "[warning] Run the research step first" in capsys.readouterr().err

    def test_video_uses_restored_work(self, run_cli, capsys):
        run_cli.slot.write(SavedSession(research_text="R", script_text="Q: hi", timestamp=1))
        assert run_cli("video") == 0
        captured = capsys.readouterr()
        assert "Total 0.0s, audio: no" in captured.out
        assert "Restored work saved" in captured.err

    def test_discard(self, run_cli):
        run_cli.slot.write(SavedSession(research_text="R", timestamp=1))
        assert run_cli("discard") == 0
        assert run_cli.slot.read() is None
