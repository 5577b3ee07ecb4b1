"""Tests for nano_creator.config"""

import os
from pathlib import Path

import pytest

from nano_creator.config import (
    AUTOSAVE_KEY,
    DEFAULT_RETRY_POLICIES,
    NO_RETRY,
    PERSONAS,
    StudioConfig,
    get_model_config,
    parse_bool_env,
)
from nano_creator.models import OperationKind, RetryPolicy


class TestRetryProfiles:
    @pytest.mark.parametrize(
        "kind,max_retries,timeout,backoff",
        [
            (OperationKind.RESEARCH, 2, 90.0, 1.0),
            (OperationKind.SCRIPT_OPTIMIZE, 2, 300.0, 3.0),
            (OperationKind.SPEECH_SINGLE, 3, 360.0, 3.0),
            (OperationKind.SPEECH_MULTI, 3, 480.0, 5.0),
            (OperationKind.IMAGE_GEN, 3, 60.0, 2.0),
            (OperationKind.CARD_NEWS_GEN, 2, 60.0, 3.0),
        ],
    )
    def test_retrying_operations(self, kind, max_retries, timeout, backoff):
        policy = DEFAULT_RETRY_POLICIES[kind]
        assert (policy.max_retries, policy.timeout, policy.backoff_base) == (max_retries, timeout, backoff)

    @pytest.mark.parametrize(
        "kind", [OperationKind.SCRIPT_GEN, OperationKind.KEYWORD_EXTRACT, OperationKind.IMAGE_PROMPTS]
    )
    def test_single_attempt_operations(self, kind):
        assert DEFAULT_RETRY_POLICIES[kind] == NO_RETRY
        assert NO_RETRY.timeout is None

    def test_every_operation_has_a_policy_and_model(self):
        for kind in OperationKind:
            assert kind in DEFAULT_RETRY_POLICIES
            assert get_model_config(kind).model_name.startswith("gemini-")

    def test_tts_uses_flash_model(self):
        assert get_model_config(OperationKind.SPEECH_MULTI).model_name == "gemini-2.5-flash-preview-tts"


class TestPersonas:
    def test_default_personas(self):
        assert [(p.id, p.voice_id, p.speaker_label) for p in PERSONAS] == [
            ("q", "Puck", "Q"),
            ("jiyoung", "Achernar", "지영"),
        ]


class TestParseBoolEnv:
    @pytest.mark.parametrize("value", ["1", "true", "TRUE", " yes ", "on"])
    def test_truthy(self, value):
        assert parse_bool_env(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "no", ""])
    def test_falsy(self, value):
        assert parse_bool_env(value) is False

    def test_default_when_unset(self):
        assert parse_bool_env(None, default=True) is True


class TestStudioConfig:
    def test_defaults(self):
        config = StudioConfig()
        assert config.api_version == "v1alpha"
        assert config.autosave_key == AUTOSAVE_KEY == "nano-creator-autosave"
        assert config.autosave_delay == 10.0
        assert config.batch_window_size == 3
        assert config.script_token_ceiling == 30000
        assert config.card_news_script_limit == 10000
        assert config.persona_ids == ["q", "jiyoung"]

    def test_policy_tables_are_independent(self):
        first, second = StudioConfig(), StudioConfig()
        first.retry_policies[OperationKind.RESEARCH] = RetryPolicy(max_retries=0, timeout=None, backoff_base=0)
        assert second.policy_for(OperationKind.RESEARCH).max_retries == 2
        assert DEFAULT_RETRY_POLICIES[OperationKind.RESEARCH].max_retries == 2

    def test_persona_lookup(self):
        config = StudioConfig()
        assert config.persona("q").name == "Q (Analyst)"
        assert config.persona("nobody") is None

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        monkeypatch.setenv("NANO_CREATOR_STORAGE_DIR", str(tmp_path / "store"))
        monkeypatch.setenv("NANO_CREATOR_AUTOSAVE_SECONDS", "3.5")
        monkeypatch.setenv("LOG_JSON", "true")
        config = StudioConfig.from_env(env_file=tmp_path / "missing.env")
        assert config.api_key == "from-env"
        assert config.storage_dir == tmp_path / "store"
        assert config.autosave_delay == 3.5
        assert config.log_json is True

    def test_from_env_falls_back_to_api_key(self, monkeypatch, tmp_path):
        monkeypatch.setenv("API_KEY", "fallback")
        assert StudioConfig.from_env(env_file=tmp_path / "missing.env").api_key == "fallback"

    def test_from_env_reads_dotenv_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("GEMINI_API_KEY=dotenv-key\n", encoding="utf-8")
        try:
            config = StudioConfig.from_env(env_file=env_file)
        finally:
            os.environ.pop("GEMINI_API_KEY", None)
        assert config.api_key == "dotenv-key"

    def test_from_env_overrides(self, tmp_path):
        config = StudioConfig.from_env(env_file=tmp_path / "missing.env", output_dir=Path("exports"))
        assert config.output_dir == Path("exports")

    def test_invalid_autosave_seconds_falls_back(self, monkeypatch, tmp_path):
        monkeypatch.setenv("NANO_CREATOR_AUTOSAVE_SECONDS", "soon")
        assert StudioConfig.from_env(env_file=tmp_path / "missing.env").autosave_delay == 10.0
