"""Tests for the remote generation client"""

import base64
import json

import pytest

from nano_creator.config import CARD_NEWS_TRUNCATION_MARKER, PERSONAS
from nano_creator.core.exceptions import (
    AuthError,
    ExhaustedError,
    InputTooLargeError,
    ParseError,
    ServerError,
)
from nano_creator.services.generation import (
    GenerationClient,
    estimate_tokens,
    normalize_keywords,
    truncate_script,
)
from nano_creator.services.infrastructure.retry import RetryExecutor


@pytest.fixture
def client(transport, studio_config, recording_sleep):
    return GenerationClient(transport, studio_config, RetryExecutor(recording_sleep))


class TestHelpers:
    def test_estimate_tokens(self):
        assert estimate_tokens("") == 0
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2

    def test_normalize_truncates(self):
        assert normalize_keywords([str(i) for i in range(12)]) == [str(i) for i in range(10)]

    def test_normalize_pads_by_cycling(self):
        assert normalize_keywords(["a", " b ", ""], count=5) == ["a", "b", "a", "b", "a"]

    def test_normalize_empty_is_parse_error(self):
        with pytest.raises(ParseError):
            normalize_keywords(["", "  "])

    def test_truncate_script(self):
        assert truncate_script("short", 10) == "short"
        assert truncate_script("x" * 12, 10) == "x" * 10 + CARD_NEWS_TRUNCATION_MARKER


@pytest.mark.asyncio
class TestResearch:
    async def test_attaches_search_without_raw_data(self, client, transport, responses):
        transport.push(responses.text("report", sources=[("https://a.example", "A")]))

        result = await client.research("Lakers vs Celtics", "Focus on pace")

        assert result.text == "report"
        assert [(s.uri, s.title) for s in result.sources] == [("https://a.example", "A")]
        call = transport.calls[0]
        assert call.model == "gemini-2.5-pro"
        assert call.config.tools == ["google_search"]
        assert "No raw data provided" in call.contents
        assert "Lakers vs Celtics" in call.contents

    async def test_no_search_with_raw_data(self, client, transport, responses):
        transport.push(responses.text("report"))
        await client.research("topic", raw_data="PTS 110-102")
        assert transport.calls[0].config is None
        assert "PTS 110-102" in transport.calls[0].contents

    async def test_news_analysis_forces_search(self, client, transport, responses):
        transport.push(responses.text("report"))
        await client.research("topic", raw_data="data", analyze_news=True)
        call = transport.calls[0]
        assert call.config.tools == ["google_search"]
        assert "NEWS ANALYSIS" in call.contents

    async def test_inputs_are_sanitized(self, client, transport, responses):
        transport.push(responses.text("report"))
        await client.research("핸디캡 분석", raw_data="언더오버 220.5")
        contents = transport.calls[0].contents
        assert "핸디캡" not in contents
        assert "언더오버" not in contents
        assert "총점 220.5" in contents

    async def test_retries_server_errors(self, client, transport, responses, recording_sleep):
        transport.push(ServerError("busy"), responses.text("report"))
        retries = []
        result = await client.research("topic", on_retry=lambda attempt, error: retries.append(attempt))
        assert result.text == "report"
        assert retries == [1]
        assert recording_sleep.delays == [1.0]

    async def test_exhausts_after_three_attempts(self, client, transport, recording_sleep):
        transport.push(*[ServerError("busy") for _ in range(3)])
        with pytest.raises(ExhaustedError):
            await client.research("topic")
        assert len(transport.calls) == 3
        assert recording_sleep.delays == [1.0, 2.0]

    async def test_auth_error_not_retried(self, client, transport):
        transport.push(AuthError("bad key"))
        with pytest.raises(AuthError):
            await client.research("topic")
        assert len(transport.calls) == 1

    async def test_empty_text_is_parse_error(self, client, transport, responses):
        transport.push(responses.text("  "))
        with pytest.raises(ParseError):
            await client.research("topic")
        assert len(transport.calls) == 1


@pytest.mark.asyncio
class TestScript:
    async def test_generates_script(self, client, transport, responses):
        transport.push(responses.text("Q: hello"))
        assert await client.generate_script("research") == "Q: hello"
        assert "--- RESEARCH DATA ---" in transport.calls[0].contents

    async def test_token_guard_rejects_before_calling(self, client, transport):
        with pytest.raises(InputTooLargeError) as exc_info:
            await client.generate_script("x" * 130_000)
        assert transport.calls == []
        assert exc_info.value.limit == 30000

    async def test_script_generation_is_single_attempt(self, client, transport, recording_sleep):
        transport.push(ServerError("busy"))
        with pytest.raises(ExhaustedError):
            await client.generate_script("research")
        assert len(transport.calls) == 1
        assert recording_sleep.delays == []

    async def test_optimize_uses_its_own_backoff(self, client, transport, responses, recording_sleep):
        transport.push(ServerError("busy"), responses.text("optimized"))
        assert await client.optimize_script("Q: hi") == "optimized"
        assert recording_sleep.delays == [3.0]


@pytest.mark.asyncio
class TestSpeech:
    async def test_single_speaker(self, client, transport, responses):
        transport.push(responses.inline(b"\x01\x00\x02\x00"))
        pcm = await client.synthesize_speech("hello", PERSONAS[0])
        assert pcm == b"\x01\x00\x02\x00"
        call = transport.calls[0]
        assert call.model == "gemini-2.5-flash-preview-tts"
        assert call.config.response_modalities == ["AUDIO"]
        assert call.config.voice_name == "Puck"

    async def test_multi_speaker_maps_labels_to_voices(self, client, transport, responses):
        transport.push(responses.inline(base64.b64encode(b"\x00\x00").decode("ascii")))
        pcm = await client.synthesize_conversation("Q: hi\n지영: hello", PERSONAS)
        assert pcm == b"\x00\x00"
        assert transport.calls[0].config.speaker_voices == {"Q": "Puck", "지영": "Achernar"}

    async def test_missing_audio_is_parse_error(self, client, transport, responses):
        transport.push(responses.text("I cannot speak"))
        with pytest.raises(ParseError):
            await client.synthesize_speech("hello", PERSONAS[0])
        assert len(transport.calls) == 1


@pytest.mark.asyncio
class TestVisuals:
    async def test_image_prompt_carries_aspect_ratio(self, client, transport, responses):
        transport.push(responses.inline(b"png", mime_type="image/png"))
        assert await client.generate_image("court at night", "9:16") == b"png"
        call = transport.calls[0]
        assert call.contents == "court at night, 9:16 aspect ratio"
        assert call.config.response_modalities == ["IMAGE"]
        assert call.model == "gemini-2.5-flash-image"

    async def test_image_backoff(self, client, transport, responses, recording_sleep):
        transport.push(ServerError("a"), ServerError("b"), responses.inline(b"png"))
        await client.generate_image("x")
        assert recording_sleep.delays == [2.0, 4.0]

    async def test_keywords_are_normalized_to_ten(self, client, transport, responses):
        transport.push(responses.text('```json\n["rebound", "pace", "three-pointer"]\n```'))
        keywords = await client.extract_keywords("Q: script")
        assert len(keywords) == 10
        assert keywords[:4] == ["rebound", "pace", "three-pointer", "rebound"]
        assert transport.calls[0].config.response_mime_type == "application/json"

    async def test_keywords_wrong_shape(self, client, transport, responses):
        transport.push(responses.text('{"keywords": ["a"]}'))
        with pytest.raises(ParseError):
            await client.extract_keywords("Q: script")

    async def test_image_prompts(self, client, transport, responses):
        transport.push(responses.text(json.dumps({"rebound": "a player grabbing a rebound"})))
        prompts = await client.generate_image_prompts(["rebound"])
        assert prompts == {"rebound": "a player grabbing a rebound"}
        assert '["rebound"]' in transport.calls[0].contents


@pytest.mark.asyncio
class TestCardNews:
    async def test_cards(self, client, transport, responses):
        payload = {"cards": [{"title": "T1", "content": "C1", "image_prompt": "P1"},
                             {"title": "T2", "content": "C2", "image_prompt": "P2"}]}
        transport.push(responses.text(json.dumps(payload)))
        cards = await client.generate_card_news("Q: script")
        assert [c.title for c in cards] == ["T1", "T2"]

    async def test_long_script_is_truncated(self, client, transport, responses):
        transport.push(responses.text('{"cards": []}'))
        await client.generate_card_news("y" * 12_000)
        contents = transport.calls[0].contents
        assert CARD_NEWS_TRUNCATION_MARKER in contents
        assert "y" * 10_001 not in contents

    async def test_invalid_payload(self, client, transport, responses):
        transport.push(responses.text("[]"))
        with pytest.raises(ParseError):
            await client.generate_card_news("Q: script")
