"""VisionClient backends: one call, fallback text, single failure kind"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from notescan.constants import MSG_NO_TEXT_EXTRACTED, TRANSCRIPTION_PROMPT
from notescan.errors import TranscriptionFailed
from notescan.request_builder import build_request
from notescan.vision.claude import ClaudeVisionClient
from notescan.vision.client import VisionClient
from notescan.vision.openai import OpenAIVisionClient


def make_request(n: int = 3):
    return build_request([("image/jpeg", f"img-{i}") for i in range(n)])


def claude_response(text: str) -> MagicMock:
    response = MagicMock()
    response.content = [MagicMock(type="text", text=text)]
    return response


def openai_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def test_backends_implement_abc():
    assert issubclass(ClaudeVisionClient, VisionClient)
    assert issubclass(OpenAIVisionClient, VisionClient)


# ── ClaudeVisionClient ────────────────────────────────────────────────────────


async def test_claude_sends_all_images_then_prompt_in_one_call():
    client = ClaudeVisionClient(api_key="test-key", model="claude-test", max_tokens=512)

    with patch("notescan.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(return_value=claude_response("Hola"))
        mock_cls.return_value = mock_anthropic

        result = await client.transcribe(make_request(4))

    assert result == "Hola"
    mock_cls.assert_called_once_with(api_key="test-key")
    mock_anthropic.messages.create.assert_called_once()
    kwargs = mock_anthropic.messages.create.call_args.kwargs
    assert kwargs["model"] == "claude-test"
    assert kwargs["max_tokens"] == 512
    content = kwargs["messages"][0]["content"]
    assert [b["type"] for b in content] == ["image"] * 4 + ["text"]
    assert [b["source"]["data"] for b in content[:-1]] == ["img-0", "img-1", "img-2", "img-3"]
    assert content[0]["source"]["media_type"] == "image/jpeg"
    assert content[-1]["text"] == TRANSCRIPTION_PROMPT


async def test_claude_returns_stripped_text():
    client = ClaudeVisionClient(api_key="k", model="m", max_tokens=10)

    with patch("notescan.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(return_value=claude_response("  # Tema \n"))
        mock_cls.return_value = mock_anthropic

        result = await client.transcribe(make_request())

    assert result == "# Tema"


async def test_claude_empty_text_returns_fallback():
    client = ClaudeVisionClient(api_key="k", model="m", max_tokens=10)

    with patch("notescan.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(return_value=claude_response("   "))
        mock_cls.return_value = mock_anthropic

        result = await client.transcribe(make_request())

    assert result == MSG_NO_TEXT_EXTRACTED


async def test_claude_api_error_raises_transcription_failed():
    client = ClaudeVisionClient(api_key="k", model="m", max_tokens=10)

    with patch("notescan.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(side_effect=RuntimeError("API down"))
        mock_cls.return_value = mock_anthropic

        with pytest.raises(TranscriptionFailed) as exc_info:
            await client.transcribe(make_request())

    assert "API down" not in exc_info.value.user_message
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    mock_anthropic.messages.create.assert_called_once()


# ── OpenAIVisionClient ────────────────────────────────────────────────────────


async def test_openai_sends_data_urls_then_prompt():
    client = OpenAIVisionClient(api_key="test-key", model="gpt-test", max_tokens=256)

    with patch("notescan.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(return_value=openai_response("Hola mundo"))
        mock_cls.return_value = mock_openai

        result = await client.transcribe(make_request(3))

    assert result == "Hola mundo"
    mock_openai.chat.completions.create.assert_called_once()
    kwargs = mock_openai.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-test"
    content = kwargs["messages"][0]["content"]
    assert [b["type"] for b in content] == ["image_url"] * 3 + ["text"]
    assert content[0]["image_url"]["url"] == "data:image/jpeg;base64,img-0"


async def test_openai_missing_content_returns_fallback():
    client = OpenAIVisionClient(api_key="k", model="m", max_tokens=10)

    with patch("notescan.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(return_value=openai_response(None))
        mock_cls.return_value = mock_openai

        result = await client.transcribe(make_request())

    assert result == MSG_NO_TEXT_EXTRACTED


async def test_openai_malformed_response_raises_transcription_failed():
    client = OpenAIVisionClient(api_key="k", model="m", max_tokens=10)
    response = MagicMock()
    response.choices = []

    with patch("notescan.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(return_value=response)
        mock_cls.return_value = mock_openai

        with pytest.raises(TranscriptionFailed):
            await client.transcribe(make_request())
