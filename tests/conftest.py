import io

import pytest
from PIL import Image

from notescan.capture_store import ImageFile


def make_image_bytes(fmt: str = "JPEG", size: tuple[int, int] = (64, 48)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=(240, 240, 230)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def image_file():
    """Factory for in-memory image files."""
    def _make(name: str = "page.jpg", fmt: str = "JPEG") -> ImageFile:
        return ImageFile(name=name, data=make_image_bytes(fmt))

    return _make


@pytest.fixture
def env(monkeypatch):
    """Clean env with the required variables set and .env loading disabled."""
    monkeypatch.setattr("notescan.config.load_dotenv", lambda **_: None)
    for var in (
        "VISION_PROVIDER",
        "ANTHROPIC_API_KEY",
        "OPENAI_API_KEY",
        "CLAUDE_VISION_MODEL",
        "OPENAI_VISION_MODEL",
        "MAX_OUTPUT_TOKENS",
        "PREVIEW_DIR",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "bot123:ABC")
    monkeypatch.setenv("ALLOWED_CHAT_ID", "123456789")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
    return monkeypatch
