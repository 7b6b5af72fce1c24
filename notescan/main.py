"""Entry point — wires Config → VisionClient → SessionRegistry → TelegramClient."""
import logging

from rich.logging import RichHandler

from notescan.capture_store import ImageCaptureStore
from notescan.config import Config
from notescan.constants import MSG_BOT_STARTING
from notescan.session import NoteSession, SessionRegistry
from notescan.telegram.client import TelegramClient
from notescan.vision.claude import ClaudeVisionClient
from notescan.vision.client import VisionClient
from notescan.vision.openai import OpenAIVisionClient


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def build_vision_client(config: Config) -> VisionClient:
    match config.vision_provider:
        case "claude":
            client_cls = ClaudeVisionClient
        case _:
            client_cls = OpenAIVisionClient
    return client_cls(
        api_key=config.vision_api_key,
        model=config.vision_model,
        max_tokens=config.max_output_tokens,
    )


def build_sessions(config: Config, vision: VisionClient) -> SessionRegistry:
    return SessionRegistry(
        lambda chat_id: NoteSession(ImageCaptureStore(config.preview_dir), vision, name=chat_id)
    )


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_BOT_STARTING)

    sessions = build_sessions(config, build_vision_client(config))
    try:
        TelegramClient(config, sessions).run()
    finally:
        sessions.close()


if __name__ == "__main__":
    main()
