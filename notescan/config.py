from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from notescan.constants import (
    CLAUDE_VISION_MODEL,
    DEFAULT_MAX_OUTPUT_TOKENS,
    OPENAI_VISION_MODEL,
    PROVIDER_CLAUDE,
    PROVIDER_OPENAI,
)


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    allowed_chat_id: str
    log_level: str
    vision_provider: str
    anthropic_api_key: Optional[str]
    openai_api_key: Optional[str]
    claude_vision_model: str
    openai_vision_model: str
    max_output_tokens: int
    preview_dir: Optional[str]

    @property
    def vision_model(self) -> str:
        match self.vision_provider:
            case "claude":
                return self.claude_vision_model
            case _:
                return self.openai_vision_model

    @property
    def vision_api_key(self) -> str:
        match self.vision_provider:
            case "claude":
                return self.anthropic_api_key or ""
            case _:
                return self.openai_api_key or ""

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        token = os.getenv("TELEGRAM_BOT_TOKEN")
        chat_id = os.getenv("ALLOWED_CHAT_ID")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        provider = os.getenv("VISION_PROVIDER", "").strip().lower() or None
        anthropic_api_key = os.getenv("ANTHROPIC_API_KEY") or None
        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        claude_model = os.getenv("CLAUDE_VISION_MODEL") or CLAUDE_VISION_MODEL
        openai_model = os.getenv("OPENAI_VISION_MODEL") or OPENAI_VISION_MODEL
        max_tokens = os.getenv("MAX_OUTPUT_TOKENS", str(DEFAULT_MAX_OUTPUT_TOKENS))
        preview_dir = os.getenv("PREVIEW_DIR") or None

        return cls._validate(
            telegram_bot_token=token,
            allowed_chat_id=chat_id,
            log_level=log_level,
            vision_provider=provider,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
            claude_vision_model=claude_model,
            openai_vision_model=openai_model,
            max_output_tokens=int(max_tokens),
            preview_dir=preview_dir,
        )

    @staticmethod
    def _validate(
        telegram_bot_token: Optional[str],
        allowed_chat_id: Optional[str],
        log_level: str,
        vision_provider: Optional[str],
        anthropic_api_key: Optional[str],
        openai_api_key: Optional[str],
        claude_vision_model: str,
        openai_vision_model: str,
        max_output_tokens: int,
        preview_dir: Optional[str],
    ) -> "Config":
        match telegram_bot_token:
            case None | "":
                raise ValueError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match allowed_chat_id:
            case None | "":
                raise ValueError("ALLOWED_CHAT_ID must be set in .env")
            case _:
                pass

        match (vision_provider, anthropic_api_key, openai_api_key):
            case (None, str(), _):
                provider = PROVIDER_CLAUDE
            case (None, None, str()):
                provider = PROVIDER_OPENAI
            case (None, None, None):
                raise ValueError("ANTHROPIC_API_KEY or OPENAI_API_KEY must be set in .env")
            case ("claude", None, _):
                raise ValueError("ANTHROPIC_API_KEY must be set in .env for VISION_PROVIDER=claude")
            case ("openai", _, None):
                raise ValueError("OPENAI_API_KEY must be set in .env for VISION_PROVIDER=openai")
            case ("claude" | "openai" as p, _, _):
                provider = p
            case (other, _, _):
                raise ValueError(f"Unknown VISION_PROVIDER: {other}")

        match max_output_tokens:
            case n if n <= 0:
                raise ValueError("MAX_OUTPUT_TOKENS must be positive")
            case _:
                pass

        return Config(
            telegram_bot_token=telegram_bot_token,
            allowed_chat_id=allowed_chat_id,
            log_level=log_level,
            vision_provider=provider,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
            claude_vision_model=claude_vision_model,
            openai_vision_model=openai_vision_model,
            max_output_tokens=max_output_tokens,
            preview_dir=preview_dir,
        )
