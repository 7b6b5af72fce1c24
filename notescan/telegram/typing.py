"""Typing indicator shown in a chat while a transcription is in flight."""
import asyncio
import contextlib
import logging

from telegram import Bot
from telegram.constants import ChatAction
from telegram.error import TelegramError

from notescan.constants import MSG_LOG_TYPING_FAILED, TELEGRAM_TYPING_INTERVAL

logger = logging.getLogger(__name__)


class TelegramTypingIndicator:
    """Async context manager that keeps the TYPING action alive.

    Telegram drops the action after a few seconds, so it is resent every
    ``interval`` seconds until the block exits. Exiting wakes the refresh
    loop at once instead of waiting out the interval.
    """

    def __init__(self, bot: Bot, chat_id: str, interval: float = TELEGRAM_TYPING_INTERVAL) -> None:
        self._bot = bot
        self._chat_id = int(chat_id)
        self._interval = interval
        self._done = asyncio.Event()
        self._task: asyncio.Task | None = None

    async def __aenter__(self) -> "TelegramTypingIndicator":
        self._done.clear()
        self._task = asyncio.create_task(self._refresh())
        return self

    async def __aexit__(self, *exc_info) -> None:
        self._done.set()
        match self._task:
            case None:
                pass
            case task:
                self._task = None
                await task

    async def _refresh(self) -> None:
        while not self._done.is_set():
            try:
                await self._bot.send_chat_action(chat_id=self._chat_id, action=ChatAction.TYPING)
            except TelegramError as exc:
                logger.debug(MSG_LOG_TYPING_FAILED, self._chat_id, exc)
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._done.wait(), timeout=self._interval)
