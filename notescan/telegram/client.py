"""TelegramClient — event-driven transport via python-telegram-bot."""
import logging
from typing import Awaitable, Callable, Optional

from telegram import Bot, Update
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from notescan.capture_store import ImageFile
from notescan.config import Config
from notescan.constants import (
    CMD_HELP,
    CMD_LIST,
    CMD_NEW,
    CMD_REMOVE,
    CMD_START,
    CMD_STATUS,
    CMD_TRANSCRIBE,
    MIN_IMAGES,
    MSG_BLOCKED_CHAT,
    MSG_HELP,
    MSG_IMAGE_LIST_HEADER,
    MSG_IMAGE_LIST_ITEM,
    MSG_IMAGE_REMOVED,
    MSG_IMAGES_ADDED,
    MSG_IMAGES_MISSING,
    MSG_IMAGES_READY,
    MSG_LOG_SEND_FAILED,
    MSG_NEW_SESSION,
    MSG_NO_IMAGES,
    MSG_REMOVE_USAGE,
    MSG_RESULT_FILES,
    MSG_STATUS,
    MSG_UNEXPECTED_ERROR,
)
from notescan.errors import NoteScanError
from notescan.export import ExportFile, split_message, to_print_file, to_text_file
from notescan.session import NoteSession, SessionRegistry
from notescan.telegram.typing import TelegramTypingIndicator

logger = logging.getLogger(__name__)

Handler = Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]
# (session, chat_id, args, bot) -> reply text, or None when the handler already replied
Action = Callable[[NoteSession, str, list[str], Bot], Awaitable[Optional[str]]]


# ── pure helpers (module-level so tests can import them directly) ──────────────


def progress_reply(count: int) -> str:
    match MIN_IMAGES - count:
        case missing if missing > 0:
            hint = MSG_IMAGES_MISSING.format(missing=missing)
        case _:
            hint = MSG_IMAGES_READY
    return MSG_IMAGES_ADDED.format(count=count, hint=hint)


def list_reply(session: NoteSession) -> str:
    match session.images:
        case ():
            return MSG_NO_IMAGES
        case images:
            lines = [MSG_IMAGE_LIST_HEADER.format(count=len(images))]
            lines += [
                MSG_IMAGE_LIST_ITEM.format(position=i, name=img.name)
                for i, img in enumerate(images, start=1)
            ]
            return "\n".join(lines)


def status_reply(session: NoteSession) -> str:
    return MSG_STATUS.format(
        state=session.state.value,
        count=len(session.images),
        minimum=MIN_IMAGES,
        model=session.model,
    )


def parse_position(args: list[str]) -> int | None:
    """Parse a 1-based photo position from command args."""
    match args:
        case [raw] if raw.isdigit() and int(raw) > 0:
            return int(raw)
        case _:
            return None


# ── client ────────────────────────────────────────────────────────────────────


class TelegramClient:

    def __init__(self, config: Config, sessions: SessionRegistry) -> None:
        self._token = config.telegram_bot_token
        self._allowed_chat_id = config.allowed_chat_id
        self._sessions = sessions
        self._app: Optional[Application] = None

    def run(self) -> None:
        self._app = Application.builder().token(self._token).build()
        self._app.add_handler(TGMessageHandler(filters.PHOTO, self._make_photo_handler()))
        self._app.add_handler(
            TGMessageHandler(filters.Document.IMAGE, self._make_document_handler())
        )
        commands: dict[str, Action] = {
            CMD_START: self._help,
            CMD_HELP: self._help,
            CMD_TRANSCRIBE: self._transcribe,
            CMD_LIST: self._list,
            CMD_REMOVE: self._remove,
            CMD_NEW: self._new,
            CMD_STATUS: self._status,
        }
        for name, action in commands.items():
            self._app.add_handler(CommandHandler(name, self._make_command_handler(action)))
        self._app.run_polling()

    async def send_message(self, to: str, text: str) -> bool:
        match self._app:
            case None:
                logger.error("send_message called before run()")
                return False
            case app:
                try:
                    for chunk in split_message(text):
                        await app.bot.send_message(chat_id=int(to), text=chunk)
                    return True
                except Exception as exc:
                    logger.error(MSG_LOG_SEND_FAILED, exc)
                    return False

    async def send_document(self, to: str, export: ExportFile) -> bool:
        match self._app:
            case None:
                logger.error("send_document called before run()")
                return False
            case app:
                try:
                    await app.bot.send_document(
                        chat_id=int(to), document=export.content, filename=export.filename
                    )
                    return True
                except Exception as exc:
                    logger.error(MSG_LOG_SEND_FAILED, exc)
                    return False

    # ── helpers (also used in tests) ─────────────────────────────────────────

    def _is_allowed(self, update: Update) -> bool:
        if update.effective_chat is None:
            return False
        return str(update.effective_chat.id) == self._allowed_chat_id.strip()

    @staticmethod
    def _update_to_image(update: Update, data: bytes) -> ImageFile:
        msg = update.message
        match msg.document if msg else None:
            case None:
                return ImageFile(name=f"foto-{msg.message_id}.jpg", data=data)
            case document:
                return ImageFile(name=document.file_name or f"foto-{msg.message_id}", data=data)

    # ── command actions ───────────────────────────────────────────────────────

    async def _help(self, session: NoteSession, chat_id: str, args: list[str], bot: Bot) -> str:
        return MSG_HELP

    async def _list(self, session: NoteSession, chat_id: str, args: list[str], bot: Bot) -> str:
        return list_reply(session)

    async def _status(self, session: NoteSession, chat_id: str, args: list[str], bot: Bot) -> str:
        return status_reply(session)

    async def _new(self, session: NoteSession, chat_id: str, args: list[str], bot: Bot) -> str:
        session.reset()
        return MSG_NEW_SESSION

    async def _remove(self, session: NoteSession, chat_id: str, args: list[str], bot: Bot) -> str:
        images = session.images
        match parse_position(args):
            case int() as position if position <= len(images):
                session.remove_image(images[position - 1].id)
                return MSG_IMAGE_REMOVED.format(position=position, count=len(session.images))
            case _:
                return MSG_REMOVE_USAGE

    async def _transcribe(
        self, session: NoteSession, chat_id: str, args: list[str], bot: Bot
    ) -> None:
        async with TelegramTypingIndicator(bot, chat_id):
            result = await session.submit()
        await self.send_message(chat_id, result.text)
        await self.send_document(chat_id, to_text_file(result))
        await self.send_document(chat_id, to_print_file(result))
        await self.send_message(chat_id, MSG_RESULT_FILES)

    # ── internal handler factory ──────────────────────────────────────────────

    async def _run_action(self, chat_id: str, action: Callable[[], Awaitable[Optional[str]]]) -> None:
        try:
            reply = await action()
        except NoteScanError as exc:
            reply = exc.user_message
        except Exception:
            logger.exception("Unhandled error in chat %s", chat_id)
            reply = MSG_UNEXPECTED_ERROR
        match reply:
            case None:
                pass
            case text:
                await self.send_message(chat_id, text)

    def _make_command_handler(self, action: Action) -> Handler:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            match self._is_allowed(update):
                case False:
                    chat_id = update.effective_chat.id if update.effective_chat else "?"
                    logger.warning(MSG_BLOCKED_CHAT, chat_id)
                    return
                case True:
                    pass

            chat_id = str(update.effective_chat.id)
            session = self._sessions.get(chat_id)
            args = list(context.args or [])
            await self._run_action(chat_id, lambda: action(session, chat_id, args, context.bot))

        return _handler

    def _make_image_handler(self, pick_file: Callable[[Update], object]) -> Handler:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            match self._is_allowed(update):
                case False:
                    chat_id = update.effective_chat.id if update.effective_chat else "?"
                    logger.warning(MSG_BLOCKED_CHAT, chat_id)
                    return
                case True:
                    pass

            chat_id = str(update.effective_chat.id)
            session = self._sessions.get(chat_id)

            async def _add() -> Optional[str]:
                match pick_file(update):
                    case None:
                        return None
                    case source:
                        tg_file = await source.get_file()
                        data = bytes(await tg_file.download_as_bytearray())
                        await session.add_images([self._update_to_image(update, data)])
                        return progress_reply(len(session.images))

            await self._run_action(chat_id, _add)

        return _handler

    def _make_photo_handler(self) -> Handler:
        def _largest_photo(update: Update):
            photos = update.message.photo if update.message else None
            return photos[-1] if photos else None

        return self._make_image_handler(_largest_photo)

    def _make_document_handler(self) -> Handler:
        return self._make_image_handler(
            lambda update: update.message.document if update.message else None
        )
