"""NoteSession — Upload → Processing → Result | Error, and Reset back to Upload."""
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, Optional

from notescan.capture_store import CapturedImage, ImageCaptureStore, ImageFile
from notescan.constants import (
    MIN_IMAGES,
    MSG_LOG_IMAGES_ADDED,
    MSG_LOG_PROVIDER_ERROR,
    MSG_LOG_TRANSCRIBED,
    MSG_LOG_TRANSCRIBING,
    MSG_TRANSCRIPTION_FAILED,
)
from notescan.errors import (
    InsufficientImages,
    NoteScanError,
    SessionBusy,
    SessionFinished,
    SessionRestarted,
    TranscriptionFailed,
)
from notescan.request_builder import build_request
from notescan.vision.client import VisionClient

logger = logging.getLogger(__name__)


class AppState(Enum):
    UPLOAD = "upload"
    PROCESSING = "processing"
    RESULT = "result"
    ERROR = "error"


@dataclass(frozen=True)
class TranscriptionResult:
    text: str
    produced_at: datetime = field(default_factory=datetime.now)


@dataclass
class SessionState:
    state: AppState = AppState.UPLOAD
    result: Optional[TranscriptionResult] = None
    error: Optional[str] = None


class NoteSession:
    """One user's capture-and-transcribe cycle.

    Images may only change, and a transcription may only start, while the
    session is neither PROCESSING nor holding a RESULT.
    The PROCESSING guard is the only concurrency control: at most one
    remote call is ever in flight per session.
    """

    def __init__(self, store: ImageCaptureStore, client: VisionClient, name: str = "") -> None:
        self._store = store
        self._client = client
        self._name = name
        self._state = SessionState()

    @property
    def state(self) -> AppState:
        return self._state.state

    @property
    def result(self) -> Optional[TranscriptionResult]:
        return self._state.result

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def images(self) -> tuple[CapturedImage, ...]:
        return self._store.images

    @property
    def model(self) -> str:
        return self._client.model

    def _ensure_idle(self) -> None:
        match self._state.state:
            case AppState.PROCESSING:
                raise SessionBusy()
            case _:
                pass

    def _ensure_accepting(self) -> None:
        self._ensure_idle()
        match self._state.state:
            case AppState.RESULT:
                raise SessionFinished()
            case _:
                pass

    async def add_images(self, files: Iterable[ImageFile]) -> list[CapturedImage]:
        """Decode ``files`` and append them to the store.

        Decoding yields to the event loop, so the guards are checked again
        before the batch joins the store. A batch that lost the race is
        released and never appended.
        """
        self._ensure_accepting()
        current = self._state
        added = await self._store.decode(files)
        try:
            self._ensure_accepting()
            if self._state is not current:
                raise SessionRestarted()
        except NoteScanError:
            self._store.discard(added)
            raise
        self._store.commit(added)
        self._state.error = None
        logger.info(MSG_LOG_IMAGES_ADDED, len(added), self._name, len(self._store))
        return added

    def remove_image(self, image_id: str) -> bool:
        self._ensure_accepting()
        return self._store.remove(image_id)

    async def submit(self) -> TranscriptionResult:
        """Transcribe the current images in one remote call.

        Raises InsufficientImages before any call is made when too few
        images are held. A failed call leaves the images in place.
        """
        self._ensure_accepting()
        images = self._store.images
        if len(images) < MIN_IMAGES:
            error = InsufficientImages(len(images))
            self._state.error = error.user_message
            raise error

        request = build_request(images)
        self._state.state = AppState.PROCESSING
        self._state.error = None
        logger.info(MSG_LOG_TRANSCRIBING, self.model, len(images), request.prompt_version)
        start = time.time()
        try:
            text = await self._client.transcribe(request)
        except Exception as exc:
            match exc:
                case TranscriptionFailed():
                    pass
                case _:
                    logger.exception(MSG_LOG_PROVIDER_ERROR)
            self._state.state = AppState.ERROR
            self._state.error = MSG_TRANSCRIPTION_FAILED
            raise TranscriptionFailed(MSG_TRANSCRIPTION_FAILED) from exc

        result = TranscriptionResult(text=text)
        self._state.state = AppState.RESULT
        self._state.result = result
        logger.info(MSG_LOG_TRANSCRIBED, len(images), time.time() - start)
        return result

    def reset(self) -> None:
        self._ensure_idle()
        self._store.clear()
        self._state = SessionState()

    def close(self) -> None:
        self._store.close()
        self._state = SessionState()


class SessionRegistry:
    """Lazily creates one NoteSession per chat."""

    def __init__(self, factory: Callable[[str], NoteSession]) -> None:
        self._factory = factory
        self._sessions: dict[str, NoteSession] = {}

    def get(self, chat_id: str) -> NoteSession:
        match self._sessions.get(chat_id):
            case None:
                session = self._factory(chat_id)
                self._sessions[chat_id] = session
                return session
            case session:
                return session

    def discard(self, chat_id: str) -> None:
        match self._sessions.pop(chat_id, None):
            case None:
                pass
            case session:
                session.close()

    def close(self) -> None:
        list(map(self.discard, list(self._sessions)))
