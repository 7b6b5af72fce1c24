"""VisionClient — abstract base for note transcription backends."""
import logging
from abc import ABC, abstractmethod

from notescan.constants import (
    MSG_LOG_EMPTY_RESPONSE,
    MSG_LOG_PROVIDER_ERROR,
    MSG_NO_TEXT_EXTRACTED,
)
from notescan.errors import TranscriptionFailed
from notescan.request_builder import TranscriptionRequest

logger = logging.getLogger(__name__)


class VisionClient(ABC):

    def __init__(self, api_key: str, model: str, max_tokens: int) -> None:
        self._api_key = api_key
        self.model = model
        self._max_tokens = max_tokens

    async def transcribe(self, request: TranscriptionRequest) -> str:
        """Send the whole request in one call and return the transcription text.

        Never returns an empty string. Any backend failure is logged and
        raised as TranscriptionFailed. There is no retry.
        """
        try:
            text = await self._generate(request)
        except Exception as exc:
            logger.exception(MSG_LOG_PROVIDER_ERROR)
            raise TranscriptionFailed() from exc

        match (text or "").strip():
            case "":
                logger.warning(MSG_LOG_EMPTY_RESPONSE)
                return MSG_NO_TEXT_EXTRACTED
            case content:
                return content

    @abstractmethod
    async def _generate(self, request: TranscriptionRequest) -> str | None:
        """Issue the remote call and return the raw text field. Raises on failure."""
        ...
