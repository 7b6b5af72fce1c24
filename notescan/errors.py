"""Error taxonomy. Every error carries a message that is safe to show the user."""
from notescan.constants import (
    MIN_IMAGES,
    MSG_DECODE_FAILED,
    MSG_INSUFFICIENT_IMAGES,
    MSG_SESSION_BUSY,
    MSG_SESSION_FINISHED,
    MSG_SESSION_RESTARTED,
    MSG_TRANSCRIPTION_FAILED_CLIENT,
)


class NoteScanError(Exception):
    """Base exception for all notescan errors."""

    def __init__(self, user_message: str) -> None:
        self.user_message = user_message
        super().__init__(user_message)


class InsufficientImages(NoteScanError):
    """Submit attempted with fewer than the minimum number of images."""

    def __init__(self, count: int, minimum: int = MIN_IMAGES) -> None:
        self.count = count
        self.minimum = minimum
        super().__init__(MSG_INSUFFICIENT_IMAGES % minimum)


class DecodeFailed(NoteScanError):
    """A file in an upload batch could not be read as an image."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(MSG_DECODE_FAILED % filename)


class TranscriptionFailed(NoteScanError):
    """The remote transcription call failed. The raw cause is chained, not shown."""

    def __init__(self, user_message: str = MSG_TRANSCRIPTION_FAILED_CLIENT) -> None:
        super().__init__(user_message)


class SessionBusy(NoteScanError):
    """The session is processing a transcription and cannot be changed."""

    def __init__(self) -> None:
        super().__init__(MSG_SESSION_BUSY)


class SessionFinished(NoteScanError):
    """The session already holds a result; it must be reset before new work."""

    def __init__(self) -> None:
        super().__init__(MSG_SESSION_FINISHED)


class SessionRestarted(NoteScanError):
    """The session was reset or closed while an upload batch was decoding."""

    def __init__(self) -> None:
        super().__init__(MSG_SESSION_RESTARTED)
