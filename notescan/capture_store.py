"""ImageCaptureStore — ordered in-memory collection of photos awaiting transcription."""
import asyncio
import base64
import io
import logging
import shutil
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from PIL import Image, UnidentifiedImageError

from notescan.constants import (
    MSG_LOG_DECODE_FAILED,
    PREVIEW_DIR_PREFIX,
    PREVIEW_SIZE,
    SUPPORTED_IMAGE_FORMATS,
)
from notescan.errors import DecodeFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageFile:
    name: str
    data: bytes


@dataclass(frozen=True)
class CapturedImage:
    id: str
    name: str
    mime_type: str
    display_handle: Path
    encoded_payload: str


def _detect_mime_type(data: bytes) -> str:
    """Verify ``data`` is a supported image and return its media type. Raises on failure."""
    with Image.open(io.BytesIO(data)) as img:
        img.verify()
        fmt = img.format
    match SUPPORTED_IMAGE_FORMATS.get(fmt or ""):
        case None:
            raise ValueError(f"unsupported image format: {fmt}")
        case mime:
            return mime


def _write_preview(data: bytes, path: Path) -> None:
    # verify() leaves the image unusable, so reopen for the thumbnail
    with Image.open(io.BytesIO(data)) as img:
        thumb = img.convert("RGB")
        thumb.thumbnail(PREVIEW_SIZE)
        thumb.save(path, format="JPEG")


def _release(handle: Path) -> None:
    handle.unlink(missing_ok=True)


class ImageCaptureStore:
    """Holds captured images in upload order.

    Each entry owns a thumbnail file under the store's preview directory;
    the file is deleted when the entry is removed or the store is cleared.
    """

    def __init__(self, preview_root: Optional[str] = None) -> None:
        self._preview_dir = Path(tempfile.mkdtemp(prefix=PREVIEW_DIR_PREFIX, dir=preview_root))
        self._images: list[CapturedImage] = []

    @property
    def images(self) -> tuple[CapturedImage, ...]:
        return tuple(self._images)

    def __len__(self) -> int:
        return len(self._images)

    def __iter__(self) -> Iterator[CapturedImage]:
        return iter(tuple(self._images))

    def get(self, image_id: str) -> CapturedImage | None:
        return next((img for img in self._images if img.id == image_id), None)

    def payloads(self) -> list[str]:
        return [img.encoded_payload for img in self._images]

    async def add(self, files: Iterable[ImageFile]) -> list[CapturedImage]:
        """Decode a batch of files and append them in order.

        The batch is all-or-nothing: if any file fails to decode, handles
        created for the batch are released and DecodeFailed is raised.
        """
        captured = await self.decode(files)
        self.commit(captured)
        return captured

    async def decode(self, files: Iterable[ImageFile]) -> list[CapturedImage]:
        """Decode a batch without appending it.

        The caller either commits the result or discards it.
        """
        batch = list(files)
        results = await asyncio.gather(
            *(asyncio.to_thread(self._capture, f) for f in batch),
            return_exceptions=True,
        )
        captured = [r for r in results if isinstance(r, CapturedImage)]
        failed = [(f, r) for f, r in zip(batch, results) if isinstance(r, BaseException)]
        match failed:
            case []:
                return captured
            case [(file, exc), *_]:
                self.discard(captured)
                raise DecodeFailed(file.name) from exc

    def commit(self, images: Iterable[CapturedImage]) -> None:
        self._images.extend(images)

    def discard(self, images: Iterable[CapturedImage]) -> None:
        """Release handles of decoded images that never joined the store."""
        list(map(lambda img: _release(img.display_handle), images))

    def remove(self, image_id: str) -> bool:
        match self.get(image_id):
            case None:
                return False
            case img:
                self._images.remove(img)
                _release(img.display_handle)
                return True

    def clear(self) -> None:
        images, self._images = self._images, []
        self.discard(images)

    def close(self) -> None:
        """Clear the store and delete its preview directory."""
        self.clear()
        shutil.rmtree(self._preview_dir, ignore_errors=True)

    def _capture(self, file: ImageFile) -> CapturedImage:
        image_id = uuid.uuid4().hex
        handle = self._preview_dir / f"{image_id}.jpg"
        try:
            mime_type = _detect_mime_type(file.data)
            _write_preview(file.data, handle)
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
            logger.warning(MSG_LOG_DECODE_FAILED, file.name, exc)
            _release(handle)
            raise
        return CapturedImage(
            id=image_id,
            name=file.name,
            mime_type=mime_type,
            display_handle=handle,
            encoded_payload=base64.standard_b64encode(file.data).decode(),
        )
