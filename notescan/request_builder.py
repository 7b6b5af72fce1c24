"""Builds the multi-part transcription request: N image parts + one instruction part."""
from dataclasses import dataclass
from typing import Sequence, Union

from notescan.capture_store import CapturedImage
from notescan.constants import MIN_IMAGES, PROMPT_VERSION, TRANSCRIPTION_PROMPT


@dataclass(frozen=True)
class ImagePart:
    mime_type: str
    data: str


@dataclass(frozen=True)
class InstructionPart:
    text: str


RequestPart = Union[ImagePart, InstructionPart]


@dataclass(frozen=True)
class TranscriptionRequest:
    parts: tuple[RequestPart, ...]
    prompt_version: str = PROMPT_VERSION

    @property
    def images(self) -> tuple[ImagePart, ...]:
        return tuple(p for p in self.parts if isinstance(p, ImagePart))

    @property
    def instruction(self) -> InstructionPart:
        match self.parts[-1]:
            case InstructionPart() as part:
                return part
            case _:
                raise ValueError("request must end with an instruction part")


def _to_part(image: CapturedImage | tuple[str, str]) -> ImagePart:
    match image:
        case CapturedImage(mime_type=mime, encoded_payload=payload):
            return ImagePart(mime_type=mime, data=payload)
        case (str() as mime, str() as payload):
            return ImagePart(mime_type=mime, data=payload)
        case _:
            raise TypeError(f"cannot build an image part from {type(image).__name__}")


def build_request(
    images: Sequence[CapturedImage | tuple[str, str]],
    instruction: str = TRANSCRIPTION_PROMPT,
) -> TranscriptionRequest:
    """Image parts in upload order, then exactly one instruction part.

    Callers check the image count first; a short sequence here is a bug.
    """
    if len(images) < MIN_IMAGES:
        raise ValueError(f"at least {MIN_IMAGES} images required, got {len(images)}")
    parts: list[RequestPart] = [_to_part(img) for img in images]
    parts.append(InstructionPart(text=instruction))
    return TranscriptionRequest(parts=tuple(parts))
