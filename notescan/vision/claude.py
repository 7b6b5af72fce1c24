"""ClaudeVisionClient — Anthropic Claude vision backend."""
from anthropic import AsyncAnthropic

from notescan.request_builder import ImagePart, InstructionPart, RequestPart, TranscriptionRequest
from notescan.vision.client import VisionClient


def _to_block(part: RequestPart) -> dict:
    match part:
        case ImagePart(mime_type=mime, data=data):
            return {
                "type": "image",
                "source": {"type": "base64", "media_type": mime, "data": data},
            }
        case InstructionPart(text=text):
            return {"type": "text", "text": text}


class ClaudeVisionClient(VisionClient):

    async def _generate(self, request: TranscriptionRequest) -> str | None:
        client = AsyncAnthropic(api_key=self._api_key)
        message = await client.messages.create(
            model=self.model,
            max_tokens=self._max_tokens,
            messages=[
                {
                    "role": "user",
                    "content": [_to_block(p) for p in request.parts],
                }
            ],
        )
        return "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )
