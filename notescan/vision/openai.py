"""OpenAIVisionClient — OpenAI GPT-4o vision backend."""
from openai import AsyncOpenAI

from notescan.request_builder import ImagePart, InstructionPart, RequestPart, TranscriptionRequest
from notescan.vision.client import VisionClient


def _to_block(part: RequestPart) -> dict:
    match part:
        case ImagePart(mime_type=mime, data=data):
            return {
                "type": "image_url",
                "image_url": {"url": f"data:{mime};base64,{data}"},
            }
        case InstructionPart(text=text):
            return {"type": "text", "text": text}


class OpenAIVisionClient(VisionClient):

    async def _generate(self, request: TranscriptionRequest) -> str | None:
        client = AsyncOpenAI(api_key=self._api_key)
        response = await client.chat.completions.create(
            model=self.model,
            max_tokens=self._max_tokens,
            messages=[
                {
                    "role": "user",
                    "content": [_to_block(p) for p in request.parts],
                }
            ],
        )
        return response.choices[0].message.content
