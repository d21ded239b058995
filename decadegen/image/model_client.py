"""Remote image model capability and its Gemini implementation.

Architectural role:
    Defines the `ImageModel` protocol consumed by `GenerationService` and the
    production adapter backed by the `google-genai` SDK.

Model call flow:
    `GenerationService` -> `ImageModel.generate(image, prompt)` ->
    `client.aio.models.generate_content(...)` -> `ModelResponse`.

Response contract:
    `ModelResponse` is a tagged result: either it carries an inline image, or
    it carries only text (possibly empty). Transport and API failures are not
    folded into the result; they propagate as exceptions so the retry policy
    can classify them.

Retry behavior:
    None here. Each `generate` call performs exactly one remote request.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from google import genai
from google.genai import types

from decadegen.image.data_url import InlineImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelResponse:
    """Outcome of one successful model round trip.

    Attributes:
        image: First inline image returned by the model, if any.
        text: Concatenated text parts, if any.
    """

    image: InlineImage | None = None
    text: str | None = None

    @property
    def has_image(self) -> bool:
        return self.image is not None


class ImageModel(Protocol):
    """Capability interface for image-to-image generation models."""

    async def generate(self, image: InlineImage, prompt: str) -> ModelResponse:
        ...


def extract_model_response(response) -> ModelResponse:
    """Convert a `GenerateContentResponse` into a `ModelResponse`.

    Only the first candidate is inspected. The first part carrying inline data
    wins; text parts are joined in order.
    """
    candidates = getattr(response, "candidates", None) or []
    content = getattr(candidates[0], "content", None) if candidates else None
    parts = getattr(content, "parts", None) or []

    texts = []
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            return ModelResponse(
                image=InlineImage(
                    mime_type=inline_data.mime_type or "image/png",
                    data=inline_data.data,
                )
            )
        text = getattr(part, "text", None)
        if text:
            texts.append(text)

    return ModelResponse(text="".join(texts) or None)


class GeminiImageModel:
    """`ImageModel` backed by Gemini's image-capable `generate_content`."""

    def __init__(self, api_key: str, model_name: str):
        """Initialize the SDK client.

        Args:
            api_key: Google API key. Must be non-empty.
            model_name: Gemini model identifier.
        """
        if not api_key:
            raise ValueError("Google API key not configured")
        self.model_name = model_name
        self._client = genai.Client(api_key=api_key)

    async def generate(self, image: InlineImage, prompt: str) -> ModelResponse:
        contents = types.Content(
            role="user",
            parts=[
                types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
                types.Part.from_text(text=prompt),
            ],
        )
        logger.info(
            "Calling %s (mime_type=%s, image_bytes=%d, prompt_chars=%d)",
            self.model_name,
            image.mime_type,
            len(image.data),
            len(prompt),
        )
        response = await self._client.aio.models.generate_content(
            model=self.model_name,
            contents=contents,
        )
        return extract_model_response(response)
