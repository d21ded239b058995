"""Generation service: validation, model invocation, and retry orchestration.

Role in pipeline:
    - Receives one transport-agnostic request (`method`, decoded JSON payload)
      from the HTTP adapter.
    - Validates credential, method, and payload shape before any model call.
    - Invokes the model with bounded retry and maps the outcome to a
      `GenerationResult`.

Request lifecycle:
    1. Credential check -> `ConfigurationError`.
    2. Method check (POST only) -> `MethodNotAllowed`.
    3. Payload validation -> `BadRequest`.
    4. Data URL decomposition -> `BadRequest`.
    5. Model invocation with retry (see `GenerationService._invoke_with_retry`).
    6. Response shaping: every exception becomes a failure result.

Retry loop states:
    `Attempting(n)` -> `Success` on an image-bearing response.
    `Attempting(n)` -> `Attempting(n+1)` on a transient error while n < max.
    `Attempting(n)` -> `FailedTerminal` on a refusal, a non-transient error,
    or a transient error on the last attempt.

Concurrency:
    One outstanding model call per invocation; backoff is an awaited sleep so
    other invocations proceed. No state is shared between invocations.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, Field, ValidationError

from decadegen.image.data_url import InlineImage, InvalidDataURL, parse_data_url
from decadegen.image.errors import (
    BadRequest,
    ConfigurationError,
    GenerationError,
    GenerationExhausted,
    MethodNotAllowed,
    ModelFailure,
    ModelRefusal,
)
from decadegen.image.model_client import GeminiImageModel, ImageModel
from decadegen.image.provider_config import ServiceConfig
from decadegen.image.retry import RetryPolicy, is_transient

logger = logging.getLogger(__name__)

ACCEPTED_METHOD = "POST"
MISSING_FIELDS_MESSAGE = "Missing required body parameters: imageDataUrl, prompt"
INVALID_DATA_URL_MESSAGE = "Invalid image data URL format."
MODEL_FAILURE_PREFIX = "The AI model failed to generate an image. Details: "


class GenerationRequest(BaseModel):
    """Wire payload of `POST /api/generate`. Both fields are required and non-empty."""

    imageDataUrl: str = Field(min_length=1)
    prompt: str = Field(min_length=1)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one service invocation.

    Exactly one of `url` (success) or `message` (failure) is set.
    """

    status_code: int
    url: str | None = None
    error_kind: str | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.url is not None

    @classmethod
    def success(cls, url: str) -> "GenerationResult":
        return cls(status_code=200, url=url)

    @classmethod
    def failure(cls, status_code: int, error_kind: str, message: str) -> "GenerationResult":
        return cls(status_code=status_code, error_kind=error_kind, message=message)

    def to_body(self) -> dict:
        if self.ok:
            return {"url": self.url}
        return {"error": self.message}


class GenerationService:
    """Validate one generation request and drive the model retry loop."""

    def __init__(
        self,
        config: ServiceConfig,
        model_factory: Callable[[str, str], ImageModel] = GeminiImageModel,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Args:
            config: Credential and model selection, read by the caller.
            model_factory: Builds an `ImageModel` from `(api_key, model_name)`.
                Only called after validation succeeds.
            policy: Attempt budget and backoff; defaults to 3 attempts, 1s base.
            sleep: Awaitable used for backoff delays.
        """
        self.config = config
        self.model_factory = model_factory
        self.policy = policy or RetryPolicy()
        self.sleep = sleep

    async def handle(self, method: str, payload: Any) -> GenerationResult:
        """Run the full request lifecycle and never raise.

        Args:
            method: Transport verb of the incoming request.
            payload: Decoded JSON body, or `None` when absent/unparsable.

        Returns:
            Success result with the generated data URL, or a failure result
            carrying status, error kind, and a human-readable message.
        """
        try:
            url = await self.generate(method, payload)
        except ModelFailure as exc:
            logger.exception("Image generation failed")
            return GenerationResult.failure(
                exc.status_code, exc.error_kind, MODEL_FAILURE_PREFIX + exc.message
            )
        except GenerationError as exc:
            return GenerationResult.failure(exc.status_code, exc.error_kind, exc.message)
        except Exception as exc:
            logger.exception("Image generation failed with unexpected error")
            message = str(exc) or "An unknown server error occurred"
            return GenerationResult.failure(500, ModelFailure.error_kind, MODEL_FAILURE_PREFIX + message)
        return GenerationResult.success(url)

    async def generate(self, method: str, payload: Any) -> str:
        """Validate the request and return the generated image data URL.

        Raises:
            GenerationError: For every classified failure.
            Exception: Non-transient errors from the model propagate unchanged.
        """
        if not self.config.api_key:
            logger.error("API key is not set in the server environment.")
            raise ConfigurationError()

        if (method or "").upper() != ACCEPTED_METHOD:
            raise MethodNotAllowed()

        image_data_url, prompt = _extract_fields(payload)
        image = _decode_image(image_data_url)

        model = self.model_factory(self.config.api_key, self.config.model_name)
        return await self._invoke_with_retry(model, image, prompt)

    async def _invoke_with_retry(self, model: ImageModel, image: InlineImage, prompt: str) -> str:
        max_attempts = max(1, self.policy.max_attempts)

        for attempt in range(1, max_attempts + 1):
            try:
                response = await model.generate(image, prompt)
                if response.has_image:
                    return response.image.to_data_url()
                raise ModelRefusal(response.text)

            except Exception as exc:
                logger.warning("Error on attempt %d/%d: %s", attempt, max_attempts, exc)

                if not is_transient(exc):
                    raise
                if attempt < max_attempts:
                    delay = self.policy.backoff(attempt)
                    logger.info("Retrying in %.1fs", delay)
                    await self.sleep(delay)
                    continue
                raise GenerationExhausted() from exc

        raise GenerationExhausted()


def _extract_fields(payload: Any) -> tuple[str, str]:
    try:
        request = GenerationRequest.model_validate(payload)
    except ValidationError as exc:
        raise BadRequest(MISSING_FIELDS_MESSAGE) from exc
    return request.imageDataUrl, request.prompt


def _decode_image(image_data_url: str) -> InlineImage:
    try:
        return parse_data_url(image_data_url).decode()
    except InvalidDataURL as exc:
        raise BadRequest(INVALID_DATA_URL_MESSAGE) from exc
