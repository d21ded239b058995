"""Error taxonomy for the generation service.

Every service-side failure derives from `GenerationError`. Subclasses carry the
HTTP status class and a stable `error_kind` label so that the HTTP adapter can
render them without inspecting exception types.

Retry semantics:
    Only `TransientModelError` (and errors the retry predicate recognizes as
    transient) are retried. Everything else terminates the request.
"""


class GenerationError(Exception):
    """Base class for failures surfaced by `GenerationService`."""

    status_code = 500
    error_kind = "generation_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(GenerationError):
    """The model credential is missing from the server environment."""

    error_kind = "configuration_error"

    def __init__(self, message: str = "Server configuration error: API key not found."):
        super().__init__(message)


class MethodNotAllowed(GenerationError):
    status_code = 405
    error_kind = "method_not_allowed"

    def __init__(self, message: str = "Method Not Allowed"):
        super().__init__(message)


class BadRequest(GenerationError):
    """Caller-side payload problem. Never retried."""

    status_code = 400
    error_kind = "bad_request"


class ModelFailure(GenerationError):
    """Base class for failures that originate at the remote model.

    These are rendered with the "failed to generate" prefix at the service
    boundary.
    """

    error_kind = "model_error"


class ModelRefusal(ModelFailure):
    """The model answered with text instead of an image."""

    error_kind = "model_refusal"

    def __init__(self, text: str | None = None):
        self.text = text
        super().__init__(
            "The AI model responded with text instead of an image: "
            f"\"{text or 'No text response received.'}\""
        )


class TransientModelError(ModelFailure):
    """A model-side failure expected to clear on retry."""

    error_kind = "transient_model_error"


class GenerationExhausted(ModelFailure):
    """Every attempt failed with a transient error."""

    error_kind = "generation_exhausted"

    def __init__(self, message: str = "Failed to generate image after all retries."):
        super().__init__(message)
