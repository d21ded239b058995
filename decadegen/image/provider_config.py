"""Provider/runtime configuration for the image generation layer.

Architectural role:
    Centralizes model selection and credential lookup for
    `decadegen.image.service` and `decadegen.image.model_client`.

Configuration flow:
    - `.env` values are loaded once at import time via `load_dotenv()`.
    - `ServiceConfig.from_env()` snapshots the process environment per request.
    - The snapshot is passed explicitly into `GenerationService`; no module in
      the retry path reads the environment directly.

Failure behavior:
    A missing credential is represented as `api_key=None`. The service turns
    that into `ConfigurationError` on every request until it is corrected.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# Image-capable Gemini model used when `IMAGE_MODEL` is not set.
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image-preview"

# Credential variables in lookup order.
API_KEY_ENV_VARS = ("API_KEY", "GEMINI_API_KEY")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_SERVER_URL = "http://127.0.0.1:8000"


def load_api_key():
    """Return the first non-empty credential from `API_KEY_ENV_VARS`, or `None`."""
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return None


@dataclass(frozen=True)
class ServiceConfig:
    """Runtime configuration for `GenerationService`.

    Relevant environment variables:
        - `API_KEY` (fallback `GEMINI_API_KEY`)
        - `IMAGE_MODEL`
    """

    api_key: str | None = None
    model_name: str = DEFAULT_IMAGE_MODEL

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        model_name = os.getenv("IMAGE_MODEL", "").strip() or DEFAULT_IMAGE_MODEL
        return cls(api_key=load_api_key(), model_name=model_name)


def server_bind():
    """Return `(host, port)` for `decadegen serve`."""
    host = os.getenv("DECADEGEN_HOST", DEFAULT_HOST).strip() or DEFAULT_HOST
    port = int(os.getenv("DECADEGEN_PORT", str(DEFAULT_PORT)))
    return host, port


def server_url():
    """Return the base URL the client requester talks to."""
    return os.getenv("DECADEGEN_SERVER_URL", DEFAULT_SERVER_URL).strip().rstrip("/")
