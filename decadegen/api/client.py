"""Client requester for the `/api/generate` endpoint.

Processing flow:
    1. Resolve the service base URL (argument or `DECADEGEN_SERVER_URL`).
    2. POST `{imageDataUrl, prompt}` as JSON, exactly once.
    3. Return the `url` field of a successful response.

Retry behavior:
    None. Retry and backoff are owned by the server next to the credential.

Error handling strategy:
    - Non-2xx response -> `GenerationRequestError` with the server's `error`
      text, or `Server responded with status <code>` when absent.
    - 2xx without `url` -> `GenerationRequestError`.
    - Transport failures -> `GenerationRequestError` with the transport message.
"""

import logging

import requests

from decadegen.image.provider_config import server_url

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120


class GenerationRequestError(RuntimeError):
    """Raised when the generation service does not return an image."""


def _read_json(response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def request_generation(
    image_data_url: str,
    prompt: str,
    *,
    base_url: str | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    session=None,
) -> str:
    """Send one generation request and return the generated data URL.

    Args:
        image_data_url: Source image as `data:image/<subtype>;base64,...`.
        prompt: Prompt guiding the generation.
        base_url: Service root; defaults to `DECADEGEN_SERVER_URL`.
        timeout: Transport timeout in seconds.
        session: Object exposing `post(url, json=..., timeout=...)`;
            defaults to the `requests` module.

    Returns:
        Generated image as a data URL.

    Raises:
        GenerationRequestError: On any non-success outcome.
    """
    http = session or requests
    url = (base_url if base_url is not None else server_url()).rstrip("/") + "/api/generate"

    try:
        response = http.post(
            url,
            json={"imageDataUrl": image_data_url, "prompt": prompt},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        logger.error("Error calling backend API: %s", exc)
        raise GenerationRequestError(str(exc) or "An unknown error occurred while communicating with the server.") from exc

    result = _read_json(response)

    if not 200 <= response.status_code < 300:
        message = result.get("error") or f"Server responded with status {response.status_code}"
        logger.error("Error calling backend API: %s", message)
        raise GenerationRequestError(message)

    if not result.get("url"):
        logger.error("Error calling backend API: response had no url")
        raise GenerationRequestError("Server response did not include an image URL.")

    return result["url"]


def generate_decade_image(image_data_url: str, prompt: str, **kwargs) -> str:
    """Generate a decade-styled image through the generation service."""
    return request_generation(image_data_url, prompt, **kwargs)
