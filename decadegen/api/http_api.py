"""
HTTP API adapter for the generation service.

Architectural role:
- Expose `/api/generate` over FastAPI.
- Parse the JSON body and hand `(method, payload)` to `GenerationService`.
- Render `GenerationResult` as a JSON response with the result's status code.

Endpoint responsibilities:
- `/api/generate` is registered for every common verb so that the service,
  not the router, decides which verbs are rejected (credential check runs
  before the method check).

Input validation behavior:
- Unparsable or non-object JSON is forwarded as `None` and reported by the
  service as missing body parameters.
- All field and data URL validation lives in the service.
- Router-level errors (unknown path, unrouted verb) are rendered as
  `{"error": ...}` too. A 405 on `/api/generate` is handed to the service so
  the credential check still runs first.

Error handling strategy:
- The service never raises; every outcome is a `GenerationResult`.

Side effects:
- Reads the process environment once per request via `get_service_config`.
"""

import json
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from decadegen.image.provider_config import ServiceConfig
from decadegen.image.service import GenerationService

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"
ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

app = FastAPI(title="decadegen")


def get_service_config() -> ServiceConfig:
    """Per-request configuration snapshot; overridden in tests."""
    return ServiceConfig.from_env()


def get_generation_service(config: ServiceConfig = Depends(get_service_config)) -> GenerationService:
    return GenerationService(config)


async def read_payload(request: Request):
    """Return the decoded JSON body, or `None` when it is empty or invalid."""
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        logger.warning("Request body is not valid JSON")
        return None


@app.api_route(GENERATE_PATH, methods=ROUTED_METHODS)
async def generate(
    request: Request,
    service: GenerationService = Depends(get_generation_service),
):
    """Run one generation request and return `{url}` or `{error}`."""
    payload = await read_payload(request) if request.method == "POST" else None
    result = await service.handle(request.method, payload)
    return JSONResponse(status_code=result.status_code, content=result.to_body())


def _resolve_service() -> GenerationService:
    """Build the service outside of a route, honoring dependency overrides."""
    overrides = app.dependency_overrides
    if get_generation_service in overrides:
        return overrides[get_generation_service]()
    config = overrides.get(get_service_config, get_service_config)()
    return get_generation_service(config)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render router errors with the same `{"error": ...}` body as the service."""
    if exc.status_code == 405 and request.url.path == GENERATE_PATH:
        result = await _resolve_service().handle(request.method, None)
        return JSONResponse(status_code=result.status_code, content=result.to_body())
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )
