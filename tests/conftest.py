"""Shared pytest fixtures.

Every test that reaches the generation service uses `tests.fakes.FakeImageModel`;
no test talks to the real Gemini API.
"""

import base64

import pytest

from decadegen.image.provider_config import ServiceConfig
from tests.fakes import PNG_BYTES, RecordingSleep


@pytest.fixture
def png_data_url():
    return "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.fixture
def config():
    return ServiceConfig(api_key="test-api-key", model_name="test-image-model")


@pytest.fixture
def sleep():
    return RecordingSleep()
