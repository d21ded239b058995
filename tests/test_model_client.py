"""Tests for the Gemini image model adapter."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from decadegen.image.data_url import InlineImage
from decadegen.image.model_client import GeminiImageModel, ModelResponse, extract_model_response
from tests.fakes import JPEG_BYTES, PNG_BYTES


def make_part(inline_data=None, text=None):
    part = MagicMock()
    part.inline_data = inline_data
    part.text = text
    return part


def make_response(*parts):
    response = MagicMock()
    response.candidates = [MagicMock()]
    response.candidates[0].content.parts = list(parts)
    return response


def inline(mime_type, data):
    blob = MagicMock()
    blob.mime_type = mime_type
    blob.data = data
    return blob


@pytest.fixture
def mock_genai():
    with patch("decadegen.image.model_client.genai") as mock:
        yield mock


class TestExtractModelResponse:
    def test_image_part(self):
        response = make_response(make_part(text="Here you go"), make_part(inline("image/png", PNG_BYTES)))
        result = extract_model_response(response)

        assert result.has_image
        assert result.image == InlineImage(mime_type="image/png", data=PNG_BYTES)

    def test_text_only(self):
        response = make_response(make_part(text="I can't "), make_part(text="do that."))
        result = extract_model_response(response)

        assert result == ModelResponse(text="I can't do that.")
        assert not result.has_image

    def test_no_candidates(self):
        response = MagicMock()
        response.candidates = None
        assert extract_model_response(response) == ModelResponse()

    def test_missing_mime_type_defaults_to_png(self):
        response = make_response(make_part(inline(None, JPEG_BYTES)))
        assert extract_model_response(response).image.mime_type == "image/png"

    def test_empty_inline_data_skipped(self):
        response = make_response(make_part(inline("image/png", b"")), make_part(text="sorry"))
        assert extract_model_response(response) == ModelResponse(text="sorry")


class TestGeminiImageModel:
    def test_init_requires_api_key(self, mock_genai):
        with pytest.raises(ValueError, match="API key not configured"):
            GeminiImageModel(api_key="", model_name="m")
        mock_genai.Client.assert_not_called()

    def test_init_creates_client(self, mock_genai):
        model = GeminiImageModel(api_key="key-123", model_name="gemini-2.5-flash-image-preview")
        mock_genai.Client.assert_called_once_with(api_key="key-123")
        assert model.model_name == "gemini-2.5-flash-image-preview"

    @pytest.mark.asyncio
    async def test_generate_sends_image_and_prompt(self, mock_genai):
        mock_client = MagicMock()
        mock_client.aio.models.generate_content = AsyncMock(
            return_value=make_response(make_part(inline("image/jpeg", JPEG_BYTES)))
        )
        mock_genai.Client.return_value = mock_client

        model = GeminiImageModel(api_key="key", model_name="img-model")
        result = await model.generate(InlineImage(mime_type="image/png", data=PNG_BYTES), "1970s")

        assert result.image == InlineImage(mime_type="image/jpeg", data=JPEG_BYTES)
        call_kwargs = mock_client.aio.models.generate_content.call_args.kwargs
        assert call_kwargs["model"] == "img-model"
        parts = call_kwargs["contents"].parts
        assert parts[0].inline_data.data == PNG_BYTES
        assert parts[0].inline_data.mime_type == "image/png"
        assert parts[1].text == "1970s"

    @pytest.mark.asyncio
    async def test_generate_propagates_errors(self, mock_genai):
        mock_client = MagicMock()
        mock_client.aio.models.generate_content = AsyncMock(side_effect=Exception("500 INTERNAL"))
        mock_genai.Client.return_value = mock_client

        model = GeminiImageModel(api_key="key", model_name="img-model")
        with pytest.raises(Exception, match="500 INTERNAL"):
            await model.generate(InlineImage(mime_type="image/png", data=PNG_BYTES), "1970s")
