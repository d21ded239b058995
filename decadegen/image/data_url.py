"""Data URL codec for inline images.

Processing flow:
    1. Match `data:image/<subtype>;base64,<payload>` against the whole string.
    2. Split into mime type and base64 payload.
    3. Decode the payload to bytes on demand.

Edge cases:
    - Non-image mime types (for example `text/plain`) do not match.
    - A newline anywhere in the value makes it non-matching.
    - An empty payload matches; decoding yields empty bytes.
    - Decoding is strict: characters outside the base64 alphabet (including
      spaces) are rejected, not skipped.
"""

import base64
import binascii
import re
from dataclasses import dataclass

DATA_URL_PATTERN = re.compile(r"data:(image/\w+);base64,(.*)")


class InvalidDataURL(ValueError):
    """Raised when a value is not an image data URL."""


@dataclass(frozen=True)
class InlineImage:
    """Decoded image bytes plus mime type, as exchanged with the model."""

    mime_type: str
    data: bytes

    def to_data_url(self) -> str:
        return encode_data_url(self.mime_type, self.data)


@dataclass(frozen=True)
class ImageDataURL:
    """Parsed `data:<mime_type>;base64,<data>` value."""

    mime_type: str
    data: str

    def decode(self) -> InlineImage:
        try:
            raw = base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidDataURL("Invalid base64 payload in data URL.") from exc
        return InlineImage(mime_type=self.mime_type, data=raw)

    def __str__(self) -> str:
        return encode_data_url(self.mime_type, self.data)


def parse_data_url(value: str) -> ImageDataURL:
    """Split an image data URL into mime type and base64 payload.

    Args:
        value: Candidate data URL string.

    Returns:
        `ImageDataURL` with the matched mime type and raw base64 text.

    Raises:
        InvalidDataURL: When `value` is not a string or does not match
            `DATA_URL_PATTERN`.
    """
    if not isinstance(value, str):
        raise InvalidDataURL("Data URL must be a string.")
    match = DATA_URL_PATTERN.fullmatch(value)
    if not match:
        raise InvalidDataURL("Invalid image data URL format.")
    return ImageDataURL(mime_type=match.group(1), data=match.group(2))


def is_image_data_url(value) -> bool:
    return isinstance(value, str) and DATA_URL_PATTERN.fullmatch(value) is not None


def encode_data_url(mime_type: str, data) -> str:
    """Build a data URL from a mime type and either raw bytes or base64 text."""
    if isinstance(data, (bytes, bytearray)):
        data = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:{mime_type};base64,{data}"
