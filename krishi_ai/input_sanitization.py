"""
Input Sanitization Module for Krishi AI

Cleans free text before it is substituted into prompts and decodes the
base64 data URIs used to upload crop photos.
"""

import base64
import binascii
import re
from typing import Optional, Tuple


MAX_QUESTION_LENGTH = 4000
MAX_FIELD_LENGTH = 500
MAX_FORECAST_LENGTH = 2000

ALLOWED_IMAGE_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/heic",
    "image/heif",
}

_DATA_URI_RE = re.compile(r'^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(?:;[^;,]*)*?);base64,(?P<data>.*)$', re.DOTALL)


def sanitize_text(
    text: Optional[str],
    max_length: Optional[int] = None,
    strip_html: bool = True
) -> str:
    """Sanitize text input for prompt substitution.

    Args:
        text: Input text to sanitize
        max_length: Maximum allowed length (truncates if exceeded)
        strip_html: Whether to strip HTML tags

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text.strip()

    if strip_html:
        text = _strip_html_tags(text)

    text = _remove_control_chars(text)

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text.strip()


def sanitize_question(text: str) -> str:
    """Sanitize a farmer's chat question."""
    return sanitize_text(text, max_length=MAX_QUESTION_LENGTH)


def sanitize_field(text: Optional[str]) -> str:
    """Sanitize a short field such as crop type, location or language."""
    return sanitize_text(text, max_length=MAX_FIELD_LENGTH)


def sanitize_forecast(text: str) -> str:
    return sanitize_text(text, max_length=MAX_FORECAST_LENGTH)


def parse_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """Decode a base64 image data URI.

    Args:
        data_uri: String of the form ``data:<mime>;base64,<payload>``

    Returns:
        Tuple of (mime_type, raw_bytes)

    Raises:
        ValueError: If the URI is malformed, not an image, or not valid base64
    """
    if not data_uri:
        raise ValueError("Empty image data URI")

    match = _DATA_URI_RE.match(data_uri.strip())
    if not match:
        raise ValueError("Image must be a base64 data URI")

    mime_type = match.group("mime").lower()
    if not validate_image_type(mime_type):
        raise ValueError(f"Unsupported image type: {mime_type}")

    payload = re.sub(r'\s+', '', match.group("data"))
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image payload: {e}") from e

    if not data:
        raise ValueError("Image payload is empty")

    # Gemini rejects image/jpg
    if mime_type == "image/jpg":
        mime_type = "image/jpeg"

    return mime_type, data


def _strip_html_tags(text: str) -> str:
    """Remove HTML tags from text."""
    text = re.sub(r'<script[^>]*>.*?</script>', '', text, flags=re.IGNORECASE | re.DOTALL)
    text = re.sub(r'<style[^>]*>.*?</style>', '', text, flags=re.IGNORECASE | re.DOTALL)
    text = re.sub(r'<[^>]+>', '', text)
    return text


def _remove_control_chars(text: str) -> str:
    """Remove control characters (keeps tab and newline)."""
    return re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)


def validate_image_type(content_type: str) -> bool:
    """Validate image content type."""
    return content_type.lower() in ALLOWED_IMAGE_TYPES
