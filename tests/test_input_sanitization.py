"""Tests for prompt input sanitization and data URI parsing."""
import base64

import pytest

from krishi_ai.input_sanitization import (
    MAX_QUESTION_LENGTH,
    parse_data_uri,
    sanitize_field,
    sanitize_question,
    sanitize_text,
    validate_image_type,
)


class TestSanitizeText:

    def test_strips_html(self):
        assert sanitize_text("<b>Wheat</b> rust?<script>alert(1)</script>") == "Wheat rust?"

    def test_removes_control_chars(self):
        assert sanitize_text("rice\x00 paddy\x07") == "rice paddy"

    def test_keeps_newlines(self):
        assert sanitize_text("line1\nline2") == "line1\nline2"

    def test_none_and_empty(self):
        assert sanitize_text(None) == ""
        assert sanitize_text("") == ""

    def test_truncates_question(self):
        assert len(sanitize_question("a" * (MAX_QUESTION_LENGTH + 100))) == MAX_QUESTION_LENGTH

    def test_keeps_non_ascii(self):
        assert sanitize_field("  धान  ") == "धान"


class TestParseDataUri:

    def test_jpeg(self):
        payload = b"\xff\xd8\xff\xe0jpegdata"
        uri = "data:image/jpeg;base64," + base64.b64encode(payload).decode()
        assert parse_data_uri(uri) == ("image/jpeg", payload)

    def test_jpg_normalized(self):
        uri = "data:image/jpg;base64," + base64.b64encode(b"abc").decode()
        assert parse_data_uri(uri)[0] == "image/jpeg"

    def test_extra_params(self):
        uri = "data:image/png;name=leaf.png;base64," + base64.b64encode(b"png").decode()
        assert parse_data_uri(uri) == ("image/png", b"png")

    def test_rejects_non_image(self):
        uri = "data:text/plain;base64," + base64.b64encode(b"hi").decode()
        with pytest.raises(ValueError):
            parse_data_uri(uri)

    def test_rejects_bad_base64(self):
        with pytest.raises(ValueError):
            parse_data_uri("data:image/png;base64,@@not-base64@@")

    def test_rejects_plain_string(self):
        with pytest.raises(ValueError):
            parse_data_uri("https://example.com/leaf.png")

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            parse_data_uri("")
        with pytest.raises(ValueError):
            parse_data_uri("data:image/png;base64,")


def test_validate_image_type():
    assert validate_image_type("IMAGE/PNG")
    assert not validate_image_type("application/pdf")
