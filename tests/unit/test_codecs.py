"""Unit tests for the content codec registry."""

import pytest

from cloudevents_binding import DEFAULT_CODECS, Codec, CodecRegistry, ErrorKind, ValidationError
from cloudevents_binding.codecs import (
    codec_for,
    is_json_content_type,
    media_type,
    parse_binary,
    parse_json,
    parse_text,
)


class TestMediaType:
    """Test content type normalization."""

    def test_strips_parameters(self):
        assert media_type("application/json; charset=utf-8") == "application/json"

    def test_none(self):
        assert media_type(None) is None

    @pytest.mark.parametrize(
        "content_type,expected",
        [
            ("application/json", True),
            ("application/json; charset=utf-8", True),
            ("application/cloudevents+json", True),
            ("application/vnd.api+json", True),
            ("text/plain", False),
            (None, False),
        ],
    )
    def test_is_json(self, content_type, expected):
        assert is_json_content_type(content_type) is expected


class TestLookup:
    """Test registry lookups."""

    def test_lookup_ignores_parameters(self):
        codec = DEFAULT_CODECS.codec_for("application/json; charset=utf-8")

        assert codec is not None
        assert codec.content_type == "application/json"

    def test_lookup_is_case_sensitive(self):
        """Lookups are exact: no guessing for differently-cased types."""
        assert DEFAULT_CODECS.codec_for("Application/JSON") is None

    def test_missing_codec_returns_none(self):
        assert codec_for("application/x-unregistered") is None
        assert "application/x-unregistered" not in DEFAULT_CODECS

    def test_require_codec_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            DEFAULT_CODECS.require_codec("application/x-unregistered")

        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_CONTENT_TYPE

    def test_require_codec_without_content_type(self):
        with pytest.raises(ValidationError) as exc_info:
            DEFAULT_CODECS.require_codec(None)

        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_CONTENT_TYPE

    def test_default_content_types(self):
        assert {"application/json", "text/plain", "application/octet-stream"} <= set(
            DEFAULT_CODECS.content_types
        )


class TestExtend:
    """Test building registries without mutating the default."""

    def test_extend_returns_new_registry(self):
        csv = Codec("text/csv", parse_text, str)
        registry = DEFAULT_CODECS.extend(csv)

        assert registry.codec_for("text/csv") is csv
        assert DEFAULT_CODECS.codec_for("text/csv") is None
        assert len(registry) == len(DEFAULT_CODECS) + 1

    def test_extend_replaces_existing(self):
        custom = Codec("application/json", lambda value: "parsed", lambda value: "formatted")
        registry = CodecRegistry().extend(custom)

        assert registry.require_codec("application/json").format({}) == "formatted"


class TestParsers:
    """Test the default parsers and formatters."""

    def test_json_round_trip(self):
        codec = DEFAULT_CODECS.require_codec("application/json")

        assert codec.format({"foo": "bar"}) == '{"foo":"bar"}'
        assert codec.parse('{"foo":"bar"}') == {"foo": "bar"}

    def test_json_parses_bytes(self):
        assert parse_json(b'{"foo":"bar"}') == {"foo": "bar"}

    def test_json_passes_objects_through(self):
        value = {"already": "parsed"}

        assert parse_json(value) is value

    def test_invalid_json(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_json("{not json")

        assert exc_info.value.kind is ErrorKind.INVALID_PAYLOAD

    def test_text_decodes_bytes(self):
        assert parse_text("héllo".encode()) == "héllo"

    def test_text_rejects_invalid_utf8(self):
        with pytest.raises(ValidationError):
            parse_text(b"\xff\xfe")

    def test_binary_formats_base64(self):
        codec = DEFAULT_CODECS.require_codec("application/octet-stream")

        assert codec.format(b"\x00\xff") == "AP8="

    def test_binary_parses_unwrapped_bytes(self):
        assert parse_binary(b"\x00\xff") == b"\x00\xff"

    def test_binary_decodes_base64_string(self):
        assert parse_binary("AP8=") == b"\x00\xff"

    def test_binary_encodes_plain_text(self):
        assert parse_binary("hello") == b"hello"
