"""Unit tests for the per-version header mapping tables."""

from datetime import UTC, datetime

import pytest

from cloudevents_binding import CloudEvent, Version
from cloudevents_binding.headers import (
    V03_HEADERS,
    V1_HEADERS,
    HeaderMapping,
    HeaderTable,
    attribute_for,
    header_name_for,
    headers_for,
    sanitize,
    table_for,
)


class TestTables:
    """Test table contents and lookups."""

    @pytest.mark.parametrize("version", [Version.V1, Version.V03])
    @pytest.mark.parametrize(
        "attribute,header",
        [
            ("id", "ce-id"),
            ("source", "ce-source"),
            ("type", "ce-type"),
            ("specversion", "ce-specversion"),
            ("time", "ce-time"),
            ("subject", "ce-subject"),
            ("datacontenttype", "content-type"),
        ],
    )
    def test_common_headers(self, version, attribute, header):
        assert header_name_for(attribute, version) == header
        assert attribute_for(header, version).attribute == attribute

    def test_v1_dataschema(self):
        assert header_name_for("dataschema", Version.V1) == "ce-dataschema"
        assert header_name_for("schemaurl", Version.V1) is None
        assert attribute_for("ce-schemaurl", Version.V1) is None

    def test_v03_schemaurl(self):
        assert header_name_for("schemaurl", "0.3") == "ce-schemaurl"
        assert header_name_for("dataschema", "0.3") is None
        assert attribute_for("ce-dataschema", "0.3") is None

    def test_v03_datacontentencoding(self):
        assert header_name_for("datacontentencoding", Version.V03) == "ce-datacontentencoding"
        assert header_name_for("datacontentencoding", Version.V1) is None

    def test_tables_are_distinct(self):
        """0.3 does not route through the 1.0 table."""
        assert table_for("0.3") is V03_HEADERS
        assert table_for("1.0") is V1_HEADERS
        assert {m.header for m in V1_HEADERS} != {m.header for m in V03_HEADERS}

    def test_attribute_for_is_case_insensitive(self):
        assert attribute_for("CE-ID", Version.V1).attribute == "id"

    def test_unknown_version(self):
        with pytest.raises(ValueError):
            table_for("9.9")

    def test_duplicate_header_rejected(self):
        with pytest.raises(ValueError, match="Duplicate header"):
            HeaderTable(
                Version.V1,
                [HeaderMapping("id", "ce-id"), HeaderMapping("other", "ce-id")],
            )

    def test_time_parser_and_formatter_are_inverse(self):
        mapping = attribute_for("ce-time", Version.V1)
        value = datetime(2020, 5, 17, 10, 30, 15, tzinfo=UTC)

        assert mapping.format(value) == "2020-05-17T10:30:15Z"
        assert mapping.parse(mapping.format(value)) == value


class TestHeadersFor:
    """Test binary-mode header construction."""

    def test_v1_headers(self, event: CloudEvent):
        headers = headers_for(event)

        assert headers["ce-id"] == event.id
        assert headers["ce-specversion"] == "1.0"
        assert headers["ce-time"] == "2020-05-17T10:30:15.123000Z"
        assert headers["ce-dataschema"] == "http://cloudevents.io/schema.json"
        assert headers["content-type"] == "application/json"

    def test_extension_headers(self, event: CloudEvent):
        headers = headers_for(event)

        assert headers["ce-extension1"] == "foobar"
        assert headers["ce-extension2"] == "acme"

    def test_v03_headers(self, v03_event: CloudEvent):
        headers = headers_for(v03_event)

        assert headers["ce-specversion"] == "0.3"
        assert headers["ce-schemaurl"] == "http://cloudevents.io/schema.json"
        assert "ce-dataschema" not in headers

    def test_absent_attributes_omitted(self):
        event = CloudEvent(type="t", source="s", id="1")

        assert set(headers_for(event)) == {"ce-id", "ce-type", "ce-source", "ce-specversion"}

    def test_extension_values_stringified(self):
        event = CloudEvent(type="t", source="s", id="1", flag=True, count=2019)
        headers = headers_for(event)

        assert headers["ce-flag"] == "true"
        assert headers["ce-count"] == "2019"


class TestSanitize:
    """Test header name normalization."""

    def test_lower_cases_names(self):
        assert sanitize({"CE-ID": "1", "Content-Type": "text/plain"}) == {
            "ce-id": "1",
            "content-type": "text/plain",
        }

    def test_does_not_mutate_input(self):
        headers = {"CE-ID": "1"}
        sanitize(headers)

        assert headers == {"CE-ID": "1"}
