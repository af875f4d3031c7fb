"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime

import pytest

from cloudevents_binding import CloudEvent, Version

EVENT_ID = "b46cf653-d48a-4b90-8dfa-355c01061361"
EVENT_TYPE = "org.cncf.cloudevents.example"
EVENT_SOURCE = "urn:event:from:myapi/resource/123"
EVENT_TIME = datetime(2020, 5, 17, 10, 30, 15, 123000, tzinfo=UTC)
SUBJECT = "subject.ext"
DATA_SCHEMA = "http://cloudevents.io/schema.json"


@pytest.fixture
def event() -> CloudEvent:
    """A 1.0 event with JSON data and two extensions."""
    return CloudEvent(
        specversion=Version.V1,
        id=EVENT_ID,
        type=EVENT_TYPE,
        source=EVENT_SOURCE,
        datacontenttype="application/json",
        subject=SUBJECT,
        time=EVENT_TIME,
        dataschema=DATA_SCHEMA,
        data={"foo": "bar"},
        extension1="foobar",
        extension2="acme",
    )


@pytest.fixture
def v03_event() -> CloudEvent:
    """A 0.3 event using the 0.3-only schemaurl attribute."""
    return CloudEvent(
        specversion=Version.V03,
        id=EVENT_ID,
        type=EVENT_TYPE,
        source=EVENT_SOURCE,
        datacontenttype="application/json",
        subject=SUBJECT,
        time=EVENT_TIME,
        schemaurl=DATA_SCHEMA,
        data={"foo": "bar"},
        extension1="foobar",
    )
