"""Binary-mode header mapping tables.

One immutable table per specification version maps each context attribute
to its wire header, with the functions that convert the value between its
attribute form and its header string. The tables are independent: 0.3 carries
``ce-schemaurl`` and ``ce-datacontentencoding`` where 1.0 carries
``ce-dataschema``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .constants import (
    EXTENSIONS_PREFIX,
    HEADER_CONTENT_TYPE,
    Attribute,
    CEHeader,
    Version,
)
from .event.cloudevent import format_extension_value, format_time, parse_time

if TYPE_CHECKING:
    from .event import CloudEvent

logger = logging.getLogger(__name__)


def _passthrough(value: Any) -> Any:
    return value


def _strip(value: str) -> str:
    return value.strip()


def _format_version(value: Version | str) -> str:
    return value.value if isinstance(value, Version) else str(value)


@dataclass(frozen=True)
class HeaderMapping:
    """One attribute <-> header entry.

    ``parse`` turns the header string into the attribute value; ``format``
    does the reverse. They are inverses for every legal attribute value.
    """

    attribute: str
    header: str
    parse: Callable[[str], Any] = _passthrough
    format: Callable[[Any], str] = str


class HeaderTable:
    """Immutable, bidirectional attribute/header table for one spec version."""

    def __init__(self, version: Version, mappings: Iterable[HeaderMapping]):
        by_header: dict[str, HeaderMapping] = {}
        by_attribute: dict[str, HeaderMapping] = {}
        for mapping in mappings:
            if mapping.header in by_header:
                raise ValueError(f"Duplicate header {mapping.header!r} in {version.value} table")
            by_header[mapping.header] = mapping
            by_attribute[mapping.attribute] = mapping
        self.version = version
        self._by_header: Mapping[str, HeaderMapping] = MappingProxyType(by_header)
        self._by_attribute: Mapping[str, HeaderMapping] = MappingProxyType(by_attribute)

    def __iter__(self):
        return iter(self._by_header.values())

    def __len__(self) -> int:
        return len(self._by_header)

    def __contains__(self, header: object) -> bool:
        return header in self._by_header

    def header_name_for(self, attribute: str) -> str | None:
        mapping = self._by_attribute.get(attribute)
        return mapping.header if mapping else None

    def attribute_for(self, header: str) -> HeaderMapping | None:
        return self._by_header.get(header.lower())


def _common_mappings() -> list[HeaderMapping]:
    return [
        HeaderMapping(Attribute.DATA_CONTENT_TYPE.value, HEADER_CONTENT_TYPE, _strip),
        HeaderMapping(Attribute.ID.value, CEHeader.ID.value),
        HeaderMapping(Attribute.TYPE.value, CEHeader.TYPE.value),
        HeaderMapping(Attribute.SOURCE.value, CEHeader.SOURCE.value),
        HeaderMapping(
            Attribute.SPEC_VERSION.value, CEHeader.SPEC_VERSION.value, _strip, _format_version
        ),
        HeaderMapping(Attribute.TIME.value, CEHeader.TIME.value, parse_time, format_time),
        HeaderMapping(Attribute.SUBJECT.value, CEHeader.SUBJECT.value),
    ]


V1_HEADERS = HeaderTable(
    Version.V1,
    [
        *_common_mappings(),
        HeaderMapping(Attribute.DATA_SCHEMA.value, CEHeader.DATA_SCHEMA.value),
    ],
)

V03_HEADERS = HeaderTable(
    Version.V03,
    [
        *_common_mappings(),
        HeaderMapping(Attribute.SCHEMA_URL.value, CEHeader.SCHEMA_URL.value),
        HeaderMapping(Attribute.DATA_CONTENT_ENCODING.value, CEHeader.CONTENT_ENCODING.value),
    ],
)

_TABLES: Mapping[Version, HeaderTable] = MappingProxyType(
    {Version.V1: V1_HEADERS, Version.V03: V03_HEADERS}
)


def table_for(version: Version | str) -> HeaderTable:
    """Select the header table of a spec version."""
    return _TABLES[Version.parse(version)]


def header_name_for(attribute: str, version: Version | str) -> str | None:
    return table_for(version).header_name_for(attribute)


def attribute_for(header: str, version: Version | str) -> HeaderMapping | None:
    return table_for(version).attribute_for(header)


def sanitize(headers: Mapping[str, Any]) -> dict[str, str]:
    """Return a copy of the headers with lower-cased, stripped names.

    The input mapping is never modified. When two names collide after
    normalization the last one wins.
    """
    return {str(name).strip().lower(): value for name, value in headers.items()}


def headers_for(event: CloudEvent) -> dict[str, str]:
    """Build the binary-mode headers for an event.

    Attributes known to the event's version table are formatted with the
    table's formatter; every extension becomes a ``ce-<name>`` header.
    """
    table = table_for(event.specversion)
    headers: dict[str, str] = {}
    for mapping in table:
        value = event.get(mapping.attribute)
        if value is not None:
            headers[mapping.header] = mapping.format(value)
    for name, value in event.extensions.items():
        headers[f"{EXTENSIONS_PREFIX}{name}"] = format_extension_value(value)
    return headers
