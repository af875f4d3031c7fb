"""CloudEvent model and specification constraint checks."""

from .cloudevent import CloudEvent, check_extension, format_time, parse_time
from .spec import validate_cloudevent

__all__ = [
    "CloudEvent",
    "check_extension",
    "format_time",
    "parse_time",
    "validate_cloudevent",
]
