"""Encoder for the engine's colon-delimited argument syntax."""

import math
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import Any

from rrdbridge.core.models import Marker

DELIMITER = ":"


def to_epoch(value: datetime | date | int | float) -> int:
    """Convert a timestamp to whole epoch seconds, rounding down.

    A plain date means local midnight of that day.
    """
    if isinstance(value, datetime):
        return math.floor(value.timestamp())
    if isinstance(value, date):
        return math.floor(datetime.combine(value, time.min).timestamp())
    return math.floor(value)


def format_value(value: Any) -> str:
    """Render one argument in its canonical textual form.

    Absolute timestamps become epoch seconds and durations become whole
    seconds. Values are not escaped: a value containing ``:`` produces a
    malformed command.

    Args:
        value: A marker, bool, datetime, date, timedelta or any value with a
            meaningful ``str()`` (int, float, str, enum members).

    Returns:
        The textual form the engine parses.
    """
    if isinstance(value, Marker):
        return value.token
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, date):
        return str(to_epoch(value))
    if isinstance(value, timedelta):
        return str(int(value.total_seconds()))
    return str(value)


def join(values: Iterable[Any]) -> str:
    """Join values into one ``a:b:c`` argument.

    Returns:
        The joined string, empty for no values.
    """
    return DELIMITER.join(format_value(v) for v in values)
