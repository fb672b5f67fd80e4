"""Core domain models for round-robin database commands."""

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True)
class Marker:
    """A symbolic argument understood by the engine.

    Attributes:
        token: The literal the engine expects in place of a value.
    """

    token: str

    def __str__(self) -> str:
        return self.token


# Unknown value: heartbeat/min/max placeholders and missing samples.
UNKNOWN = Marker("U")

# "Now" as the timestamp field of an update row.
NOW = Marker("N")


class DSType(StrEnum):
    """Data source compute types."""

    GAUGE = "GAUGE"
    COUNTER = "COUNTER"
    DCOUNTER = "DCOUNTER"
    DERIVE = "DERIVE"
    DDERIVE = "DDERIVE"
    ABSOLUTE = "ABSOLUTE"
    COMPUTE = "COMPUTE"


class CF(StrEnum):
    """Consolidation functions."""

    AVERAGE = "AVERAGE"
    MIN = "MIN"
    MAX = "MAX"
    LAST = "LAST"


@dataclass(frozen=True)
class GraphInfo:
    """Metadata reported by the engine for a rendered graph.

    Attributes:
        print_lines: Text produced by PRINT elements, in element order.
        width: Rendered image width in pixels.
        height: Rendered image height in pixels.
        ymin: Lower Y-axis bound chosen by the engine.
        ymax: Upper Y-axis bound chosen by the engine.
    """

    print_lines: list[str] = field(default_factory=list)
    width: int = 0
    height: int = 0
    ymin: float = 0.0
    ymax: float = 0.0
