"""rrdbridge: command layer for round-robin time-series databases."""

from rrdbridge.adapters.engine.in_memory import InMemoryEngine
from rrdbridge.core.creator import Creator
from rrdbridge.core.encoding.command import format_value, join, to_epoch
from rrdbridge.core.errors import EngineError
from rrdbridge.core.grapher import Grapher
from rrdbridge.core.models import CF, NOW, UNKNOWN, DSType, GraphInfo, Marker
from rrdbridge.core.ports import EnginePort
from rrdbridge.core.updater import Updater

__all__ = [
    "CF",
    "NOW",
    "UNKNOWN",
    "Creator",
    "DSType",
    "EngineError",
    "EnginePort",
    "GraphInfo",
    "Grapher",
    "InMemoryEngine",
    "Marker",
    "Updater",
    "format_value",
    "join",
    "to_epoch",
]
