"""Port interface for the round-robin storage engine.

The builders in ``rrdbridge.core`` talk to the engine only through this
protocol. Adapters translate it to a concrete engine binding.
Examples: InMemoryEngine, RRDToolEngine.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from rrdbridge.core.models import GraphInfo


@runtime_checkable
class EnginePort(Protocol):
    """Port for the three native engine operations.

    Implementations raise ``EngineError`` with the engine's own message
    when an operation fails.
    """

    def create(
        self, target: str, start: int, step: int, tokens: Sequence[str]
    ) -> None:
        """Create a database file.

        Args:
            target: Database filename.
            start: Epoch seconds; data at or before this time is refused.
            step: Base interval in seconds.
            tokens: DS and RRA definitions in order.
        """
        ...

    def update(self, target: str, template: str, rows: Sequence[str]) -> None:
        """Feed one or more rows into a database.

        Args:
            target: Database filename.
            template: ``:``-joined data source names, or "" for schema order.
            rows: ``<timestamp-or-N>:<v1>:<v2>...`` rows, oldest first.
        """
        ...

    def graph(self, target: str, tokens: Sequence[str]) -> tuple[GraphInfo, bytes]:
        """Render a graph.

        Args:
            target: Output filename, or "-" to render into memory.
            tokens: Render options followed by graph elements.

        Returns:
            GraphInfo and the image bytes (empty when written to a file).
        """
        ...
