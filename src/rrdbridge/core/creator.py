"""Schema builder for new round-robin databases."""

import logging
import os
from datetime import datetime
from typing import Any

from rrdbridge.core.encoding.command import join, to_epoch
from rrdbridge.core.ports import EnginePort

logger = logging.getLogger(__name__)


class Creator:
    """Accumulates DS and RRA definitions and creates the database once.

    Nothing is validated locally. A malformed schema is rejected by the
    engine when ``create()`` runs. Instances are not thread-safe.

    Example:
        ```python
        c = Creator(engine, "load.rrd", start=datetime.now(), step=60)
        c.data_source("load", DSType.GAUGE, 120, 0, UNKNOWN)
        c.archive(CF.AVERAGE, 0.5, 1, 1440)
        c.create()
        ```

    Args:
        engine: Engine adapter implementing EnginePort.
        filename: Database file to create.
        start: No data at or before this time is accepted.
        step: Base interval in seconds with which data is fed in.
    """

    def __init__(
        self,
        engine: EnginePort,
        filename: str,
        start: datetime | int,
        step: int = 300,
    ) -> None:
        self._engine = engine
        self._filename = filename
        self._start = start
        self._step = step
        self._tokens: list[str] = []

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def tokens(self) -> list[str]:
        """Definitions accumulated so far, in order."""
        return list(self._tokens)

    def data_source(self, name: str, compute: str, *args: Any) -> None:
        """Append ``DS:<name>:<compute>:<args>``.

        Args:
            name: Data source name.
            compute: Compute type (GAUGE, COUNTER, DERIVE, ...).
            *args: Heartbeat, min and max for most types; the RPN
                expression for COMPUTE.
        """
        self._tokens.append(f"DS:{name}:{compute}:{join(args)}")

    def archive(self, cf: str, *args: Any) -> None:
        """Append ``RRA:<cf>:<args>`` (usually xff, steps, rows)."""
        self._tokens.append(f"RRA:{cf}:{join(args)}")

    def create(self, overwrite: bool = False) -> None:
        """Create the database file.

        Args:
            overwrite: Replace an existing file. When False the target is
                first created exclusively, so an existing file fails here
                without reaching the engine.

        Raises:
            OSError: The exclusive-create probe failed.
            EngineError: The engine rejected the schema.
        """
        if not overwrite:
            fd = os.open(self._filename, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
            os.close(fd)
        logger.debug(
            "Creating %s with %d definitions", self._filename, len(self._tokens)
        )
        self._engine.create(
            self._filename, to_epoch(self._start), self._step, list(self._tokens)
        )
