"""Sample buffer feeding rows into an existing database."""

import logging
from typing import Any

from rrdbridge.core.encoding.command import DELIMITER, join
from rrdbridge.core.ports import EnginePort

logger = logging.getLogger(__name__)


class Updater:
    """Submits sample rows immediately or buffers them for one bulk update.

    Buffering with ``cache()`` avoids an open/write/close cycle in the
    engine for every sample. The buffered path is single-writer. Calling
    ``update()`` with arguments is safe from several threads at once since
    each call submits its own row and never touches the buffer.

    Args:
        engine: Engine adapter implementing EnginePort.
        filename: Existing database file.
    """

    def __init__(self, engine: EnginePort, filename: str) -> None:
        self._engine = engine
        self._filename = filename
        self._template = ""
        self._pending: list[str] = []

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def template(self) -> str:
        return self._template

    @property
    def pending(self) -> tuple[str, ...]:
        """Buffered rows in the order they were cached."""
        return tuple(self._pending)

    def set_template(self, *ds_names: str) -> None:
        """Map row values to these data sources instead of schema order."""
        self._template = DELIMITER.join(ds_names)

    def cache(self, *args: Any) -> None:
        """Buffer one row for a later ``update()`` without arguments.

        Args:
            *args: Timestamp (or NOW) followed by one value per data source.
        """
        self._pending.append(join(args))

    def update(self, *args: Any) -> None:
        """Save data in the database.

        With arguments, one row is submitted right away and the buffer is
        left alone. Without arguments, every buffered row is submitted in
        one request and the buffer is emptied even when the engine fails;
        see ``flush()`` for a variant that keeps the rows.

        Raises:
            EngineError: The engine rejected a row.
        """
        if args:
            row = join(args)
            logger.debug("Updating %s with 1 row", self._filename)
            self._engine.update(self._filename, self._template, [row])
        else:
            self.flush()

    def flush(self, keep_on_error: bool = False) -> None:
        """Submit all buffered rows as a single update.

        Does nothing when the buffer is empty.

        Args:
            keep_on_error: Put the rows back in front of the buffer when
                the update raises, whatever the exception, instead of
                dropping them.

        Raises:
            EngineError: The engine rejected a row.
        """
        if not self._pending:
            return
        rows, self._pending = self._pending, []
        logger.debug("Updating %s with %d rows", self._filename, len(rows))
        try:
            self._engine.update(self._filename, self._template, rows)
        except Exception:
            if keep_on_error:
                self._pending[:0] = rows
            else:
                logger.warning(
                    "Dropping %d buffered rows for %s after failed update",
                    len(rows),
                    self._filename,
                )
            raise
