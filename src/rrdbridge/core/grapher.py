"""Graph assembler producing render requests for the engine."""

import logging
import threading
from datetime import datetime

from rrdbridge.core.encoding.command import DELIMITER, format_value, to_epoch
from rrdbridge.core.models import GraphInfo
from rrdbridge.core.ports import EnginePort

logger = logging.getLogger(__name__)

# Target name that makes the engine return the image instead of writing it
IN_MEMORY_TARGET = "-"


class Grapher:
    """Ordered list of graph elements plus render options.

    Elements are kept exactly in append order. The engine evaluates them
    in sequence, so a variable must be bound by DEF, CDEF or VDEF before
    anything refers to it. This is not checked here; the engine fails the
    render instead.

    Render calls on one instance are serialized by a lock held only around
    the engine call. Adding elements is not thread-safe and must be
    finished before rendering.

    Example:
        ```python
        g = Grapher(engine)
        g.set_title("Load")
        g.define("load", "load.rrd", "load", CF.AVERAGE)
        g.vdef("avg", "load,AVERAGE")
        g.line(1.0, "load", "FF0000")
        g.gprint("avg", "avg %6.2lf")
        info, png = g.graph(start, end)
        ```

    Args:
        engine: Engine adapter implementing EnginePort.
    """

    def __init__(self, engine: EnginePort) -> None:
        self._engine = engine
        self._lock = threading.Lock()
        self._title = ""
        self._vlabel = ""
        self._width = 0
        self._height = 0
        self._lower_limit: float | None = None
        self._upper_limit: float | None = None
        self._rigid = False
        self._base: int | None = None
        self._image_format = ""
        self._watermark = ""
        self._elements: list[str] = []

    @property
    def tokens(self) -> list[str]:
        """Graph elements accumulated so far, in order."""
        return list(self._elements)

    # --- Render options ---

    def set_title(self, title: str) -> None:
        self._title = title

    def set_vlabel(self, vlabel: str) -> None:
        self._vlabel = vlabel

    def set_size(self, width: int, height: int) -> None:
        """Set the canvas size in pixels; 0 keeps the engine default."""
        self._width = width
        self._height = height

    def set_limits(
        self,
        lower: float | None = None,
        upper: float | None = None,
        rigid: bool = False,
    ) -> None:
        """Set Y-axis limits.

        Args:
            lower: Lower limit, or None for autoscaling.
            upper: Upper limit, or None for autoscaling.
            rigid: Do not expand the axis when values exceed the limits.
        """
        self._lower_limit = lower
        self._upper_limit = upper
        self._rigid = rigid

    def set_base(self, base: int) -> None:
        """Use 1024 for memory sizes, 1000 (engine default) otherwise."""
        self._base = base

    def set_image_format(self, image_format: str) -> None:
        self._image_format = image_format

    def set_watermark(self, text: str) -> None:
        self._watermark = text

    # --- Elements ---

    def _push(self, cmd: str, options: tuple[str, ...] = ()) -> None:
        if options:
            cmd += DELIMITER + DELIMITER.join(options)
        self._elements.append(cmd)

    def define(
        self, vname: str, rrdfile: str, ds_name: str, cf: str, *options: str
    ) -> None:
        """Bind ``vname`` to a data source: ``DEF:<v>=<file>:<ds>:<cf>``.

        Args:
            vname: Variable name for later elements.
            rrdfile: Database file holding the series.
            ds_name: Data source within the file.
            cf: Consolidation function of the archive to read.
            *options: Extra ``key=value`` fields such as ``step=3600``.
        """
        self._push(f"DEF:{vname}={rrdfile}:{ds_name}:{cf}", options)

    def vdef(self, vname: str, rpn: str) -> None:
        """Bind ``vname`` to a single value reduced from a series."""
        self._push(f"VDEF:{vname}={rpn}")

    def cdef(self, vname: str, rpn: str) -> None:
        """Bind ``vname`` to a series computed point by point."""
        self._push(f"CDEF:{vname}={rpn}")

    def line(self, width: float, value: str, color: str = "", *options: str) -> None:
        """Draw ``value`` as a line; no color makes it invisible."""
        cmd = f"LINE{width:f}:{value}"
        if color:
            cmd += "#" + color
        self._push(cmd, options)

    def area(self, value: str, color: str = "", *options: str) -> None:
        """Fill the area below ``value``; pass ``"STACK"`` to stack it."""
        cmd = f"AREA:{value}"
        if color:
            cmd += "#" + color
        self._push(cmd, options)

    def hrule(self, value: float | str, color: str, *options: str) -> None:
        """Horizontal line at a fixed value or a VDEF variable."""
        self._push(f"HRULE:{format_value(value)}#{color}", options)

    def vrule(self, when: datetime | int | str, color: str, *options: str) -> None:
        """Vertical line at a time or a VDEF variable."""
        self._push(f"VRULE:{format_value(when)}#{color}", options)

    def comment(self, text: str) -> None:
        self._push(f"COMMENT:{text}")

    def print(self, vname: str, fmt: str) -> None:
        """Report a VDEF value in GraphInfo.print_lines."""
        self._push(f"PRINT:{vname}:{fmt}")

    def print_with_time(self, vname: str, fmt: str) -> None:
        """Like ``print()`` but ``fmt`` formats the value's time (strftime)."""
        self._push(f"PRINT:{vname}:{fmt}:strftime")

    def gprint(self, vname: str, fmt: str) -> None:
        """Print a VDEF value into the graph legend."""
        self._push(f"GPRINT:{vname}:{fmt}")

    def gprint_with_time(self, vname: str, fmt: str) -> None:
        self._push(f"GPRINT:{vname}:{fmt}:strftime")

    # --- Rendering ---

    def _render_args(self, start: datetime | int, end: datetime | int) -> list[str]:
        args = ["--start", str(to_epoch(start)), "--end", str(to_epoch(end))]
        if self._title:
            args += ["--title", self._title]
        if self._vlabel:
            args += ["--vertical-label", self._vlabel]
        if self._width:
            args += ["--width", str(self._width)]
        if self._height:
            args += ["--height", str(self._height)]
        if self._lower_limit is not None:
            args += ["--lower-limit", format_value(self._lower_limit)]
        if self._upper_limit is not None:
            args += ["--upper-limit", format_value(self._upper_limit)]
        if self._rigid:
            args.append("--rigid")
        if self._base is not None:
            args += ["--base", str(self._base)]
        if self._image_format:
            args += ["--imgformat", self._image_format]
        if self._watermark:
            args += ["--watermark", self._watermark]
        return args + self._elements

    def _graph(
        self, target: str, start: datetime | int, end: datetime | int
    ) -> tuple[GraphInfo, bytes]:
        args = self._render_args(start, end)
        with self._lock:
            logger.debug("Rendering %s with %d elements", target, len(self._elements))
            return self._engine.graph(target, args)

    def graph(
        self, start: datetime | int, end: datetime | int
    ) -> tuple[GraphInfo, bytes]:
        """Render into memory.

        Returns:
            GraphInfo and the encoded image.

        Raises:
            EngineError: The engine could not render the graph.
        """
        return self._graph(IN_MEMORY_TARGET, start, end)

    def save_graph(
        self, filename: str, start: datetime | int, end: datetime | int
    ) -> GraphInfo:
        """Render into ``filename``, which the engine writes itself.

        Raises:
            EngineError: The engine could not render the graph.
        """
        info, _ = self._graph(filename, start, end)
        return info
