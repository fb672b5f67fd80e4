"""Engine adapter for the ``rrdtool`` Python binding.

Requires librrd and the ``rrdtool`` package (``pip install rrdbridge[rrdtool]``).
"""

import logging
from collections.abc import Sequence
from typing import Any

try:
    import rrdtool
except ImportError:
    rrdtool = None  # type: ignore[assignment]

from rrdbridge.core.errors import EngineError
from rrdbridge.core.models import GraphInfo

logger = logging.getLogger(__name__)


def _graph_info(info: dict[str, Any]) -> tuple[GraphInfo, bytes]:
    """Translate the dictionary returned by ``rrdtool.graphv``.

    PRINT results arrive as ``print[0]``, ``print[1]``, ... keys and are
    returned in index order.
    """
    prints = sorted(
        (int(key[len("print[") : -1]), value)
        for key, value in info.items()
        if key.startswith("print[")
    )
    image = info.get("image") or b""
    if isinstance(image, str):
        image = image.encode("latin-1")
    return (
        GraphInfo(
            print_lines=[str(value) for _, value in prints],
            width=int(info.get("image_width", 0)),
            height=int(info.get("image_height", 0)),
            ymin=float(info.get("value_min", 0.0)),
            ymax=float(info.get("value_max", 0.0)),
        ),
        image,
    )


class RRDToolEngine:
    """rrdtool implementation of EnginePort.

    Args:
        daemon: Address of an rrdcached daemon (e.g. ``unix:/var/run/rrdcached.sock``).
            Updates and renders go through it when set.
    """

    def __init__(self, daemon: str | None = None) -> None:
        if rrdtool is None:
            raise ImportError(
                "RRDToolEngine requires the rrdtool package: "
                "pip install rrdbridge[rrdtool]"
            )
        self._daemon = daemon

    def _daemon_args(self) -> list[str]:
        return ["--daemon", self._daemon] if self._daemon else []

    def create(
        self, target: str, start: int, step: int, tokens: Sequence[str]
    ) -> None:
        """Create a database file with ``rrdtool create``."""
        try:
            rrdtool.create(
                target, "--start", str(start), "--step", str(step), *tokens
            )
        except rrdtool.OperationalError as exc:
            raise EngineError(str(exc)) from exc

    def update(self, target: str, template: str, rows: Sequence[str]) -> None:
        """Feed rows with ``rrdtool update``."""
        args = self._daemon_args()
        if template:
            args += ["--template", template]
        try:
            rrdtool.update(target, *args, *rows)
        except rrdtool.OperationalError as exc:
            raise EngineError(str(exc)) from exc

    def graph(self, target: str, tokens: Sequence[str]) -> tuple[GraphInfo, bytes]:
        """Render with ``rrdtool graphv``; target "-" returns the image."""
        try:
            info = rrdtool.graphv(target, *self._daemon_args(), *tokens)
        except rrdtool.OperationalError as exc:
            raise EngineError(str(exc)) from exc
        logger.debug("Rendered %s", target)
        return _graph_info(info)
