"""In-memory engine adapter.

Keeps schemas and samples in dictionaries and applies a subset of the
engine's checks, enough to exercise error paths without native libraries.
Suitable for testing and development; nothing is written to disk.
"""

import re
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from rrdbridge.core.errors import EngineError
from rrdbridge.core.models import GraphInfo

# Render options that take no value
_FLAG_OPTIONS = frozenset({"--rigid", "--no-legend", "--lazy", "--logarithmic"})

_DEFAULT_WIDTH = 400
_DEFAULT_HEIGHT = 100

# Stand-in for rendered image data: a PNG signature and nothing else
PLACEHOLDER_IMAGE = b"\x89PNG\r\n\x1a\n"


@dataclass(frozen=True)
class CreateCall:
    target: str
    start: int
    step: int
    tokens: list[str]


@dataclass(frozen=True)
class UpdateCall:
    target: str
    template: str
    rows: list[str]


@dataclass(frozen=True)
class GraphCall:
    target: str
    tokens: list[str]


@dataclass
class _Database:
    start: int
    step: int
    ds_names: list[str]
    last_update: int
    samples: dict[str, list[tuple[int, str]]] = field(default_factory=dict)


class InMemoryEngine:
    """In-memory implementation of EnginePort.

    Every call is recorded in ``creates``, ``updates`` and ``graphs``, in
    call order, including calls that fail. All methods are thread-safe.

    Graph rendering is simulated: the reported size comes from the
    ``--width``/``--height`` options, the Y bounds from the stored values of
    DEF sources, and each PRINT element contributes its format string
    unchanged as a print line.

    Args:
        enforce_ordering: Reject rows whose timestamp is not after the last
            update, as the real engine does.
    """

    def __init__(self, enforce_ordering: bool = True) -> None:
        self._enforce_ordering = enforce_ordering
        self._lock = threading.Lock()
        self._databases: dict[str, _Database] = {}
        self.creates: list[CreateCall] = []
        self.updates: list[UpdateCall] = []
        self.graphs: list[GraphCall] = []

    def _get(self, target: str) -> _Database:
        db = self._databases.get(target)
        if db is None:
            raise EngineError(f"opening '{target}': No such file or directory")
        return db

    def last_update(self, target: str) -> int:
        """Timestamp of the newest accepted row (the start time if none)."""
        with self._lock:
            return self._get(target).last_update

    def samples(self, target: str, ds_name: str) -> list[tuple[int, str]]:
        """Accepted ``(timestamp, value)`` pairs for one data source."""
        with self._lock:
            return list(self._get(target).samples.get(ds_name, []))

    def create(
        self, target: str, start: int, step: int, tokens: Sequence[str]
    ) -> None:
        """Register a database schema, replacing any existing one."""
        with self._lock:
            self.creates.append(CreateCall(target, start, step, list(tokens)))
            if step < 1:
                raise EngineError("step size should be no less than one second")
            ds_names: list[str] = []
            archives = 0
            for token in tokens:
                kind, *fields = token.split(":")
                if kind == "DS" and len(fields) >= 2:
                    if fields[0] in ds_names:
                        raise EngineError(f"Duplicate DS name: {fields[0]}")
                    ds_names.append(fields[0])
                elif kind == "RRA" and fields:
                    archives += 1
                else:
                    raise EngineError(f"can't parse argument '{token}'")
            if not ds_names:
                raise EngineError("you must define at least one Data Source")
            if not archives:
                raise EngineError("you must define at least one Round Robin Archive")
            self._databases[target] = _Database(
                start=start,
                step=step,
                ds_names=ds_names,
                last_update=start,
                samples={name: [] for name in ds_names},
            )

    def update(self, target: str, template: str, rows: Sequence[str]) -> None:
        """Apply rows in order, stopping at the first rejected one.

        Rows before the rejected one stay applied.
        """
        with self._lock:
            self.updates.append(UpdateCall(target, template, list(rows)))
            db = self._get(target)
            names = template.split(":") if template else db.ds_names
            for name in names:
                if name not in db.ds_names:
                    raise EngineError(f"unknown DS name '{name}'")
            for row in rows:
                ts_field, *values = row.split(":")
                if len(values) != len(names):
                    raise EngineError(
                        f"expected {len(names)} data source readings "
                        f"(got {len(values)}) from {row}"
                    )
                timestamp = self._parse_time(ts_field)
                if self._enforce_ordering and timestamp <= db.last_update:
                    raise EngineError(
                        f"illegal attempt to update using time {timestamp} "
                        f"when last update time is {db.last_update} "
                        "(minimum one second step)"
                    )
                db.last_update = max(db.last_update, timestamp)
                for name, value in zip(names, values, strict=True):
                    db.samples[name].append((timestamp, value))

    @staticmethod
    def _parse_time(value: str) -> int:
        if value == "N":
            return int(time.time())
        try:
            return int(float(value))
        except ValueError:
            raise EngineError(f"ds time: {value}: not a valid time") from None

    def graph(self, target: str, tokens: Sequence[str]) -> tuple[GraphInfo, bytes]:
        """Check variable bindings and report a simulated render."""
        with self._lock:
            self.graphs.append(GraphCall(target, list(tokens)))
            options, elements = _split_options(list(tokens))
            defined: set[str] = set()
            values: list[float] = []
            print_lines: list[str] = []
            for element in elements:
                kind, _, rest = element.partition(":")
                if kind in ("DEF", "CDEF", "VDEF"):
                    vname, sep, expr = rest.partition("=")
                    if not vname or not sep:
                        raise EngineError(f"can't parse '{element}'")
                    if kind == "DEF":
                        values.extend(self._def_values(expr))
                    defined.add(vname)
                elif kind.startswith("LINE") or kind in ("AREA", "PRINT", "GPRINT"):
                    vname = re.split("[#:]", rest, maxsplit=1)[0]
                    if vname not in defined:
                        raise EngineError(
                            f"Not a valid vname: {vname} in line {element}"
                        )
                    if kind == "PRINT":
                        _, _, fmt = rest.partition(":")
                        print_lines.append(fmt.removesuffix(":strftime"))
                elif kind not in ("HRULE", "VRULE", "COMMENT"):
                    raise EngineError(f"Unknown function '{kind}'")
            info = GraphInfo(
                print_lines=print_lines,
                width=int(options.get("--width", _DEFAULT_WIDTH)),
                height=int(options.get("--height", _DEFAULT_HEIGHT)),
                ymin=min(values, default=0.0),
                ymax=max(values, default=0.0),
            )
            return info, PLACEHOLDER_IMAGE if target == "-" else b""

    def _def_values(self, expr: str) -> list[float]:
        rrdfile, ds_name, *_ = expr.split(":") + [""]
        db = self._get(rrdfile)
        if ds_name not in db.ds_names:
            raise EngineError(f"No DS called '{ds_name}' in '{rrdfile}'")
        values = []
        for _, raw in db.samples[ds_name]:
            try:
                values.append(float(raw))
            except ValueError:
                continue
        return [v for v in values if v == v]


def _split_options(tokens: list[str]) -> tuple[dict[str, str], list[str]]:
    """Separate leading ``--option value`` pairs from graph elements."""
    options: dict[str, str] = {}
    i = 0
    while i < len(tokens) and tokens[i].startswith("--"):
        if tokens[i] in _FLAG_OPTIONS:
            options[tokens[i]] = ""
            i += 1
        else:
            options[tokens[i]] = tokens[i + 1] if i + 1 < len(tokens) else ""
            i += 2
    return options, tokens[i:]
