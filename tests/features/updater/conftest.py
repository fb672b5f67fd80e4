"""BDD step definitions for buffered update features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from rrdbridge import EngineError, InMemoryEngine, Updater


@dataclass
class UpdaterScenarioContext:
    """State shared between the steps of one scenario."""

    engine: InMemoryEngine = field(default_factory=InMemoryEngine)
    updater: Updater | None = None
    error: EngineError | None = None


@pytest.fixture
def ctx() -> UpdaterScenarioContext:
    """Fresh scenario context for each test."""
    return UpdaterScenarioContext()


def _updater(ctx: UpdaterScenarioContext) -> Updater:
    assert ctx.updater is not None, "no updater in scenario"
    return ctx.updater


# === Background Steps ===
@given("an in-memory engine")
def step_engine(ctx: UpdaterScenarioContext) -> None:
    ctx.engine = InMemoryEngine()


@given(
    parsers.parse(
        'a database "{name}" with data sources "{names}" starting at {start:d}'
    )
)
def step_database(
    ctx: UpdaterScenarioContext, name: str, names: str, start: int
) -> None:
    tokens = [f"DS:{ds}:COUNTER:120:0:U" for ds in names.split(",")]
    ctx.engine.create(name, start, 60, [*tokens, "RRA:AVERAGE:0.5:1:100"])


@given(parsers.parse('an updater for "{name}"'))
def step_updater(ctx: UpdaterScenarioContext, name: str) -> None:
    ctx.updater = Updater(ctx.engine, name)


# === Actions ===
@when(parsers.parse("rows for timestamps {t1:d}, {t2:d} and {t3:d} are cached"))
def step_cache_rows(ctx: UpdaterScenarioContext, t1: int, t2: int, t3: int) -> None:
    for value, timestamp in enumerate((t1, t2, t3), start=1):
        _updater(ctx).cache(timestamp, value, value)


@when("the updater is flushed")
def step_flush(ctx: UpdaterScenarioContext) -> None:
    try:
        _updater(ctx).update()
    except EngineError as e:
        ctx.error = e


@when("the updater is flushed keeping rows on error")
def step_flush_keep(ctx: UpdaterScenarioContext) -> None:
    try:
        _updater(ctx).flush(keep_on_error=True)
    except EngineError as e:
        ctx.error = e


@when(parsers.parse("a row for timestamp {timestamp:d} is submitted immediately"))
def step_immediate(ctx: UpdaterScenarioContext, timestamp: int) -> None:
    _updater(ctx).update(timestamp, 9, 9)


# === Assertions ===
@then(parsers.parse("the engine has received {count:d} update"))
@then(parsers.parse("the engine has received {count:d} updates"))
def step_update_count(ctx: UpdaterScenarioContext, count: int) -> None:
    assert len(ctx.engine.updates) == count


@then(parsers.parse('the last update contained the rows "{rows}"'))
def step_last_rows(ctx: UpdaterScenarioContext, rows: str) -> None:
    assert ctx.engine.updates[-1].rows == rows.split(",")


@then(parsers.parse("the updater holds {count:d} pending rows"))
def step_pending(ctx: UpdaterScenarioContext, count: int) -> None:
    assert len(_updater(ctx).pending) == count


@then("the flush fails with an engine error")
def step_flush_failed(ctx: UpdaterScenarioContext) -> None:
    assert isinstance(ctx.error, EngineError)
