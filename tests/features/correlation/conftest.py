"""BDD step definitions for correlation features."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from vmusage.core.models import (
    EnrichedOutputRecord,
    InstanceDescriptor,
    MetricKind,
    MetricSample,
)
from vmusage.core.run import run_correlation


@dataclass
class CorrelationScenarioContext:
    """Shared state between steps in a correlation scenario."""

    streams: dict[MetricKind, list[MetricSample]] = field(
        default_factory=lambda: {kind: [] for kind in MetricKind}
    )
    descriptors: list[InstanceDescriptor] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)
    records: list[EnrichedOutputRecord] = field(default_factory=list)


_KINDS = {
    "cpu": MetricKind.CPU_UTILIZATION,
    "ram_total": MetricKind.RAM_TOTAL,
    "ram_used": MetricKind.RAM_USED,
}


@pytest.fixture
def ctx() -> CorrelationScenarioContext:
    """Fresh scenario context for each test."""
    return CorrelationScenarioContext()


# === Given ===
@given(
    parsers.parse(
        'an inventory entry for instance "{instance}" of type "{machine_type}"'
        ' in zone "{zone}"'
    )
)
def step_inventory(
    ctx: CorrelationScenarioContext, instance: str, machine_type: str, zone: str
) -> None:
    ctx.descriptors.append(
        InstanceDescriptor(instance, zone, machine_type, "Intel Cascade Lake")
    )


@given(
    parsers.parse(
        'a {stream} sample for "{instance}" from {start:d} to {end:d}'
        " with value {value:g}"
    )
)
def step_sample(
    ctx: CorrelationScenarioContext,
    stream: str,
    instance: str,
    start: int,
    end: int,
    value: float,
) -> None:
    kind = _KINDS[stream]
    ctx.streams[kind].append(
        MetricSample(instance, "us-central1-a", kind, start, end, float(value))
    )


@given(parsers.parse('a context field "{name}" set to "{value}"'))
def step_context(ctx: CorrelationScenarioContext, name: str, value: str) -> None:
    ctx.context[name] = value


# === When ===
@when("the streams are correlated")
def step_correlate(ctx: CorrelationScenarioContext) -> None:
    driver = ctx.streams[MetricKind.CPU_UTILIZATION]
    auxiliary = {
        kind: samples
        for kind, samples in ctx.streams.items()
        if kind != MetricKind.CPU_UTILIZATION
    }
    ctx.records = run_correlation(driver, auxiliary, ctx.descriptors, ctx.context)


# === Then ===
@then(parsers.re(r"(?P<count>\d+) records? (is|are) produced"))
def step_count(ctx: CorrelationScenarioContext, count: str) -> None:
    assert len(ctx.records) == int(count)


@then(parsers.parse('record {n:d} has "{name}" equal to {value:g}'))
def step_numeric_field(
    ctx: CorrelationScenarioContext, n: int, name: str, value: float
) -> None:
    assert ctx.records[n - 1][name] == pytest.approx(value)


@then(parsers.parse('record {n:d} has text "{name}" equal to "{value}"'))
def step_text_field(
    ctx: CorrelationScenarioContext, n: int, name: str, value: str
) -> None:
    assert ctx.records[n - 1][name] == value


@then(parsers.parse('record {n:d} has no "{name}"'))
def step_field_absent(ctx: CorrelationScenarioContext, n: int, name: str) -> None:
    assert name not in ctx.records[n - 1]
