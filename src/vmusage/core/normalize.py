"""Normalization of raw metric-source points into MetricSample objects."""

import logging
from collections.abc import Iterable

from vmusage.core.models import IdentityLabel, MetricKind, MetricSample, RawPoint

logger = logging.getLogger(__name__)


def _coerce_value(point: RawPoint) -> float | None:
    """Return the point value as a float, preferring the double representation."""
    if point.double_value is not None:
        return float(point.double_value)
    if point.int64_value is not None:
        return float(point.int64_value)
    return None


def normalize(
    point: RawPoint,
    kind: MetricKind,
    identity: IdentityLabel = IdentityLabel.INSTANCE_ID,
) -> MetricSample | None:
    """Convert a raw point into a MetricSample.

    Points that are not instance scoped (no identity label), carry no value,
    or have no usable interval are skipped.

    Args:
        point: Raw point from a metric source.
        kind: Metric kind the point was fetched for.
        identity: Label whose value becomes the instance identity.

    Returns:
        The normalized sample, or None if the point was skipped.
    """
    instance = point.labels.get(identity)
    if not instance:
        return None

    value = _coerce_value(point)
    if value is None:
        return None

    if point.end_time is None:
        return None
    # Gauge points report a single instant
    start_time = point.start_time if point.start_time is not None else point.end_time
    if start_time > point.end_time:
        return None

    return MetricSample(
        instance_identity=str(instance),
        zone=point.labels.get("zone", ""),
        kind=kind,
        start_time=int(start_time),
        end_time=int(point.end_time),
        value=value,
    )


def normalize_points(
    points: Iterable[RawPoint],
    kind: MetricKind,
    identity: IdentityLabel = IdentityLabel.INSTANCE_ID,
) -> list[MetricSample]:
    """Normalize a whole stream, dropping points that fail the contract.

    Args:
        points: Raw points fetched for a single metric kind.
        kind: Metric kind the points were fetched for.
        identity: Label whose value becomes the instance identity.

    Returns:
        Normalized samples in input order.
    """
    samples: list[MetricSample] = []
    skipped = 0
    for point in points:
        sample = normalize(point, kind, identity)
        if sample is None:
            skipped += 1
            continue
        samples.append(sample)

    if skipped:
        logger.debug(
            "Skipped %d raw %s points without identity, value or interval",
            skipped,
            kind,
            extra={"metric_kind": str(kind), "skipped": skipped},
        )
    return samples
