"""End-to-end correlation run: index, correlate and enrich."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from vmusage.core.correlate import AUXILIARY_KINDS, correlate
from vmusage.core.enrich import enrich
from vmusage.core.indexing import StreamIndex, index_samples
from vmusage.core.models import (
    EnrichedOutputRecord,
    InstanceDescriptor,
    MetricKind,
    MetricSample,
    OutputValue,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrelationStats:
    """Data-quality counts for one correlation run.

    Attributes:
        driver_samples: Number of driver samples (and output records).
        duplicates: Auxiliary samples discarded per kind by the first-wins policy.
        missing_auxiliary: Records with at least one defaulted auxiliary value.
        missing_descriptor: Records emitted without inventory fields.
    """

    driver_samples: int = 0
    duplicates: Mapping[MetricKind, int] | None = None
    missing_auxiliary: int = 0
    missing_descriptor: int = 0


def _index_descriptors(
    descriptors: Iterable[InstanceDescriptor],
) -> dict[str, InstanceDescriptor]:
    by_identity: dict[str, InstanceDescriptor] = {}
    for descriptor in descriptors:
        by_identity.setdefault(descriptor.instance_identity, descriptor)
    return by_identity


def run_correlation_with_stats(
    driver: Sequence[MetricSample],
    auxiliary: Mapping[MetricKind, Iterable[MetricSample]],
    descriptors: Iterable[InstanceDescriptor] = (),
    context: Mapping[str, OutputValue] | None = None,
) -> tuple[list[EnrichedOutputRecord], CorrelationStats]:
    """Correlate and enrich, also returning data-quality counts.

    See run_correlation for the argument contract.
    """
    indices: dict[MetricKind, StreamIndex] = {
        kind: index_samples(samples, kind) for kind, samples in auxiliary.items()
    }
    for kind in AUXILIARY_KINDS:
        indices.setdefault(kind, StreamIndex(kind))
    inventory = _index_descriptors(descriptors)

    records: list[EnrichedOutputRecord] = []
    missing_auxiliary = 0
    missing_descriptor = 0
    for joined in correlate(driver, indices):
        descriptor = inventory.get(joined.instance_identity)
        if joined.degraded:
            missing_auxiliary += 1
        if descriptor is None:
            missing_descriptor += 1
            logger.debug("No descriptor for instance %s", joined.instance_identity)
        records.append(enrich(joined, descriptor, context))

    stats = CorrelationStats(
        driver_samples=len(driver),
        duplicates={kind: index.duplicates for kind, index in indices.items()},
        missing_auxiliary=missing_auxiliary,
        missing_descriptor=missing_descriptor,
    )
    logger.info(
        "Correlated %d driver samples into %d records "
        "(%d degraded, %d without descriptor, %d duplicates discarded)",
        stats.driver_samples,
        len(records),
        missing_auxiliary,
        missing_descriptor,
        sum(stats.duplicates.values()) if stats.duplicates else 0,
    )
    return records, stats


def run_correlation(
    driver: Sequence[MetricSample],
    auxiliary: Mapping[MetricKind, Iterable[MetricSample]],
    descriptors: Iterable[InstanceDescriptor] = (),
    context: Mapping[str, OutputValue] | None = None,
) -> list[EnrichedOutputRecord]:
    """Produce one enriched record per driver sample, in driver order.

    Args:
        driver: Normalized samples of the driver stream.
        auxiliary: Normalized samples per auxiliary metric kind. Each
            stream must contain a single kind. RAM total and RAM used
            are always joined; a kind left out counts as an empty stream.
        descriptors: Inventory metadata, looked up by instance identity.
            The first descriptor seen for an identity is used.
        context: Caller fields merged into every record, overriding
            computed fields of the same name.

    Returns:
        Enriched records. Empty when there are no driver samples.
    """
    records, _ = run_correlation_with_stats(driver, auxiliary, descriptors, context)
    return records
