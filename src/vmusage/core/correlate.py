"""Join of a driver stream with auxiliary metric streams."""

import logging
from collections.abc import Iterable, Mapping

from vmusage.core.indexing import StreamIndex
from vmusage.core.models import JoinedUsageRecord, MetricKind, MetricSample

logger = logging.getLogger(__name__)

# Value attached when an auxiliary stream has no sample for the driver key
MISSING_AUXILIARY_VALUE = 0.0

# Auxiliary kinds every joined record reports, present in the input or not
AUXILIARY_KINDS = (MetricKind.RAM_TOTAL, MetricKind.RAM_USED)


def correlate(
    driver: Iterable[MetricSample],
    auxiliary: Mapping[MetricKind, StreamIndex],
) -> list[JoinedUsageRecord]:
    """Join auxiliary streams onto the driver stream by exact key match.

    Every driver sample yields exactly one record, in driver order. An
    auxiliary kind with no sample under the driver's key contributes
    ``MISSING_AUXILIARY_VALUE`` and is listed in the record's ``missing``.

    Args:
        driver: Samples of the driver stream (CPU utilization).
        auxiliary: Index per auxiliary metric kind.

    Returns:
        Joined records, one per driver sample.
    """
    records: list[JoinedUsageRecord] = []
    for sample in driver:
        key = sample.key
        values: dict[MetricKind, float] = {}
        missing: set[MetricKind] = set()
        for kind, index in auxiliary.items():
            match = index.find(key)
            if match is None:
                values[kind] = MISSING_AUXILIARY_VALUE
                missing.add(kind)
            else:
                values[kind] = match.value

        if missing:
            logger.debug(
                "No %s for %s [%d, %d], using default",
                ", ".join(sorted(missing)),
                *key,
            )

        records.append(
            JoinedUsageRecord(
                instance_identity=sample.instance_identity,
                zone=sample.zone,
                start_time=sample.start_time,
                end_time=sample.end_time,
                cpu_utilization=sample.value,
                auxiliary=values,
                missing=frozenset(missing),
            )
        )
    return records
