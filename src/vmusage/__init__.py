"""Correlation and enrichment of cloud VM usage metrics."""

from vmusage.core.correlate import correlate
from vmusage.core.enrich import enrich
from vmusage.core.indexing import StreamIndex, index_samples
from vmusage.core.models import (
    EnrichedOutputRecord,
    IdentityLabel,
    InstanceDescriptor,
    JoinedUsageRecord,
    MetricKind,
    MetricSample,
    RawPoint,
)
from vmusage.core.normalize import normalize, normalize_points
from vmusage.core.run import (
    CorrelationStats,
    run_correlation,
    run_correlation_with_stats,
)
from vmusage.importer import UsageImporter

__all__ = [
    "CorrelationStats",
    "EnrichedOutputRecord",
    "IdentityLabel",
    "InstanceDescriptor",
    "JoinedUsageRecord",
    "MetricKind",
    "MetricSample",
    "RawPoint",
    "StreamIndex",
    "UsageImporter",
    "correlate",
    "enrich",
    "index_samples",
    "normalize",
    "normalize_points",
    "run_correlation",
    "run_correlation_with_stats",
]
