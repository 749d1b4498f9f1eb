"""Lookup index over a single metric stream."""

import logging
from collections.abc import Iterable

from vmusage.core.models import JoinKey, MetricKind, MetricSample

logger = logging.getLogger(__name__)


class StreamIndex:
    """Samples of one metric kind keyed by (instance, start_time, end_time).

    When two samples share a key the first one seen is kept and the later
    one is counted in ``duplicates``.
    """

    def __init__(self, kind: MetricKind | None = None) -> None:
        self._kind = kind
        self._samples: dict[JoinKey, MetricSample] = {}
        self._duplicates = 0

    @property
    def kind(self) -> MetricKind | None:
        """Metric kind of the indexed samples, None while empty and untyped."""
        return self._kind

    @property
    def duplicates(self) -> int:
        """Number of samples discarded because their key was already indexed."""
        return self._duplicates

    def add(self, sample: MetricSample) -> bool:
        """Index a sample.

        Returns:
            True if the sample was stored, False if its key was already taken.

        Raises:
            ValueError: If the sample's kind differs from the indexed stream.
        """
        if self._kind is None:
            self._kind = sample.kind
        elif sample.kind != self._kind:
            raise ValueError(
                f"cannot index {sample.kind} sample in a {self._kind} stream"
            )

        key = sample.key
        if key in self._samples:
            self._duplicates += 1
            logger.debug(
                "Discarding duplicate %s sample for %s [%d, %d]",
                sample.kind,
                *key,
            )
            return False
        self._samples[key] = sample
        return True

    def find(self, key: JoinKey) -> MetricSample | None:
        """Return the sample stored under key, or None."""
        return self._samples.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._samples

    def __len__(self) -> int:
        return len(self._samples)


def index_samples(
    samples: Iterable[MetricSample], kind: MetricKind | None = None
) -> StreamIndex:
    """Build a StreamIndex over samples of a single metric kind.

    Args:
        samples: Samples sharing one metric kind.
        kind: Expected kind. Lets an empty stream still carry its kind.

    Returns:
        Populated index.

    Raises:
        ValueError: If the samples mix metric kinds.
    """
    index = StreamIndex(kind)
    for sample in samples:
        index.add(sample)
    return index
