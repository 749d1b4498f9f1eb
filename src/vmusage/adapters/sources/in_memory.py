"""In-memory metric and inventory sources."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace

from vmusage.core.models import IdentityLabel, InstanceDescriptor, MetricKind, RawPoint
from vmusage.core.ports import MetricQuery

logger = logging.getLogger(__name__)


class InMemoryMetricSource:
    """In-memory implementation of MetricSourcePort.

    Serves preloaded raw points per metric kind, ignoring the query window.
    Suitable for testing and for replaying previously exported data.
    """

    def __init__(
        self, points: Mapping[MetricKind, Iterable[RawPoint]] | None = None
    ) -> None:
        self._points: dict[MetricKind, list[RawPoint]] = {
            kind: list(stream) for kind, stream in (points or {}).items()
        }
        self.queries: list[tuple[MetricKind, MetricQuery]] = []

    def add(self, kind: MetricKind, point: RawPoint) -> None:
        """Append a raw point to the stream of the given kind."""
        self._points.setdefault(kind, []).append(point)

    async def fetch(self, kind: MetricKind, query: MetricQuery) -> list[RawPoint]:
        """Return the points stored for kind and record the query."""
        self.queries.append((kind, query))
        return list(self._points.get(kind, []))


class InMemoryInventory:
    """In-memory implementation of InventoryPort.

    Holds instance metadata with both the id and name attributes, and
    keys each returned descriptor by the requested identity label.
    Instances lacking the requested attribute are left out.
    """

    def __init__(self, instances: Iterable[InstanceDescriptor] = ()) -> None:
        self._instances = list(instances)

    async def list_instances(
        self, project_id: str, identity: IdentityLabel
    ) -> list[InstanceDescriptor]:
        """Return the stored descriptors keyed by the requested identity."""
        result = []
        for instance in self._instances:
            if identity == IdentityLabel.INSTANCE_NAME:
                key = instance.instance_name
            else:
                key = instance.instance_id
            if not key:
                logger.debug(
                    "Skipping instance %s without %s",
                    instance.instance_identity,
                    identity,
                )
                continue
            result.append(replace(instance, instance_identity=key))
        return result
