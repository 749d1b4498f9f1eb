"""Google Cloud metric and inventory sources.

Requires the ``gcp`` extra (google-cloud-monitoring, google-cloud-compute).
Default clients authenticate with Application Default Credentials. The
blocking client calls run in a worker thread so several fetches can be
awaited concurrently.
"""

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from google.cloud import compute_v1, monitoring_v3

from vmusage.core.models import IdentityLabel, InstanceDescriptor, MetricKind, RawPoint
from vmusage.core.ports import MetricQuery

logger = logging.getLogger(__name__)

METRIC_TYPES: dict[MetricKind, str] = {
    MetricKind.CPU_UTILIZATION: "compute.googleapis.com/instance/cpu/utilization",
    MetricKind.RAM_TOTAL: "compute.googleapis.com/instance/memory/balloon/ram_size",
    MetricKind.RAM_USED: "compute.googleapis.com/instance/memory/balloon/ram_used",
}

_ZONE_SCOPE_PREFIX = "zones/"


def _seconds(moment: datetime | None) -> int | None:
    if moment is None:
        return None
    return int(moment.timestamp())


def points_from_series(series: Iterable[Any]) -> list[RawPoint]:
    """Flatten Cloud Monitoring time series into raw points.

    Resource labels (instance_id, zone) and metric labels (instance_name)
    are merged into each point's labels, metric labels winning on clash.

    Args:
        series: monitoring_v3.TimeSeries messages.

    Returns:
        One RawPoint per point of every series.
    """
    points: list[RawPoint] = []
    for ts in series:
        labels = {**dict(ts.resource.labels), **dict(ts.metric.labels)}
        for point in ts.points:
            value = point.value
            # Oneof membership tells an explicit 0 apart from an unset value
            double_value = value.double_value if "double_value" in value else None
            int64_value = value.int64_value if "int64_value" in value else None
            points.append(
                RawPoint(
                    labels=labels,
                    start_time=_seconds(point.interval.start_time),
                    end_time=_seconds(point.interval.end_time),
                    double_value=double_value,
                    int64_value=int64_value,
                )
            )
    return points


def zone_from_scope(scope: str) -> str:
    """Turn an aggregated-list scope key ("zones/us-central1-a") into a zone."""
    if scope.startswith(_ZONE_SCOPE_PREFIX):
        return scope[len(_ZONE_SCOPE_PREFIX) :]
    return scope


def descriptor_from_instance(
    scope: str, instance: Any, identity: IdentityLabel
) -> InstanceDescriptor:
    """Build an InstanceDescriptor from a compute_v1.Instance message."""
    instance_id = str(instance.id)
    instance_name = instance.name
    return InstanceDescriptor(
        instance_identity=(
            instance_name if identity == IdentityLabel.INSTANCE_NAME else instance_id
        ),
        zone=zone_from_scope(scope),
        machine_type=instance.machine_type.rsplit("/", 1)[-1],
        cpu_platform=instance.cpu_platform,
        instance_id=instance_id,
        instance_name=instance_name,
    )


class GcpMonitoringSource:
    """Cloud Monitoring implementation of MetricSourcePort.

    Args:
        client: A monitoring_v3.MetricServiceClient. Created on first use
            when omitted.
    """

    def __init__(self, client: Any = None) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = monitoring_v3.MetricServiceClient()
        return self._client

    def _list_time_series(self, kind: MetricKind, query: MetricQuery) -> list[RawPoint]:
        interval = monitoring_v3.TimeInterval(
            {
                "start_time": {"seconds": query.start_time},
                "end_time": {"seconds": query.end_time},
            }
        )
        series = self.client.list_time_series(
            request={
                "name": f"projects/{query.project_id}",
                "filter": f'metric.type="{METRIC_TYPES[kind]}"',
                "interval": interval,
                "view": monitoring_v3.ListTimeSeriesRequest.TimeSeriesView.FULL,
            }
        )
        points = points_from_series(series)
        logger.debug(
            "Fetched %d %s points for project %s",
            len(points),
            kind,
            query.project_id,
        )
        return points

    async def fetch(self, kind: MetricKind, query: MetricQuery) -> list[RawPoint]:
        """Fetch all raw points of one metric kind within the query window."""
        return await asyncio.to_thread(self._list_time_series, kind, query)


class GcpComputeInventory:
    """Compute Engine implementation of InventoryPort.

    Args:
        client: A compute_v1.InstancesClient. Created on first use when
            omitted.
    """

    def __init__(self, client: Any = None) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = compute_v1.InstancesClient()
        return self._client

    def _aggregated_list(
        self, project_id: str, identity: IdentityLabel
    ) -> list[InstanceDescriptor]:
        request = compute_v1.AggregatedListInstancesRequest(project=project_id)
        descriptors = []
        for scope, scoped_list in self.client.aggregated_list(request=request):
            for instance in scoped_list.instances:
                descriptors.append(descriptor_from_instance(scope, instance, identity))
        logger.debug(
            "Listed %d instances for project %s", len(descriptors), project_id
        )
        return descriptors

    async def list_instances(
        self, project_id: str, identity: IdentityLabel
    ) -> list[InstanceDescriptor]:
        """List every instance in the project across all zones."""
        return await asyncio.to_thread(self._aggregated_list, project_id, identity)
