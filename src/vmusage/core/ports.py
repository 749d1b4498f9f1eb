"""Port interfaces for metric and inventory sources.

These protocols define the contracts that source adapters must implement.
The core depends only on these interfaces, not on any cloud client.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from vmusage.core.models import IdentityLabel, InstanceDescriptor, MetricKind, RawPoint


@dataclass(frozen=True)
class MetricQuery:
    """Project and time window a metric fetch is scoped to.

    Attributes:
        project_id: Cloud project holding the instances.
        start_time: Window start, seconds since epoch.
        end_time: Window end, seconds since epoch.
    """

    project_id: str
    start_time: int
    end_time: int


@runtime_checkable
class MetricSourcePort(Protocol):
    """Port for fetching raw metric points.

    Examples: InMemoryMetricSource, GcpMonitoringSource.
    """

    async def fetch(self, kind: MetricKind, query: MetricQuery) -> list[RawPoint]:
        """Fetch all raw points of one metric kind within the query window."""
        ...


@runtime_checkable
class InventoryPort(Protocol):
    """Port for listing VM instance metadata.

    Examples: InMemoryInventory, GcpComputeInventory.
    """

    async def list_instances(
        self, project_id: str, identity: IdentityLabel
    ) -> list[InstanceDescriptor]:
        """List every instance in the project.

        Args:
            project_id: Cloud project to list.
            identity: Attribute used as each descriptor's instance_identity.

        Returns:
            One descriptor per instance.
        """
        ...
