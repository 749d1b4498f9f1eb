"""Tests for port interfaces."""

import pytest

from vmusage.core.models import IdentityLabel, InstanceDescriptor, MetricKind, RawPoint
from vmusage.core.ports import InventoryPort, MetricQuery, MetricSourcePort


class TestMetricSourcePort:
    """Tests for MetricSourcePort protocol."""

    @pytest.mark.core
    def test_protocol_has_fetch_method(self) -> None:
        """MetricSourcePort must define fetch(kind, query) -> list[RawPoint]."""
        assert hasattr(MetricSourcePort, "fetch")

    @pytest.mark.core
    def test_class_implementing_protocol_is_recognized(self) -> None:
        """A class with an async fetch method should satisfy MetricSourcePort."""

        class FakeSource:
            async def fetch(
                self, kind: MetricKind, query: MetricQuery
            ) -> list[RawPoint]:
                return []

        source: MetricSourcePort = FakeSource()
        assert isinstance(source, MetricSourcePort)

    @pytest.mark.core
    def test_class_without_fetch_is_rejected(self) -> None:
        """Objects lacking fetch do not satisfy the protocol."""

        class NotASource:
            pass

        assert not isinstance(NotASource(), MetricSourcePort)


class TestInventoryPort:
    """Tests for InventoryPort protocol."""

    @pytest.mark.core
    def test_protocol_has_list_instances_method(self) -> None:
        """InventoryPort must define list_instances(project_id, identity)."""
        assert hasattr(InventoryPort, "list_instances")

    @pytest.mark.core
    def test_class_implementing_protocol_is_recognized(self) -> None:
        """A class with list_instances should satisfy InventoryPort."""

        class FakeInventory:
            async def list_instances(
                self, project_id: str, identity: IdentityLabel
            ) -> list[InstanceDescriptor]:
                return []

        inventory: InventoryPort = FakeInventory()
        assert isinstance(inventory, InventoryPort)


class TestMetricQuery:
    """Tests for MetricQuery."""

    @pytest.mark.core
    def test_query_is_value_object(self) -> None:
        """Queries with equal fields compare equal."""
        assert MetricQuery("p", 0, 60) == MetricQuery("p", 0, 60)
