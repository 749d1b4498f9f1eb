"""Shared test fixtures for all test modules."""

from collections.abc import Callable

import pytest

from vmusage.core.models import InstanceDescriptor, MetricKind, MetricSample, RawPoint

try:
    import httpx
except ImportError:
    httpx = None


@pytest.fixture
def make_sample() -> Callable[..., MetricSample]:
    """Factory fixture for MetricSample objects with sensible defaults."""

    def _sample(
        kind: MetricKind = MetricKind.CPU_UTILIZATION,
        value: float = 0.5,
        instance: str = "i1",
        start: int = 1000,
        end: int = 1060,
        zone: str = "us-central1-a",
    ) -> MetricSample:
        return MetricSample(
            instance_identity=instance,
            zone=zone,
            kind=kind,
            start_time=start,
            end_time=end,
            value=value,
        )

    return _sample


@pytest.fixture
def make_point() -> Callable[..., RawPoint]:
    """Factory fixture for RawPoint objects shaped like GCE instance series."""

    def _point(
        value: float | None = 0.5,
        instance_id: str = "1001",
        instance_name: str = "web-1",
        start: int | None = 1000,
        end: int | None = 1060,
        zone: str = "us-central1-a",
    ) -> RawPoint:
        return RawPoint(
            labels={
                "instance_id": instance_id,
                "instance_name": instance_name,
                "zone": zone,
            },
            start_time=start,
            end_time=end,
            double_value=value,
        )

    return _point


@pytest.fixture
def descriptor() -> InstanceDescriptor:
    """Inventory descriptor for instance i1."""
    return InstanceDescriptor(
        instance_identity="i1",
        zone="us-central1-a",
        machine_type="n1-standard-4",
        cpu_platform="Intel Skylake",
        instance_id="1001",
        instance_name="web-1",
    )


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            async with asgi_test_client(app) as client:
                response = await client.post("/usage", json=body)
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
