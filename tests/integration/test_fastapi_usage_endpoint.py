"""Integration tests for the FastAPI /usage endpoint."""

import json

import pytest

pytest.importorskip("fastapi")

from fastapi import FastAPI  # noqa: E402

from vmusage.adapters.frameworks.fastapi import create_usage_router  # noqa: E402
from vmusage.adapters.sources.in_memory import (  # noqa: E402
    InMemoryInventory,
    InMemoryMetricSource,
)
from vmusage.core.models import MetricKind  # noqa: E402
from vmusage.importer import UsageImporter  # noqa: E402

pytestmark = [
    pytest.mark.integration,
    pytest.mark.tier(2),
    pytest.mark.tra("Adapter.FastAPI.Usage"),
]

BODY = {
    "inputs": [{"timestamp": "2023-11-14T22:13:20Z", "duration": 60}],
    "config": {"gcp-project-id": "demo-project"},
}


@pytest.fixture
def app(make_point) -> FastAPI:
    source = InMemoryMetricSource(
        {
            MetricKind.CPU_UTILIZATION: [
                make_point(value=0.5, start=1700000000, end=1700000000)
            ],
        }
    )
    app = FastAPI()
    app.include_router(create_usage_router(UsageImporter(source, InMemoryInventory())))
    return app


class TestUsageEndpoint:
    """Tests for POST /usage."""

    async def test_returns_200(self, app, asgi_test_client) -> None:
        """A valid request succeeds."""
        async with asgi_test_client(app) as client:
            response = await client.post("/usage", json=BODY)

        assert response.status_code == 200

    async def test_has_ndjson_content_type(self, app, asgi_test_client) -> None:
        """Records are returned as NDJSON."""
        async with asgi_test_client(app) as client:
            response = await client.post("/usage", json=BODY)

        assert response.headers["content-type"] == "application/x-ndjson"

    async def test_returns_one_line_per_record(self, app, asgi_test_client) -> None:
        """Each enriched record is one JSON line."""
        async with asgi_test_client(app) as client:
            response = await client.post("/usage", json=BODY)

        lines = response.text.strip().split("\n")
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["cpu/utilization"] == 0.5
        assert record["memory/total/GB"] == 0
        assert record["cloud/vendor"] == "gcp"

    async def test_missing_config_is_422(self, app, asgi_test_client) -> None:
        """Config validation failures map to 422."""
        async with asgi_test_client(app) as client:
            response = await client.post("/usage", json={"inputs": BODY["inputs"]})

        assert response.status_code == 422
        assert "Config must be provided." in response.json()["detail"]

    async def test_invalid_input_is_422(self, app, asgi_test_client) -> None:
        """Input validation failures map to 422."""
        body = {**BODY, "inputs": [{"duration": 60}]}

        async with asgi_test_client(app) as client:
            response = await client.post("/usage", json=body)

        assert response.status_code == 422
