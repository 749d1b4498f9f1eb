"""Example FastAPI application serving GCP VM usage records.

Run with:
    uvicorn examples.fastapi_app:app --reload

Endpoints:
    POST /usage   - NDJSON usage records for the requested windows

Example request body:
    {
        "inputs": [{"timestamp": "2023-11-14T22:00:00Z", "duration": 3600}],
        "config": {"gcp-project-id": "my-project"}
    }

Credentials are taken from Application Default Credentials.
"""

from fastapi import FastAPI

from vmusage.adapters.frameworks.fastapi import create_usage_router
from vmusage.adapters.sources.gcp import GcpComputeInventory, GcpMonitoringSource
from vmusage.importer import UsageImporter

importer = UsageImporter(GcpMonitoringSource(), GcpComputeInventory())

app = FastAPI(title="VM Usage Importer")
app.include_router(create_usage_router(importer))
