"""FastAPI adapter exposing the usage importer."""

from typing import Any

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel, Field

from vmusage.core.encoding.ndjson import encode_records
from vmusage.errors import VmUsageError
from vmusage.importer import UsageImporter


class UsageRequest(BaseModel):
    """Body of POST /usage."""

    inputs: list[dict[str, Any]] = Field(default_factory=list)
    config: dict[str, Any] | None = None


def create_usage_router(importer: UsageImporter) -> APIRouter:
    """Create a FastAPI router with a /usage endpoint.

    Args:
        importer: Importer wired to the metric and inventory sources.

    Returns:
        APIRouter with POST /usage configured.
    """
    router = APIRouter()

    @router.post("/usage")
    async def post_usage(request: UsageRequest) -> Response:
        """Return enriched usage records in NDJSON format."""
        try:
            records = await importer.execute(request.inputs, request.config)
        except VmUsageError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return Response(
            content=encode_records(records),
            media_type="application/x-ndjson",
        )

    return router
