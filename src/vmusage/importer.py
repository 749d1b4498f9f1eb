"""Usage importer: fetch, normalize and correlate VM usage per input window."""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from vmusage.config import (
    SAMPLING_PERIOD_SECONDS,
    ImporterConfig,
    ImporterInput,
    load_config,
    load_input,
)
from vmusage.core import fields
from vmusage.core.correlate import AUXILIARY_KINDS
from vmusage.core.models import EnrichedOutputRecord, MetricKind
from vmusage.core.normalize import normalize_points
from vmusage.core.ports import InventoryPort, MetricQuery, MetricSourcePort
from vmusage.core.run import run_correlation

logger = logging.getLogger(__name__)

DRIVER_KIND = MetricKind.CPU_UTILIZATION


class UsageImporter:
    """Produces enriched usage records for each requested window.

    Example:
        ```python
        importer = UsageImporter(GcpMonitoringSource(), GcpComputeInventory())
        records = await importer.execute(
            [{"timestamp": "2023-11-14T22:00:00Z", "duration": 3600}],
            {"gcp-project-id": "my-project"},
        )
        ```
    """

    def __init__(self, source: MetricSourcePort, inventory: InventoryPort) -> None:
        self._source = source
        self._inventory = inventory

    async def execute(
        self,
        inputs: Iterable[Mapping[str, Any]],
        config: Mapping[str, Any] | None,
    ) -> list[dict[str, Any]]:
        """Run the import for every input, concatenating results in input order.

        Args:
            inputs: Raw input windows (timestamp, duration, pass-through fields).
            config: Raw importer configuration.

        Returns:
            Output records as plain dicts.

        Raises:
            ConfigValidationError: If config is missing or invalid.
            InputValidationError: If an input is invalid.
        """
        validated_config = load_config(config)
        validated_inputs = [load_input(raw) for raw in inputs]

        outputs: list[dict[str, Any]] = []
        for window in validated_inputs:
            records = await self.import_window(window, validated_config)
            outputs.extend(record.to_dict() for record in records)
        return outputs

    async def import_window(
        self, window: ImporterInput, config: ImporterConfig
    ) -> list[EnrichedOutputRecord]:
        """Fetch all streams for one window and correlate them."""
        query = MetricQuery(
            project_id=config.gcp_project_id,
            start_time=window.start_time,
            end_time=window.end_time,
        )
        kinds = (DRIVER_KIND, *AUXILIARY_KINDS)
        *streams, descriptors = await asyncio.gather(
            *(self._source.fetch(kind, query) for kind in kinds),
            self._inventory.list_instances(config.gcp_project_id, config.identity),
        )

        identity = config.identity
        driver = normalize_points(streams[0], DRIVER_KIND, identity)
        auxiliary = {
            kind: normalize_points(points, kind, identity)
            for kind, points in zip(AUXILIARY_KINDS, streams[1:], strict=True)
        }

        records = run_correlation(
            driver, auxiliary, descriptors, self._context(window, config)
        )
        logger.info(
            "Imported %d records for project %s window [%d, %d]",
            len(records),
            query.project_id,
            query.start_time,
            query.end_time,
        )
        return records

    @staticmethod
    def _context(window: ImporterInput, config: ImporterConfig) -> dict[str, Any]:
        context: dict[str, Any] = {fields.VENDOR: config.vendor}
        context.update(window.passthrough_fields())
        context.update(config.context_fields())
        context[fields.DURATION] = SAMPLING_PERIOD_SECONDS
        return context
