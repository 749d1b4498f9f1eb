"""Correlate previously exported metric streams without any cloud access.

Run with:
    python examples/replay.py
"""

import asyncio
import logging

from vmusage.adapters.sources.in_memory import InMemoryInventory, InMemoryMetricSource
from vmusage.core.encoding.ndjson import encode_records
from vmusage.core.models import InstanceDescriptor, MetricKind, RawPoint
from vmusage.importer import UsageImporter


def _point(value: float, start: int) -> RawPoint:
    return RawPoint(
        labels={"instance_id": "1234", "instance_name": "web-1", "zone": "us-east1-b"},
        start_time=start,
        end_time=start + 60,
        double_value=value,
    )


async def main() -> None:
    source = InMemoryMetricSource(
        {
            MetricKind.CPU_UTILIZATION: [
                _point(0.42, 1700000000),
                _point(0.37, 1700000060),
            ],
            MetricKind.RAM_TOTAL: [_point(8e9, 1700000000), _point(8e9, 1700000060)],
            MetricKind.RAM_USED: [_point(2e9, 1700000000)],
        }
    )
    inventory = InMemoryInventory(
        [
            InstanceDescriptor(
                instance_identity="1234",
                zone="us-east1-b",
                machine_type="e2-standard-2",
                cpu_platform="Intel Broadwell",
                instance_id="1234",
                instance_name="web-1",
            )
        ]
    )
    importer = UsageImporter(source, inventory)
    records = await importer.execute(
        [{"timestamp": "2023-11-14T22:13:20Z", "duration": 120}],
        {"gcp-project-id": "demo-project"},
    )
    print(encode_records(records), end="")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
