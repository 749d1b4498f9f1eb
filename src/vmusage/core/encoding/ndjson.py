"""NDJSON encoder for enriched output records."""

import json
from collections.abc import Iterable, Mapping
from typing import Any


def encode_records(records: Iterable[Mapping[str, Any]]) -> str:
    """Encode output records to newline-delimited JSON.

    Args:
        records: An iterable of EnrichedOutputRecord (or plain mappings).

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no records.
    """
    lines = [json.dumps(dict(record)) for record in records]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
