"""Derived fields and metadata merging for joined usage records.

Precedence when the same field name is produced by more than one layer,
lowest to highest:

1. descriptor fields (instance type, CPU platform, zone, id, name)
2. derived fields (utilization, unit conversions, timestamp)
3. caller context
"""

from collections.abc import Mapping
from datetime import UTC, datetime

from vmusage.core import fields
from vmusage.core.models import (
    EnrichedOutputRecord,
    InstanceDescriptor,
    JoinedUsageRecord,
    OutputValue,
)

GB_PER_BYTE = 1e-9

SECONDS_PER_DAY = 86400
_MIN_DATETIME_SECONDS = int(datetime.min.replace(tzinfo=UTC).timestamp())
_MAX_DATETIME_SECONDS = int(datetime.max.replace(tzinfo=UTC).timestamp())


def bytes_to_gb(value: float) -> float:
    """Convert bytes to decimal gigabytes."""
    return value * GB_PER_BYTE


def memory_utilization(ram_total: float, ram_used: float) -> float:
    """Return (total - used) / total, or 0.0 when total is not positive.

    Note this is the free-memory fraction, kept as reported by the
    upstream convention the output field is named after.
    """
    if ram_total > 0:
        return (ram_total - ram_used) / ram_total
    return 0.0


def _civil_from_days(days: int) -> tuple[int, int, int]:
    """Proleptic Gregorian (year, month, day) for days since 1970-01-01."""
    shifted = days + 719468
    era = shifted // 146097
    day_of_era = shifted - era * 146097
    year_of_era = (
        day_of_era
        - day_of_era // 1460
        + day_of_era // 36524
        - day_of_era // 146096
    ) // 365
    day_of_year = day_of_era - (
        365 * year_of_era + year_of_era // 4 - year_of_era // 100
    )
    month_index = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * month_index + 2) // 5 + 1
    month = month_index + 3 if month_index < 10 else month_index - 9
    year = year_of_era + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def _extended_iso_timestamp(seconds: int) -> str:
    # Years outside 0000-9999 use the signed six-digit form
    days, remainder = divmod(seconds, SECONDS_PER_DAY)
    year, month, day = _civil_from_days(days)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)
    year_text = f"{year:04d}" if 0 <= year <= 9999 else f"{year:+07d}"
    return (
        f"{year_text}-{month:02d}-{day:02d}"
        f"T{hours:02d}:{minutes:02d}:{secs:02d}.000Z"
    )


def iso_timestamp(seconds: int) -> str:
    """Format epoch seconds as ISO-8601 UTC with millisecond precision.

    Moments outside the range of ``datetime`` are still formatted, using
    the expanded year form (``+011476-...``) instead of raising.

    >>> iso_timestamp(1700000000)
    '2023-11-14T22:13:20.000Z'
    >>> iso_timestamp(253402300800)
    '+010000-01-01T00:00:00.000Z'
    """
    seconds = int(seconds)
    if not _MIN_DATETIME_SECONDS <= seconds <= _MAX_DATETIME_SECONDS:
        return _extended_iso_timestamp(seconds)
    moment = datetime.fromtimestamp(seconds, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def descriptor_fields(descriptor: InstanceDescriptor) -> dict[str, OutputValue]:
    """Static output fields contributed by an inventory descriptor."""
    result: dict[str, OutputValue] = {
        fields.INSTANCE_TYPE: descriptor.machine_type,
        fields.CPU_PLATFORM: descriptor.cpu_platform,
        fields.ZONE: descriptor.zone,
    }
    if descriptor.instance_id is not None:
        result[fields.INSTANCE_ID] = descriptor.instance_id
    if descriptor.instance_name is not None:
        result[fields.INSTANCE_NAME] = descriptor.instance_name
    return result


def derived_fields(record: JoinedUsageRecord) -> dict[str, OutputValue]:
    """Output fields computed from the joined record itself."""
    return {
        fields.INSTANCE: record.instance_identity,
        fields.CPU_UTILIZATION: record.cpu_utilization,
        fields.MEMORY_TOTAL_BYTES: record.ram_total,
        fields.MEMORY_USED_BYTES: record.ram_used,
        fields.MEMORY_TOTAL_GB: bytes_to_gb(record.ram_total),
        fields.MEMORY_USED_GB: bytes_to_gb(record.ram_used),
        fields.MEMORY_UTILIZATION: memory_utilization(
            record.ram_total, record.ram_used
        ),
        fields.TIMESTAMP: iso_timestamp(record.start_time),
    }


def enrich(
    record: JoinedUsageRecord,
    descriptor: InstanceDescriptor | None = None,
    context: Mapping[str, OutputValue] | None = None,
) -> EnrichedOutputRecord:
    """Build the final output record for one joined record.

    Args:
        record: Joined driver/auxiliary values for one window.
        descriptor: Inventory metadata for the instance. When None the
            descriptor fields are left out of the output.
        context: Caller fields merged last, overriding any computed field.

    Returns:
        New EnrichedOutputRecord. The inputs are not modified.
    """
    merged: dict[str, OutputValue] = {}
    if descriptor is not None:
        merged.update(descriptor_fields(descriptor))
    merged.update(derived_fields(record))
    if context:
        merged.update(context)
    return EnrichedOutputRecord(merged)
