"""Core domain models for VM usage correlation."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

# Output values are flat scalars so records encode straight to JSON.
OutputValue = str | int | float | bool
JoinKey = tuple[str, int, int]


class MetricKind(StrEnum):
    """Metric streams fetched per instance."""

    CPU_UTILIZATION = "cpu_utilization"
    RAM_TOTAL = "ram_total"
    RAM_USED = "ram_used"


class IdentityLabel(StrEnum):
    """Label used as the instance identity for a whole correlation run."""

    INSTANCE_ID = "instance_id"
    INSTANCE_NAME = "instance_name"


@dataclass(frozen=True)
class RawPoint:
    """A single point as returned by a metric source, before normalization.

    Attributes:
        labels: Resource and metric labels of the series the point belongs to.
        start_time: Interval start in seconds since epoch, if reported.
        end_time: Interval end in seconds since epoch, if reported.
        double_value: Floating-point value, if the series is DOUBLE typed.
        int64_value: Integer value, if the series is INT64 typed.
    """

    labels: Mapping[str, str] = field(default_factory=dict)
    start_time: int | None = None
    end_time: int | None = None
    double_value: float | None = None
    int64_value: int | None = None


@dataclass(frozen=True)
class MetricSample:
    """A normalized observation of one metric for one instance.

    Attributes:
        instance_identity: Key used to correlate samples across streams.
        zone: Location label. Not part of the join key.
        kind: Which metric stream the sample belongs to.
        start_time: Window start, seconds since epoch (inclusive).
        end_time: Window end, seconds since epoch (inclusive).
        value: Ratio in [0, 1] for utilization, bytes for memory.
    """

    instance_identity: str
    zone: str
    kind: MetricKind
    start_time: int
    end_time: int
    value: float

    def __post_init__(self) -> None:
        if self.start_time > self.end_time:
            raise ValueError(
                f"start_time {self.start_time} is after end_time {self.end_time}"
            )

    @property
    def key(self) -> JoinKey:
        """Join key shared by samples of the same instance and window."""
        return (self.instance_identity, self.start_time, self.end_time)


@dataclass(frozen=True)
class InstanceDescriptor:
    """Static inventory metadata for a VM instance."""

    instance_identity: str
    zone: str
    machine_type: str
    cpu_platform: str
    instance_id: str | None = None
    instance_name: str | None = None


@dataclass(frozen=True)
class JoinedUsageRecord:
    """One driver sample with the auxiliary values matched onto it.

    Attributes:
        instance_identity: Identity of the instance.
        zone: Zone reported by the driver sample.
        start_time: Window start, seconds since epoch.
        end_time: Window end, seconds since epoch.
        cpu_utilization: Driver value.
        auxiliary: Read-only value per auxiliary kind, 0.0 where no sample
            matched. Copied on construction and left out of the hash.
        missing: Auxiliary kinds that had no matching sample.
    """

    instance_identity: str
    zone: str
    start_time: int
    end_time: int
    cpu_utilization: float
    auxiliary: Mapping[MetricKind, float] = field(default_factory=dict, hash=False)
    missing: frozenset[MetricKind] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "auxiliary", MappingProxyType(dict(self.auxiliary)))

    @property
    def ram_total(self) -> float:
        return self.auxiliary.get(MetricKind.RAM_TOTAL, 0.0)

    @property
    def ram_used(self) -> float:
        return self.auxiliary.get(MetricKind.RAM_USED, 0.0)

    @property
    def degraded(self) -> bool:
        """True when at least one auxiliary value is a default."""
        return bool(self.missing)


class EnrichedOutputRecord(Mapping[str, OutputValue]):
    """Final flat record emitted for one driver sample.

    Behaves as a read-only mapping of output field name to value. The
    fields are copied on construction so later changes to the source
    mapping do not leak into an emitted record.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, OutputValue]) -> None:
        self._fields = MappingProxyType(dict(fields))

    def __getitem__(self, key: str) -> OutputValue:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"EnrichedOutputRecord({dict(self._fields)!r})"

    def to_dict(self) -> dict[str, OutputValue]:
        """Return a plain mutable copy of the record."""
        return dict(self._fields)
