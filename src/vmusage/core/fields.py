"""Field names of enriched output records."""

VENDOR = "cloud/vendor"
INSTANCE = "cloud/instance"
INSTANCE_ID = "cloud/instance-id"
INSTANCE_NAME = "cloud/instance-name"
INSTANCE_TYPE = "cloud/instance-type"
CPU_PLATFORM = "cloud/cpu-platform"
ZONE = "cloud/zone"

CPU_UTILIZATION = "cpu/utilization"
MEMORY_TOTAL_BYTES = "memory/total/bytes"
MEMORY_USED_BYTES = "memory/used/bytes"
MEMORY_TOTAL_GB = "memory/total/GB"
MEMORY_USED_GB = "memory/used/GB"
MEMORY_UTILIZATION = "memory/utilization"

TIMESTAMP = "timestamp"
DURATION = "duration"

# Fields that only come from an inventory descriptor
DESCRIPTOR_FIELDS = frozenset(
    {INSTANCE_ID, INSTANCE_NAME, INSTANCE_TYPE, CPU_PLATFORM, ZONE}
)
