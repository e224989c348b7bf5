"""Input discovery and partition packing."""

from csv_partition_loader.partition.discover import (
    compute_file_splits,
    discover_units,
    list_input_files,
    partitions_from_node_blocks,
)
from csv_partition_loader.partition.pack import compute_size_bound, pack_units, pack_units_with_stats
from csv_partition_loader.partition.types import BlockDescriptor, InputUnit, PackingStats, Partition

__all__ = [
    "BlockDescriptor",
    "InputUnit",
    "PackingStats",
    "Partition",
    "compute_file_splits",
    "compute_size_bound",
    "discover_units",
    "list_input_files",
    "pack_units",
    "pack_units_with_stats",
    "partitions_from_node_blocks",
]
