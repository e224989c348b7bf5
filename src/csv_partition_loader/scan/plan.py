"""Scan planning: discovery plus partitioning."""

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from csv_partition_loader.config import ScanConfig
from csv_partition_loader.partition import (
    BlockDescriptor,
    Partition,
    discover_units,
    pack_units_with_stats,
    partitions_from_node_blocks,
)
from csv_partition_loader.reader import ReadFunction, ScanContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanPlan:
    """Partitions to scan and the function that opens a cursor per unit."""

    partitions: tuple[Partition, ...]
    read_function: ReadFunction
    total_bytes: int
    size_bound: int | None = None

    @property
    def unit_count(self) -> int:
        return sum(len(partition) for partition in self.partitions)


def plan_scan(
    paths: str | Iterable[str],
    config: ScanConfig,
    split_size: int,
    context: ScanContext | None = None,
) -> ScanPlan:
    """
    Discover input files and pack their splits into balanced partitions.

    Args:
        paths: Comma-separated string or iterable of files, directories or globs.
        config: Packing thresholds.
        split_size: Target size of a single file split during discovery.
        context: CSV options used by every cursor of the scan.
    """
    config.validate()
    start = time.perf_counter()

    units = discover_units(paths, split_size)
    partitions, stats = pack_units_with_stats(
        units,
        config.max_split_bytes,
        config.open_cost_bytes,
        config.parallelism,
    )

    logger.info(
        "Planned %d partitions from %d units (%d bytes, bound %d, %d oversized) in %.2fs",
        stats.partitions,
        stats.units,
        stats.total_bytes,
        stats.size_bound,
        stats.oversized_units,
        time.perf_counter() - start,
    )
    return ScanPlan(
        partitions=tuple(partitions),
        read_function=ReadFunction(context or ScanContext()),
        total_bytes=stats.total_bytes,
        size_bound=stats.size_bound,
    )


def plan_local_scan(
    node_blocks: Mapping[str, Sequence[BlockDescriptor]],
    context: ScanContext | None = None,
) -> ScanPlan:
    """Build a plan with one partition per node from a locality assignment."""
    partitions = partitions_from_node_blocks(node_blocks)
    total_bytes = sum(partition.total_length for partition in partitions)
    logger.info(
        "Planned %d node-local partitions from %d nodes (%d bytes)",
        len(partitions),
        len(node_blocks),
        total_bytes,
    )
    return ScanPlan(
        partitions=tuple(partitions),
        read_function=ReadFunction(context or ScanContext()),
        total_bytes=total_bytes,
    )
