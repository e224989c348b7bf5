"""Greedy bin packing of input units into bounded-size partitions."""

import logging
from collections.abc import Sequence

from csv_partition_loader.config import check_packing_args
from csv_partition_loader.partition.types import InputUnit, PackingStats, Partition

logger = logging.getLogger(__name__)


def compute_size_bound(
    units: Sequence[InputUnit],
    max_split_bytes: int,
    open_cost_bytes: int,
    parallelism: int,
) -> int:
    """
    Compute the per-partition byte ceiling for one packing run.

    The bound is min(max_split_bytes, max(open_cost_bytes, bytes_per_core)),
    where bytes_per_core is the open-cost-weighted total divided (floor) by
    parallelism.
    """
    check_packing_args(max_split_bytes, open_cost_bytes, parallelism)
    total_weighted = sum(unit.length + open_cost_bytes for unit in units)
    bytes_per_core = total_weighted // parallelism
    return min(max_split_bytes, max(open_cost_bytes, bytes_per_core))


def pack_units_with_stats(
    units: Sequence[InputUnit],
    max_split_bytes: int,
    open_cost_bytes: int,
    parallelism: int,
) -> tuple[list[Partition], PackingStats]:
    """
    Pack units into partitions, largest first.

    Units are sorted by length descending (sort is stable, so discovery order
    breaks ties) and appended to the current partition until the next unit
    would push it over the size bound. A unit larger than the bound ends up
    alone in its own partition.

    Returns:
        Tuple of (partitions in index order, packing statistics).
    """
    size_bound = compute_size_bound(units, max_split_bytes, open_cost_bytes, parallelism)
    stats = PackingStats(units=len(units), size_bound=size_bound)

    logger.info(
        "Planning scan with bin packing, max size: %d bytes, "
        "open cost is considered as scanning %d bytes.",
        size_bound,
        open_cost_bytes,
    )

    ordered = sorted(units, key=lambda unit: unit.length, reverse=True)

    partitions: list[Partition] = []
    current: list[InputUnit] = []
    current_size = 0

    def close_partition() -> None:
        nonlocal current_size
        if current:
            partition = Partition(index=len(partitions), units=tuple(current))
            partitions.append(partition)
            logger.debug(
                "Partition %d: %d units, %d bytes",
                partition.index,
                len(partition),
                partition.total_length,
            )
        current.clear()
        current_size = 0

    for unit in ordered:
        stats.total_bytes += unit.length
        if unit.length > size_bound:
            stats.oversized_units += 1
        if current_size + unit.length > size_bound:
            close_partition()
        current_size += unit.length + open_cost_bytes
        current.append(unit)
    close_partition()

    stats.partitions = len(partitions)
    return partitions, stats


def pack_units(
    units: Sequence[InputUnit],
    max_split_bytes: int,
    open_cost_bytes: int,
    parallelism: int,
) -> list[Partition]:
    """Pack units into bounded-size partitions (see pack_units_with_stats)."""
    partitions, _stats = pack_units_with_stats(units, max_split_bytes, open_cost_bytes, parallelism)
    return partitions
