"""Packing thresholds supplied by the caller."""

from dataclasses import dataclass

from csv_partition_loader.errors import PackingConfigError


def check_packing_args(max_split_bytes: int, open_cost_bytes: int, parallelism: int) -> None:
    """Raise PackingConfigError if any packing threshold is out of range."""
    if parallelism < 1:
        raise PackingConfigError(f"parallelism must be >= 1, got {parallelism}")
    if max_split_bytes <= 0:
        raise PackingConfigError(f"max_split_bytes must be > 0, got {max_split_bytes}")
    if open_cost_bytes < 0:
        raise PackingConfigError(f"open_cost_bytes must be >= 0, got {open_cost_bytes}")


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """
    Thresholds for one packing run.

    max_split_bytes is the hard ceiling on a partition, open_cost_bytes the
    per-unit surcharge, and parallelism the number of workers the scan targets.
    """

    max_split_bytes: int
    open_cost_bytes: int
    parallelism: int

    def validate(self) -> None:
        check_packing_args(self.max_split_bytes, self.open_cost_bytes, self.parallelism)
