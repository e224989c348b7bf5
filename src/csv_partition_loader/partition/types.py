"""Input units, partitions and the block shape used by locality assignment."""

from collections.abc import Iterator
from dataclasses import dataclass, field

# Hadoop reports local files as living on this host.
LOCAL_HOST = "localhost"

# Last split of a file may exceed the split size by up to 10%.
SPLIT_SLOP = 1.1


@dataclass(frozen=True, slots=True)
class InputUnit:
    """One schedulable byte range [offset, offset + length) of a file."""

    path: str
    offset: int
    length: int
    locations: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")
        if self.length < 0:
            raise ValueError(f"length must be >= 0, got {self.length}")

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True, slots=True)
class Partition:
    """A non-empty ordered group of units read together by one worker."""

    index: int
    units: tuple[InputUnit, ...]

    def __post_init__(self) -> None:
        if not self.units:
            raise ValueError(f"partition {self.index} has no units")

    def __len__(self) -> int:
        return len(self.units)

    def __iter__(self) -> Iterator[InputUnit]:
        return iter(self.units)

    @property
    def total_length(self) -> int:
        return sum(unit.length for unit in self.units)

    def weighted_size(self, open_cost_bytes: int) -> int:
        """Sum of unit lengths plus the open cost charged for each unit."""
        return self.total_length + open_cost_bytes * len(self.units)


@dataclass(frozen=True, slots=True)
class BlockDescriptor:
    """Block as produced by an external node-to-blocks assignment."""

    file_path: str
    block_offset: int
    block_length: int
    locations: tuple[str, ...] = field(default=())

    def to_unit(self) -> InputUnit:
        return InputUnit(
            path=self.file_path,
            offset=self.block_offset,
            length=self.block_length,
            locations=tuple(self.locations),
        )


@dataclass
class PackingStats:
    """Statistics from a pack_units_with_stats run."""

    units: int = 0
    partitions: int = 0
    total_bytes: int = 0
    size_bound: int = 0
    oversized_units: int = 0
