"""Input discovery: whole-file splits and locality-aware block partitions."""

import glob
import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from csv_partition_loader.partition.types import (
    LOCAL_HOST,
    SPLIT_SLOP,
    BlockDescriptor,
    InputUnit,
    Partition,
)

logger = logging.getLogger(__name__)


def _is_hidden(name: str) -> bool:
    return name.startswith(("_", "."))


def _expand(spec: str) -> list[Path]:
    if glob.has_magic(spec):
        matches = sorted(Path(match) for match in glob.glob(spec, recursive=True))
        if not matches:
            raise FileNotFoundError(f"input pattern matched no files: {spec}")
        return matches

    path = Path(spec)
    if not path.exists():
        raise FileNotFoundError(f"input path does not exist: {spec}")
    return [path]


def list_input_files(paths: str | Iterable[str]) -> list[Path]:
    """
    Resolve input path specs to a sorted list of data files.

    Accepts a comma-separated string or an iterable of paths. Each entry may
    be a file, a directory (listed recursively) or a glob pattern. Files and
    directories whose names start with "_" or "." are skipped.
    """
    if isinstance(paths, str):
        specs = [part.strip() for part in paths.split(",") if part.strip()]
    else:
        specs = [str(part) for part in paths]

    files: list[Path] = []
    seen: set[Path] = set()
    for spec in specs:
        for path in _expand(spec):
            if path.is_dir():
                candidates = sorted(
                    child
                    for child in path.rglob("*")
                    if child.is_file()
                    and not any(_is_hidden(part) for part in child.relative_to(path).parts)
                )
            elif _is_hidden(path.name):
                continue
            else:
                candidates = [path]

            for candidate in candidates:
                if candidate not in seen:
                    seen.add(candidate)
                    files.append(candidate)

    return files


def compute_file_splits(
    path: str,
    size: int,
    split_size: int,
    locations: tuple[str, ...] = (LOCAL_HOST,),
) -> list[InputUnit]:
    """
    Cut one file into split_size byte ranges.

    The tail is folded into the last split while it stays within SPLIT_SLOP of
    split_size. An empty file yields a single zero-length unit with no hosts.
    """
    if split_size <= 0:
        raise ValueError(f"split_size must be > 0, got {split_size}")
    if size == 0:
        return [InputUnit(path=path, offset=0, length=0)]

    units: list[InputUnit] = []
    remaining = size
    while remaining / split_size > SPLIT_SLOP:
        units.append(InputUnit(path, size - remaining, split_size, locations))
        remaining -= split_size
    if remaining:
        units.append(InputUnit(path, size - remaining, remaining, locations))
    return units


def discover_units(paths: str | Iterable[str], split_size: int) -> list[InputUnit]:
    """Discover input units for every file under paths, in discovery order."""
    units: list[InputUnit] = []
    files = list_input_files(paths)
    for file_path in files:
        size = os.path.getsize(file_path)
        units.extend(compute_file_splits(str(file_path), size, split_size))

    logger.info("Discovered %d units in %d files", len(units), len(files))
    return units


def partitions_from_node_blocks(
    node_blocks: Mapping[str, Sequence[BlockDescriptor]],
) -> list[Partition]:
    """
    Build one partition per node from an external locality assignment.

    The assignment is trusted as the partitioning decision, so no size bound is
    applied. Partition indexes follow the mapping's iteration order; nodes with
    no blocks produce no partition.
    """
    partitions: list[Partition] = []
    for node, blocks in node_blocks.items():
        if not blocks:
            logger.debug("Node %s has no blocks assigned, skipping", node)
            continue
        units = tuple(block.to_unit() for block in blocks)
        partitions.append(Partition(index=len(partitions), units=units))
        logger.debug("Node %s: partition %d with %d blocks", node, len(partitions) - 1, len(units))
    return partitions
