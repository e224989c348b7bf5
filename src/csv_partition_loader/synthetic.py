"""
Synthetic dataset generator for partition packing benchmarks.

Writes CSV files whose row counts are drawn log-uniformly between min_rows and
max_rows, so a handful of files dominate the total size while most stay small.
"""

import math
import random
from pathlib import Path

# Large buffer for efficient streaming writes.
BUFFER_SIZE = 1024 * 1024  # 1MB


def skewed_row_count(rng: random.Random, min_rows: int, max_rows: int) -> int:
    """Draw a row count log-uniformly from [min_rows, max_rows]."""
    if min_rows == max_rows:
        return min_rows
    low, high = math.log(min_rows), math.log(max_rows)
    return min(max_rows, max(min_rows, round(math.exp(rng.uniform(low, high)))))


def generate_skewed_dataset(
    out_dir: str,
    num_files: int,
    min_rows: int,
    max_rows: int,
    columns: int = 4,
    seed: int = 1,
    header: bool = False,
) -> list[Path]:
    """
    Generate num_files CSV files of skewed sizes under out_dir.

    Every row is "<file>,<row>,<value>..." so tests can check which records
    were read. The same seed always produces the same files.

    Returns:
        Paths of the written files, in creation order.
    """
    if num_files < 1:
        raise ValueError(f"num_files must be >= 1, got {num_files}")
    if not 1 <= min_rows <= max_rows:
        raise ValueError(f"need 1 <= min_rows <= max_rows, got {min_rows}, {max_rows}")
    if columns < 2:
        raise ValueError(f"columns must be >= 2, got {columns}")

    rng = random.Random(seed)
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    paths: list[Path] = []
    for file_idx in range(num_files):
        rows = skewed_row_count(rng, min_rows, max_rows)
        path = out_path / f"part_{file_idx:04d}.csv"
        with open(path, "w", encoding="utf-8", newline="", buffering=BUFFER_SIZE) as handle:
            if header:
                names = ["file", "row"] + [f"c{i}" for i in range(2, columns)]
                handle.write(",".join(names) + "\n")
            for row_idx in range(rows):
                values = [str(rng.randrange(1_000_000)) for _ in range(columns - 2)]
                handle.write(",".join([str(file_idx), str(row_idx), *values]) + "\n")
        paths.append(path)

    return paths
