"""Command-line interface for the CSV partition loader."""

import argparse
import logging
import os
import sys

from csv_partition_loader.config import ScanConfig
from csv_partition_loader.errors import CsvLoaderError
from csv_partition_loader.reader import ScanContext
from csv_partition_loader.scan import plan_scan, run_scan
from csv_partition_loader.synthetic import generate_skewed_dataset

logger = logging.getLogger(__name__)

MIB = 1024 * 1024

DEFAULT_MAX_SPLIT_BYTES = 128 * MIB
DEFAULT_OPEN_COST_BYTES = 4 * MIB
DEFAULT_SPLIT_SIZE = 32 * MIB


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging to write to stderr."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _add_planning_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="+",
        help="Input files, directories or glob patterns",
    )
    parser.add_argument(
        "--max-split-bytes",
        type=int,
        default=DEFAULT_MAX_SPLIT_BYTES,
        help="Upper bound on partition size in bytes (default: 128 MiB)",
    )
    parser.add_argument(
        "--open-cost-bytes",
        type=int,
        default=DEFAULT_OPEN_COST_BYTES,
        help="Estimated cost of opening a file, in bytes (default: 4 MiB)",
    )
    parser.add_argument(
        "--parallelism",
        type=int,
        default=os.cpu_count() or 1,
        help="Number of workers the partitions are balanced for (default: CPU count)",
    )
    parser.add_argument(
        "--split-size",
        type=int,
        default=DEFAULT_SPLIT_SIZE,
        help="Size of a single file split during discovery (default: 32 MiB)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="csv-partition-loader",
        description="Pack CSV inputs into balanced partitions and read them.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    plan = commands.add_parser("plan", help="Print the partitions of a scan")
    _add_planning_args(plan)

    count = commands.add_parser("count", help="Count records per partition")
    _add_planning_args(count)
    count.add_argument("--delimiter", default=",", help="Field delimiter (default: ',')")
    count.add_argument("--encoding", default="utf-8", help="File encoding (default: utf-8)")
    count.add_argument(
        "--skip-header",
        action="store_true",
        help="Drop the first record of every file",
    )
    count.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Executor worker count (default: executor's choice)",
    )

    generate = commands.add_parser("generate", help="Write a skewed synthetic dataset")
    generate.add_argument("out_dir", help="Directory to write CSV files into")
    generate.add_argument("--files", type=int, default=16, help="Number of files (default: 16)")
    generate.add_argument("--min-rows", type=int, default=10, help="Rows in the smallest file (default: 10)")
    generate.add_argument("--max-rows", type=int, default=100_000, help="Rows in the largest file (default: 100000)")
    generate.add_argument("--columns", type=int, default=4, help="Columns per row (default: 4)")
    generate.add_argument("--seed", type=int, default=1, help="Random seed (default: 1)")

    return parser


def _config_from_args(args: argparse.Namespace) -> ScanConfig:
    return ScanConfig(
        max_split_bytes=args.max_split_bytes,
        open_cost_bytes=args.open_cost_bytes,
        parallelism=args.parallelism,
    )


def cmd_plan(args: argparse.Namespace) -> int:
    plan = plan_scan(args.paths, _config_from_args(args), args.split_size)
    for partition in plan.partitions:
        print(f"{partition.index}\t{len(partition)}\t{partition.total_length}")
    return 0


def cmd_count(args: argparse.Namespace) -> int:
    context = ScanContext(
        delimiter=args.delimiter,
        encoding=args.encoding,
        skip_header=args.skip_header,
    )
    plan = plan_scan(args.paths, _config_from_args(args), args.split_size, context)
    results = run_scan(plan, workers=args.workers)
    for result in results:
        print(f"{result.index}\t{result.records}")
    print(f"total\t{sum(result.records for result in results)}")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    paths = generate_skewed_dataset(
        args.out_dir,
        num_files=args.files,
        min_rows=args.min_rows,
        max_rows=args.max_rows,
        columns=args.columns,
        seed=args.seed,
    )
    logger.info("Wrote %d files to %s", len(paths), args.out_dir)
    return 0


COMMANDS = {
    "plan": cmd_plan,
    "count": cmd_count,
    "generate": cmd_generate,
}


def main(argv: list[str] | None = None) -> int:
    """Entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging based on --log-level
    log_level = getattr(logging, args.log_level)
    configure_logging(log_level)

    try:
        return COMMANDS[args.command](args)
    except (CsvLoaderError, FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
