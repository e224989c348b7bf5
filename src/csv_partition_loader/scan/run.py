"""Reading partitions, serially or through an executor."""

import logging
import os
import time
from collections.abc import Iterator
from concurrent.futures import Future, as_completed
from dataclasses import dataclass
from itertools import islice

from csv_partition_loader.partition import Partition
from csv_partition_loader.reader import ReadFunction, Record
from csv_partition_loader.scan.execution import (
    EXECUTOR_ENV,
    choose_executor,
    describe_executor,
    is_gil_enabled,
    worker_count,
)
from csv_partition_loader.scan.plan import ScanPlan

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PartitionResult:
    """Outcome of scanning one partition."""

    index: int
    units: int
    records: int
    elapsed: float


def iter_partition_records(partition: Partition, read_function: ReadFunction) -> Iterator[Record]:
    """
    Yield every record of partition, unit by unit in partition order.

    Each cursor is closed when its unit is drained, when reading fails, or when
    the generator itself is closed before the end.
    """
    for unit in partition.units:
        with read_function(unit) as cursor:
            yield from cursor


def scan_partition(
    partition: Partition,
    read_function: ReadFunction,
    limit: int | None = None,
) -> PartitionResult:
    """Count the records of one partition, stopping after limit records if given."""
    start = time.perf_counter()
    records = 0
    rows = iter_partition_records(partition, read_function)
    try:
        for _ in islice(rows, limit):
            records += 1
    finally:
        rows.close()

    return PartitionResult(
        index=partition.index,
        units=len(partition),
        records=records,
        elapsed=time.perf_counter() - start,
    )


def run_scan(
    plan: ScanPlan,
    workers: int | None = None,
    limit: int | None = None,
) -> list[PartitionResult]:
    """
    Scan every partition of plan and return results in partition order.

    A failing partition is logged with its index and its error re-raised.
    """
    total_start = time.perf_counter()
    executor_class = choose_executor(len(plan.partitions))
    executor_name = describe_executor(executor_class)

    gil_status = "enabled" if is_gil_enabled() else "disabled"
    max_workers = worker_count(workers, len(plan.partitions)) if executor_class else 1
    executor_override = os.environ.get(EXECUTOR_ENV, "")
    override_info = f", {EXECUTOR_ENV}={executor_override}" if executor_override else ""

    logger.info(
        f"Scanning: partitions={len(plan.partitions)}, units={plan.unit_count}, "
        f"workers={max_workers}, executor={executor_name}, GIL={gil_status}{override_info}"
    )

    results: list[PartitionResult] = []

    if executor_class is None:
        for partition in plan.partitions:
            try:
                results.append(scan_partition(partition, plan.read_function, limit))
            except Exception:
                logger.error("Partition %d failed", partition.index)
                raise
    else:
        with executor_class(max_workers=max_workers) as executor:
            futures: dict[Future[PartitionResult], int] = {
                executor.submit(scan_partition, partition, plan.read_function, limit): partition.index
                for partition in plan.partitions
            }
            for future in as_completed(futures):
                try:
                    result = future.result()
                except Exception:
                    logger.error("Partition %d failed", futures[future])
                    for pending in futures:
                        pending.cancel()
                    raise
                logger.debug("Partition %d: %d records in %.2fs", result.index, result.records, result.elapsed)
                results.append(result)

    results.sort(key=lambda result: result.index)
    total_records = sum(result.records for result in results)
    logger.info("Scan done: %d records in %.2fs", total_records, time.perf_counter() - total_start)
    return results
