"""Scan planning and partition execution."""

from csv_partition_loader.scan.plan import ScanPlan, plan_local_scan, plan_scan
from csv_partition_loader.scan.run import PartitionResult, iter_partition_records, run_scan, scan_partition

__all__ = [
    "PartitionResult",
    "ScanPlan",
    "iter_partition_records",
    "plan_local_scan",
    "plan_scan",
    "run_scan",
    "scan_partition",
]
