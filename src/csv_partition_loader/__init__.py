"""CSV Partition Loader - Pack skewed CSV inputs into balanced partitions and read them lazily."""

from csv_partition_loader.config import ScanConfig
from csv_partition_loader.errors import (
    CsvLoaderError,
    DecodeError,
    ExhaustedError,
    OpenError,
    PackingConfigError,
)
from csv_partition_loader.partition import InputUnit, Partition, pack_units
from csv_partition_loader.reader import RecordCursor, ScanContext, open_cursor
from csv_partition_loader.scan import plan_local_scan, plan_scan, run_scan

__all__ = [
    "CsvLoaderError",
    "DecodeError",
    "ExhaustedError",
    "InputUnit",
    "OpenError",
    "PackingConfigError",
    "Partition",
    "RecordCursor",
    "ScanConfig",
    "ScanContext",
    "open_cursor",
    "pack_units",
    "plan_local_scan",
    "plan_scan",
    "run_scan",
]
