"""Executor selection for partition scans."""

import os
import sys
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from typing import TypeAlias

ExecutorClass: TypeAlias = type[ThreadPoolExecutor] | type[ProcessPoolExecutor] | None

# Environment variable to override executor selection.
EXECUTOR_ENV = "CSV_LOADER_EXECUTOR"

# Policy names accepted in EXECUTOR_ENV; None scans in the calling thread.
POLICIES: dict[str, ExecutorClass] = {
    "serial": None,
    "threads": ThreadPoolExecutor,
    "processes": ProcessPoolExecutor,
}


def is_gil_enabled() -> bool:
    """Whether partitions scanned on threads would contend for the GIL."""
    # Builds older than 3.13 have no free-threaded mode to ask about.
    check_gil = getattr(sys, "_is_gil_enabled", None)
    return True if check_gil is None else check_gil()


def choose_executor(partitions: int) -> ExecutorClass:
    """
    Pick the executor used to scan a plan of the given size.

    Priority:
    1. CSV_LOADER_EXECUTOR env var naming one of POLICIES
    2. Serial when there is at most one partition to scan
    3. Threads when the GIL is disabled, processes otherwise

    Unrecognised override values fall through to the automatic choice.
    """
    override = os.environ.get(EXECUTOR_ENV, "").lower()
    if override in POLICIES:
        return POLICIES[override]

    if partitions <= 1:
        return None
    return ProcessPoolExecutor if is_gil_enabled() else ThreadPoolExecutor


def worker_count(workers: int | None, partitions: int) -> int:
    """Cap the requested (or CPU-derived) worker count at the partition count."""
    requested = workers if workers is not None else os.cpu_count() or 1
    return max(1, min(requested, partitions))


def describe_executor(executor_class: ExecutorClass) -> str:
    """Policy name for executor_class, as used in scan log lines."""
    for name, policy in POLICIES.items():
        if policy is executor_class:
            return name
    raise ValueError(f"unknown executor: {executor_class!r}")
