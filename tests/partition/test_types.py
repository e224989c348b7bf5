"""Tests for input unit and partition types."""

import pytest

from csv_partition_loader.partition import BlockDescriptor, InputUnit, Partition


def test_input_unit_rejects_negative_values() -> None:
    with pytest.raises(ValueError, match="offset"):
        InputUnit("a.csv", -1, 10)
    with pytest.raises(ValueError, match="length"):
        InputUnit("a.csv", 0, -10)


def test_input_unit_end() -> None:
    assert InputUnit("a.csv", 100, 50).end == 150


def test_partition_requires_units() -> None:
    with pytest.raises(ValueError):
        Partition(index=0, units=())


def test_partition_sizes() -> None:
    partition = Partition(index=3, units=(InputUnit("a.csv", 0, 10), InputUnit("b.csv", 0, 20)))
    assert len(partition) == 2
    assert partition.total_length == 30
    assert partition.weighted_size(5) == 40
    assert [unit.path for unit in partition] == ["a.csv", "b.csv"]


def test_block_descriptor_to_unit() -> None:
    block = BlockDescriptor("data.csv", 64, 32, ("node-1", "node-2"))
    assert block.to_unit() == InputUnit("data.csv", 64, 32, ("node-1", "node-2"))
