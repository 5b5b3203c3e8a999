import pytest

from canisterkit.attributes import (
    ComputeAllocation,
    ComputeAllocationError,
    FreezingThreshold,
    FreezingThresholdError,
    MemoryAllocation,
    MemoryAllocationError,
    ReservedCyclesLimit,
    ReservedCyclesLimitError,
)


@pytest.mark.parametrize(
    "cls", [ComputeAllocation, MemoryAllocation, FreezingThreshold, ReservedCyclesLimit]
)
def test_can_convert_one(cls):
    assert int(cls(1)) == 1


@pytest.mark.parametrize(
    "cls", [ComputeAllocation, MemoryAllocation, FreezingThreshold, ReservedCyclesLimit]
)
def test_can_convert_from_itself(cls):
    original = cls(100)
    assert int(cls(original)) == 100
    assert cls(original) == original


def test_compute_allocation_bounds():
    assert int(ComputeAllocation(0)) == 0
    assert int(ComputeAllocation(100)) == 100
    with pytest.raises(ComputeAllocationError, match="Must be a percent between 0 and 100."):
        ComputeAllocation(101)
    with pytest.raises(ComputeAllocationError):
        ComputeAllocation(-1)


def test_memory_allocation_bounds():
    assert int(MemoryAllocation(1 << 48)) == 1 << 48
    with pytest.raises(MemoryAllocationError) as info:
        MemoryAllocation((1 << 48) + 1)
    assert info.value.value == (1 << 48) + 1
    with pytest.raises(MemoryAllocationError):
        MemoryAllocation(-1)


def test_freezing_threshold_bounds():
    assert int(FreezingThreshold(2**64 - 1)) == 2**64 - 1
    with pytest.raises(FreezingThresholdError):
        FreezingThreshold(2**64)
    with pytest.raises(FreezingThresholdError):
        FreezingThreshold(-1)


def test_reserved_cycles_limit_negative():
    with pytest.raises(ReservedCyclesLimitError) as info:
        ReservedCyclesLimit(-4)
    assert info.value.value == -4


def test_reserved_cycles_limit_large():
    assert ReservedCyclesLimit(2**127 + 6).value == 170141183460469231731687303715884105734


def test_reserved_cycles_limit_upper_bound():
    assert int(ReservedCyclesLimit(2**128 - 1)) == 2**128 - 1
    with pytest.raises(ReservedCyclesLimitError):
        ReservedCyclesLimit(2**128)


@pytest.mark.parametrize("bad", ["5", 1.5, True])
def test_non_integers_rejected(bad):
    with pytest.raises(TypeError):
        ComputeAllocation(bad)