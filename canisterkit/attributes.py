"""Checked numeric values used in canister settings."""

from __future__ import annotations

import operator
from dataclasses import dataclass

_MAX_MEMORY = 1 << 48
_MAX_U64 = (1 << 64) - 1
_MAX_U128 = (1 << 128) - 1


class ComputeAllocationError(ValueError):
    """The value was not a percentage in the range [0, 100]."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__("Must be a percent between 0 and 100.")


class MemoryAllocationError(ValueError):
    """The value was not in the range [0, 2^48]."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(
            "Memory allocation must be between 0 and 2^48 (i.e 256TiB), "
            f"inclusively. Got {value}."
        )


class FreezingThresholdError(ValueError):
    """The value was not in the range [0, 2^64-1]."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(
            f"Freezing threshold must be between 0 and 2^64-1, inclusively. Got {value}."
        )


class ReservedCyclesLimitError(ValueError):
    """The value was not in the range [0, 2^128-1]."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(
            f"ReservedCyclesLimit must be between 0 and 2^128-1, inclusively. Got {value}."
        )


def _coerce(instance, value, maximum: int, error) -> None:
    if isinstance(value, type(instance)):
        number = value.value
    else:
        if isinstance(value, bool):
            raise TypeError("a boolean is not a valid numeric setting")
        number = operator.index(value)
    if number < 0 or number > maximum:
        raise error(number)
    object.__setattr__(instance, "value", number)


@dataclass(frozen=True)
class ComputeAllocation:
    """Guaranteed compute capacity, as a percentage between 0 and 100."""

    value: int

    def __post_init__(self) -> None:
        _coerce(self, self.value, 100, ComputeAllocationError)

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class MemoryAllocation:
    """Guaranteed memory in bytes, between 0 and 2^48."""

    value: int

    def __post_init__(self) -> None:
        _coerce(self, self.value, _MAX_MEMORY, MemoryAllocationError)

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class FreezingThreshold:
    """Seconds of runway before a canister is frozen, between 0 and 2^64-1."""

    value: int

    def __post_init__(self) -> None:
        _coerce(self, self.value, _MAX_U64, FreezingThresholdError)

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class ReservedCyclesLimit:
    """Upper limit of reserved cycles, between 0 and 2^128-1; 0 disables reservation."""

    value: int

    def __post_init__(self) -> None:
        _coerce(self, self.value, _MAX_U128, ReservedCyclesLimitError)

    def __int__(self) -> int:
        return self.value