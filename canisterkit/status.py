"""Management canister methods and the canister status record."""

from __future__ import annotations

import enum
import operator
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from canisterkit.calls import CandidError

MANAGEMENT_CANISTER_ID = "aaaaa-aa"


class MgmtMethod(str, enum.Enum):
    """All the known methods of the management canister."""

    CREATE_CANISTER = "create_canister"
    INSTALL_CODE = "install_code"
    START_CANISTER = "start_canister"
    STOP_CANISTER = "stop_canister"
    CANISTER_STATUS = "canister_status"
    DELETE_CANISTER = "delete_canister"
    DEPOSIT_CYCLES = "deposit_cycles"
    RAW_RAND = "raw_rand"
    PROVISIONAL_CREATE_CANISTER_WITH_CYCLES = "provisional_create_canister_with_cycles"
    PROVISIONAL_TOP_UP_CANISTER = "provisional_top_up_canister"
    UNINSTALL_CODE = "uninstall_code"
    UPDATE_SETTINGS = "update_settings"

    def __str__(self) -> str:
        return self.value


class CanisterStatus(enum.Enum):
    """Whether a canister is running, stopping or stopped."""

    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class QueryStats:
    """Statistics relating to query calls."""

    num_calls_total: int
    num_instructions_total: int
    request_payload_bytes_total: int
    response_payload_bytes_total: int


@dataclass(frozen=True)
class DefiniteCanisterSettings:
    """The concrete settings of a canister."""

    controllers: List[Any]
    compute_allocation: int
    memory_allocation: int
    freezing_threshold: int
    reserved_cycles_limit: Optional[int] = None


@dataclass(frozen=True)
class StatusCallResult:
    """The complete status information of a canister."""

    status: CanisterStatus
    settings: DefiniteCanisterSettings
    module_hash: Optional[bytes]
    memory_size: int
    cycles: int
    reserved_cycles: int
    idle_cycles_burned_per_day: int
    query_stats: QueryStats

    def __str__(self) -> str:
        return repr(self)


def _field(value: Mapping[str, Any], name: str) -> Any:
    if not isinstance(value, Mapping):
        raise CandidError(f"expected a record, got {type(value).__name__}")
    try:
        return value[name]
    except KeyError:
        raise CandidError(f"missing field '{name}'") from None


def _nat(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise CandidError(f"field '{name}' is not a natural number")
    try:
        number = operator.index(value)
    except TypeError:
        raise CandidError(f"field '{name}' is not a natural number") from None
    if number < 0:
        raise CandidError(f"field '{name}' is negative")
    return number


def _status(value: Any) -> CanisterStatus:
    if isinstance(value, Mapping):
        if len(value) != 1:
            raise CandidError("a variant must have exactly one tag")
        (value,) = value.keys()
    try:
        return CanisterStatus(value)
    except ValueError:
        raise CandidError(f"unknown canister status: {value!r}") from None


def _settings(value: Mapping[str, Any]) -> DefiniteCanisterSettings:
    limit = value.get("reserved_cycles_limit") if isinstance(value, Mapping) else None
    return DefiniteCanisterSettings(
        controllers=list(_field(value, "controllers")),
        compute_allocation=_nat(_field(value, "compute_allocation"), "compute_allocation"),
        memory_allocation=_nat(_field(value, "memory_allocation"), "memory_allocation"),
        freezing_threshold=_nat(_field(value, "freezing_threshold"), "freezing_threshold"),
        reserved_cycles_limit=None if limit is None else _nat(limit, "reserved_cycles_limit"),
    )


def _query_stats(value: Mapping[str, Any]) -> QueryStats:
    names = (
        "num_calls_total",
        "num_instructions_total",
        "request_payload_bytes_total",
        "response_payload_bytes_total",
    )
    return QueryStats(**{name: _nat(_field(value, name), name) for name in names})


def parse_status_call_result(value: Mapping[str, Any]) -> StatusCallResult:
    """Build a StatusCallResult from a decoded Candid record."""
    module_hash = value.get("module_hash") if isinstance(value, Mapping) else None
    return StatusCallResult(
        status=_status(_field(value, "status")),
        settings=_settings(_field(value, "settings")),
        module_hash=None if module_hash is None else bytes(module_hash),
        memory_size=_nat(_field(value, "memory_size"), "memory_size"),
        cycles=_nat(_field(value, "cycles"), "cycles"),
        reserved_cycles=_nat(_field(value, "reserved_cycles"), "reserved_cycles"),
        idle_cycles_burned_per_day=_nat(
            _field(value, "idle_cycles_burned_per_day"), "idle_cycles_burned_per_day"
        ),
        query_stats=_query_stats(_field(value, "query_stats")),
    )