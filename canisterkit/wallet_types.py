"""Records and variants exchanged with the cycles wallet canister."""

from __future__ import annotations

import enum
import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from canisterkit.calls import CandidError

_MAX_U32 = (1 << 32) - 1
_MAX_U64 = (1 << 64) - 1
_MAX_U128 = (1 << 128) - 1


def _field(value: Any, name: str) -> Any:
    if not isinstance(value, Mapping):
        raise CandidError(f"expected a record, got {type(value).__name__}")
    try:
        return value[name]
    except KeyError:
        raise CandidError(f"missing field '{name}'") from None


def _nat(value: Any, name: str, maximum: int = _MAX_U128) -> int:
    if isinstance(value, bool):
        raise CandidError(f"field '{name}' is not a natural number")
    try:
        number = operator.index(value)
    except TypeError:
        raise CandidError(f"field '{name}' is not a natural number") from None
    if number < 0 or number > maximum:
        raise CandidError(f"field '{name}' is out of range: {number}")
    return number


def _opt_text(value: Any, name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise CandidError(f"field '{name}' is not text")
    return value


def _variant(value: Any) -> Tuple[str, Any]:
    if isinstance(value, str):
        return value, None
    if isinstance(value, Mapping) and len(value) == 1:
        ((tag, payload),) = value.items()
        return tag, payload
    raise CandidError("a variant must have exactly one tag")


class Role(enum.Enum):
    """The significance of a principal in the wallet's address book."""

    CONTACT = "Contact"
    CUSTODIAN = "Custodian"
    CONTROLLER = "Controller"


class Kind(enum.Enum):
    """The kind of a principal."""

    UNKNOWN = "Unknown"
    USER = "User"
    CANISTER = "Canister"


def _enum_tag(cls: type, value: Any) -> Any:
    tag, _ = _variant(value)
    try:
        return cls(tag)
    except ValueError:
        raise CandidError(f"unknown {cls.__name__} tag: {tag!r}") from None


@dataclass(frozen=True)
class CanisterSettingsV1:
    """Canister settings understood by single-controller wallets."""

    controller: Any = None
    compute_allocation: Optional[int] = None
    memory_allocation: Optional[int] = None
    freezing_threshold: Optional[int] = None

    def to_value(self) -> Dict[str, Any]:
        """The settings as a Candid record, absent options as None."""
        return {
            "controller": self.controller,
            "compute_allocation": self.compute_allocation,
            "memory_allocation": self.memory_allocation,
            "freezing_threshold": self.freezing_threshold,
        }


@dataclass(frozen=True)
class AddressEntry:
    """An entry in the wallet's address book."""

    id: Any
    name: Optional[str]
    kind: Kind
    role: Role

    def to_value(self) -> Dict[str, Any]:
        """The entry as a Candid record."""
        return {
            "id": self.id,
            "name": self.name,
            "kind": {self.kind.value: None},
            "role": {self.role.value: None},
        }


@dataclass(frozen=True)
class ManagedCanisterInfo:
    """A canister that the wallet manages."""

    id: Any
    name: Optional[str]
    created_at: int


@dataclass(frozen=True)
class CyclesSent:
    """Cycles were sent to a canister."""

    to: Any
    amount: int
    refund: int


@dataclass(frozen=True)
class CyclesReceived:
    """Cycles were received from a canister."""

    from_: Any
    amount: int
    memo: Optional[str]


@dataclass(frozen=True)
class AddressAdded:
    """A principal was added to the address book."""

    id: Any
    name: Optional[str]
    role: Role


@dataclass(frozen=True)
class AddressRemoved:
    """A principal was removed from the address book."""

    id: Any


@dataclass(frozen=True)
class CanisterCreated:
    """A canister was created."""

    canister: Any
    cycles: int


@dataclass(frozen=True)
class CanisterCalled:
    """A call was forwarded to a canister."""

    canister: Any
    method_name: str
    cycles: int


EventKind = Union[
    CyclesSent, CyclesReceived, AddressAdded, AddressRemoved, CanisterCreated, CanisterCalled
]


@dataclass(frozen=True)
class Event:
    """A transaction event recorded by the wallet."""

    id: int
    timestamp: int
    kind: EventKind


@dataclass(frozen=True)
class ManagedCyclesSent:
    """Cycles were sent to a managed canister."""

    amount: int
    refund: int


@dataclass(frozen=True)
class Called:
    """A call was forwarded to a managed canister."""

    method_name: str
    cycles: int


@dataclass(frozen=True)
class Created:
    """A managed canister was created."""

    cycles: int


ManagedCanisterEventKind = Union[ManagedCyclesSent, Called, Created]


@dataclass(frozen=True)
class ManagedCanisterEvent:
    """A transaction event related to a managed canister."""

    id: int
    timestamp: int
    kind: ManagedCanisterEventKind


@dataclass(frozen=True)
class BalanceResult:
    """The wallet's balance in cycles."""

    amount: int

    @classmethod
    def from_value(cls, value: Any) -> "BalanceResult":
        """Build from a decoded Candid record."""
        return cls(amount=_nat(_field(value, "amount"), "amount"))


@dataclass(frozen=True)
class CreateResult:
    """The id of a newly created canister."""

    canister_id: Any

    @classmethod
    def from_value(cls, value: Any) -> "CreateResult":
        """Build from a decoded Candid record."""
        return cls(canister_id=_field(value, "canister_id"))


@dataclass(frozen=True)
class CallResult:
    """The encoded return blob of a forwarded call."""

    return_: bytes

    @classmethod
    def from_value(cls, value: Any) -> "CallResult":
        """Build from a decoded Candid record."""
        blob = _field(value, "return")
        if not isinstance(blob, (bytes, bytearray, list)):
            raise CandidError("field 'return' is not a blob")
        return cls(return_=bytes(blob))


def _text(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise CandidError(f"field '{name}' is not text")
    return value


_EVENT_KINDS: Dict[str, Callable[[Any], EventKind]] = {
    "CyclesSent": lambda p: CyclesSent(
        to=_field(p, "to"),
        amount=_nat(_field(p, "amount"), "amount"),
        refund=_nat(_field(p, "refund"), "refund"),
    ),
    "CyclesReceived": lambda p: CyclesReceived(
        from_=_field(p, "from"),
        amount=_nat(_field(p, "amount"), "amount"),
        memo=_opt_text(p.get("memo"), "memo"),
    ),
    "AddressAdded": lambda p: AddressAdded(
        id=_field(p, "id"),
        name=_opt_text(p.get("name"), "name"),
        role=_enum_tag(Role, _field(p, "role")),
    ),
    "AddressRemoved": lambda p: AddressRemoved(id=_field(p, "id")),
    "CanisterCreated": lambda p: CanisterCreated(
        canister=_field(p, "canister"),
        cycles=_nat(_field(p, "cycles"), "cycles"),
    ),
    "CanisterCalled": lambda p: CanisterCalled(
        canister=_field(p, "canister"),
        method_name=_text(_field(p, "method_name"), "method_name"),
        cycles=_nat(_field(p, "cycles"), "cycles"),
    ),
}

_MANAGED_KINDS: Dict[str, Callable[[Any], ManagedCanisterEventKind]] = {
    "CyclesSent": lambda p: ManagedCyclesSent(
        amount=_nat(_field(p, "amount"), "amount"),
        refund=_nat(_field(p, "refund"), "refund"),
    ),
    "Called": lambda p: Called(
        method_name=_text(_field(p, "method_name"), "method_name"),
        cycles=_nat(_field(p, "cycles"), "cycles"),
    ),
    "Created": lambda p: Created(cycles=_nat(_field(p, "cycles"), "cycles")),
}


def _kind(table: Mapping[str, Callable[[Any], Any]], value: Any) -> Any:
    tag, payload = _variant(value)
    try:
        build = table[tag]
    except KeyError:
        raise CandidError(f"unknown event kind: {tag!r}") from None
    if not isinstance(payload, Mapping):
        raise CandidError(f"event kind {tag!r} carries no record")
    return build(payload)


def parse_event(value: Any) -> Event:
    """Build a wallet Event from a decoded Candid record (64- or 128-bit)."""
    return Event(
        id=_nat(_field(value, "id"), "id", _MAX_U32),
        timestamp=_nat(_field(value, "timestamp"), "timestamp", _MAX_U64),
        kind=_kind(_EVENT_KINDS, _field(value, "kind")),
    )


def parse_managed_canister_event(value: Any) -> ManagedCanisterEvent:
    """Build a ManagedCanisterEvent from a decoded Candid record."""
    return ManagedCanisterEvent(
        id=_nat(_field(value, "id"), "id", _MAX_U32),
        timestamp=_nat(_field(value, "timestamp"), "timestamp", _MAX_U64),
        kind=_kind(_MANAGED_KINDS, _field(value, "kind")),
    )


def parse_address_entry(value: Any) -> AddressEntry:
    """Build an AddressEntry from a decoded Candid record."""
    return AddressEntry(
        id=_field(value, "id"),
        name=_opt_text(value.get("name"), "name"),
        kind=_enum_tag(Kind, _field(value, "kind")),
        role=_enum_tag(Role, _field(value, "role")),
    )


def parse_managed_canister_info(value: Any) -> ManagedCanisterInfo:
    """Build a ManagedCanisterInfo from a decoded Candid record."""
    return ManagedCanisterInfo(
        id=_field(value, "id"),
        name=_opt_text(value.get("name"), "name"),
        created_at=_nat(_field(value, "created_at"), "created_at", _MAX_U64),
    )