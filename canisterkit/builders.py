"""Builders for the create_canister and update_settings management calls."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Union

from canisterkit.attributes import (
    ComputeAllocation,
    FreezingThreshold,
    MemoryAllocation,
    ReservedCyclesLimit,
)
from canisterkit.calls import (
    Argument,
    CallKind,
    CandidError,
    Decoder,
    Encoder,
    MessageError,
    PreparedCall,
)
from canisterkit.install import CanisterSettings
from canisterkit.status import MANAGEMENT_CANISTER_ID, MgmtMethod

PrincipalConverter = Callable[[Any], Any]
_Pending = Union[Any, MessageError, None]


def default_principal(value: Any) -> Any:
    """Accept a principal given as non-empty text or raw bytes."""
    if isinstance(value, str):
        if not value:
            raise ValueError("a principal cannot be empty text")
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise TypeError(f"cannot use a {type(value).__name__} as a principal")


def _checked(kind: type, value: Any) -> _Pending:
    """Convert ``value`` into ``kind``; None stays None and a failure becomes a stored MessageError."""
    if value is None:
        return None
    try:
        return kind(value)
    except (ValueError, TypeError) as exc:
        return MessageError(str(exc))


def _resolve(pending: _Pending) -> Optional[int]:
    if isinstance(pending, MessageError):
        raise MessageError(str(pending))
    return None if pending is None else int(pending)


def _require_encoder(encoder: Optional[Encoder]) -> Encoder:
    if encoder is None:
        raise MessageError("no Candid encoder available to build the call")
    return encoder


class _PendingSettings:
    """Settings collected by a builder, with conversion errors kept until build time."""

    def __init__(self, principal_converter: PrincipalConverter) -> None:
        self.principal_converter = principal_converter
        self.controllers: Union[List[Any], MessageError, None] = None
        self.compute_allocation: _Pending = None
        self.memory_allocation: _Pending = None
        self.freezing_threshold: _Pending = None
        self.reserved_cycles_limit: _Pending = None

    def add_controller(self, controller: Any) -> None:
        if isinstance(self.controllers, MessageError):
            return
        if controller is None:
            self.controllers = None
            return
        try:
            principal = self.principal_converter(controller)
        except (ValueError, TypeError) as exc:
            self.controllers = MessageError(str(exc))
            return
        self.controllers = [*(self.controllers or []), principal]

    def resolve(self) -> CanisterSettings:
        if isinstance(self.controllers, MessageError):
            raise MessageError(str(self.controllers))
        return CanisterSettings(
            controllers=None if self.controllers is None else list(self.controllers),
            compute_allocation=_resolve(self.compute_allocation),
            memory_allocation=_resolve(self.memory_allocation),
            freezing_threshold=_resolve(self.freezing_threshold),
            reserved_cycles_limit=_resolve(self.reserved_cycles_limit),
        )


def _canister_id_of(result: Any) -> Any:
    if isinstance(result, (tuple, list)):
        if not result:
            raise CandidError("reply holds no values")
        result = result[0]
    if isinstance(result, dict) and "canister_id" in result:
        return result["canister_id"]
    raise CandidError("reply is not a record with a canister_id field")


class CreateCanisterBuilder:
    """A builder for a create_canister call."""

    def __init__(
        self,
        encoder: Optional[Encoder] = None,
        decoder: Optional[Decoder] = None,
        management_id: Any = MANAGEMENT_CANISTER_ID,
        principal_converter: PrincipalConverter = default_principal,
    ) -> None:
        self.encoder = encoder
        self.decoder = decoder
        self.management_id = management_id
        self.principal_converter = principal_converter
        self._pending = _PendingSettings(principal_converter)
        self.effective_canister_id: Any = management_id
        self.is_provisional_create = False
        self.amount: Optional[int] = None
        self.specified_id: Any = None

    def as_provisional_create_with_amount(self, amount: Optional[int]) -> "CreateCanisterBuilder":
        """Create through provisional_create_canister_with_cycles with ``amount`` cycles."""
        self.is_provisional_create = True
        self.amount = amount
        return self

    def as_provisional_create_with_specified_id(self, specified_id: Any) -> "CreateCanisterBuilder":
        """Ask for a specific canister id; it also becomes the effective canister id."""
        self.is_provisional_create = True
        self.specified_id = specified_id
        self.effective_canister_id = specified_id
        return self

    def with_effective_canister_id(self, effective_canister_id: Any) -> "CreateCanisterBuilder":
        """Set the effective canister id; a value that is not a principal is ignored."""
        try:
            self.effective_canister_id = self.principal_converter(effective_canister_id)
        except (ValueError, TypeError):
            pass
        return self

    def with_optional_controller(self, controller: Any) -> "CreateCanisterBuilder":
        """Add a controller; None reverts the controllers to the default."""
        self._pending.add_controller(controller)
        return self

    def with_controller(self, controller: Any) -> "CreateCanisterBuilder":
        """Add a designated controller."""
        return self.with_optional_controller(controller)

    def with_optional_compute_allocation(self, compute_allocation: Any) -> "CreateCanisterBuilder":
        """Set the compute allocation; None reverts it to the default."""
        self._pending.compute_allocation = _checked(ComputeAllocation, compute_allocation)
        return self

    def with_compute_allocation(self, compute_allocation: Any) -> "CreateCanisterBuilder":
        """Set the compute allocation."""
        return self.with_optional_compute_allocation(compute_allocation)

    def with_optional_memory_allocation(self, memory_allocation: Any) -> "CreateCanisterBuilder":
        """Set the memory allocation; None reverts it to the default."""
        self._pending.memory_allocation = _checked(MemoryAllocation, memory_allocation)
        return self

    def with_memory_allocation(self, memory_allocation: Any) -> "CreateCanisterBuilder":
        """Set the memory allocation."""
        return self.with_optional_memory_allocation(memory_allocation)

    def with_optional_freezing_threshold(self, freezing_threshold: Any) -> "CreateCanisterBuilder":
        """Set the freezing threshold; None reverts it to the default."""
        self._pending.freezing_threshold = _checked(FreezingThreshold, freezing_threshold)
        return self

    def with_freezing_threshold(self, freezing_threshold: Any) -> "CreateCanisterBuilder":
        """Set the freezing threshold."""
        return self.with_optional_freezing_threshold(freezing_threshold)

    def with_optional_reserved_cycles_limit(self, limit: Any) -> "CreateCanisterBuilder":
        """Set the reserved cycles limit; None creates the canister with the default limit."""
        self._pending.reserved_cycles_limit = _checked(ReservedCyclesLimit, limit)
        return self

    def with_reserved_cycles_limit(self, limit: Any) -> "CreateCanisterBuilder":
        """Set the reserved cycles limit."""
        return self.with_optional_reserved_cycles_limit(limit)

    def build(self) -> PreparedCall:
        """Prepare the call; its result is the new canister's id."""
        settings = self._pending.resolve()
        encoder = _require_encoder(self.encoder)
        if self.is_provisional_create:
            method = MgmtMethod.PROVISIONAL_CREATE_CANISTER_WITH_CYCLES
            payload = {
                "amount": self.amount,
                "settings": settings.to_value(),
                "specified_id": self.specified_id,
            }
        else:
            method = MgmtMethod.CREATE_CANISTER
            payload = settings.to_value()
        return PreparedCall(
            kind=CallKind.UPDATE,
            canister_id=self.management_id,
            method_name=method.value,
            arg=Argument.from_values(payload).serialize(encoder),
            effective_canister_id=self.effective_canister_id,
            decoder=self.decoder,
        ).map(_canister_id_of)

    async def call(self, executor) -> Any:
        """Submit the call and return its request id."""
        return await self.build().call(executor)

    async def call_and_wait(self, executor) -> Any:
        """Submit the call, wait for it and return the new canister's id."""
        return await self.build().call_and_wait(executor)


class UpdateCanisterBuilder:
    """A builder for an update_settings call."""

    def __init__(
        self,
        canister_id: Any,
        encoder: Optional[Encoder] = None,
        decoder: Optional[Decoder] = None,
        management_id: Any = MANAGEMENT_CANISTER_ID,
        principal_converter: PrincipalConverter = default_principal,
    ) -> None:
        self.canister_id = canister_id
        self.encoder = encoder
        self.decoder = decoder
        self.management_id = management_id
        self.principal_converter = principal_converter
        self._pending = _PendingSettings(principal_converter)

    def with_optional_controller(self, controller: Any) -> "UpdateCanisterBuilder":
        """Add a controller; None reverts the controllers to the default."""
        self._pending.add_controller(controller)
        return self

    def with_controller(self, controller: Any) -> "UpdateCanisterBuilder":
        """Add a designated controller."""
        return self.with_optional_controller(controller)

    def with_optional_compute_allocation(self, compute_allocation: Any) -> "UpdateCanisterBuilder":
        """Set the compute allocation; None reverts it to the default."""
        self._pending.compute_allocation = _checked(ComputeAllocation, compute_allocation)
        return self

    def with_compute_allocation(self, compute_allocation: Any) -> "UpdateCanisterBuilder":
        """Set the compute allocation."""
        return self.with_optional_compute_allocation(compute_allocation)

    def with_optional_memory_allocation(self, memory_allocation: Any) -> "UpdateCanisterBuilder":
        """Set the memory allocation; None reverts it to the default."""
        self._pending.memory_allocation = _checked(MemoryAllocation, memory_allocation)
        return self

    def with_memory_allocation(self, memory_allocation: Any) -> "UpdateCanisterBuilder":
        """Set the memory allocation."""
        return self.with_optional_memory_allocation(memory_allocation)

    def with_optional_freezing_threshold(self, freezing_threshold: Any) -> "UpdateCanisterBuilder":
        """Set the freezing threshold; None reverts it to the default."""
        self._pending.freezing_threshold = _checked(FreezingThreshold, freezing_threshold)
        return self

    def with_freezing_threshold(self, freezing_threshold: Any) -> "UpdateCanisterBuilder":
        """Set the freezing threshold."""
        return self.with_optional_freezing_threshold(freezing_threshold)

    def with_optional_reserved_cycles_limit(self, limit: Any) -> "UpdateCanisterBuilder":
        """Set the reserved cycles limit; None leaves it unchanged."""
        self._pending.reserved_cycles_limit = _checked(ReservedCyclesLimit, limit)
        return self

    def with_reserved_cycles_limit(self, limit: Any) -> "UpdateCanisterBuilder":
        """Set the reserved cycles limit."""
        return self.with_optional_reserved_cycles_limit(limit)

    def build(self) -> PreparedCall:
        """Prepare the call that updates the canister's settings."""
        settings = self._pending.resolve()
        encoder = _require_encoder(self.encoder)
        payload = {"canister_id": self.canister_id, "settings": settings.to_value()}
        return PreparedCall(
            kind=CallKind.UPDATE,
            canister_id=self.management_id,
            method_name=MgmtMethod.UPDATE_SETTINGS.value,
            arg=Argument.from_values(payload).serialize(encoder),
            effective_canister_id=self.canister_id,
            decoder=lambda _reply: None,
        )

    async def call(self, executor) -> Any:
        """Submit the call and return its request id."""
        return await self.build().call(executor)

    async def call_and_wait(self, executor) -> Any:
        """Submit the call and wait for it to complete."""
        return await self.build().call_and_wait(executor)