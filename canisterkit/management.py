"""The management canister interface: prepared calls for its methods."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from canisterkit.builders import (
    CreateCanisterBuilder,
    PrincipalConverter,
    UpdateCanisterBuilder,
    default_principal,
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
from canisterkit.install import InstallCodeBuilder
from canisterkit.status import (
    MANAGEMENT_CANISTER_ID,
    MgmtMethod,
    StatusCallResult,
    parse_status_call_result,
)

_MAX_U64 = (1 << 64) - 1


def _unit(_reply: Any) -> None:
    return None


def _first(result: Any) -> Any:
    if isinstance(result, (tuple, list)):
        if not result:
            raise CandidError("reply holds no values")
        return result[0]
    return result


def _status_of(result: Any) -> StatusCallResult:
    return parse_status_call_result(_first(result))


def _blob_of(result: Any) -> bytes:
    value = _first(result)
    if not isinstance(value, (bytes, bytearray, list)):
        raise CandidError("reply is not a blob")
    return bytes(value)


@dataclass(frozen=True)
class ManagementCanister:
    """The IC management canister; each method prepares one call or builder."""

    encoder: Optional[Encoder] = None
    decoder: Optional[Decoder] = None
    canister_id: Any = MANAGEMENT_CANISTER_ID
    principal_converter: PrincipalConverter = default_principal

    def _encode(self, *values: Any) -> bytes:
        if self.encoder is None:
            raise MessageError("no Candid encoder available to build the call")
        return Argument.from_values(*values).serialize(self.encoder)

    def _update(
        self,
        method: MgmtMethod,
        *values: Any,
        effective_canister_id: Any = None,
        decoder: Optional[Decoder] = None,
    ) -> PreparedCall:
        return PreparedCall(
            kind=CallKind.UPDATE,
            canister_id=self.canister_id,
            method_name=method.value,
            arg=self._encode(*values),
            effective_canister_id=effective_canister_id,
            decoder=decoder,
        )

    def _targeted(self, method: MgmtMethod, canister_id: Any) -> PreparedCall:
        return self._update(
            method,
            {"canister_id": canister_id},
            effective_canister_id=canister_id,
            decoder=_unit,
        )

    def canister_status(self, canister_id: Any) -> PreparedCall:
        """Get the status of a canister."""
        return self._update(
            MgmtMethod.CANISTER_STATUS,
            {"canister_id": canister_id},
            effective_canister_id=canister_id,
            decoder=self.decoder,
        ).map(_status_of)

    def create_canister(self) -> CreateCanisterBuilder:
        """Start building a create_canister call."""
        return CreateCanisterBuilder(
            encoder=self.encoder,
            decoder=self.decoder,
            management_id=self.canister_id,
            principal_converter=self.principal_converter,
        )

    def deposit_cycles(self, canister_id: Any) -> PreparedCall:
        """Deposit the cycles included in the call into a canister."""
        return self._targeted(MgmtMethod.DEPOSIT_CYCLES, canister_id)

    def delete_canister(self, canister_id: Any) -> PreparedCall:
        """Delete a canister."""
        return self._targeted(MgmtMethod.DELETE_CANISTER, canister_id)

    def provisional_top_up_canister(self, canister_id: Any, amount: int) -> PreparedCall:
        """Add ``amount`` fresh cycles to a canister's balance."""
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise MessageError("the top-up amount must be an integer")
        if amount < 0 or amount > _MAX_U64:
            raise MessageError(f"the top-up amount must fit in 64 bits, got {amount}")
        return self._update(
            MgmtMethod.PROVISIONAL_TOP_UP_CANISTER,
            {"canister_id": canister_id, "amount": amount},
            effective_canister_id=canister_id,
            decoder=_unit,
        )

    def raw_rand(self) -> PreparedCall:
        """Ask for 32 pseudo-random bytes."""
        return self._update(MgmtMethod.RAW_RAND, decoder=self.decoder).map(_blob_of)

    def start_canister(self, canister_id: Any) -> PreparedCall:
        """Start a canister."""
        return self._targeted(MgmtMethod.START_CANISTER, canister_id)

    def stop_canister(self, canister_id: Any) -> PreparedCall:
        """Stop a canister."""
        return self._targeted(MgmtMethod.STOP_CANISTER, canister_id)

    def uninstall_code(self, canister_id: Any) -> PreparedCall:
        """Remove a canister's code and state."""
        return self._targeted(MgmtMethod.UNINSTALL_CODE, canister_id)

    def install_code(self, canister_id: Any, wasm: bytes) -> InstallCodeBuilder:
        """Start building an install_code call."""
        return InstallCodeBuilder(
            canister_id=canister_id,
            wasm=bytes(wasm),
            encoder=self.encoder,
            management_id=self.canister_id,
        )

    def update_settings(self, canister_id: Any) -> UpdateCanisterBuilder:
        """Start building an update_settings call."""
        return UpdateCanisterBuilder(
            canister_id,
            encoder=self.encoder,
            decoder=self.decoder,
            management_id=self.canister_id,
            principal_converter=self.principal_converter,
        )