"""Canister settings, install modes and the install_code call builder."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from canisterkit.calls import Argument, CallKind, Encoder, MessageError, PreparedCall
from canisterkit.status import MANAGEMENT_CANISTER_ID, MgmtMethod


@dataclass
class CanisterSettings:
    """A set of optional canister settings; None leaves a setting unspecified."""

    controllers: Optional[List[Any]] = None
    compute_allocation: Optional[int] = None
    memory_allocation: Optional[int] = None
    freezing_threshold: Optional[int] = None
    reserved_cycles_limit: Optional[int] = None

    def to_value(self) -> Dict[str, Any]:
        """The settings as a Candid record, absent options as None."""
        return {
            "controllers": None if self.controllers is None else list(self.controllers),
            "compute_allocation": self.compute_allocation,
            "memory_allocation": self.memory_allocation,
            "freezing_threshold": self.freezing_threshold,
            "reserved_cycles_limit": self.reserved_cycles_limit,
        }


class InstallMode(enum.Enum):
    """How a module is installed into a canister."""

    INSTALL = "install"
    REINSTALL = "reinstall"
    UPGRADE = "upgrade"


def parse_install_mode(text: str) -> InstallMode:
    """Parse an install mode from its lower-case name."""
    try:
        return InstallMode(text)
    except ValueError:
        raise ValueError(f"Invalid install mode: {text}") from None


@dataclass(frozen=True)
class CanisterInstall:
    """A prepared argument of an install_code call."""

    mode: InstallMode
    canister_id: Any
    wasm_module: bytes
    arg: bytes = b""

    def to_value(self) -> Dict[str, Any]:
        """The record as a Candid value; the mode is a single-tag variant."""
        return {
            "mode": {self.mode.value: None},
            "canister_id": self.canister_id,
            "wasm_module": bytes(self.wasm_module),
            "arg": bytes(self.arg),
        }


@dataclass
class InstallCodeBuilder:
    """A builder for an install_code call."""

    canister_id: Any
    wasm: bytes
    encoder: Optional[Encoder] = None
    management_id: Any = MANAGEMENT_CANISTER_ID
    arg: Argument = field(default_factory=Argument)
    mode: Optional[InstallMode] = None

    def with_arg(self, arg: Any) -> "InstallCodeBuilder":
        """Set the init argument to one Candid value. Can be called at most once."""
        self.arg.set_idl_arg(arg)
        return self

    def with_args(self, *args: Any) -> "InstallCodeBuilder":
        """Set the init argument to several Candid values. Can be called at most once."""
        self.arg.set_idl_arg(*args)
        return self

    def with_raw_arg(self, arg: bytes) -> "InstallCodeBuilder":
        """Set the init argument to encoded bytes. Can be called at most once."""
        self.arg.set_raw_arg(arg)
        return self

    def with_mode(self, mode: Union[InstallMode, str]) -> "InstallCodeBuilder":
        """Choose the install mode."""
        self.mode = mode if isinstance(mode, InstallMode) else parse_install_mode(mode)
        return self

    def build(self, encoder: Optional[Encoder] = None) -> PreparedCall:
        """Prepare the install_code call."""
        encoder = encoder or self.encoder
        if encoder is None:
            raise MessageError("no Candid encoder available to build the call")
        install = CanisterInstall(
            mode=self.mode or InstallMode.INSTALL,
            canister_id=self.canister_id,
            wasm_module=bytes(self.wasm),
            arg=self.arg.serialize(encoder),
        )
        payload = Argument.from_values(install.to_value()).serialize(encoder)
        return PreparedCall(
            kind=CallKind.UPDATE,
            canister_id=self.management_id,
            method_name=MgmtMethod.INSTALL_CODE.value,
            arg=payload,
            effective_canister_id=self.canister_id,
            decoder=lambda _reply: None,
        )

    async def call(self, executor) -> Any:
        """Submit the call and return its request id."""
        return await self.build().call(executor)

    async def call_and_wait(self, executor) -> None:
        """Submit the call and wait for it to complete."""
        return await self.build().call_and_wait(executor)