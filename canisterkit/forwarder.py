"""Forwarding a canister call, with cycles attached, through the cycles wallet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from canisterkit.calls import (
    AgentError,
    Argument,
    CallKind,
    CandidError,
    Decoder,
    Encoder,
    MessageError,
    PreparedCall,
    WalletCallFailed,
    WalletUpgradeRequired,
)
from canisterkit.wallet_types import CallResult

_MAX_U64 = (1 << 64) - 1
_MAX_U128 = (1 << 128) - 1


def _first(result: Any) -> Any:
    if isinstance(result, (tuple, list)):
        if not result:
            raise CandidError("reply holds no values")
        return result[0]
    return result


def _result_variant(value: Any) -> tuple:
    if isinstance(value, Mapping) and len(value) == 1:
        ((tag, payload),) = value.items()
        if tag in ("Ok", "Err"):
            return tag, payload
    raise CandidError("reply is not an Ok/Err variant")


@dataclass
class CallForwarder:
    """A call to ``destination`` that the wallet makes on the caller's behalf.

    The wallet's reply is decoded with ``decoder``; the forwarded method's
    return blob is decoded with ``out_decoder`` (left as bytes when absent).
    """

    wallet_id: Any
    destination: Any
    method_name: str
    amount: int
    u128: bool = True
    arg: Argument = field(default_factory=Argument)
    encoder: Optional[Encoder] = None
    decoder: Optional[Decoder] = None
    out_decoder: Optional[Decoder] = None

    def with_arg(self, arg: Any) -> "CallForwarder":
        """Set the argument to one Candid value. Can be called at most once."""
        self.arg.set_idl_arg(arg)
        return self

    def with_args(self, *args: Any) -> "CallForwarder":
        """Set the argument to several Candid values. Can be called at most once."""
        self.arg.set_idl_arg(*args)
        return self

    def with_arg_raw(self, arg: bytes) -> "CallForwarder":
        """Set the argument to already-encoded bytes. Can be called at most once."""
        self.arg.set_raw_arg(arg)
        return self

    def _unwrap(self, result: Any) -> Any:
        tag, payload = _result_variant(_first(result))
        if tag == "Err":
            raise WalletCallFailed(str(payload))
        blob = CallResult.from_value(payload).return_
        if self.out_decoder is None:
            return blob
        try:
            return self.out_decoder(blob)
        except AgentError:
            raise
        except Exception as exc:
            raise CandidError(f"failed to decode forwarded reply: {exc}") from exc

    def build(self) -> PreparedCall:
        """Prepare the wallet_call (or wallet_call128) update."""
        if self.encoder is None:
            raise MessageError("no Candid encoder available to build the call")
        amount = self.amount
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise MessageError("the cycle amount must be an integer")
        if amount < 0 or amount > _MAX_U128:
            raise MessageError(f"the cycle amount must fit in 128 bits, got {amount}")
        args = self.arg.serialize(self.encoder)
        if self.u128:
            method = "wallet_call128"
        else:
            if amount > _MAX_U64:
                raise WalletUpgradeRequired(
                    "The installed wallet does not support cycle counts >2^64-1"
                )
            method = "wallet_call"
        payload = {
            "canister": self.destination,
            "method_name": self.method_name,
            "args": args,
            "cycles": amount,
        }
        return PreparedCall(
            kind=CallKind.UPDATE,
            canister_id=self.wallet_id,
            method_name=method,
            arg=Argument.from_values(payload).serialize(self.encoder),
            decoder=self.decoder,
        ).map(self._unwrap)

    async def call(self, executor) -> Any:
        """Submit the forwarded call and return its request id."""
        return await self.build().call(executor)

    async def call_and_wait(self, executor) -> Any:
        """Submit the forwarded call, wait for it and return the decoded result."""
        return await self.build().call_and_wait(executor)