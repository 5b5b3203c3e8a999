"""Building blocks for canister calls: arguments, prepared calls, executors and errors."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Tuple

Encoder = Callable[[tuple], bytes]
Decoder = Callable[[bytes], Any]


class CallKind(enum.Enum):
    """Whether a call is a query or an update."""

    QUERY = "query"
    UPDATE = "update"


class RejectCode(enum.IntEnum):
    """Reject codes a replica attaches to a rejected call."""

    SYS_FATAL = 1
    SYS_TRANSIENT = 2
    DESTINATION_INVALID = 3
    CANISTER_REJECT = 4
    CANISTER_ERROR = 5


class AgentError(Exception):
    """Base class of every error raised while preparing or making a call."""


class MessageError(AgentError):
    """A call could not be prepared from the values given."""


class WalletUpgradeRequired(AgentError):
    """The installed wallet is too old for the requested operation."""


class WalletError(AgentError):
    """The wallet canister reported an error."""


class WalletCallFailed(AgentError):
    """A call forwarded through the wallet failed."""


class CandidError(AgentError):
    """A Candid value could not be encoded or decoded."""


class ReplicaError(AgentError):
    """The replica rejected a call."""

    def __init__(
        self,
        reject_code: int,
        reject_message: str,
        error_code: Optional[str] = None,
    ) -> None:
        self.reject_code = RejectCode(reject_code)
        self.reject_message = reject_message
        self.error_code = error_code
        super().__init__(
            f"The replica returned a rejection error: reject code {self.reject_code.name}, "
            f'reject message "{reject_message}", error code {error_code or ""}'
        )


class Argument:
    """The argument of a call: Candid values, raw bytes, or nothing yet.

    Either form may be set at most once.
    """

    __slots__ = ("_values", "_raw")

    def __init__(self) -> None:
        self._values: Optional[tuple] = None
        self._raw: Optional[bytes] = None

    @classmethod
    def from_values(cls, *args: Any) -> "Argument":
        """Create an argument holding the given Candid values."""
        argument = cls()
        argument.set_idl_arg(*args)
        return argument

    @classmethod
    def from_raw(cls, raw: bytes) -> "Argument":
        """Create an argument holding already-encoded bytes."""
        argument = cls()
        argument.set_raw_arg(raw)
        return argument

    def _ensure_unset(self) -> None:
        if self.is_set():
            raise ValueError("argument is being set more than once")

    def set_idl_arg(self, *args: Any) -> None:
        """Set the argument to one or more Candid values."""
        self._ensure_unset()
        self._values = tuple(args)

    def set_raw_arg(self, raw: bytes) -> None:
        """Set the argument to already-encoded bytes."""
        self._ensure_unset()
        self._raw = bytes(raw)

    def is_set(self) -> bool:
        """Whether either form of the argument has been set."""
        return self._values is not None or self._raw is not None

    def serialize(self, encoder: Encoder) -> bytes:
        """Encode the argument; an unset argument encodes as an empty value list."""
        if self._raw is not None:
            return self._raw
        values = self._values if self._values is not None else ()
        try:
            return bytes(encoder(values))
        except AgentError:
            raise
        except Exception as exc:
            raise CandidError(f"failed to encode argument: {exc}") from exc

    def __repr__(self) -> str:
        if self._raw is not None:
            return f"Argument(raw={self._raw!r})"
        if self._values is not None:
            return f"Argument(values={self._values!r})"
        return "Argument()"


@dataclass(frozen=True)
class PreparedCall:
    """A fully described call, ready to be handed to an executor."""

    kind: CallKind
    canister_id: Any
    method_name: str
    arg: bytes = b""
    effective_canister_id: Any = None
    decoder: Optional[Decoder] = None
    transforms: Tuple[Callable[[Any], Any], ...] = ()

    def __post_init__(self) -> None:
        if self.effective_canister_id is None:
            object.__setattr__(self, "effective_canister_id", self.canister_id)

    def map(self, func: Callable[[Any], Any]) -> "PreparedCall":
        """Return a call whose decoded result is passed through ``func``."""
        return replace(self, transforms=self.transforms + (func,))

    def decode(self, reply: bytes) -> Any:
        """Turn raw reply bytes into the call's result."""
        result: Any = reply
        if self.decoder is not None:
            try:
                result = self.decoder(reply)
            except AgentError:
                raise
            except Exception as exc:
                raise CandidError(f"failed to decode reply: {exc}") from exc
        for transform in self.transforms:
            result = transform(result)
        return result

    async def call(self, executor: "Executor") -> Any:
        """Submit the call and return its request id."""
        return await executor.call(self)

    async def call_and_wait(self, executor: "Executor") -> Any:
        """Submit the call, wait for the reply and decode it."""
        reply = await executor.call_and_wait(self)
        return self.decode(reply)


class Executor(ABC):
    """Sends prepared calls to the network."""

    @abstractmethod
    async def call(self, prepared: PreparedCall) -> Any:
        """Submit a call and return its request id."""

    @abstractmethod
    async def call_and_wait(self, prepared: PreparedCall) -> bytes:
        """Submit a call and return the raw reply bytes."""