# canisterkit

canisterkit prepares calls to the management canister and to the cycles wallet
canister. It also holds the data models that those calls return. Candid encoding and
decoding come from you, as do the network transport. You supply an encoder, which is a
callable that turns a tuple of values into bytes. You may also supply a decoder, which
turns reply bytes into values, and you supply an `Executor` that sends calls. canisterkit
decides which method is called, builds the argument, picks the effective canister id
and turns the reply into Python objects.

## Installation

```
pip install canisterkit
```

To run the tests:

```
pip install "canisterkit[test]"
pytest
```

## Modules

- `canisterkit.calls` holds the call machinery.
  - `Argument` holds Candid values or raw bytes. Either one can be set only once.
  - `PreparedCall` is a call that is ready to send. `map` adds a transform that runs
    on the decoded reply, `decode` turns reply bytes into the result, and
    `call` / `call_and_wait` hand the call to an executor.
  - `Executor` is the abstract interface you implement. Its `call` returns a request
    id and its `call_and_wait` returns the raw reply bytes.
  - `CallKind` marks a call as a query or an update. `RejectCode` lists the replica's
    reject codes.
  - `AgentError` is the base of every error here. Its subclasses are `MessageError`,
    `WalletUpgradeRequired`, `WalletError`, `WalletCallFailed`, `CandidError` and
    `ReplicaError`.
- `canisterkit.attributes` holds checked numeric settings. Each is a frozen dataclass
  that supports `int()`, and each raises its own error, a `ValueError` subclass, when the
  value is out of range:
  - `ComputeAllocation`, from 0 to 100.
  - `MemoryAllocation`, from 0 to 2^48.
  - `FreezingThreshold`, from 0 to 2^64-1.
  - `ReservedCyclesLimit`, from 0 to 2^128-1.
- `canisterkit.certheader` handles the `IC-Certificate` header.
  - `parse_structured_cert_header` splits the header into its `certificate` and `tree`
    fields.
  - `parse_base64_cbor` decodes one of those fields.
  - Both raise `CertHeaderError` on malformed input.
- `canisterkit.status` holds `MgmtMethod`, `CanisterStatus`, `QueryStats`,
  `DefiniteCanisterSettings`, `StatusCallResult`, and `parse_status_call_result`, which
  builds a `StatusCallResult` from a decoded record.
- `canisterkit.install` holds `CanisterSettings`, `InstallMode`, `parse_install_mode`,
  `CanisterInstall` and `InstallCodeBuilder`.
- `canisterkit.builders` holds `CreateCanisterBuilder`, which can also do provisional
  creation with an amount or a specified id, and `UpdateCanisterBuilder`. An invalid
  setting is stored when you set it and raised as a `MessageError` when `build()` is
  called.
- `canisterkit.management` holds `ManagementCanister`. It has one method per
  management call: `canister_status`, `create_canister`, `deposit_cycles`,
  `delete_canister`, `provisional_top_up_canister`, `raw_rand`, `start_canister`,
  `stop_canister`, `uninstall_code`, `install_code` and `update_settings`.
- `canisterkit.wallet_types` holds the wallet's records: `AddressEntry`,
  `ManagedCanisterInfo`, `Event` with its kinds, `ManagedCanisterEvent` with its kinds,
  `BalanceResult`, `CreateResult`, `CallResult` and `CanisterSettingsV1`. It also has
  the parsers `parse_event`, `parse_managed_canister_event`, `parse_address_entry` and
  `parse_managed_canister_info`.
- `canisterkit.forwarder` holds `CallForwarder`, which forwards a call through the
  wallet with cycles attached.
  - It uses `wallet_call128` when `u128` is true, and `wallet_call` when it is false.
  - With `wallet_call`, an amount above 2^64-1 raises `WalletUpgradeRequired`.
  - An `Err` reply from the wallet raises `WalletCallFailed`.

## Examples

```python
from canisterkit.attributes import ComputeAllocation, ComputeAllocationError

int(ComputeAllocation(50))   # 50
ComputeAllocation(101)       # raises ComputeAllocationError
```

```python
from canisterkit.certheader import parse_structured_cert_header

header = parse_structured_cert_header("certificate=:abcdef:, tree=:010203:")
header.certificate   # "abcdef"
header.tree          # "010203"
```

```python
from canisterkit.management import ManagementCanister

mgmt = ManagementCanister(encoder=my_encoder, decoder=my_decoder)
prepared = mgmt.start_canister("rrkah-fqaaa-aaaaa-aaaaq-cai")
prepared.method_name             # "start_canister"
prepared.effective_canister_id   # "rrkah-fqaaa-aaaaa-aaaaq-cai"
await prepared.call_and_wait(my_executor)
```

## What it does not do

- It has no Candid encoder or decoder, and no network transport. You provide these.
- It has no command-line tool.
- It has no higher-level wallet object. Nothing here asks a wallet for its version and
  then chooses between the 64-bit and 128-bit wallet methods. `CallForwarder` takes
  that choice as its `u128` flag. The other wallet records can only be parsed from
  replies that you have already decoded.