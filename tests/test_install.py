import pytest

from canisterkit.calls import CallKind, Executor, MessageError
from canisterkit.install import (
    CanisterInstall,
    CanisterSettings,
    InstallCodeBuilder,
    InstallMode,
    parse_install_mode,
)
from canisterkit.status import MANAGEMENT_CANISTER_ID


class RecordingEncoder:
    def __init__(self):
        self.seen = []

    def __call__(self, values):
        self.seen.append(values)
        return b"E%d" % len(self.seen)


class FakeExecutor(Executor):
    def __init__(self):
        self.calls = []

    async def call(self, prepared):
        self.calls.append(prepared)
        return "request-1"

    async def call_and_wait(self, prepared):
        self.calls.append(prepared)
        return b"reply"


@pytest.mark.parametrize(
    "text,mode",
    [
        ("install", InstallMode.INSTALL),
        ("reinstall", InstallMode.REINSTALL),
        ("upgrade", InstallMode.UPGRADE),
    ],
)
def test_parse_install_mode(text, mode):
    assert parse_install_mode(text) is mode


def test_parse_install_mode_invalid():
    with pytest.raises(ValueError, match="Invalid install mode: foo"):
        parse_install_mode("foo")


def test_empty_settings_value():
    value = CanisterSettings().to_value()
    assert set(value) == {
        "controllers",
        "compute_allocation",
        "memory_allocation",
        "freezing_threshold",
        "reserved_cycles_limit",
    }
    assert all(v is None for v in value.values())


def test_settings_value_copies_controllers():
    controllers = ["a"]
    value = CanisterSettings(controllers=controllers, compute_allocation=5).to_value()
    controllers.append("b")
    assert value["controllers"] == ["a"]
    assert value["compute_allocation"] == 5


def test_canister_install_value():
    value = CanisterInstall(InstallMode.UPGRADE, "cid", b"wasm", b"arg").to_value()
    assert value == {
        "mode": {"upgrade": None},
        "canister_id": "cid",
        "wasm_module": b"wasm",
        "arg": b"arg",
    }


def test_build_default_mode_and_targets():
    encoder = RecordingEncoder()
    prepared = InstallCodeBuilder("cid", b"wasm").build(encoder)
    assert prepared.kind is CallKind.UPDATE
    assert prepared.method_name == "install_code"
    assert prepared.canister_id == MANAGEMENT_CANISTER_ID
    assert prepared.effective_canister_id == "cid"
    install_value = encoder.seen[-1][0]
    assert install_value["mode"] == {"install": None}
    assert encoder.seen[0] == ()
    assert install_value["arg"] == b"E1"
    assert prepared.arg == b"E2"


def test_build_with_arg_and_mode():
    encoder = RecordingEncoder()
    prepared = (
        InstallCodeBuilder("cid", b"wasm", encoder=encoder)
        .with_arg(42)
        .with_mode("reinstall")
        .build()
    )
    assert encoder.seen[0] == (42,)
    assert encoder.seen[1][0]["mode"] == {"reinstall": None}
    assert prepared.arg == b"E2"


def test_build_with_raw_arg_skips_encoding():
    encoder = RecordingEncoder()
    InstallCodeBuilder("cid", b"wasm").with_raw_arg(b"\x00\x01").build(encoder)
    assert len(encoder.seen) == 1
    assert encoder.seen[0][0]["arg"] == b"\x00\x01"


def test_with_args_passes_all_values():
    encoder = RecordingEncoder()
    InstallCodeBuilder("cid", b"wasm").with_args(1, "two").build(encoder)
    assert encoder.seen[0] == (1, "two")


def test_argument_set_twice_raises():
    builder = InstallCodeBuilder("cid", b"wasm").with_arg(1)
    with pytest.raises(ValueError):
        builder.with_raw_arg(b"x")
    with pytest.raises(ValueError):
        builder.with_args(1, 2)


def test_build_without_encoder_raises():
    with pytest.raises(MessageError):
        InstallCodeBuilder("cid", b"wasm").build()


@pytest.mark.asyncio
async def test_call_and_wait_returns_none():
    executor = FakeExecutor()
    builder = InstallCodeBuilder("cid", b"wasm", encoder=RecordingEncoder())
    assert await builder.call_and_wait(executor) is None
    assert executor.calls[0].method_name == "install_code"


@pytest.mark.asyncio
async def test_call_returns_request_id():
    executor = FakeExecutor()
    builder = InstallCodeBuilder("cid", b"wasm", encoder=RecordingEncoder())
    assert await builder.call(executor) == "request-1"
    assert executor.calls[0].effective_canister_id == "cid"