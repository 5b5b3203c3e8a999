import pytest

from canisterkit.calls import CandidError
from canisterkit.wallet_types import (
    AddressAdded,
    AddressEntry,
    AddressRemoved,
    BalanceResult,
    CallResult,
    Called,
    CanisterCalled,
    CanisterCreated,
    CanisterSettingsV1,
    Created,
    CreateResult,
    CyclesReceived,
    CyclesSent,
    Kind,
    ManagedCyclesSent,
    Role,
    parse_address_entry,
    parse_event,
    parse_managed_canister_event,
    parse_managed_canister_info,
)


def test_parse_cycles_received_event():
    event = parse_event(
        {
            "id": 3,
            "timestamp": 1000,
            "kind": {"CyclesReceived": {"from": "sender", "amount": 42, "memo": "hi"}},
        }
    )
    assert event.id == 3
    assert event.timestamp == 1000
    assert event.kind == CyclesReceived(from_="sender", amount=42, memo="hi")


@pytest.mark.parametrize(
    "kind, expected",
    [
        ({"CyclesSent": {"to": "x", "amount": 5, "refund": 1}}, CyclesSent("x", 5, 1)),
        ({"AddressRemoved": {"id": "x"}}, AddressRemoved("x")),
        ({"CanisterCreated": {"canister": "c", "cycles": 7}}, CanisterCreated("c", 7)),
        (
            {"CanisterCalled": {"canister": "c", "method_name": "m", "cycles": 2}},
            CanisterCalled("c", "m", 2),
        ),
        (
            {"AddressAdded": {"id": "a", "name": None, "role": {"Custodian": None}}},
            AddressAdded("a", None, Role.CUSTODIAN),
        ),
    ],
)
def test_parse_event_kinds(kind, expected):
    assert parse_event({"id": 0, "timestamp": 0, "kind": kind}).kind == expected


def test_event_accepts_128_bit_amounts():
    big = (1 << 100) + 1
    event = parse_event(
        {"id": 1, "timestamp": 2, "kind": {"CanisterCreated": {"canister": "c", "cycles": big}}}
    )
    assert event.kind.cycles == big


def test_event_id_must_fit_u32():
    with pytest.raises(CandidError):
        parse_event(
            {"id": 1 << 32, "timestamp": 0, "kind": {"AddressRemoved": {"id": "x"}}}
        )


def test_unknown_event_kind():
    with pytest.raises(CandidError):
        parse_event({"id": 0, "timestamp": 0, "kind": {"Nope": {}}})


def test_missing_field():
    with pytest.raises(CandidError):
        parse_event({"id": 0, "kind": {"AddressRemoved": {"id": "x"}}})


@pytest.mark.parametrize(
    "kind, expected",
    [
        ({"CyclesSent": {"amount": 9, "refund": 0}}, ManagedCyclesSent(9, 0)),
        ({"Called": {"method_name": "go", "cycles": 4}}, Called("go", 4)),
        ({"Created": {"cycles": 11}}, Created(11)),
    ],
)
def test_parse_managed_canister_event(kind, expected):
    event = parse_managed_canister_event({"id": 2, "timestamp": 5, "kind": kind})
    assert event.kind == expected
    assert event.id == 2


def test_address_entry_round_trip():
    entry = AddressEntry(id="p", name="friend", kind=Kind.CANISTER, role=Role.CONTROLLER)
    assert parse_address_entry(entry.to_value()) == entry


def test_address_entry_accepts_plain_tags():
    entry = parse_address_entry({"id": "p", "name": None, "kind": "User", "role": "Contact"})
    assert entry.kind is Kind.USER
    assert entry.role is Role.CONTACT


def test_address_entry_rejects_unknown_role():
    with pytest.raises(CandidError):
        parse_address_entry({"id": "p", "name": None, "kind": "User", "role": "Boss"})


def test_managed_canister_info():
    info = parse_managed_canister_info({"id": "c", "name": None, "created_at": 77})
    assert info.id == "c"
    assert info.name is None
    assert info.created_at == 77


def test_settings_v1_to_value():
    settings = CanisterSettingsV1(controller="ctrl", compute_allocation=10)
    assert settings.to_value() == {
        "controller": "ctrl",
        "compute_allocation": 10,
        "memory_allocation": None,
        "freezing_threshold": None,
    }


def test_result_records():
    assert BalanceResult.from_value({"amount": 123}).amount == 123
    assert CreateResult.from_value({"canister_id": "new"}).canister_id == "new"
    assert CallResult.from_value({"return": b"\x01"}).return_ == b"\x01"
    with pytest.raises(CandidError):
        BalanceResult.from_value({"amount": -1})