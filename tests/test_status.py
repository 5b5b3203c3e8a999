import pytest

from canisterkit.calls import CandidError
from canisterkit.status import (
    CanisterStatus,
    MgmtMethod,
    StatusCallResult,
    parse_status_call_result,
)


def _record(**overrides):
    record = {
        "status": {"running": None},
        "settings": {
            "controllers": ["ctrl-a", "ctrl-b"],
            "compute_allocation": 10,
            "memory_allocation": 2048,
            "freezing_threshold": 2592000,
            "reserved_cycles_limit": 5,
        },
        "module_hash": b"\x01\x02",
        "memory_size": 100,
        "cycles": 7,
        "reserved_cycles": 3,
        "idle_cycles_burned_per_day": 9,
        "query_stats": {
            "num_calls_total": 1,
            "num_instructions_total": 2,
            "request_payload_bytes_total": 3,
            "response_payload_bytes_total": 4,
        },
    }
    record.update(overrides)
    return record


def test_mgmt_method_parses_snake_case():
    assert MgmtMethod("install_code") is MgmtMethod.INSTALL_CODE
    assert (
        MgmtMethod("provisional_create_canister_with_cycles")
        is MgmtMethod.PROVISIONAL_CREATE_CANISTER_WITH_CYCLES
    )


def test_mgmt_method_rejects_unknown():
    with pytest.raises(ValueError):
        MgmtMethod("no_such_method")


def test_mgmt_method_str_is_wire_name():
    method = MgmtMethod("update_settings")
    assert str(method) == "update_settings"


def test_canister_status_display():
    running = parse_status_call_result(_record()).status
    stopped = parse_status_call_result(_record(status="stopped")).status
    assert str(running) == "Running"
    assert str(stopped) == "Stopped"
    assert stopped is CanisterStatus.STOPPED


def test_parse_full_record():
    result = parse_status_call_result(_record())
    assert result.status is CanisterStatus.RUNNING
    assert result.settings.controllers == ["ctrl-a", "ctrl-b"]
    assert result.settings.freezing_threshold == 2592000
    assert result.settings.reserved_cycles_limit == 5
    assert result.module_hash == b"\x01\x02"
    assert result.cycles == 7
    assert result.query_stats.response_payload_bytes_total == 4


def test_parse_accepts_plain_status_and_missing_options():
    record = _record(status="stopping", module_hash=None)
    del record["settings"]["reserved_cycles_limit"]
    result = parse_status_call_result(record)
    assert result.status is CanisterStatus.STOPPING
    assert result.module_hash is None
    assert result.settings.reserved_cycles_limit is None


def test_parse_missing_field_raises():
    record = _record()
    del record["cycles"]
    with pytest.raises(CandidError):
        parse_status_call_result(record)


def test_parse_unknown_status_raises():
    with pytest.raises(CandidError):
        parse_status_call_result(_record(status={"frozen": None}))


def test_parse_negative_nat_raises():
    with pytest.raises(CandidError):
        parse_status_call_result(_record(memory_size=-1))


def test_status_result_str_matches_repr():
    result = parse_status_call_result(_record())
    assert isinstance(result, StatusCallResult)
    assert str(result) == repr(result)
    assert "RUNNING" in str(result)