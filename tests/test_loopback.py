"""Tests for the in-process loopback runtime."""

from __future__ import annotations

from decimal import Decimal

import pytest

from rfcbind import (
    ABAPApplicationError,
    ABAPRuntimeError,
    Direction,
    ExternalError,
    FunctionDescription,
    LoopbackRuntime,
    ParameterDescription,
    RfcType,
)
from rfcbind import errors
from rfcbind.loopback import MemoryFunctionContainer, MemoryTable, _parse_default, abap_exception

from .conftest import ITEM, NAME_COUNT

DEFAULTS = FunctionDescription(
    "Z_DEFAULTS",
    [
        ParameterDescription("FLAG", RfcType.CHAR, Direction.IMPORT, 1, 2, default_value="'X'", optional=True),
        ParameterDescription("BLANK", RfcType.CHAR, Direction.IMPORT, 1, 2, default_value="SPACE", optional=True),
        ParameterDescription("ROWS", RfcType.INT, Direction.IMPORT, 4, 4, default_value="10", optional=True),
        ParameterDescription("TODAY", RfcType.DATE, Direction.IMPORT, 8, 16, default_value="SY-DATUM", optional=True),
        ParameterDescription("ECHO", RfcType.STRING, Direction.EXPORT, 8, 8),
    ],
)


def _echo_defaults(params):
    return {"ECHO": "%(FLAG)s|%(BLANK)s|%(ROWS)d|%(TODAY)s" % params}


@pytest.mark.parametrize(
    ("default", "parsed"),
    [("'X'", "X"), ("SPACE", ""), ("10", "10"), ("SY-DATUM", None), ("  'AB' ", "AB")],
)
def test_parse_default(default: str, parsed) -> None:
    assert _parse_default(default) == parsed


def test_defaults_apply_to_unsupplied_imports(runtime: LoopbackRuntime) -> None:
    runtime.register(DEFAULTS, _echo_defaults)
    session = runtime.open_connection({"dest": "LOOP"})
    container = runtime.create_function(session, DEFAULTS)

    runtime.invoke(session, container)

    assert container.get_field("ECHO", RfcType.STRING) == "X| |10|00000000"


def test_supplied_values_win_over_defaults(runtime: LoopbackRuntime) -> None:
    runtime.register(DEFAULTS, _echo_defaults)
    session = runtime.open_connection({})
    container = runtime.create_function(session, DEFAULTS)
    container.set_field("FLAG", RfcType.CHAR, "-")

    runtime.invoke(session, container)

    assert container.get_field("ECHO", RfcType.STRING).startswith("-|")


def test_handler_without_outputs(runtime: LoopbackRuntime) -> None:
    runtime.register(FunctionDescription("Z_NOOP"))
    session = runtime.open_connection({})

    runtime.invoke(session, runtime.create_function(session, FunctionDescription("Z_NOOP")))

    assert runtime.invocations == ["Z_NOOP"]


def test_unknown_function_module(runtime: LoopbackRuntime) -> None:
    session = runtime.open_connection({})

    with pytest.raises(ABAPApplicationError) as excinfo:
        runtime.get_function_description(session, "Z_UNKNOWN")

    info = excinfo.value.error_info
    assert info.key == "FU_NOT_FOUND"
    assert (info.abap_msg_class, info.abap_msg_type, info.abap_msg_number) == ("FL", "E", "046")


def test_handler_returning_import_parameter(runtime: LoopbackRuntime) -> None:
    runtime.register(NAME_COUNT, lambda params: {"NAME": "changed"})
    session = runtime.open_connection({})
    container = runtime.create_function(session, NAME_COUNT)

    with pytest.raises(ABAPRuntimeError) as excinfo:
        runtime.invoke(session, container)

    assert excinfo.value.key == "CALL_FUNCTION_PARM_UNKNOWN"


def test_handler_returning_bad_value(runtime: LoopbackRuntime) -> None:
    runtime.register(NAME_COUNT, lambda params: {"COUNT": "three"})
    session = runtime.open_connection({})
    container = runtime.create_function(session, NAME_COUNT)

    with pytest.raises(ABAPRuntimeError) as excinfo:
        runtime.invoke(session, container)

    assert excinfo.value.key == "CONVT_NO_NUMBER"
    assert "three" in excinfo.value.message


def test_abap_exception_builder() -> None:
    error = abap_exception("NOT_FOUND", "Order 4711 not found", msg_class="ZSD", msg_number="001", v1="4711")

    assert isinstance(error, ABAPApplicationError)
    assert error.code == errors.RFC_ABAP_EXCEPTION
    assert error.error_info.abap_msg_type == "E"
    assert error.error_info.abap_msg_v1 == "4711"
    assert abap_exception("NO_DATA").message == "NO_DATA"
    assert abap_exception("NO_DATA").error_info.abap_msg_type == ""


def test_closed_handle_is_invalid(runtime: LoopbackRuntime) -> None:
    session = runtime.open_connection({})
    runtime.close_connection(session)

    with pytest.raises(ExternalError) as excinfo:
        runtime.ping(session)

    assert excinfo.value.code == errors.RFC_INVALID_HANDLE


def test_attributes_are_padded(runtime: LoopbackRuntime) -> None:
    session = runtime.open_connection({"DEST": "LOOP", "client": "100", "lang": "de"})

    attributes = runtime.get_connection_attributes(session)

    assert attributes["dest"] == "LOOP".ljust(64)
    assert attributes["client"] == "100"
    assert attributes["isoLanguage"] == "DE"
    assert attributes["cpicConvId"] == "%08d" % session.id


def test_extra_attributes_override() -> None:
    runtime = LoopbackRuntime(attributes={"sysId": "QAS"}, version=(7, 53, 1))
    session = runtime.open_connection({})

    assert runtime.get_connection_attributes(session)["sysId"] == "QAS"
    assert runtime.version() == (7, 53, 1)


def test_container_slots_are_typed() -> None:
    container = MemoryFunctionContainer(NAME_COUNT)

    with pytest.raises(ExternalError) as excinfo:
        container.get_field("COUNT", RfcType.CHAR)
    assert excinfo.value.key == "RFC_CONVERSION_FAILURE"

    with pytest.raises(ExternalError) as excinfo:
        container.set_field("MISSING", RfcType.CHAR, "x")
    assert excinfo.value.key == "RFC_INVALID_PARAMETER"


def test_table_rows() -> None:
    table = MemoryTable("ITEMS", ITEM)
    row = table.append_row()
    row.set_field("QUANTITY", RfcType.BCD, Decimal("1.000"))

    assert len(table) == 1
    assert table.row(0) is row
    with pytest.raises(ExternalError) as excinfo:
        table.row(1)
    assert excinfo.value.key == "RFC_TABLE_MOVE_EOF"

    table.clear()
    assert len(table) == 0
