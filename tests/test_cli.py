"""Tests for the command line front end."""

from __future__ import annotations

import json

import pytest

from rfcbind import LoopbackRuntime
from rfcbind.__main__ import main, parse_params, typed_params

from .conftest import NAME_COUNT


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COLUMNS", "200")


def test_parse_params() -> None:
    assert parse_params(["NAME=ABC", "ROWCOUNT=5", "DELIMITER=|", "EXPR=A=B"]) == {
        "NAME": "ABC", "ROWCOUNT": "5", "DELIMITER": "|", "EXPR": "A=B",
    }
    with pytest.raises(ValueError):
        parse_params(["NAME"])


def test_values_are_typed_by_declared_parameter_type() -> None:
    params = {"NAME": "123", "COUNT": "4", "OTHER": "7"}

    assert typed_params(NAME_COUNT, params) == {"NAME": "123", "COUNT": 4, "OTHER": "7"}


def test_digit_only_char_value(runtime: LoopbackRuntime, capsys: pytest.CaptureFixture) -> None:
    rc = main(["--dest", "LOOP", "--func", "Z_NAME_COUNT", "--param", "NAME=123",
               "--return-import-params"], runtime=runtime)

    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {"NAME": "123", "COUNT": 3}


def test_call_prints_json(runtime: LoopbackRuntime, capsys: pytest.CaptureFixture) -> None:
    rc = main(["--dest", "LOOP", "--func", "Z_NAME_COUNT", "--param", "NAME=ABC"], runtime=runtime)

    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {"COUNT": 3}


def test_call_serializes_decimals(runtime: LoopbackRuntime, capsys: pytest.CaptureFixture) -> None:
    rc = main(["--host", "sap01", "--user", "u", "--password", "p",
               "--func", "Z_ORDER_SIMULATE", "--param", "ORDER_TYPE=OR"], runtime=runtime)

    result = json.loads(capsys.readouterr().out)
    assert rc == 0
    assert result["TOTAL"] == "0.00"
    assert result["USED_CHANNEL"] == "10"


def test_return_import_params(runtime: LoopbackRuntime, capsys: pytest.CaptureFixture) -> None:
    main(["--dest", "LOOP", "--func", "Z_NAME_COUNT", "--param", "NAME=ABC",
          "--return-import-params", "--no-rstrip"], runtime=runtime)

    assert json.loads(capsys.readouterr().out) == {"NAME": "ABC       ", "COUNT": 3}


def test_describe(runtime: LoopbackRuntime, capsys: pytest.CaptureFixture) -> None:
    rc = main(["--dest", "LOOP", "--func", "Z_ORDER_SIMULATE", "--describe"], runtime=runtime)

    out = capsys.readouterr().out
    assert rc == 0
    assert "Function Z_ORDER_SIMULATE" in out
    assert "ITEMS" in out
    assert "TABLE ZITEM" in out
    assert runtime.invocations == []


def test_rfc_error_exit_code(runtime: LoopbackRuntime, capsys: pytest.CaptureFixture) -> None:
    rc = main(["--dest", "LOOP", "--func", "Z_MISSING"], runtime=runtime)

    out = capsys.readouterr().out
    assert rc == 1
    assert "RFC Error:" in out
    assert "Key: FU_NOT_FOUND" in out


def test_binding_error_exit_code(runtime: LoopbackRuntime, capsys: pytest.CaptureFixture) -> None:
    rc = main(["--dest", "LOOP", "--func", "Z_NAME_COUNT"], runtime=runtime)

    assert rc == 1
    assert "Required parameter NAME" in capsys.readouterr().out


def test_sdk_version(runtime: LoopbackRuntime, capsys: pytest.CaptureFixture) -> None:
    assert main(["--sdk-version"], runtime=runtime) == 0
    assert "SAP NW RFC SDK version: 7.50.0" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        ["--dest", "LOOP"],
        ["--func", "Z_NAME_COUNT"],
        ["--host", "sap01", "--func", "Z_NAME_COUNT"],
        ["--dest", "LOOP", "--func", "Z_NAME_COUNT", "--param", "NAME"],
    ],
)
def test_usage_errors(runtime: LoopbackRuntime, argv: list) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(argv, runtime=runtime)

    assert excinfo.value.code == 2
