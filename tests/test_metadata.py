"""Tests for the metadata model."""

from __future__ import annotations

import dataclasses

import pytest

from rfcbind import Direction, FieldDescription, ParameterDescription, RfcType

from .conftest import ADDRESS, NAME_COUNT, ORDER_SIMULATE


def test_type_codes_match_sdk_numbering() -> None:
    assert RfcType.CHAR == 0
    assert RfcType.TABLE == 5
    assert RfcType.STRUCTURE == 17
    assert RfcType.STRING == 29
    assert RfcType.UTCLONG == 32
    assert str(RfcType.BCD) == "RFCTYPE_BCD"


def test_directions() -> None:
    assert [d.is_input for d in Direction] == [True, False, True, True]
    assert [d.is_output for d in Direction] == [False, True, True, True]
    assert str(Direction.TABLES) == "RFC_TABLES"


@pytest.mark.parametrize(
    ("direction", "optional", "required"),
    [
        (Direction.IMPORT, False, True),
        (Direction.IMPORT, True, False),
        (Direction.CHANGING, False, True),
        (Direction.EXPORT, False, False),
        (Direction.TABLES, False, False),
    ],
)
def test_required_parameters(direction: Direction, optional: bool, required: bool) -> None:
    param = ParameterDescription("P", RfcType.CHAR, direction, 1, 2, optional=optional)

    assert param.required is required


def test_function_description_lookup_is_exact() -> None:
    assert ORDER_SIMULATE.parameter("ITEMS").parameter_type == RfcType.TABLE
    assert ORDER_SIMULATE.parameter("items") is None
    assert "TOTAL" in ORDER_SIMULATE
    assert len(NAME_COUNT) == 2
    assert [p.name for p in NAME_COUNT] == ["NAME", "COUNT"]


def test_result_parameters() -> None:
    outputs = [p.name for p in ORDER_SIMULATE.result_parameters()]
    everything = [p.name for p in ORDER_SIMULATE.result_parameters(return_import_params=True)]

    assert outputs == ["ITEMS", "COMMENT", "TOTAL", "ITEM_COUNT", "USED_CHANNEL", "RETURN"]
    assert everything == [p.name for p in ORDER_SIMULATE.parameters]


def test_type_description_fields() -> None:
    assert ADDRESS.get_field("ZIP").field_type == RfcType.NUM
    assert ADDRESS.get_field("COUNTRY") is None
    assert [f.name for f in ADDRESS] == ["CITY", "ZIP", "STREET"]
    assert isinstance(ADDRESS.fields, tuple)


def test_descriptions_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        NAME_COUNT.name = "OTHER"
    with pytest.raises(dataclasses.FrozenInstanceError):
        ADDRESS.get_field("CITY").nuc_length = 99


def test_str_formats() -> None:
    field_desc = FieldDescription("CITY", RfcType.CHAR, 20, 0, 40, 0)

    assert str(field_desc) == (
        "fieldDesc(name= CITY, fieldType= RFCTYPE_CHAR, nucLen= 20, nucOff= 0, "
        "ucLen= 40, ucOff= 0, dec= 0)"
    )
    assert str(ADDRESS) == "typeDesc(name= ZADDRESS, nucLen= 45, ucLen= 90, fields= 3)"
    assert str(NAME_COUNT).startswith("FunctionDescription:\n Name: Z_NAME_COUNT\n Parameters:\n")
    assert "paramDesc(name= NAME, paramType= RFCTYPE_CHAR, dir= RFC_IMPORT" in str(NAME_COUNT)
