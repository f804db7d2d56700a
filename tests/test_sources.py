"""Tests for parameter sources."""

from __future__ import annotations

from collections import OrderedDict, namedtuple
from dataclasses import dataclass

import pytest

from rfcbind import MISSING, ParameterShapeError
from rfcbind.sources import AttributeSource, MappingSource, ParameterSource, as_source


@dataclass
class Header:
    ORDER_TYPE: str
    SALES_ORG: str = "1000"


Item = namedtuple("Item", ["POSNR", "MATNR"])


class PlainParams:
    def __init__(self) -> None:
        self.NAME = "ABC"
        self._private = "hidden"


def test_mapping_source_keeps_caller_order() -> None:
    source = as_source(OrderedDict([("B", 1), ("A", 2)]))

    assert isinstance(source, MappingSource)
    assert source.names() == ["B", "A"]
    assert source.value_for("A") == 2
    assert source.value_for("C") is MISSING


def test_mapping_source_rejects_non_string_keys() -> None:
    with pytest.raises(ParameterShapeError):
        as_source({1: "x"})


def test_dataclass_source() -> None:
    source = as_source(Header(ORDER_TYPE="OR"))

    assert isinstance(source, AttributeSource)
    assert source.names() == ["ORDER_TYPE", "SALES_ORG"]
    assert source.value_for("SALES_ORG") == "1000"
    assert source.value_for("UNKNOWN") is MISSING


def test_namedtuple_source() -> None:
    source = as_source(Item(10, "MAT-1"))

    assert source.names() == ["POSNR", "MATNR"]
    assert source.value_for("MATNR") == "MAT-1"


def test_plain_object_source_skips_private_attributes() -> None:
    source = as_source(PlainParams())

    assert source.names() == ["NAME"]


def test_none_means_no_parameters() -> None:
    assert list(as_source(None).names()) == []


def test_existing_source_is_passed_through() -> None:
    source = MappingSource({"A": 1})

    assert as_source(source) is source
    assert isinstance(source, ParameterSource)


@pytest.mark.parametrize("value", ["text", b"raw", 42, 1.5, [1, 2], Header])
def test_values_without_named_fields_are_rejected(value) -> None:
    with pytest.raises(ParameterShapeError):
        as_source(value)


def test_missing_is_falsy() -> None:
    assert not MISSING
    assert repr(MISSING) == "MISSING"
