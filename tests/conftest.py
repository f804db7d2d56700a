"""Shared metadata and runtime fixtures."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator

import pytest

from rfcbind import (
    Connection,
    Direction,
    FieldDescription,
    FunctionDescription,
    LoopbackRuntime,
    ParameterDescription,
    RfcType,
    TypeDescription,
)

NAME_COUNT = FunctionDescription(
    "Z_NAME_COUNT",
    [
        ParameterDescription("NAME", RfcType.CHAR, Direction.IMPORT, nuc_length=10, uc_length=20),
        ParameterDescription("COUNT", RfcType.INT, Direction.EXPORT, nuc_length=4, uc_length=4),
    ],
)

ADDRESS = TypeDescription(
    "ZADDRESS",
    nuc_length=45,
    uc_length=90,
    fields=[
        FieldDescription("CITY", RfcType.CHAR, 20, 0, 40, 0),
        FieldDescription("ZIP", RfcType.NUM, 5, 20, 10, 40),
        FieldDescription("STREET", RfcType.CHAR, 20, 25, 40, 50),
    ],
)

PARTNER = TypeDescription(
    "ZPARTNER",
    nuc_length=55,
    uc_length=110,
    fields=[
        FieldDescription("PARTNER_ID", RfcType.CHAR, 10, 0, 20, 0),
        FieldDescription("ADDRESS", RfcType.STRUCTURE, 45, 10, 90, 20, type_description=ADDRESS),
    ],
)

ITEM = TypeDescription(
    "ZITEM",
    nuc_length=43,
    uc_length=80,
    fields=[
        FieldDescription("POSNR", RfcType.NUM, 6, 0, 12, 0),
        FieldDescription("MATNR", RfcType.CHAR, 18, 6, 36, 12),
        FieldDescription("QUANTITY", RfcType.BCD, 7, 24, 7, 48, decimals=3),
        FieldDescription("PRICE", RfcType.BCD, 6, 31, 6, 56, decimals=2),
        FieldDescription("DELIV_DATE", RfcType.DATE, 8, 37, 16, 64),
    ],
)

BAPIRET = TypeDescription(
    "ZBAPIRET",
    nuc_length=51,
    uc_length=102,
    fields=[
        FieldDescription("TYPE", RfcType.CHAR, 1, 0, 2, 0),
        FieldDescription("MESSAGE", RfcType.CHAR, 50, 1, 100, 2),
    ],
)

ORDER_SIMULATE = FunctionDescription(
    "Z_ORDER_SIMULATE",
    [
        ParameterDescription("ORDER_TYPE", RfcType.CHAR, Direction.IMPORT, nuc_length=4, uc_length=8),
        ParameterDescription(
            "PARTNER", RfcType.STRUCTURE, Direction.IMPORT, nuc_length=55, uc_length=110,
            optional=True, type_description=PARTNER,
        ),
        ParameterDescription(
            "CHANNEL", RfcType.CHAR, Direction.IMPORT, nuc_length=2, uc_length=4,
            default_value="'10'", optional=True,
        ),
        ParameterDescription(
            "ITEMS", RfcType.TABLE, Direction.TABLES, nuc_length=43, uc_length=80,
            type_description=ITEM,
        ),
        ParameterDescription("COMMENT", RfcType.STRING, Direction.CHANGING, nuc_length=8, uc_length=8, optional=True),
        ParameterDescription("TOTAL", RfcType.BCD, Direction.EXPORT, nuc_length=8, uc_length=8, decimals=2),
        ParameterDescription("ITEM_COUNT", RfcType.INT, Direction.EXPORT, nuc_length=4, uc_length=4),
        ParameterDescription("USED_CHANNEL", RfcType.CHAR, Direction.EXPORT, nuc_length=2, uc_length=4),
        ParameterDescription(
            "RETURN", RfcType.STRUCTURE, Direction.EXPORT, nuc_length=51, uc_length=102,
            type_description=BAPIRET,
        ),
    ],
)


def _order_simulate(params):
    items = params["ITEMS"]
    total = sum((item["QUANTITY"] * item["PRICE"] for item in items), Decimal(0))
    return {
        "TOTAL": total,
        "ITEM_COUNT": len(items),
        "USED_CHANNEL": params["CHANNEL"],
        "COMMENT": params["COMMENT"].upper(),
        "ITEMS": [dict(item, POSNR=str((index + 1) * 10)) for index, item in enumerate(items)],
        "RETURN": {"TYPE": "S", "MESSAGE": "Order %s simulated" % params["ORDER_TYPE"].strip()},
    }


@pytest.fixture
def runtime() -> LoopbackRuntime:
    runtime = LoopbackRuntime()
    runtime.register(NAME_COUNT, lambda params: {"COUNT": len(params["NAME"].strip())})
    runtime.register(ORDER_SIMULATE, _order_simulate)
    return runtime


@pytest.fixture
def conn(runtime: LoopbackRuntime) -> Iterator[Connection]:
    connection = Connection(runtime=runtime, dest="LOOP", user="tester")
    connection.open()
    yield connection
    connection.close()
