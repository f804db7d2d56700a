# -*- coding: utf-8 -*-
#
# MIT License
#
# Copyright (c) 2026 Joris van de Vis
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
"""
Fill: caller values -> typed call container.

The caller's parameters are read through a ParameterSource; every name is
matched against the FunctionDescription and converted according to the
parameter's RfcType before it is written into the container. Nothing is
truncated or coerced silently: a value that does not fit its declared type
raises ConversionError naming the parameter path, e.g. ``ITEMS[2]-MATNR``.
"""

import datetime
import logging
import re
from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from .errors import (
    ConversionError, MissingParameterError, ParameterShapeError, UnknownParameterError,
)
from .metadata import (
    DATE_LENGTH, DECF_PRECISION, INTEGER_RANGES, TIME_LENGTH, RfcType,
)
from .sources import as_source

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r'[0-9]*\Z')
_INITIAL_DATE = '0' * DATE_LENGTH
_INITIAL_TIME = '0' * TIME_LENGTH

# Enough precision for the widest BCD field (16 bytes, 31 digits) plus decimals
_BCD_PRECISION = 64


# ============================================================================
# Entry points
# ============================================================================

def fill_function(func_desc, container, params):
    """Write ``params`` into ``container`` according to ``func_desc``.

    Names are matched case-sensitively. A None value counts as not supplied.
    Omitted optional parameters keep the runtime default; omitted required
    IMPORT/CHANGING parameters raise MissingParameterError.
    """
    source = as_source(params)
    supplied = []
    for name in source.names():
        param = func_desc.parameter(name)
        if param is None:
            raise UnknownParameterError(name, func_desc.name)
        value = source.value_for(name)
        if value is not None:
            supplied.append((param, value))

    supplied_names = {param.name for param, _ in supplied}
    for param in func_desc.parameters:
        if param.required and param.name not in supplied_names:
            raise MissingParameterError(param.name, func_desc.name)

    for param, value in supplied:
        fill_parameter(container, param, value)
    logger.debug('Filled %d parameter(s) of %s', len(supplied), func_desc.name)


def fill_parameter(container, param, value):
    """Write one parameter value into ``container``."""
    _fill_value(
        container, param.name, param.parameter_type, param.nuc_length,
        param.decimals, param.type_description, value, param.name,
    )


def _fill_value(container, name, rfc_type, length, decimals, type_desc, value, path):
    if rfc_type == RfcType.STRUCTURE:
        _fill_structure(container.structure(name), type_desc, value, path)
    elif rfc_type == RfcType.TABLE:
        _fill_table(container.table(name), type_desc, value, path)
    else:
        container.set_field(name, rfc_type, to_wire(rfc_type, value, length, decimals, path))


def _fill_structure(container, type_desc, value, path):
    type_name = type_desc.name if type_desc is not None else '?'
    try:
        source = as_source(value)
    except ParameterShapeError as exc:
        raise ConversionError(
            path, 'STRUCTURE %s' % type_name, value,
            'expected a mapping or an object with named fields', exc) from exc

    for field_name in source.names():
        field_desc = type_desc.get_field(field_name) if type_desc is not None else None
        if field_desc is None:
            raise UnknownParameterError(field_name, '%s (%s)' % (path, type_name))
        field_value = source.value_for(field_name)
        if field_value is None:
            continue
        _fill_value(
            container, field_desc.name, field_desc.field_type, field_desc.nuc_length,
            field_desc.decimals, field_desc.type_description, field_value,
            '%s-%s' % (path, field_name),
        )


def _fill_table(table, type_desc, rows, path):
    if isinstance(rows, (str, bytes, bytearray, Mapping)) or not isinstance(rows, Sequence):
        raise ConversionError(
            path, 'TABLE %s' % (type_desc.name if type_desc is not None else '?'),
            rows, 'expected a sequence of rows')
    for index, row in enumerate(rows):
        row_path = '%s[%d]' % (path, index)
        if row is None:
            raise ConversionError(
                row_path, 'STRUCTURE %s' % (type_desc.name if type_desc is not None else '?'),
                row, 'a table row cannot be None')
        _fill_structure(table.append_row(), type_desc, row, row_path)


# ============================================================================
# Scalar conversions
# ============================================================================

def to_wire(rfc_type, value, length=0, decimals=0, path=''):
    """Convert one scalar application value to its container form."""
    try:
        converter = _CONVERTERS[rfc_type]
    except KeyError:
        raise ConversionError(path, str(rfc_type), value, 'unsupported RFC type') from None
    return converter(rfc_type, value, length, decimals, path)


def _type_label(rfc_type, length=0, decimals=0):
    name = RfcType(rfc_type).name
    if rfc_type == RfcType.BCD:
        return '%s(%d,%d)' % (name, length, decimals)
    if length and rfc_type in (RfcType.CHAR, RfcType.NUM, RfcType.BYTE):
        return '%s(%d)' % (name, length)
    return name


def _fail(rfc_type, value, length, decimals, path, reason, cause=None):
    return ConversionError(path, _type_label(rfc_type, length, decimals), value, reason, cause)


def _char(rfc_type, value, length, decimals, path):
    if not isinstance(value, str):
        raise _fail(rfc_type, value, length, decimals, path, 'expected str')
    if length and len(value) > length:
        raise _fail(rfc_type, value, length, decimals, path,
                    'longer than %d characters' % length)
    return value.ljust(length)


def _string(rfc_type, value, length, decimals, path):
    if not isinstance(value, str):
        raise _fail(rfc_type, value, length, decimals, path, 'expected str')
    return value


def _num(rfc_type, value, length, decimals, path):
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise _fail(rfc_type, value, length, decimals, path, 'negative numbers are not allowed')
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _DIGITS.match(text):
            raise _fail(rfc_type, value, length, decimals, path, 'only digits are allowed')
    else:
        raise _fail(rfc_type, value, length, decimals, path, 'expected str of digits or int')
    if length and len(text) > length:
        raise _fail(rfc_type, value, length, decimals, path, 'more than %d digits' % length)
    return text.rjust(length, '0')


def _to_decimal(rfc_type, value, length, decimals, path):
    if isinstance(value, bool):
        raise _fail(rfc_type, value, length, decimals, path, 'expected a number')
    if isinstance(value, (Decimal, int)):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation as exc:
            raise _fail(rfc_type, value, length, decimals, path, 'not a number', exc) from exc
    else:
        raise _fail(rfc_type, value, length, decimals, path, 'expected a number')
    if not number.is_finite():
        raise _fail(rfc_type, value, length, decimals, path, 'not a finite number')
    return number


def _bcd(rfc_type, value, length, decimals, path):
    number = _to_decimal(rfc_type, value, length, decimals, path)
    with localcontext() as ctx:
        ctx.prec = _BCD_PRECISION
        number = number.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
        if length:
            integer_digits = 2 * length - 1 - decimals
            if abs(number) >= Decimal(10) ** integer_digits:
                raise _fail(rfc_type, value, length, decimals, path,
                            'overflow, at most %d integer digits' % integer_digits)
    return number


def _decf(rfc_type, value, length, decimals, path):
    number = _to_decimal(rfc_type, value, length, decimals, path)
    precision = DECF_PRECISION[rfc_type]
    if len(number.normalize().as_tuple().digits) > precision:
        raise _fail(rfc_type, value, length, decimals, path,
                    'more than %d significant digits' % precision)
    return number


def _int(rfc_type, value, length, decimals, path):
    if not isinstance(value, int) or isinstance(value, bool):
        raise _fail(rfc_type, value, length, decimals, path, 'expected int')
    low, high = INTEGER_RANGES[rfc_type]
    if not low <= value <= high:
        raise _fail(rfc_type, value, length, decimals, path,
                    'out of range %d..%d' % (low, high))
    return value


def _float(rfc_type, value, length, decimals, path):
    if isinstance(value, bool):
        raise _fail(rfc_type, value, length, decimals, path, 'expected a number')
    if isinstance(value, (float, int, Decimal)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as exc:
            raise _fail(rfc_type, value, length, decimals, path, 'not a number', exc) from exc
    raise _fail(rfc_type, value, length, decimals, path, 'expected a number')


def _date(rfc_type, value, length, decimals, path):
    if isinstance(value, datetime.datetime):
        value = value.date()
    if isinstance(value, datetime.date):
        return '%04d%02d%02d' % (value.year, value.month, value.day)
    if not isinstance(value, str):
        raise _fail(rfc_type, value, length, decimals, path, 'expected YYYYMMDD str or date')
    if value in ('', _INITIAL_DATE):
        return _INITIAL_DATE
    if len(value) != DATE_LENGTH or not _DIGITS.match(value):
        raise _fail(rfc_type, value, length, decimals, path, 'expected YYYYMMDD')
    try:
        datetime.date(int(value[:4]), int(value[4:6]), int(value[6:]))
    except ValueError as exc:
        raise _fail(rfc_type, value, length, decimals, path, str(exc), exc) from exc
    return value


def _time(rfc_type, value, length, decimals, path):
    if isinstance(value, datetime.time):
        return '%02d%02d%02d' % (value.hour, value.minute, value.second)
    if not isinstance(value, str):
        raise _fail(rfc_type, value, length, decimals, path, 'expected HHMMSS str or time')
    if value == '':
        return _INITIAL_TIME
    if len(value) != TIME_LENGTH or not _DIGITS.match(value):
        raise _fail(rfc_type, value, length, decimals, path, 'expected HHMMSS')
    try:
        datetime.time(int(value[:2]), int(value[2:4]), int(value[4:]))
    except ValueError as exc:
        raise _fail(rfc_type, value, length, decimals, path, str(exc), exc) from exc
    return value


def _byte(rfc_type, value, length, decimals, path):
    if not isinstance(value, (bytes, bytearray)):
        raise _fail(rfc_type, value, length, decimals, path, 'expected bytes')
    if length and len(value) > length:
        raise _fail(rfc_type, value, length, decimals, path, 'longer than %d bytes' % length)
    return bytes(value).ljust(length, b'\x00')


def _xstring(rfc_type, value, length, decimals, path):
    if not isinstance(value, (bytes, bytearray)):
        raise _fail(rfc_type, value, length, decimals, path, 'expected bytes')
    return bytes(value)


_CONVERTERS = {
    RfcType.CHAR: _char,
    RfcType.STRING: _string,
    RfcType.UTCLONG: _string,
    RfcType.NUM: _num,
    RfcType.BCD: _bcd,
    RfcType.DECF16: _decf,
    RfcType.DECF34: _decf,
    RfcType.INT: _int,
    RfcType.INT1: _int,
    RfcType.INT2: _int,
    RfcType.INT8: _int,
    RfcType.FLOAT: _float,
    RfcType.DATE: _date,
    RfcType.TIME: _time,
    RfcType.BYTE: _byte,
    RfcType.XSTRING: _xstring,
}
