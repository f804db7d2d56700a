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
Wrap: typed call container -> plain Python values.

The result of a call is a dict keyed by parameter name. Which parameters
are included is decided by FunctionDescription.result_parameters; the key
set is exactly that selection.
"""

from decimal import Decimal, localcontext

from .metadata import RfcType


def wrap_result(func_desc, container, return_import_params=False, rstrip=True):
    """Read the result parameters of an invoked function container."""
    return {
        param.name: wrap_parameter(container, param, rstrip)
        for param in func_desc.result_parameters(return_import_params)
    }


def wrap_parameter(container, param, rstrip=True):
    return _wrap_value(
        container, param.name, param.parameter_type, param.nuc_length,
        param.decimals, param.type_description, rstrip,
    )


def wrap_structure(container, type_desc, rstrip=True):
    """Read every field of a structure (or table row) into a dict."""
    if type_desc is None:
        return {}
    return {
        f.name: _wrap_value(container, f.name, f.field_type, f.nuc_length,
                            f.decimals, f.type_description, rstrip)
        for f in type_desc.fields
    }


def wrap_table(table, type_desc, rstrip=True):
    return [wrap_structure(table.row(i), type_desc, rstrip) for i in range(len(table))]


def _wrap_value(container, name, rfc_type, length, decimals, type_desc, rstrip):
    if rfc_type == RfcType.STRUCTURE:
        return wrap_structure(container.structure(name), type_desc, rstrip)
    if rfc_type == RfcType.TABLE:
        return wrap_table(container.table(name), type_desc, rstrip)
    return from_wire(rfc_type, container.get_field(name, rfc_type, length), decimals, rstrip)


def from_wire(rfc_type, raw, decimals=0, rstrip=True):
    """Convert one scalar container value to its application form."""
    if rfc_type == RfcType.CHAR:
        return raw.rstrip(' ') if rstrip else raw
    if rfc_type in (RfcType.INT, RfcType.INT1, RfcType.INT2, RfcType.INT8):
        return int(raw)
    if rfc_type == RfcType.FLOAT:
        return float(raw)
    if rfc_type == RfcType.BCD:
        with localcontext() as ctx:
            ctx.prec = 64
            return Decimal(raw).quantize(Decimal(1).scaleb(-decimals))
    if rfc_type in (RfcType.DECF16, RfcType.DECF34):
        return Decimal(raw)
    if rfc_type in (RfcType.BYTE, RfcType.XSTRING):
        return bytes(raw)
    # NUM, DATE, TIME, STRING, UTCLONG
    return str(raw)
