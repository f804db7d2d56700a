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
RFC metadata model: type, field, parameter and function descriptions.

Descriptions are immutable once built. They are produced by a runtime
(see rfcbind.sdk / rfcbind.loopback) and consumed by the fill and wrap
passes, which dispatch on the RfcType tag of each parameter or field.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterator, Optional, Tuple


# ============================================================================
# Type tags and directions (SAP NW RFC SDK numbering)
# ============================================================================

class RfcType(IntEnum):
    CHAR = 0
    DATE = 1
    BCD = 2
    TIME = 3
    BYTE = 4
    TABLE = 5
    NUM = 6
    FLOAT = 7
    INT = 8
    INT2 = 9
    INT1 = 10
    NULL = 14
    STRUCTURE = 17
    DECF16 = 23
    DECF34 = 24
    STRING = 29
    XSTRING = 30
    INT8 = 31
    UTCLONG = 32

    def __str__(self):
        return 'RFCTYPE_' + self.name


class Direction(IntEnum):
    IMPORT = 0x01
    EXPORT = 0x02
    CHANGING = 0x03
    TABLES = 0x07

    def __str__(self):
        return 'RFC_' + self.name

    @property
    def is_input(self):
        return bool(self & Direction.IMPORT)

    @property
    def is_output(self):
        return bool(self & Direction.EXPORT)


# Fixed character widths of the date/time types
DATE_LENGTH = 8
TIME_LENGTH = 6

INTEGER_RANGES = {
    RfcType.INT1: (0, 2**8 - 1),
    RfcType.INT2: (-2**15, 2**15 - 1),
    RfcType.INT: (-2**31, 2**31 - 1),
    RfcType.INT8: (-2**63, 2**63 - 1),
}

DECF_PRECISION = {
    RfcType.DECF16: 16,
    RfcType.DECF34: 34,
}


# ============================================================================
# Descriptions
# ============================================================================

@dataclass(frozen=True)
class FieldDescription:
    name: str
    field_type: RfcType
    nuc_length: int = 0
    nuc_offset: int = 0
    uc_length: int = 0
    uc_offset: int = 0
    decimals: int = 0
    type_description: Optional['TypeDescription'] = None

    def __str__(self):
        return 'fieldDesc(name= %s, fieldType= %s, nucLen= %d, nucOff= %d, ucLen= %d, ucOff= %d, dec= %d)' % (
            self.name, self.field_type, self.nuc_length, self.nuc_offset,
            self.uc_length, self.uc_offset, self.decimals)


@dataclass(frozen=True)
class TypeDescription:
    """Layout of a structure or table row type.

    Field offsets differ between the narrow (nuc) and wide (uc) layouts,
    so both are carried as reported by the runtime.
    """
    name: str
    nuc_length: int = 0
    uc_length: int = 0
    fields: Tuple[FieldDescription, ...] = ()
    _by_name: Dict[str, FieldDescription] = field(
        default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'fields', tuple(self.fields))
        object.__setattr__(self, '_by_name', {f.name: f for f in self.fields})

    def get_field(self, name):
        """Return the field called ``name`` or None."""
        return self._by_name.get(name)

    def __iter__(self) -> Iterator[FieldDescription]:
        return iter(self.fields)

    def __len__(self):
        return len(self.fields)

    def __str__(self):
        return 'typeDesc(name= %s, nucLen= %d, ucLen= %d, fields= %d)' % (
            self.name, self.nuc_length, self.uc_length, len(self.fields))


@dataclass(frozen=True)
class ParameterDescription:
    name: str
    parameter_type: RfcType
    direction: Direction
    nuc_length: int = 0
    uc_length: int = 0
    decimals: int = 0
    default_value: str = ''
    parameter_text: str = ''
    optional: bool = False
    type_description: Optional[TypeDescription] = None

    @property
    def required(self):
        """True when a caller must supply a value for this parameter."""
        return not self.optional and self.direction in (Direction.IMPORT, Direction.CHANGING)

    def __str__(self):
        return ('paramDesc(name= %s, paramType= %s, dir= %s, nucLen= %d, ucLen= %d, dec= %d, '
                'defValue= %s, paramText= %s, optional= %s, typeDesc= %s)' % (
                    self.name, self.parameter_type, self.direction, self.nuc_length,
                    self.uc_length, self.decimals, self.default_value,
                    self.parameter_text, self.optional, self.type_description))


@dataclass(frozen=True)
class FunctionDescription:
    name: str
    parameters: Tuple[ParameterDescription, ...] = ()
    _by_name: Dict[str, ParameterDescription] = field(
        default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'parameters', tuple(self.parameters))
        object.__setattr__(self, '_by_name', {p.name: p for p in self.parameters})

    def parameter(self, name):
        """Return the parameter called ``name`` (exact match) or None."""
        return self._by_name.get(name)

    def __contains__(self, name):
        return name in self._by_name

    def __iter__(self) -> Iterator[ParameterDescription]:
        return iter(self.parameters)

    def __len__(self):
        return len(self.parameters)

    def result_parameters(self, return_import_params=False):
        """Parameters reported back to the caller after an invocation.

        Without ``return_import_params`` only parameters that carry data
        back (EXPORT, CHANGING, TABLES) are kept.
        """
        if return_import_params:
            return list(self.parameters)
        return [p for p in self.parameters if p.direction.is_output]

    def __str__(self):
        lines = ['FunctionDescription:', ' Name: %s' % self.name, ' Parameters:']
        for p in self.parameters:
            lines.append('    %s' % p)
        return '\n'.join(lines) + '\n'
