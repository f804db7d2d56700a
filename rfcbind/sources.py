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
Parameter sources: uniform read access to caller-supplied values.

A call accepts either a name-keyed mapping or an object with named fields
(dataclass instance, named tuple, plain object). Both are adapted to the
ParameterSource protocol so the fill pass never inspects the caller's type.
"""

import dataclasses
from collections.abc import Mapping
from typing import Any, Iterable, Protocol, runtime_checkable

from .errors import ParameterShapeError


class _Missing:
    __slots__ = ()

    def __repr__(self):
        return 'MISSING'

    def __bool__(self):
        return False


MISSING: Any = _Missing()


@runtime_checkable
class ParameterSource(Protocol):
    def names(self) -> Iterable[str]:
        """Names of the values the caller supplied, in caller order."""

    def value_for(self, name: str) -> Any:
        """Return the value supplied for ``name`` or MISSING."""


class MappingSource:
    def __init__(self, mapping):
        for key in mapping:
            if not isinstance(key, str):
                raise ParameterShapeError(
                    'Parameter mappings need string keys, got %r' % (key,))
        self._mapping = mapping

    def names(self):
        return list(self._mapping)

    def value_for(self, name):
        return self._mapping.get(name, MISSING)

    def __repr__(self):
        return 'MappingSource(%r)' % (self._mapping,)


class AttributeSource:
    """Named fields of a dataclass instance, named tuple or plain object."""

    def __init__(self, obj):
        self._obj = obj
        self._names = _field_names(obj)

    def names(self):
        return list(self._names)

    def value_for(self, name):
        if name not in self._names:
            return MISSING
        return getattr(self._obj, name)

    def __repr__(self):
        return 'AttributeSource(%r)' % (self._obj,)


def _field_names(obj):
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return tuple(f.name for f in dataclasses.fields(obj))
    if isinstance(obj, tuple) and hasattr(obj, '_fields'):
        return tuple(obj._fields)
    if hasattr(obj, '__dict__') and not isinstance(obj, type):
        return tuple(name for name in vars(obj) if not name.startswith('_'))
    raise ParameterShapeError(
        'Parameters must be a mapping or an object with named fields, got %s'
        % type(obj).__name__)


def as_source(params):
    """Adapt ``params`` to a ParameterSource.

    None means "no parameters". Strings, bytes, numbers and other
    field-less values raise ParameterShapeError.
    """
    if params is None:
        return MappingSource({})
    if isinstance(params, ParameterSource):
        return params
    if isinstance(params, Mapping):
        return MappingSource(params)
    if isinstance(params, (str, bytes, bytearray, int, float, list)):
        raise ParameterShapeError(
            'Parameters must be a mapping or an object with named fields, got %s'
            % type(params).__name__)
    return AttributeSource(params)
