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
Call container contract shared by the runtimes and the fill/wrap passes.

A function container, a structure and a table row are all Containers:
named slots holding typed values. Values crossing this boundary are the
canonical forms produced by rfcbind.fill, for example:

  CHAR      str padded to the declared width
  NUM       str of digits padded to the declared width
  BCD/DECF  decimal.Decimal
  INT*      int
  FLOAT     float
  DATE      str 'YYYYMMDD'
  TIME      str 'HHMMSS'
  BYTE      bytes padded to the declared width
  XSTRING   bytes
  STRING    str

How those values are laid out in memory is up to the runtime.
"""

from typing import Any, Protocol

from .metadata import RfcType


class Container(Protocol):
    name: str

    def set_field(self, name: str, rfc_type: RfcType, value: Any) -> None:
        ...

    def get_field(self, name: str, rfc_type: RfcType, length: int = 0) -> Any:
        ...

    def structure(self, name: str) -> 'Container':
        ...

    def table(self, name: str) -> 'Table':
        ...


class Table(Protocol):
    name: str

    def append_row(self) -> Container:
        ...

    def row(self, index: int) -> Container:
        ...

    def __len__(self) -> int:
        ...


class FunctionContainer(Container, Protocol):
    """Container for one invocation of a function module."""

    function_name: str
