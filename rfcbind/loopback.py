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
Loopback runtime: serves RFC function modules implemented in Python.

Implements the rfcbind.runtime.RfcRuntime contract without the SAP NW RFC
SDK. Function modules are registered with their FunctionDescription and a
handler; an invocation hands the handler the input parameters as a dict
and writes the dict it returns back into the call container, so results
travel through the same fill and wrap passes as with a real system.

Usage:
  runtime = LoopbackRuntime()

  @runtime.function(STFC_CONNECTION)
  def stfc_connection(params):
      return {'ECHOTEXT': params['REQUTEXT'], 'RESPTEXT': 'loopback'}

  with Connection(runtime=runtime, dest='LOOP') as conn:
      conn.call('STFC_CONNECTION', REQUTEXT='hello')

The runtime keeps simple counters (open sessions, created and live
containers, invocations) and can be told to fail open, close or ping.
"""

import itertools
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict

from .errors import (
    ERGRP_ABAP_APPLICATION_FAILURE, ERGRP_ABAP_RUNTIME_FAILURE,
    ERGRP_EXTERNAL_RUNTIME_FAILURE, RFC_ABAP_EXCEPTION, RFC_ABAP_RUNTIME_FAILURE,
    RFC_CONVERSION_FAILURE, RFC_INVALID_HANDLE, RFC_INVALID_PARAMETER,
    BindingError, RfcErrorInfo, rfc_error,
)
from .fill import fill_parameter
from .metadata import DATE_LENGTH, INTEGER_RANGES, TIME_LENGTH, Direction, RfcType
from .wrap import wrap_parameter

logger = logging.getLogger(__name__)

RFC_TABLE_MOVE_EOF = 25


def _runtime_error(code, key, message, group=ERGRP_EXTERNAL_RUNTIME_FAILURE):
    return RfcErrorInfo(message=message, code=code, key=key, group=group)


def abap_exception(key, message='', msg_class='', msg_type='E', msg_number='',
                   v1='', v2='', v3='', v4=''):
    """Build the error a handler raises to signal an ABAP exception."""
    info = RfcErrorInfo(
        message=message or key, code=RFC_ABAP_EXCEPTION, key=key,
        group=ERGRP_ABAP_APPLICATION_FAILURE, abap_msg_class=msg_class,
        abap_msg_type=msg_type if msg_class else '', abap_msg_number=msg_number,
        abap_msg_v1=v1, abap_msg_v2=v2, abap_msg_v3=v3, abap_msg_v4=v4,
    )
    return rfc_error(info, 'ABAP exception %s', key)


# ============================================================================
# In-memory containers
# ============================================================================

def _initial_value(rfc_type, length, decimals, type_desc, name):
    if rfc_type == RfcType.CHAR:
        return ' ' * length
    if rfc_type == RfcType.NUM:
        return '0' * length
    if rfc_type == RfcType.BCD:
        return Decimal(0).scaleb(-decimals)
    if rfc_type in (RfcType.DECF16, RfcType.DECF34):
        return Decimal(0)
    if rfc_type in (RfcType.INT, RfcType.INT1, RfcType.INT2, RfcType.INT8):
        return 0
    if rfc_type == RfcType.FLOAT:
        return 0.0
    if rfc_type == RfcType.DATE:
        return '0' * DATE_LENGTH
    if rfc_type == RfcType.TIME:
        return '0' * TIME_LENGTH
    if rfc_type == RfcType.BYTE:
        return b'\x00' * length
    if rfc_type == RfcType.XSTRING:
        return b''
    if rfc_type == RfcType.STRUCTURE:
        return MemoryContainer.for_type(type_desc, name)
    if rfc_type == RfcType.TABLE:
        return MemoryTable(name, type_desc)
    return ''


class MemoryContainer:
    """Named, typed slots laid out from a type or function description."""

    def __init__(self, name, slots):
        self.name = name
        self._types = {}
        self._values = {}
        for slot_name, rfc_type, length, decimals, type_desc in slots:
            self._types[slot_name] = RfcType(rfc_type)
            self._values[slot_name] = _initial_value(rfc_type, length, decimals, type_desc, slot_name)

    @classmethod
    def for_type(cls, type_desc, name=None):
        fields = type_desc.fields if type_desc is not None else ()
        return cls(
            name or (type_desc.name if type_desc is not None else ''),
            [(f.name, f.field_type, f.nuc_length, f.decimals, f.type_description) for f in fields],
        )

    def _slot(self, name, rfc_type):
        declared = self._types.get(name)
        if declared is None:
            raise rfc_error(_runtime_error(
                RFC_INVALID_PARAMETER, 'RFC_INVALID_PARAMETER',
                'field %s not found in %s' % (name, self.name)),
                'Could not access field %s', name)
        if declared != rfc_type:
            raise rfc_error(_runtime_error(
                RFC_CONVERSION_FAILURE, 'RFC_CONVERSION_FAILURE',
                'field %s is %s, not %s' % (name, declared, RfcType(rfc_type))),
                'Could not access field %s', name)
        return declared

    def set_field(self, name, rfc_type, value):
        self._slot(name, rfc_type)
        self._values[name] = value

    def get_field(self, name, rfc_type, length=0):
        self._slot(name, rfc_type)
        return self._values[name]

    def structure(self, name):
        self._slot(name, RfcType.STRUCTURE)
        return self._values[name]

    def table(self, name):
        self._slot(name, RfcType.TABLE)
        return self._values[name]

    def __repr__(self):
        return '<%s %s>' % (type(self).__name__, self.name)


class MemoryTable:
    def __init__(self, name, type_desc):
        self.name = name
        self.type_desc = type_desc
        self._rows = []

    def append_row(self):
        row = MemoryContainer.for_type(self.type_desc)
        self._rows.append(row)
        return row

    def row(self, index):
        if not 0 <= index < len(self._rows):
            raise rfc_error(_runtime_error(
                RFC_TABLE_MOVE_EOF, 'RFC_TABLE_MOVE_EOF',
                'row %d of %s does not exist' % (index, self.name)),
                'Could not move to row %d', index)
        return self._rows[index]

    def clear(self):
        self._rows = []

    def __len__(self):
        return len(self._rows)


class MemoryFunctionContainer(MemoryContainer):
    def __init__(self, func_desc):
        super().__init__(func_desc.name, [
            (p.name, p.parameter_type, p.nuc_length, p.decimals, p.type_description)
            for p in func_desc.parameters
        ])
        self.function_name = func_desc.name
        self.func_desc = func_desc
        self.supplied = set()
        self.destroyed = False

    def set_field(self, name, rfc_type, value):
        super().set_field(name, rfc_type, value)
        self.supplied.add(name)

    def structure(self, name):
        self.supplied.add(name)
        return super().structure(name)

    def table(self, name):
        self.supplied.add(name)
        return super().table(name)


# ============================================================================
# Runtime
# ============================================================================

@dataclass
class LoopbackSession:
    id: int
    params: Dict[str, str] = field(default_factory=dict)
    closed: bool = False


def _parse_default(default_value):
    """Literal ABAP default values ('X', SPACE, 10); None for anything else."""
    value = default_value.strip()
    if value == 'SPACE':
        return ''
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1]
    if value.isdigit():
        return value
    return None


class LoopbackRuntime:
    """In-process RFC runtime serving Python function modules."""

    def __init__(self, attributes=None, version=(7, 50, 0)):
        self._functions = {}
        self._attributes = dict(attributes or {})
        self._version = tuple(version)
        self._ids = itertools.count(1)
        self.sessions = {}
        self.opened = 0
        self.containers_created = 0
        self.live_containers = set()
        self.invocations = []
        self.fail_open = None
        self.fail_close = None
        self.fail_ping = None

    # -- Registration --

    def register(self, func_desc, handler=None):
        """Serve ``func_desc`` with ``handler(params) -> dict or None``."""
        self._functions[func_desc.name] = (func_desc, handler)
        return handler

    def function(self, func_desc):
        """Decorator form of register()."""
        def decorator(handler):
            return self.register(func_desc, handler)
        return decorator

    @property
    def open_sessions(self):
        return len(self.sessions)

    # -- Connection --

    def open_connection(self, params):
        if self.fail_open is not None:
            raise rfc_error(self.fail_open, 'Connection could not be opened')
        session = LoopbackSession(next(self._ids), dict(params))
        self.sessions[session.id] = session
        self.opened += 1
        logger.debug('Loopback session %d opened', session.id)
        return session

    def close_connection(self, handle):
        self._check(handle)
        handle.closed = True
        del self.sessions[handle.id]
        if self.fail_close is not None:
            raise rfc_error(self.fail_close, 'Connection could not be closed')

    def ping(self, handle):
        self._check(handle)
        if self.fail_ping is not None:
            raise rfc_error(self.fail_ping, 'Server could not be pinged')

    def get_connection_attributes(self, handle):
        self._check(handle)
        params = {k.lower(): v for k, v in handle.params.items()}
        attributes = {
            'dest': params.get('dest', '').ljust(64),
            'host': 'loopback'.ljust(100),
            'partnerHost': 'loopback'.ljust(100),
            'sysNumber': params.get('sysnr', '00').ljust(2),
            'sysId': 'LBK'.ljust(8),
            'client': params.get('client', '000').ljust(3),
            'user': params.get('user', '').upper().ljust(12),
            'language': params.get('lang', 'E')[:1].ljust(2),
            'isoLanguage': params.get('lang', 'EN')[:2].upper().ljust(2),
            'rfcRole': 'C',
            'type': 'E',
            'partnerType': '3',
            'cpicConvId': ('%08d' % handle.id),
        }
        attributes.update(self._attributes)
        return attributes

    # -- Functions --

    def get_function_description(self, handle, name):
        self._check(handle)
        return self._lookup(name)[0]

    def _lookup(self, name):
        try:
            return self._functions[name]
        except KeyError:
            info = RfcErrorInfo(
                message='ID:FL Type:E Number:046 %s' % name, code=RFC_ABAP_EXCEPTION,
                key='FU_NOT_FOUND', group=ERGRP_ABAP_APPLICATION_FAILURE,
                abap_msg_class='FL', abap_msg_type='E', abap_msg_number='046',
                abap_msg_v1=name,
            )
            raise rfc_error(info, 'Could not get function description for "%s"', name) from None

    def create_function(self, handle, func_desc):
        self._check(handle)
        container = MemoryFunctionContainer(func_desc)
        self.containers_created += 1
        self.live_containers.add(id(container))
        return container

    def destroy_function(self, container):
        container.destroyed = True
        self.live_containers.discard(id(container))

    def invoke(self, handle, container):
        self._check(handle)
        handler = self._lookup(container.function_name)[1]
        func_desc = container.func_desc
        self._apply_defaults(container)
        params = {
            p.name: wrap_parameter(container, p, rstrip=False)
            for p in func_desc.parameters if p.direction.is_input
        }
        self.invocations.append(func_desc.name)
        outputs = handler(params) if handler is not None else None
        for name, value in (outputs or {}).items():
            param = func_desc.parameter(name)
            if param is None or param.direction == Direction.IMPORT:
                info = _runtime_error(
                    RFC_ABAP_RUNTIME_FAILURE, 'CALL_FUNCTION_PARM_UNKNOWN',
                    '%s is not an output parameter of %s' % (name, func_desc.name),
                    ERGRP_ABAP_RUNTIME_FAILURE)
                raise rfc_error(info, 'Could not invoke function "%s"', func_desc.name)
            if param.parameter_type == RfcType.TABLE:
                container.table(name).clear()
            try:
                fill_parameter(container, param, value)
            except BindingError as exc:
                info = _runtime_error(
                    RFC_ABAP_RUNTIME_FAILURE, 'CONVT_NO_NUMBER', str(exc),
                    ERGRP_ABAP_RUNTIME_FAILURE)
                raise rfc_error(info, 'Could not invoke function "%s"', func_desc.name) from exc

    def version(self):
        return self._version

    # -- Internal --

    def _apply_defaults(self, container):
        for param in container.func_desc.parameters:
            if param.direction != Direction.IMPORT or param.name in container.supplied:
                continue
            if not param.default_value:
                continue
            default = _parse_default(param.default_value)
            if default is None:
                continue
            if param.parameter_type in INTEGER_RANGES and default.isdigit():
                default = int(default)
            try:
                fill_parameter(container, param, default)
            except BindingError:
                logger.debug('Ignoring default %r of %s', param.default_value, param.name)

    def _check(self, handle):
        if not isinstance(handle, LoopbackSession) or handle.closed or handle.id not in self.sessions:
            info = _runtime_error(RFC_INVALID_HANDLE, 'RFC_INVALID_HANDLE',
                                  'An invalid handle was passed to the API call')
            raise rfc_error(info, 'Invalid connection handle')
