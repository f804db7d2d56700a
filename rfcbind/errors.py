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
Exception classes.

Two families share the RfcLibError base:

  RfcError      failures reported by the RFC runtime or the remote system.
                Carries the runtime diagnostic verbatim in ``error_info``.
  BindingError  failures detected locally, before or after the runtime is
                involved (bad parameter shapes, conversions, closed
                connections).
"""

from dataclasses import dataclass, fields


# ============================================================================
# Return codes and error groups (SAP NW RFC SDK numbering)
# ============================================================================

RFC_OK = 0
RFC_COMMUNICATION_FAILURE = 1
RFC_LOGON_FAILURE = 2
RFC_ABAP_RUNTIME_FAILURE = 3
RFC_ABAP_MESSAGE = 4
RFC_ABAP_EXCEPTION = 5
RFC_CLOSED = 6
RFC_CANCELED = 7
RFC_TIMEOUT = 8
RFC_INVALID_HANDLE = 13
RFC_NOT_FOUND = 17
RFC_ILLEGAL_STATE = 19
RFC_INVALID_PARAMETER = 20
RFC_CONVERSION_FAILURE = 22
RFC_BUFFER_TOO_SMALL = 23
RFC_UNKNOWN_ERROR = 28
RFC_AUTHORIZATION_FAILURE = 29
RFC_AUTHENTICATION_FAILURE = 30

RC_NAMES = {
    0: 'RFC_OK', 1: 'RFC_COMMUNICATION_FAILURE', 2: 'RFC_LOGON_FAILURE',
    3: 'RFC_ABAP_RUNTIME_FAILURE', 4: 'RFC_ABAP_MESSAGE',
    5: 'RFC_ABAP_EXCEPTION', 6: 'RFC_CLOSED', 7: 'RFC_CANCELED',
    8: 'RFC_TIMEOUT', 13: 'RFC_INVALID_HANDLE', 17: 'RFC_NOT_FOUND',
    19: 'RFC_ILLEGAL_STATE', 20: 'RFC_INVALID_PARAMETER',
    22: 'RFC_CONVERSION_FAILURE', 23: 'RFC_BUFFER_TOO_SMALL',
    28: 'RFC_UNKNOWN_ERROR', 29: 'RFC_AUTHORIZATION_FAILURE',
    30: 'RFC_AUTHENTICATION_FAILURE',
}

ERGRP_OK = 0
ERGRP_ABAP_APPLICATION_FAILURE = 1
ERGRP_ABAP_RUNTIME_FAILURE = 2
ERGRP_LOGON_FAILURE = 3
ERGRP_COMMUNICATION_FAILURE = 4
ERGRP_EXTERNAL_RUNTIME_FAILURE = 5
ERGRP_EXTERNAL_APPLICATION_FAILURE = 6
ERGRP_EXTERNAL_AUTHORIZATION_FAILURE = 7


@dataclass(frozen=True)
class RfcErrorInfo:
    """Structured diagnostic as reported by the runtime.

    The abap_* fields are only populated when the failure originated from
    an ABAP message or exception; otherwise they are empty strings.
    """
    message: str = ''
    code: int = RFC_OK
    key: str = ''
    group: int = ERGRP_OK
    abap_msg_class: str = ''
    abap_msg_type: str = ''
    abap_msg_number: str = ''
    abap_msg_v1: str = ''
    abap_msg_v2: str = ''
    abap_msg_v3: str = ''
    abap_msg_v4: str = ''

    @property
    def code_name(self):
        return RC_NAMES.get(self.code, 'RC=%d' % self.code)

    def to_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self):
        return 'RfcErrorInfo[%s, %s, %s, %s, %s, %s, %s, %s, %s, %s]' % (
            self.message, self.code_name, self.key, self.abap_msg_class,
            self.abap_msg_type, self.abap_msg_number, self.abap_msg_v1,
            self.abap_msg_v2, self.abap_msg_v3, self.abap_msg_v4)


# ============================================================================
# Exception Classes
# ============================================================================

class RfcLibError(Exception):
    """Base class for every error raised by rfcbind."""


class RfcError(RfcLibError):
    """Failure reported by the RFC runtime or the remote system."""

    def __init__(self, description, error_info=None):
        self.description = description
        self.error_info = error_info if error_info is not None else RfcErrorInfo()
        super().__init__('%s | %s' % (description, self.error_info))

    @property
    def code(self):
        return self.error_info.code

    @property
    def key(self):
        return self.error_info.key

    @property
    def message(self):
        return self.error_info.message


class CommunicationError(RfcError):
    """Network or communication failure."""


class LogonError(RfcError):
    """Authentication/logon failure."""


class ABAPApplicationError(RfcError):
    """ABAP application exception (raised by RAISE in the function module)."""


class ABAPRuntimeError(RfcError):
    """ABAP runtime error (short dump on the server)."""


class ExternalError(RfcError):
    """Error in external (non-SAP) code."""


_ERROR_GROUP_MAP = {
    ERGRP_ABAP_APPLICATION_FAILURE: ABAPApplicationError,
    ERGRP_ABAP_RUNTIME_FAILURE: ABAPRuntimeError,
    ERGRP_LOGON_FAILURE: LogonError,
    ERGRP_COMMUNICATION_FAILURE: CommunicationError,
    ERGRP_EXTERNAL_RUNTIME_FAILURE: ExternalError,
    ERGRP_EXTERNAL_APPLICATION_FAILURE: ExternalError,
    ERGRP_EXTERNAL_AUTHORIZATION_FAILURE: ExternalError,
}


def rfc_error(error_info, description, *args):
    """Build the RfcError subclass matching the error group of ``error_info``."""
    if args:
        description = description % args
    exc_class = _ERROR_GROUP_MAP.get(error_info.group, RfcError)
    return exc_class(description, error_info)


def raise_for_error_info(error_info, description, *args):
    """Raise unless ``error_info`` reports RFC_OK."""
    if error_info.code == RFC_OK:
        return
    raise rfc_error(error_info, description, *args)


class BindingError(RfcLibError):
    """Failure detected by the binding itself."""

    def __init__(self, description, cause=None):
        self.description = description
        self.cause = cause
        if cause is not None:
            super().__init__('%s | %s' % (description, cause))
        else:
            super().__init__(description)


class ConnectionClosedError(BindingError):
    """Operation requires an open connection."""


class ParameterShapeError(BindingError):
    """Parameters are neither a name-keyed mapping nor a named-field object."""


class UnknownParameterError(BindingError):
    """A supplied name matches no parameter or field of the description."""

    def __init__(self, name, container_name):
        self.name = name
        self.container_name = container_name
        super().__init__('%r is not a parameter or field of %s' % (name, container_name))


class MissingParameterError(BindingError):
    """A required (non-optional) parameter was not supplied."""

    def __init__(self, name, function_name):
        self.name = name
        self.function_name = function_name
        super().__init__('Required parameter %s of %s not supplied' % (name, function_name))


class ConversionError(BindingError):
    """A value could not be converted to the declared RFC type."""

    def __init__(self, name, expected, value, reason='', cause=None):
        self.name = name
        self.expected = expected
        self.value = value
        self.reason = reason
        description = 'Cannot convert %r for %s to %s' % (value, name, expected)
        if reason:
            description += ': ' + reason
        super().__init__(description, cause)
