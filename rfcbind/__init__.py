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
rfcbind - SAP RFC client binding

Invoke RFC-enabled function modules on SAP systems with plain Python values.
Parameters are checked and converted against the function metadata before
the call (fill), results are converted back to Python values after it
(wrap).

  from rfcbind import Connection

  with Connection(ashost='sap01', sysnr='00', client='100',
                  user='RFC_USER', passwd='secret') as conn:
      result = conn.call('RFC_READ_TABLE', QUERY_TABLE='USR02',
                         DELIMITER='|', ROWCOUNT=10)
"""

from .connection import Connection
from .errors import (
    ABAPApplicationError, ABAPRuntimeError, BindingError, CommunicationError,
    ConnectionClosedError, ConversionError, ExternalError, LogonError,
    MissingParameterError, ParameterShapeError, RfcError, RfcErrorInfo,
    RfcLibError, UnknownParameterError,
)
from .events import RfcEvent
from .fill import fill_function
from .loopback import LoopbackRuntime, abap_exception
from .metadata import (
    Direction, FieldDescription, FunctionDescription, ParameterDescription,
    RfcType, TypeDescription,
)
from .runtime import RfcRuntime, get_nwrfclib_version
from .sources import MISSING, AttributeSource, MappingSource, ParameterSource, as_source
from .wrap import wrap_result

__version__ = '0.3.0'

__all__ = [
    'MISSING', 'ABAPApplicationError', 'ABAPRuntimeError', 'AttributeSource',
    'BindingError', 'CommunicationError', 'Connection', 'ConnectionClosedError',
    'ConversionError', 'Direction', 'ExternalError', 'FieldDescription',
    'FunctionDescription', 'LogonError', 'LoopbackRuntime', 'MappingSource',
    'MissingParameterError', 'ParameterDescription', 'ParameterShapeError',
    'ParameterSource', 'RfcError', 'RfcErrorInfo', 'RfcEvent', 'RfcLibError',
    'RfcRuntime', 'RfcType', 'TypeDescription', 'UnknownParameterError',
    'abap_exception', 'as_source', 'fill_function', 'get_nwrfclib_version',
    'wrap_result',
]
