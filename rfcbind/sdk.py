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
SAP NW RFC SDK runtime via ctypes.

Implements rfcbind.runtime.RfcRuntime on top of the SAP NetWeaver RFC SDK
shared library (sapnwrfc.dll / libsapnwrfc.so / libsapnwrfc.dylib), without
a compiled extension.

Requirements:
  - SAP NetWeaver RFC SDK installed (download from SAP Support Portal)
  - SAPNWRFC_HOME pointing at the SDK root, or the SDK in a standard
    location, or an explicit sdk_path

Cross-platform SAP_UC handling:
  SAP_UC is always UTF-16 (2 bytes per character), regardless of platform.
  On Windows, c_wchar is 2 bytes (UTF-16), so it maps directly.
  On Linux/macOS, c_wchar is 4 bytes (UCS-4), so we use c_uint16 arrays
  with manual UTF-16LE encoding/decoding.
"""

import ctypes
import ctypes.util
import logging
import os
import sys
import threading
from ctypes import (
    POINTER, Structure, byref, c_double, c_int, c_int64, c_long, c_ubyte,
    c_uint, c_uint16, c_ulong, c_void_p,
)
from decimal import Decimal, InvalidOperation

from .errors import (
    RFC_BUFFER_TOO_SMALL, RFC_OK, RfcError, RfcErrorInfo, raise_for_error_info,
)
from .metadata import (
    DATE_LENGTH, TIME_LENGTH, Direction, FieldDescription, FunctionDescription,
    ParameterDescription, RfcType, TypeDescription,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Platform Detection and SAP_UC Abstraction
# ============================================================================

_WCHAR_SIZE = ctypes.sizeof(ctypes.c_wchar)
_IS_WINDOWS = sys.platform == 'win32'
_IS_MACOS = sys.platform == 'darwin'

# SAP_UC is always UTF-16 (2 bytes). On Windows, c_wchar matches.
_UC_NATIVE = (_WCHAR_SIZE == 2)

_UC = ctypes.c_wchar if _UC_NATIVE else c_uint16
_UC_P = ctypes.c_wchar_p if _UC_NATIVE else POINTER(c_uint16)


def str_to_uc(s):
    """Convert a Python str to a null-terminated SAP_UC buffer."""
    if s is None:
        return None
    if _UC_NATIVE:
        return ctypes.c_wchar_p(s)
    encoded = s.encode('utf-16-le')
    n_chars = len(encoded) // 2
    buf = (c_uint16 * (n_chars + 1))()
    ctypes.memmove(buf, encoded, len(encoded))
    buf[n_chars] = 0
    return buf


def uc_to_str(buf, char_count=None):
    """Convert a SAP_UC array to a Python str.

    Without ``char_count`` the buffer is read up to its null terminator.
    """
    if buf is None:
        return ''
    if isinstance(buf, str):
        # c_wchar arrays inside Structures come back as str
        return buf[:char_count] if char_count is not None else buf
    if _UC_NATIVE:
        v = buf.value
        return v[:char_count] if char_count is not None else v

    if char_count is None:
        char_count = 0
        while char_count < len(buf) and buf[char_count] != 0:
            char_count += 1
    if char_count == 0:
        return ''
    raw = (c_uint16 * char_count)()
    ctypes.memmove(raw, buf, char_count * 2)
    return bytes(raw).decode('utf-16-le')


def create_uc_buffer(size):
    """Mutable SAP_UC buffer of ``size`` characters for SDK output."""
    if _UC_NATIVE:
        return ctypes.create_unicode_buffer(size)
    return (_UC * size)()


# ============================================================================
# ctypes Structure Definitions
# ============================================================================

class RFC_ERROR_INFO(Structure):
    _fields_ = [
        ('code', c_long),
        ('group', c_long),
        ('key', _UC * 128),
        ('message', _UC * 512),
        ('abapMsgClass', _UC * 21),
        ('abapMsgType', _UC * 2),
        ('abapMsgNumber', _UC * 4),
        ('abapMsgV1', _UC * 51),
        ('abapMsgV2', _UC * 51),
        ('abapMsgV3', _UC * 51),
        ('abapMsgV4', _UC * 51),
    ]


class RFC_CONNECTION_PARAMETER(Structure):
    _fields_ = [
        ('name', _UC_P),
        ('value', _UC_P),
    ]


class RFC_PARAMETER_DESC(Structure):
    _fields_ = [
        ('name', _UC * 31),
        ('direction', c_uint),
        ('type', c_uint),
        ('nucLength', c_uint),
        ('ucLength', c_uint),
        ('decimals', c_uint),
        ('typeDescHandle', c_void_p),
        ('defaultValue', _UC * 31),
        ('parameterText', _UC * 80),
        ('optional', c_ubyte),
        ('extendedDescription', c_void_p),
    ]


class RFC_FIELD_DESC(Structure):
    _fields_ = [
        ('name', _UC * 31),
        ('type', c_uint),
        ('nucLength', c_uint),
        ('nucOffset', c_uint),
        ('ucLength', c_uint),
        ('ucOffset', c_uint),
        ('decimals', c_uint),
        ('typeDescHandle', c_void_p),
        ('extendedDescription', c_void_p),
    ]


class RFC_ATTRIBUTES(Structure):
    _fields_ = [
        ('dest', _UC * 65),
        ('host', _UC * 101),
        ('partnerHost', _UC * 101),
        ('sysNumber', _UC * 3),
        ('sysId', _UC * 9),
        ('client', _UC * 4),
        ('user', _UC * 13),
        ('language', _UC * 3),
        ('trace', _UC * 2),
        ('isoLanguage', _UC * 3),
        ('codepage', _UC * 5),
        ('partnerCodepage', _UC * 5),
        ('rfcRole', _UC * 2),
        ('type', _UC * 2),
        ('partnerType', _UC * 2),
        ('rel', _UC * 5),
        ('partnerRel', _UC * 5),
        ('kernelRel', _UC * 5),
        ('cpicConvId', _UC * 9),
        ('progName', _UC * 129),
        ('partnerBytesPerChar', _UC * 2),
        ('partnerSystemCodepage', _UC * 5),
        ('partnerIP', _UC * 16),
        ('partnerIPv6', _UC * 46),
        ('reserved', _UC * 17),
    ]


def error_info_from(struct):
    """Copy an RFC_ERROR_INFO structure into an RfcErrorInfo."""
    return RfcErrorInfo(
        message=uc_to_str(struct.message).rstrip(),
        code=struct.code,
        key=uc_to_str(struct.key).rstrip(),
        group=struct.group,
        abap_msg_class=uc_to_str(struct.abapMsgClass).rstrip(),
        abap_msg_type=uc_to_str(struct.abapMsgType).rstrip(),
        abap_msg_number=uc_to_str(struct.abapMsgNumber).rstrip(),
        abap_msg_v1=uc_to_str(struct.abapMsgV1).rstrip(),
        abap_msg_v2=uc_to_str(struct.abapMsgV2).rstrip(),
        abap_msg_v3=uc_to_str(struct.abapMsgV3).rstrip(),
        abap_msg_v4=uc_to_str(struct.abapMsgV4).rstrip(),
    )


def _check(error_info, description, *args):
    if error_info.code != RFC_OK:
        raise_for_error_info(error_info_from(error_info), description, *args)


# ============================================================================
# SDK Library Loader
# ============================================================================

def _library_name():
    if _IS_WINDOWS:
        return 'sapnwrfc.dll'
    if _IS_MACOS:
        return 'libsapnwrfc.dylib'
    return 'libsapnwrfc.so'


def find_library(sdk_path=None):
    """Locate the SDK shared library; return ``(path, directory)``.

    Search order: explicit ``sdk_path`` (directory or file), then
    $SAPNWRFC_HOME/lib, then the standard install directories, then the
    system library path.
    """
    lib_name = _library_name()

    if sdk_path:
        candidate = os.path.join(sdk_path, lib_name)
        if os.path.isfile(candidate):
            return candidate, sdk_path
        if os.path.isfile(sdk_path):
            return sdk_path, os.path.dirname(sdk_path)

    env_home = os.environ.get('SAPNWRFC_HOME')
    if env_home:
        lib_dir = os.path.join(env_home, 'lib')
        candidate = os.path.join(lib_dir, lib_name)
        if os.path.isfile(candidate):
            return candidate, lib_dir

    if _IS_WINDOWS:
        search_paths = [
            r'C:\nwrfcsdk\lib',
            os.path.join(os.environ.get('ProgramFiles', ''), 'SAP', 'nwrfcsdk', 'lib'),
        ]
    else:
        search_paths = [
            '/usr/local/sap/nwrfcsdk/lib',
            '/opt/sap/nwrfcsdk/lib',
            '/usr/sap/nwrfcsdk/lib',
            os.path.expanduser('~/nwrfcsdk/lib'),
        ]
    for path in search_paths:
        candidate = os.path.join(path, lib_name)
        if os.path.isfile(candidate):
            return candidate, path

    found = ctypes.util.find_library('sapnwrfc')
    if found:
        return found, os.path.dirname(found) or None

    raise RfcError(
        'SAP NW RFC SDK library (%s) not found. Set SAPNWRFC_HOME to the SDK '
        'root directory or pass sdk_path' % lib_name,
        RfcErrorInfo(message='%s not found' % lib_name, key='SDK_NOT_FOUND', code=-1),
    )


def load_library(sdk_path=None):
    """Load the SDK and declare the prototypes of the functions used here."""
    lib_path, lib_dir = find_library(sdk_path)
    if _IS_WINDOWS:
        if lib_dir and hasattr(os, 'add_dll_directory'):
            os.add_dll_directory(lib_dir)
        lib = ctypes.WinDLL(lib_path)
    else:
        lib = ctypes.CDLL(lib_path)
    logger.info('SAP NW RFC SDK loaded from %s', lib_path)

    VP = c_void_p
    EI = POINTER(RFC_ERROR_INFO)
    RC = c_ulong
    prototypes = {
        'RfcGetVersion': ([POINTER(c_uint), POINTER(c_uint), POINTER(c_uint)], VP),
        'RfcOpenConnection': ([POINTER(RFC_CONNECTION_PARAMETER), c_uint, EI], VP),
        'RfcCloseConnection': ([VP, EI], RC),
        'RfcPing': ([VP, EI], RC),
        'RfcGetConnectionAttributes': ([VP, POINTER(RFC_ATTRIBUTES), EI], RC),
        'RfcGetFunctionDesc': ([VP, VP, EI], VP),
        'RfcGetParameterCount': ([VP, POINTER(c_uint), EI], RC),
        'RfcGetParameterDescByIndex': ([VP, c_uint, POINTER(RFC_PARAMETER_DESC), EI], RC),
        'RfcGetTypeName': ([VP, VP, EI], RC),
        'RfcGetTypeLength': ([VP, POINTER(c_uint), POINTER(c_uint), EI], RC),
        'RfcGetFieldCount': ([VP, POINTER(c_uint), EI], RC),
        'RfcGetFieldDescByIndex': ([VP, c_uint, POINTER(RFC_FIELD_DESC), EI], RC),
        'RfcCreateFunction': ([VP, EI], VP),
        'RfcDestroyFunction': ([VP, EI], RC),
        'RfcInvoke': ([VP, VP, EI], RC),
        'RfcSetString': ([VP, VP, VP, c_uint, EI], RC),
        'RfcGetString': ([VP, VP, VP, c_uint, POINTER(c_uint), EI], RC),
        'RfcGetStringLength': ([VP, VP, POINTER(c_uint), EI], RC),
        'RfcSetChars': ([VP, VP, VP, c_uint, EI], RC),
        'RfcGetChars': ([VP, VP, VP, c_uint, EI], RC),
        'RfcSetNum': ([VP, VP, VP, c_uint, EI], RC),
        'RfcGetNum': ([VP, VP, VP, c_uint, EI], RC),
        'RfcSetInt': ([VP, VP, c_int, EI], RC),
        'RfcGetInt': ([VP, VP, POINTER(c_int), EI], RC),
        'RfcSetInt8': ([VP, VP, c_int64, EI], RC),
        'RfcGetInt8': ([VP, VP, POINTER(c_int64), EI], RC),
        'RfcSetFloat': ([VP, VP, c_double, EI], RC),
        'RfcGetFloat': ([VP, VP, POINTER(c_double), EI], RC),
        'RfcSetDate': ([VP, VP, VP, EI], RC),
        'RfcGetDate': ([VP, VP, VP, EI], RC),
        'RfcSetTime': ([VP, VP, VP, EI], RC),
        'RfcGetTime': ([VP, VP, VP, EI], RC),
        'RfcSetBytes': ([VP, VP, POINTER(c_ubyte), c_uint, EI], RC),
        'RfcGetBytes': ([VP, VP, POINTER(c_ubyte), c_uint, EI], RC),
        'RfcSetXString': ([VP, VP, POINTER(c_ubyte), c_uint, EI], RC),
        'RfcGetXString': ([VP, VP, POINTER(c_ubyte), c_uint, POINTER(c_uint), EI], RC),
        'RfcGetStructure': ([VP, VP, POINTER(VP), EI], RC),
        'RfcGetTable': ([VP, VP, POINTER(VP), EI], RC),
        'RfcGetRowCount': ([VP, POINTER(c_uint), EI], RC),
        'RfcMoveTo': ([VP, c_uint, EI], RC),
        'RfcGetCurrentRow': ([VP, EI], VP),
        'RfcAppendNewRow': ([VP, EI], VP),
    }
    for name, (argtypes, restype) in prototypes.items():
        func = getattr(lib, name)
        func.argtypes = argtypes
        func.restype = restype
    return lib


# ============================================================================
# Containers
# ============================================================================

class SdkContainer:
    """A function, structure or table-row handle of the SDK."""

    def __init__(self, lib, handle, name):
        self._lib = lib
        self.handle = handle
        self.name = name

    def set_field(self, name, rfc_type, value):
        lib = self._lib
        name_uc = str_to_uc(name)
        error_info = RFC_ERROR_INFO()

        if rfc_type == RfcType.CHAR:
            lib.RfcSetChars(self.handle, name_uc, str_to_uc(value), len(value), byref(error_info))
        elif rfc_type == RfcType.NUM:
            lib.RfcSetNum(self.handle, name_uc, str_to_uc(value), len(value), byref(error_info))
        elif rfc_type in (RfcType.INT, RfcType.INT1, RfcType.INT2):
            lib.RfcSetInt(self.handle, name_uc, c_int(value), byref(error_info))
        elif rfc_type == RfcType.INT8:
            lib.RfcSetInt8(self.handle, name_uc, c_int64(value), byref(error_info))
        elif rfc_type == RfcType.FLOAT:
            lib.RfcSetFloat(self.handle, name_uc, c_double(value), byref(error_info))
        elif rfc_type == RfcType.DATE:
            lib.RfcSetDate(self.handle, name_uc, str_to_uc(value), byref(error_info))
        elif rfc_type == RfcType.TIME:
            lib.RfcSetTime(self.handle, name_uc, str_to_uc(value), byref(error_info))
        elif rfc_type in (RfcType.BYTE, RfcType.XSTRING):
            buf = (c_ubyte * len(value))(*value)
            setter = lib.RfcSetXString if rfc_type == RfcType.XSTRING else lib.RfcSetBytes
            setter(self.handle, name_uc, buf, len(value), byref(error_info))
        else:
            # BCD, DECF16/34, STRING, UTCLONG: the SDK parses the text form
            text = format(value, 'f') if isinstance(value, Decimal) else str(value)
            lib.RfcSetString(self.handle, name_uc, str_to_uc(text), len(text), byref(error_info))
        _check(error_info, 'Could not set %s of %s', name, self.name)

    def get_field(self, name, rfc_type, length=0):
        lib = self._lib
        name_uc = str_to_uc(name)
        error_info = RFC_ERROR_INFO()

        if rfc_type in (RfcType.CHAR, RfcType.NUM):
            buf = create_uc_buffer(max(length, 1))
            getter = lib.RfcGetChars if rfc_type == RfcType.CHAR else lib.RfcGetNum
            getter(self.handle, name_uc, buf, length, byref(error_info))
            _check(error_info, 'Could not get %s of %s', name, self.name)
            return uc_to_str(buf, length)

        if rfc_type in (RfcType.INT, RfcType.INT1, RfcType.INT2):
            val = c_int(0)
            lib.RfcGetInt(self.handle, name_uc, byref(val), byref(error_info))
            _check(error_info, 'Could not get %s of %s', name, self.name)
            return val.value

        if rfc_type == RfcType.INT8:
            val = c_int64(0)
            lib.RfcGetInt8(self.handle, name_uc, byref(val), byref(error_info))
            _check(error_info, 'Could not get %s of %s', name, self.name)
            return val.value

        if rfc_type == RfcType.FLOAT:
            val = c_double(0.0)
            lib.RfcGetFloat(self.handle, name_uc, byref(val), byref(error_info))
            _check(error_info, 'Could not get %s of %s', name, self.name)
            return val.value

        if rfc_type in (RfcType.DATE, RfcType.TIME):
            size = DATE_LENGTH if rfc_type == RfcType.DATE else TIME_LENGTH
            buf = create_uc_buffer(size)
            getter = lib.RfcGetDate if rfc_type == RfcType.DATE else lib.RfcGetTime
            getter(self.handle, name_uc, buf, byref(error_info))
            _check(error_info, 'Could not get %s of %s', name, self.name)
            return uc_to_str(buf, size)

        if rfc_type == RfcType.BYTE:
            buf = (c_ubyte * length)()
            lib.RfcGetBytes(self.handle, name_uc, buf, length, byref(error_info))
            _check(error_info, 'Could not get %s of %s', name, self.name)
            return bytes(buf)

        if rfc_type == RfcType.XSTRING:
            size = self._string_length(name_uc)
            if size == 0:
                return b''
            buf = (c_ubyte * size)()
            actual = c_uint(0)
            lib.RfcGetXString(self.handle, name_uc, buf, size, byref(actual), byref(error_info))
            _check(error_info, 'Could not get %s of %s', name, self.name)
            return bytes(buf[:actual.value])

        text = self._get_string(name_uc, name)
        if rfc_type in (RfcType.BCD, RfcType.DECF16, RfcType.DECF34):
            try:
                return Decimal(text) if text.strip() else Decimal(0)
            except InvalidOperation as exc:
                raise RfcError('Could not get %s of %s: %r is not a number' % (
                    name, self.name, text)) from exc
        return text

    def structure(self, name):
        handle = c_void_p()
        error_info = RFC_ERROR_INFO()
        self._lib.RfcGetStructure(self.handle, str_to_uc(name), byref(handle), byref(error_info))
        _check(error_info, 'Could not get structure %s of %s', name, self.name)
        return SdkContainer(self._lib, handle.value, name)

    def table(self, name):
        handle = c_void_p()
        error_info = RFC_ERROR_INFO()
        self._lib.RfcGetTable(self.handle, str_to_uc(name), byref(handle), byref(error_info))
        _check(error_info, 'Could not get table %s of %s', name, self.name)
        return SdkTable(self._lib, handle.value, name)

    def _string_length(self, name_uc):
        size = c_uint(0)
        error_info = RFC_ERROR_INFO()
        self._lib.RfcGetStringLength(self.handle, name_uc, byref(size), byref(error_info))
        _check(error_info, 'Could not get string length in %s', self.name)
        return size.value

    def _get_string(self, name_uc, name):
        error_info = RFC_ERROR_INFO()
        buf_size = max(self._string_length(name_uc) + 1, 2)
        buf = create_uc_buffer(buf_size)
        actual = c_uint(0)
        rc = self._lib.RfcGetString(self.handle, name_uc, buf, buf_size, byref(actual), byref(error_info))
        if rc == RFC_BUFFER_TOO_SMALL:
            buf_size = actual.value + 1
            buf = create_uc_buffer(buf_size)
            error_info = RFC_ERROR_INFO()
            self._lib.RfcGetString(self.handle, name_uc, buf, buf_size, byref(actual), byref(error_info))
        _check(error_info, 'Could not get %s of %s', name, self.name)
        return uc_to_str(buf, actual.value)


class SdkTable:
    def __init__(self, lib, handle, name):
        self._lib = lib
        self.handle = handle
        self.name = name

    def append_row(self):
        error_info = RFC_ERROR_INFO()
        row = self._lib.RfcAppendNewRow(self.handle, byref(error_info))
        _check(error_info, 'Could not append row to %s', self.name)
        return SdkContainer(self._lib, row, self.name)

    def row(self, index):
        error_info = RFC_ERROR_INFO()
        self._lib.RfcMoveTo(self.handle, index, byref(error_info))
        _check(error_info, 'Could not move to row %d of %s', index, self.name)
        row = self._lib.RfcGetCurrentRow(self.handle, byref(error_info))
        _check(error_info, 'Could not read row %d of %s', index, self.name)
        return SdkContainer(self._lib, row, self.name)

    def __len__(self):
        count = c_uint(0)
        error_info = RFC_ERROR_INFO()
        self._lib.RfcGetRowCount(self.handle, byref(count), byref(error_info))
        _check(error_info, 'Could not get row count of %s', self.name)
        return count.value


class SdkFunctionContainer(SdkContainer):
    def __init__(self, lib, handle, func_desc):
        super().__init__(lib, handle, func_desc.name)
        self.function_name = func_desc.name
        self.func_desc = func_desc


class SdkSession:
    """Connection handle plus the parameter buffers it was opened with."""

    def __init__(self, handle, param_bufs):
        self.handle = handle
        self.param_bufs = param_bufs


# ============================================================================
# Runtime
# ============================================================================

class NwRfcRuntime:
    """RFC runtime backed by the SAP NW RFC SDK shared library."""

    _instance = None
    _instance_lock = threading.Lock()

    def __init__(self, sdk_path=None, lib=None):
        self._lib = lib if lib is not None else load_library(sdk_path)

    @classmethod
    def get(cls, sdk_path=None):
        """Get or create the process-wide runtime."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls(sdk_path)
            return cls._instance

    # -- Connection --

    def open_connection(self, params):
        count = len(params)
        conn_params = (RFC_CONNECTION_PARAMETER * count)()
        param_bufs = []
        for i, (key, value) in enumerate(params.items()):
            # Connection parameter names are UPPER CASE in the SDK
            name_buf = str_to_uc(key.upper())
            value_buf = str_to_uc(str(value))
            param_bufs.extend([name_buf, value_buf])
            if _UC_NATIVE:
                conn_params[i].name = name_buf
                conn_params[i].value = value_buf
            else:
                conn_params[i].name = ctypes.cast(name_buf, _UC_P)
                conn_params[i].value = ctypes.cast(value_buf, _UC_P)

        error_info = RFC_ERROR_INFO()
        handle = self._lib.RfcOpenConnection(conn_params, count, byref(error_info))
        if not handle or error_info.code != RFC_OK:
            _check(error_info, 'Connection could not be opened')
            raise RfcError('Connection could not be opened: RfcOpenConnection returned NULL')
        param_bufs.append(conn_params)
        return SdkSession(handle, param_bufs)

    def close_connection(self, session):
        error_info = RFC_ERROR_INFO()
        handle, session.handle = session.handle, None
        session.param_bufs = []
        if handle is None:
            return
        self._lib.RfcCloseConnection(handle, byref(error_info))
        _check(error_info, 'Connection could not be closed')

    def ping(self, session):
        error_info = RFC_ERROR_INFO()
        self._lib.RfcPing(session.handle, byref(error_info))
        _check(error_info, 'Server could not be pinged')

    def get_connection_attributes(self, session):
        attrs = RFC_ATTRIBUTES()
        error_info = RFC_ERROR_INFO()
        self._lib.RfcGetConnectionAttributes(session.handle, byref(attrs), byref(error_info))
        _check(error_info, 'Could not get connection attributes')
        return {
            field_name: uc_to_str(getattr(attrs, field_name))
            for field_name, _ in RFC_ATTRIBUTES._fields_
            if field_name != 'reserved'
        }

    # -- Metadata --

    def get_function_description(self, session, name):
        return self._wrap_function_description(self._native_description(session, name), name)

    def _native_description(self, session, name):
        error_info = RFC_ERROR_INFO()
        func_desc = self._lib.RfcGetFunctionDesc(session.handle, str_to_uc(name), byref(error_info))
        _check(error_info, 'Could not get function description for "%s"', name)
        if not func_desc:
            raise RfcError('Could not get function description for "%s"' % name)
        return func_desc

    def _wrap_function_description(self, handle, name):
        lib = self._lib
        error_info = RFC_ERROR_INFO()
        count = c_uint(0)
        lib.RfcGetParameterCount(handle, byref(count), byref(error_info))
        _check(error_info, 'Could not get parameter count of %s', name)

        type_cache = {}
        parameters = []
        for i in range(count.value):
            desc = RFC_PARAMETER_DESC()
            lib.RfcGetParameterDescByIndex(handle, i, byref(desc), byref(error_info))
            _check(error_info, 'Could not get parameter %d of %s', i, name)
            parameters.append(ParameterDescription(
                name=uc_to_str(desc.name).rstrip(),
                parameter_type=RfcType(desc.type),
                direction=Direction(desc.direction),
                nuc_length=desc.nucLength,
                uc_length=desc.ucLength,
                decimals=desc.decimals,
                default_value=uc_to_str(desc.defaultValue).rstrip(),
                parameter_text=uc_to_str(desc.parameterText).rstrip(),
                optional=bool(desc.optional),
                type_description=self._wrap_type_description(desc.typeDescHandle, type_cache),
            ))
        return FunctionDescription(name, parameters)

    def _wrap_type_description(self, handle, cache):
        if not handle:
            return None
        if handle in cache:
            return cache[handle]
        lib = self._lib
        error_info = RFC_ERROR_INFO()

        name_buf = create_uc_buffer(31)
        lib.RfcGetTypeName(handle, name_buf, byref(error_info))
        _check(error_info, 'Could not get type name')
        nuc_length = c_uint(0)
        uc_length = c_uint(0)
        lib.RfcGetTypeLength(handle, byref(nuc_length), byref(uc_length), byref(error_info))
        _check(error_info, 'Could not get type length')
        count = c_uint(0)
        lib.RfcGetFieldCount(handle, byref(count), byref(error_info))
        _check(error_info, 'Could not get field count')

        fields = []
        for i in range(count.value):
            desc = RFC_FIELD_DESC()
            lib.RfcGetFieldDescByIndex(handle, i, byref(desc), byref(error_info))
            _check(error_info, 'Could not get field %d', i)
            fields.append(FieldDescription(
                name=uc_to_str(desc.name).rstrip(),
                field_type=RfcType(desc.type),
                nuc_length=desc.nucLength,
                nuc_offset=desc.nucOffset,
                uc_length=desc.ucLength,
                uc_offset=desc.ucOffset,
                decimals=desc.decimals,
                type_description=self._wrap_type_description(desc.typeDescHandle, cache),
            ))
        type_desc = TypeDescription(
            uc_to_str(name_buf).rstrip(), nuc_length.value, uc_length.value, fields)
        cache[handle] = type_desc
        return type_desc

    # -- Function containers --

    def create_function(self, session, func_desc):
        native = self._native_description(session, func_desc.name)
        error_info = RFC_ERROR_INFO()
        handle = self._lib.RfcCreateFunction(native, byref(error_info))
        _check(error_info, 'Could not create function "%s"', func_desc.name)
        return SdkFunctionContainer(self._lib, handle, func_desc)

    def invoke(self, session, container):
        error_info = RFC_ERROR_INFO()
        self._lib.RfcInvoke(session.handle, container.handle, byref(error_info))
        _check(error_info, 'Could not invoke function "%s"', container.function_name)

    def destroy_function(self, container):
        handle, container.handle = container.handle, None
        if handle:
            error_info = RFC_ERROR_INFO()
            self._lib.RfcDestroyFunction(handle, byref(error_info))
            if error_info.code != RFC_OK:
                logger.warning('RfcDestroyFunction(%s) failed: %s',
                               container.function_name, error_info_from(error_info))

    def version(self):
        major = c_uint(0)
        minor = c_uint(0)
        patch = c_uint(0)
        self._lib.RfcGetVersion(byref(major), byref(minor), byref(patch))
        return major.value, minor.value, patch.value
