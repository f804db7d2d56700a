"""Tests for the ctypes layer that do not need the SAP NW RFC SDK."""

from __future__ import annotations

import ctypes
import os

import pytest

from rfcbind import CommunicationError, RfcError
from rfcbind import errors, sdk


def _set_uc(struct: ctypes.Structure, name: str, text: str) -> None:
    if sdk._UC_NATIVE:
        setattr(struct, name, text)
    else:
        encoded = text.encode("utf-16-le")
        ctypes.memmove(getattr(struct, name), encoded, len(encoded))


def _error_struct(code: int, group: int, key: str, message: str) -> sdk.RFC_ERROR_INFO:
    struct = sdk.RFC_ERROR_INFO()
    struct.code = code
    struct.group = group
    _set_uc(struct, "key", key)
    _set_uc(struct, "message", message)
    return struct


class FakeLib:
    """Stands in for the loaded SDK; writes results through byref() arguments."""

    def __init__(self) -> None:
        self.closed = []
        self.ping_error = None

    def RfcGetVersion(self, major, minor, patch):
        major._obj.value, minor._obj.value, patch._obj.value = 7, 50, 13
        return None

    def RfcPing(self, handle, error_info):
        if self.ping_error is not None:
            ctypes.memmove(ctypes.addressof(error_info._obj), ctypes.addressof(self.ping_error),
                           ctypes.sizeof(sdk.RFC_ERROR_INFO))
        return error_info._obj.code

    def RfcCloseConnection(self, handle, error_info):
        self.closed.append(handle)
        return 0


def test_unicode_round_trip() -> None:
    text = "Grüße aus Walldorf"

    assert sdk.uc_to_str(sdk.str_to_uc(text)) == text
    assert sdk.str_to_uc(None) is None
    assert sdk.uc_to_str(None) == ""
    assert sdk.uc_to_str("ABC   ", 3) == "ABC"


def test_error_info_from_structure() -> None:
    struct = _error_struct(
        errors.RFC_COMMUNICATION_FAILURE, errors.ERGRP_COMMUNICATION_FAILURE,
        "RFC_COMMUNICATION_FAILURE", "partner not reached",
    )

    info = sdk.error_info_from(struct)

    assert info.code == errors.RFC_COMMUNICATION_FAILURE
    assert info.group == errors.ERGRP_COMMUNICATION_FAILURE
    assert info.key == "RFC_COMMUNICATION_FAILURE"
    assert info.message == "partner not reached"
    assert info.abap_msg_class == ""


def test_find_library_in_explicit_path(tmp_path) -> None:
    lib_file = tmp_path / sdk._library_name()
    lib_file.write_bytes(b"")

    assert sdk.find_library(str(tmp_path)) == (str(lib_file), str(tmp_path))
    assert sdk.find_library(str(lib_file)) == (str(lib_file), str(tmp_path))


def test_find_library_via_sapnwrfc_home(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    lib_dir = tmp_path / "lib"
    lib_dir.mkdir()
    (lib_dir / sdk._library_name()).write_bytes(b"")
    monkeypatch.setenv("SAPNWRFC_HOME", str(tmp_path))

    path, directory = sdk.find_library()

    assert directory == str(lib_dir)
    assert os.path.basename(path) == sdk._library_name()


def test_missing_library(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SAPNWRFC_HOME", raising=False)
    monkeypatch.setattr(sdk.os.path, "isfile", lambda path: False)
    monkeypatch.setattr(sdk.ctypes.util, "find_library", lambda name: None)

    with pytest.raises(RfcError) as excinfo:
        sdk.find_library()

    assert excinfo.value.key == "SDK_NOT_FOUND"
    assert "SAPNWRFC_HOME" in excinfo.value.description


def test_runtime_version_and_ping_failure() -> None:
    lib = FakeLib()
    runtime = sdk.NwRfcRuntime(lib=lib)
    session = sdk.SdkSession(1234, [])

    assert runtime.version() == (7, 50, 13)
    runtime.ping(session)

    lib.ping_error = _error_struct(
        errors.RFC_COMMUNICATION_FAILURE, errors.ERGRP_COMMUNICATION_FAILURE,
        "RFC_COMMUNICATION_FAILURE", "connection reset",
    )
    with pytest.raises(CommunicationError) as excinfo:
        runtime.ping(session)
    assert excinfo.value.message == "connection reset"


def test_close_releases_handle_once() -> None:
    lib = FakeLib()
    runtime = sdk.NwRfcRuntime(lib=lib)
    session = sdk.SdkSession(1234, ["buffers"])

    runtime.close_connection(session)
    runtime.close_connection(session)

    assert lib.closed == [1234]
    assert session.handle is None
    assert session.param_bufs == []
