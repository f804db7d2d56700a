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
Runtime contract: what a Connection needs from the layer that talks to SAP.

rfcbind.sdk.NwRfcRuntime implements it on top of the SAP NW RFC SDK shared
library; rfcbind.loopback.LoopbackRuntime implements it in-process.
"""

from typing import Any, Dict, Mapping, Protocol, Tuple

from .container import FunctionContainer
from .metadata import FunctionDescription


class RfcRuntime(Protocol):
    def open_connection(self, params: Mapping[str, str]) -> Any:
        """Open a session and return its handle. Raises RfcError."""

    def close_connection(self, handle: Any) -> None:
        """Close a session. The handle is unusable afterwards, even on error."""

    def ping(self, handle: Any) -> None:
        ...

    def get_connection_attributes(self, handle: Any) -> Dict[str, str]:
        ...

    def get_function_description(self, handle: Any, name: str) -> FunctionDescription:
        ...

    def create_function(self, handle: Any, func_desc: FunctionDescription) -> FunctionContainer:
        ...

    def invoke(self, handle: Any, container: FunctionContainer) -> None:
        ...

    def destroy_function(self, container: FunctionContainer) -> None:
        ...

    def version(self) -> Tuple[int, int, int]:
        ...


def default_runtime():
    """The process-wide SDK runtime, loaded on first use."""
    from .sdk import NwRfcRuntime
    return NwRfcRuntime.get()


def get_nwrfclib_version(runtime=None):
    """Return ``(major, minor, patchlevel)`` of the RFC library in use."""
    runtime = runtime if runtime is not None else default_runtime()
    return tuple(runtime.version())
