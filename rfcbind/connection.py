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
Client connection to an SAP system.

A Connection is either closed or open. While open it owns exactly one
session handle of the underlying runtime; the handle (together with the
connection parameter buffers the runtime keeps for it) is released exactly
once, by close(), by leaving a ``with`` block, or by __del__ when an open
connection is dropped.

Example:
    with Connection(ashost='sap01', sysnr='00', client='100',
                    user='RFC_USER', passwd='secret') as conn:
        result = conn.call('BAPI_COMPANY_GETLIST')
        for company in result['COMPANY_LIST']:
            print(company['COMPANY'], company['NAME1'])
"""

import contextlib
import logging
import threading
import time

from .errors import ConnectionClosedError, ParameterShapeError, RfcLibError
from .events import ERROR, OK, RfcEvent, emit
from .fill import fill_function
from .metadata import FunctionDescription
from .runtime import default_runtime
from .wrap import wrap_result

logger = logging.getLogger(__name__)


class _SessionGuard:
    """One open session handle; released at most once."""

    def __init__(self, runtime, handle):
        self.runtime = runtime
        self.handle = handle
        self.released = False

    def release(self):
        if self.released:
            return
        self.released = True
        self.runtime.close_connection(self.handle)


class Connection:
    """A connection to an SAP system via the RFC protocol.

    Args:
        params: Mapping of connection parameters (ashost, sysnr, client,
                user, passwd, lang, dest, mshost, group, saprouter, ...).
                Keyword arguments not listed below are added to it.
        runtime: Object implementing rfcbind.runtime.RfcRuntime. Defaults to
                 the SAP NW RFC SDK runtime, loaded on first open.
        rstrip: Strip trailing blanks from CHAR results (default True).
        return_import_params: Also return IMPORT parameters from call().
        event_hook: Callable receiving an RfcEvent per operation.

    The constructor does not open the connection; use open(), a ``with``
    block, or Connection.from_params().
    """

    def __init__(self, params=None, *, runtime=None, rstrip=True,
                 return_import_params=False, event_hook=None, **kwargs):
        connection_params = dict(params or {})
        connection_params.update(kwargs)
        self._params = {str(k): str(v) for k, v in connection_params.items()}
        self._runtime = runtime
        self.rstrip = rstrip
        self.return_import_params = return_import_params
        self.event_hook = event_hook
        self._guard = None
        self._lock = threading.RLock()

    @classmethod
    def from_params(cls, params, **options):
        """Create a connection and open it."""
        conn = cls(params, **options)
        conn.open()
        return conn

    @classmethod
    def from_dest(cls, dest, **options):
        """Create and open a connection to a destination of sapnwrfc.ini."""
        return cls.from_params({'dest': dest}, **options)

    # -- Properties --

    @property
    def connection_params(self):
        return dict(self._params)

    @property
    def runtime(self):
        if self._runtime is None:
            self._runtime = default_runtime()
        return self._runtime

    @property
    def alive(self):
        """True while the connection holds an open session. No I/O."""
        return self._guard is not None

    def set_rstrip(self, rstrip):
        self.rstrip = rstrip
        return self

    def set_return_import_params(self, return_import_params):
        self.return_import_params = return_import_params
        return self

    # -- Context manager / finalizer --

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __del__(self):
        guard = getattr(self, '_guard', None)
        if guard is None:
            return
        self._guard = None
        try:
            guard.release()
        except Exception:
            pass

    def __repr__(self):
        return '<Connection %s %s>' % (self._target(), 'open' if self.alive else 'closed')

    # -- Connection lifecycle --

    def open(self):
        """Open the connection. No-op when already open."""
        with self._lock:
            if self._guard is not None:
                return
            runtime = self.runtime
            with self._observe('open'):
                handle = runtime.open_connection(dict(self._params))
            self._guard = _SessionGuard(runtime, handle)
            logger.info('RFC connection opened to %s', self._target())

    def close(self):
        """Close the connection. No-op when already closed.

        The connection is closed afterwards even when the runtime reports
        an error, which is then raised.
        """
        with self._lock:
            guard, self._guard = self._guard, None
            if guard is None:
                return
            with self._observe('close'):
                guard.release()
            logger.info('RFC connection to %s closed', self._target())

    def reopen(self):
        """Close and open again.

        A failing close does not prevent the open attempt. When both fail the
        open error is raised with the close error as its cause.
        """
        with self._lock:
            try:
                self.close()
            except RfcLibError as close_error:
                logger.warning('Close before reopen failed: %s', close_error)
                try:
                    self.open()
                except RfcLibError as open_error:
                    raise open_error from close_error
                return
            self.open()

    def ping(self):
        """Ping the server, opening the connection first when needed.

        A failed ping raises but leaves the connection state unchanged.
        """
        with self._lock:
            self._ensure_open()
            with self._observe('ping'):
                self.runtime.ping(self._guard.handle)

    def get_connection_attributes(self):
        """Return the current session attributes as a dict of str."""
        with self._lock:
            self._ensure_open()
            with self._observe('attributes'):
                attributes = self.runtime.get_connection_attributes(self._guard.handle)
            if self.rstrip:
                return {name: value.rstrip(' ') for name, value in attributes.items()}
            return dict(attributes)

    def get_function_description(self, func_name):
        """Return the FunctionDescription of ``func_name``.

        Opens the connection first when needed; otherwise a pure query.
        """
        with self._lock:
            self._ensure_open()
            with self._observe('metadata', func_name):
                func_desc = self.runtime.get_function_description(self._guard.handle, func_name)
            logger.debug('Got function description for %s (%d parameters)',
                         func_name, len(func_desc))
            return func_desc

    # -- RFC Function Invocation --

    def call(self, func, params=None, **kwargs):
        """Call an RFC-enabled function module.

        Args:
            func: Function module name, or a FunctionDescription obtained
                  earlier from get_function_description() to skip
                  rebuilding it. The runtime may still fetch its own native
                  handle for the function.
            params: Mapping or object with named fields holding the IMPORT,
                    CHANGING and TABLES parameters. Keyword arguments may be
                    used instead.

        Returns:
            dict of EXPORT, CHANGING and TABLES parameters (plus IMPORT
            parameters when return_import_params is set). Structures are
            dicts, tables are lists of dicts.

        Raises ConnectionClosedError without contacting the runtime when the
        connection is not open.
        """
        if kwargs:
            if params is not None:
                raise ParameterShapeError(
                    'Pass parameters either as one object or as keyword arguments, not both')
            params = kwargs
        func_name = func.name if isinstance(func, FunctionDescription) else func

        with self._lock:
            if self._guard is None:
                raise ConnectionClosedError('call() requires an open connection')
            runtime = self.runtime
            handle = self._guard.handle
            logger.debug('Calling %s', func_name)
            with self._observe('call', func_name):
                if isinstance(func, FunctionDescription):
                    func_desc = func
                else:
                    func_desc = runtime.get_function_description(handle, func_name)
                container = runtime.create_function(handle, func_desc)
                try:
                    fill_function(func_desc, container, params)
                    runtime.invoke(handle, container)
                    return wrap_result(func_desc, container,
                                       self.return_import_params, self.rstrip)
                finally:
                    runtime.destroy_function(container)

    # -- Internal --

    def _target(self):
        return self._params.get('dest') or self._params.get('ashost') or self._params.get('mshost') or '?'

    def _ensure_open(self):
        if self._guard is None:
            self.open()

    @contextlib.contextmanager
    def _observe(self, operation, function=None):
        started = time.perf_counter()
        try:
            yield
        except Exception as exc:
            emit(self.event_hook, RfcEvent(operation, ERROR, function, _elapsed_ms(started), exc))
            raise
        emit(self.event_hook, RfcEvent(operation, OK, function, _elapsed_ms(started)))


def _elapsed_ms(started):
    return (time.perf_counter() - started) * 1000.0
