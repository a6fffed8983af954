#!/usr/bin/env python
# coding=utf-8
"""Typed access to the four entry points exported by the PAN engine.

Every call here crosses into native code. Argument and return types are
declared on the ctypes function objects so that status codes come back with
the width the engine uses (``uint8`` or ``int32``).
"""

import ctypes
import logging
from ctypes import POINTER, c_char_p, c_double, c_int32, c_uint8
from dataclasses import dataclass
from typing import Any, Callable, List, Sequence

from ..core.constants import EntryPoints
from ..exceptions import EngineLoadError

_logger = logging.getLogger("pypan.EngineBindings")

DoublePointer = POINTER(c_double)


@dataclass
class RawVariable:
    """Output slots of a get-variable call.

    The two buffer pointers refer to engine-owned memory that is only valid
    until the next call into the engine.
    """

    status: int
    real: Any
    imaginary: Any
    rows: int
    cols: int


class EngineBindings:
    """Binds the engine entry points of one loaded library handle."""

    def __init__(self, handle: Any, encoding: str = "utf-8") -> None:
        """Look up and type every entry point.

        Args:
            handle: Loaded engine library (a ``ctypes.CDLL``)
            encoding: Encoding used for strings passed to the engine

        Raises:
            EngineLoadError: If the library does not export an entry point
        """
        self.encoding = encoding
        self._init_globals = self._bind(handle, EntryPoints.INIT_GLOBALS, c_uint8, [])
        self._netlist_init = self._bind(
            handle, EntryPoints.NETLIST_INIT, c_int32, [c_int32, POINTER(c_char_p)]
        )
        self._execute_command = self._bind(
            handle, EntryPoints.EXECUTE_COMMAND, c_uint8, [c_char_p]
        )
        self._get_variable = self._bind(
            handle,
            EntryPoints.GET_VARIABLE,
            c_int32,
            [
                c_char_p,
                POINTER(DoublePointer),
                POINTER(DoublePointer),
                POINTER(c_int32),
                POINTER(c_int32),
            ],
        )

    @staticmethod
    def _bind(
        handle: Any, symbol: str, restype: Any, argtypes: List[Any]
    ) -> Callable[..., Any]:
        try:
            func = getattr(handle, symbol)
        except AttributeError as e:
            raise EngineLoadError(
                str(getattr(handle, "_name", handle)),
                f"missing entry point {symbol}",
            ) from e
        if isinstance(func, ctypes._CFuncPtr):
            func.restype = restype
            func.argtypes = argtypes
        return func

    def _encode(self, text: str) -> bytes:
        return text.encode(self.encoding)

    def initialise_globals(self) -> int:
        """Call the engine's global initialization."""
        return int(self._init_globals())

    def netlist_init(self, argv: Sequence[str]) -> int:
        """Call the engine's netlist initialization with a program-style argv."""
        encoded = [self._encode(arg) for arg in argv]
        c_argv = (c_char_p * len(encoded))(*encoded)
        return int(self._netlist_init(len(encoded), c_argv))

    def execute_command(self, command: str) -> int:
        """Submit one command string to the engine's interpreter."""
        return int(self._execute_command(self._encode(command)))

    def get_variable(self, name: str) -> RawVariable:
        """Ask the engine for a named variable.

        The returned buffers are borrowed; copy them before the next engine
        call.
        """
        real = DoublePointer()
        imaginary = DoublePointer()
        rows = c_int32(0)
        cols = c_int32(0)
        status = self._get_variable(
            self._encode(name),
            ctypes.pointer(real),
            ctypes.pointer(imaginary),
            ctypes.pointer(rows),
            ctypes.pointer(cols),
        )
        _logger.debug(
            "get %s -> status=%s rows=%d cols=%d", name, status, rows.value, cols.value
        )
        return RawVariable(
            status=int(status),
            real=real,
            imaginary=imaginary,
            rows=rows.value,
            cols=cols.value,
        )
