#!/usr/bin/env python
# coding=utf-8
"""Retrieving result variables from the engine's memory.

The engine hands back pointers into its own buffers. Those buffers may be
reused or freed by the next engine call, so every retrieval copies the data
into a numpy array owned by the caller before returning.

Variables are modelled as one-dimensional sequences: the length is the row
count when it exceeds one, otherwise the column count.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

import numpy as np

from ..config import ComplexPolicy
from ..core.constants import StatusCodes
from ..exceptions import UndefinedVariableError
from .bindings import RawVariable
from .session import EngineSession

_logger = logging.getLogger("pypan.VariableReader")


class VariableKind(Enum):
    """Element type of a retrieved variable."""

    REAL = "real"
    COMPLEX = "complex"


@dataclass(frozen=True, eq=False)
class ResultVariable:
    """A variable copied out of the engine."""

    name: str
    values: np.ndarray
    kind: VariableKind = VariableKind.REAL

    @property
    def is_complex(self) -> bool:
        return self.kind is VariableKind.COMPLEX

    def __len__(self) -> int:
        return len(self.values)

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        if dtype is None:
            return self.values
        return self.values.astype(dtype)


@dataclass(frozen=True)
class UndefinedVariable:
    """Retrieval failure for a variable the engine does not know."""

    name: str
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return False

    def to_exception(self) -> UndefinedVariableError:
        return UndefinedVariableError(self.name, self.reason)


VariableResult = Union[ResultVariable, UndefinedVariable]


def effective_length(rows: int, cols: int) -> int:
    """Length of a variable reported with the given shape."""
    return rows if rows > 1 else cols


def copy_buffer(pointer: Any, length: int) -> np.ndarray:
    """Copy ``length`` doubles from a native buffer into a new array."""
    if length == 0:
        return np.empty(0, dtype=np.float64)
    view = np.ctypeslib.as_array(pointer, shape=(length,))
    return np.array(view, dtype=np.float64, copy=True)


class VariableReader:
    """Fetches named variables from an initialized session."""

    def __init__(
        self, session: EngineSession, complex_policy: Optional[ComplexPolicy] = None
    ) -> None:
        """Create a reader.

        Args:
            session: Initialized engine session
            complex_policy: How to classify variables as complex; the
                session configuration decides if omitted
        """
        self.session = session
        self.complex_policy = (
            complex_policy
            if complex_policy is not None
            else session.config.complex_policy
        )

    def get(self, name: str) -> VariableResult:
        """Retrieve a variable.

        Args:
            name: Fully qualified name, e.g. ``"Tr.time"``

        Returns:
            ResultVariable with a private copy of the data, or
            UndefinedVariable if the engine has no such variable

        Raises:
            SessionNotInitializedError: If the session has no loaded netlist
        """
        bindings = self.session.require_initialized()
        raw = bindings.get_variable(name)
        return self._convert(name, raw)

    def get_or_raise(self, name: str) -> ResultVariable:
        """Retrieve a variable, raising UndefinedVariableError on failure."""
        result = self.get(name)
        if isinstance(result, UndefinedVariable):
            raise result.to_exception()
        return result

    def _convert(self, name: str, raw: RawVariable) -> VariableResult:
        if raw.status != StatusCodes.GET_VARIABLE_OK:
            return UndefinedVariable(name)

        length = effective_length(raw.rows, raw.cols)
        if length < 0:
            return UndefinedVariable(name, f"engine reported length {length}")
        if length > 0 and not raw.real:
            return UndefinedVariable(name, "engine returned a null buffer")

        real = copy_buffer(raw.real, length)

        if self._reports_complex(raw):
            imaginary = copy_buffer(raw.imaginary, length)
            return ResultVariable(name, real + 1j * imaginary, VariableKind.COMPLEX)
        return ResultVariable(name, real, VariableKind.REAL)

    def _reports_complex(self, raw: RawVariable) -> bool:
        if self.complex_policy is ComplexPolicy.NON_NULL_IMAGINARY:
            return bool(raw.imaginary)
        if raw.imaginary:
            _logger.debug(
                "Imaginary buffer present but complex results are disabled; "
                "returning real part"
            )
        return False
