#!/usr/bin/env python
# coding=utf-8
"""Per-analysis entry points that run a command and collect its results.

Every analysis except parameter alteration follows the same template:
serialize the command, execute it, then retrieve each requested variable
(``<analysis>.<variable>``) and assemble the retrieved columns into a matrix.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..core.constants import AnalysisTypes
from ..engine.executor import CommandExecutor, CommandStatus
from ..engine.session import EngineSession
from ..engine.variables import ResultVariable, UndefinedVariable, VariableReader
from ..exceptions import MissingVariablesError, VariableLengthMismatchError
from .commands import (
    Command,
    alter_command,
    analysis_command,
    pole_zero_command,
    qualified_name,
)

_logger = logging.getLogger("pypan.AnalysisBuilder")


@dataclass(eq=False)
class AnalysisResult:
    """Variables retrieved after an analysis.

    ``data`` has one column per retrieved variable, in request order. Variables
    the engine did not have are listed in ``missing`` and have no column.
    """

    analysis_name: str
    requested: List[str]
    columns: List[str]
    data: np.ndarray
    missing: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if every requested variable was retrieved."""
        return not self.missing

    @property
    def shape(self) -> tuple:
        return self.data.shape

    def __getitem__(self, variable: str) -> np.ndarray:
        try:
            index = self.columns.index(variable)
        except ValueError:
            raise KeyError(variable) from None
        return self.data[:, index]

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        if dtype is None:
            return self.data
        return self.data.astype(dtype)

    def to_dict(self) -> Dict[str, np.ndarray]:
        """Map each retrieved variable to its column."""
        return {name: self.data[:, i] for i, name in enumerate(self.columns)}

    def raise_for_missing(self) -> "AnalysisResult":
        """Raise MissingVariablesError if any requested variable is missing.

        Returns:
            This result, for chaining
        """
        if self.missing:
            raise MissingVariablesError(
                [qualified_name(self.analysis_name, v) for v in self.missing],
                self.analysis_name,
            )
        return self


def assemble_columns(variables: Sequence[ResultVariable]) -> np.ndarray:
    """Stack variables side by side into a matrix.

    Raises:
        VariableLengthMismatchError: If the variables differ in length
    """
    lengths = {var.name: len(var) for var in variables}
    if len(set(lengths.values())) > 1:
        raise VariableLengthMismatchError(lengths)
    if not variables:
        return np.empty((0, 0))
    return np.column_stack([var.values for var in variables])


class AnalysisBuilder:
    """Runs analyses against an initialized session.

    Options are passed as keyword arguments and serialized in the order given.
    """

    def __init__(self, session: EngineSession) -> None:
        self.session = session
        self.executor = CommandExecutor(session)
        self.reader = VariableReader(session)

    def run(self, command: Command) -> CommandStatus:
        """Execute a command, raising AnalysisFailedError on failure."""
        return self.executor.execute(command.to_string()).raise_for_status()

    def collect(
        self, analysis_name: str, variables: Sequence[str]
    ) -> Optional[AnalysisResult]:
        """Retrieve variables of an analysis that has already run.

        Args:
            analysis_name: Name of the analysis
            variables: Unqualified variable names, in the desired column order

        Returns:
            AnalysisResult, or None if no variables were requested

        Raises:
            VariableLengthMismatchError: If retrieved variables differ in length
        """
        if not variables:
            return None

        retrieved: List[ResultVariable] = []
        columns: List[str] = []
        missing: List[str] = []
        for variable in variables:
            result = self.reader.get(qualified_name(analysis_name, variable))
            if isinstance(result, UndefinedVariable):
                missing.append(variable)
                continue
            retrieved.append(result)
            columns.append(variable)

        if missing:
            _logger.warning(
                "Some of the requested variables do not exist in PAN's memory: %s",
                ", ".join(qualified_name(analysis_name, v) for v in missing),
            )

        return AnalysisResult(
            analysis_name=analysis_name,
            requested=list(variables),
            columns=columns,
            data=assemble_columns(retrieved),
            missing=missing,
        )

    def _run_and_collect(
        self, command: Command, variables: Sequence[str]
    ) -> Optional[AnalysisResult]:
        self.run(command)
        return self.collect(command.analysis_name, variables)

    def transient(
        self, name: str, tstop: Any, variables: Sequence[str] = (), **options: Any
    ) -> Optional[AnalysisResult]:
        """Run a transient analysis up to ``tstop``."""
        command = analysis_command(
            name, AnalysisTypes.TRANSIENT, [("tstop", tstop)], variables, options
        )
        return self._run_and_collect(command, variables)

    def shooting(
        self, name: str, period: Any, variables: Sequence[str] = (), **options: Any
    ) -> Optional[AnalysisResult]:
        """Run a shooting (periodic steady-state) analysis."""
        command = analysis_command(
            name, AnalysisTypes.SHOOTING, [("period", period)], variables, options
        )
        return self._run_and_collect(command, variables)

    def envelope(
        self,
        name: str,
        tstop: Any,
        period: Any,
        variables: Sequence[str] = (),
        **options: Any,
    ) -> Optional[AnalysisResult]:
        """Run an envelope analysis."""
        command = analysis_command(
            name,
            AnalysisTypes.ENVELOPE,
            [("tstop", tstop), ("period", period)],
            variables,
            options,
        )
        return self._run_and_collect(command, variables)

    def dc(
        self, name: str, variables: Sequence[str] = (), **options: Any
    ) -> Optional[AnalysisResult]:
        """Run a DC analysis."""
        command = analysis_command(name, AnalysisTypes.DC, (), variables, options)
        return self._run_and_collect(command, variables)

    def pole_zero(
        self, name: str, variables: Sequence[str] = (), **options: Any
    ) -> Optional[AnalysisResult]:
        """Run a pole-zero analysis.

        The pole-zero command cannot carry a manifest, so it is sent with a
        bare retention marker and the variables are fetched afterwards.
        """
        command = pole_zero_command(name, retain=bool(variables), options=options)
        return self._run_and_collect(command, variables)

    def alter(self, name: str, param: str, value: Any, **options: Any) -> CommandStatus:
        """Change a circuit parameter of the loaded netlist.

        Returns:
            The CommandStatus; a failed alteration is reported there rather
            than raised
        """
        command = alter_command(name, param, value, options)
        return self.executor.execute(command.to_string())
