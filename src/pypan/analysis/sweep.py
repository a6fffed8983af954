#!/usr/bin/env python
# coding=utf-8
"""Live parameter sweeps over a loaded netlist.

A sweep alters one circuit parameter through a sequence of values and runs an
analysis after each alteration, without re-parsing the netlist.

Usage:

    >>> sweep = ParameterSweep(builder)
    >>> for value, result in sweep.run("Al", "R1", sweep_lin(1e3, 10e3, 10),
    ...                                 "dc", "Op", ["out"]):
    ...     print(value, result["out"])
"""

import logging
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .builder import AnalysisBuilder, AnalysisResult

_logger = logging.getLogger("pypan.ParameterSweep")

Number = Union[int, float]


def sweep_lin(start: Number, stop: Number, n: int) -> np.ndarray:
    """``n`` evenly spaced values from ``start`` to ``stop``, both included.

        >>> sweep_lin(0, 1, 5).tolist()
        [0.0, 0.25, 0.5, 0.75, 1.0]
    """
    if n < 1:
        raise ValueError("A sweep needs at least one point")
    return np.linspace(start, stop, n)


def sweep_log(start: Number, stop: Number, n: int) -> np.ndarray:
    """``n`` logarithmically spaced values from ``start`` to ``stop``.

        >>> sweep_log(1, 100, 3).tolist()
        [1.0, 10.0, 100.0]
    """
    if n < 1:
        raise ValueError("A sweep needs at least one point")
    if start <= 0 or stop <= 0:
        raise ValueError("Logarithmic sweeps need positive bounds")
    return np.geomspace(start, stop, n)


class ParameterSweep:
    """Alters a parameter value by value and runs an analysis for each."""

    # AnalysisBuilder methods that can follow an alteration
    ANALYSES = ("transient", "shooting", "envelope", "dc", "pole_zero")

    def __init__(self, builder: AnalysisBuilder) -> None:
        self.builder = builder

    def iterate(
        self,
        alter_name: str,
        param: str,
        values: Iterable[Any],
        analysis: str,
        analysis_name: str,
        variables: Sequence[str],
        *args: Any,
        **options: Any,
    ) -> Iterator[Tuple[Any, Optional[AnalysisResult]]]:
        """Yield ``(value, result)`` for each swept value.

        Args:
            alter_name: Name given to the alter commands
            param: Circuit parameter to change
            values: Values to assign, in order
            analysis: AnalysisBuilder method to run after each alteration
            analysis_name: Name given to the analysis commands
            variables: Variables to retrieve after each analysis
            *args: Mandatory analysis arguments (e.g. ``tstop``)
            **options: Analysis options

        Raises:
            ValueError: If ``analysis`` is not a sweepable analysis
            AnalysisFailedError: If an alteration or an analysis fails
        """
        if analysis not in self.ANALYSES:
            raise ValueError(
                f"Cannot sweep with analysis '{analysis}'. "
                f"Choose from {list(self.ANALYSES)}."
            )
        run_analysis = getattr(self.builder, analysis)

        for value in values:
            self.builder.alter(alter_name, param, value).raise_for_status()
            _logger.debug("%s = %s", param, value)
            result = run_analysis(analysis_name, *args, variables, **options)
            yield value, result

    def run(
        self,
        alter_name: str,
        param: str,
        values: Iterable[Any],
        analysis: str,
        analysis_name: str,
        variables: Sequence[str],
        *args: Any,
        **options: Any,
    ) -> List[Tuple[Any, Optional[AnalysisResult]]]:
        """Run the whole sweep and return every ``(value, result)`` pair."""
        return list(
            self.iterate(
                alter_name,
                param,
                values,
                analysis,
                analysis_name,
                variables,
                *args,
                **options,
            )
        )
