"""
Functional interface to the PAN engine.

These functions mirror the session-oriented classes for interactive use::

    ok, session = load_netlist("circuit.pan")
    data = tran("Tr", 1e-3, ["time", "out"], session, method=2)
    alter("Al", "R1", 2e3, session)
"""

from pathlib import Path
from typing import Any, Optional, Sequence, Union

from .analysis.builder import AnalysisBuilder, AnalysisResult
from .config import PanConfig
from .engine.executor import CommandExecutor, CommandStatus
from .engine.loader import LibraryLoader, LibrarySet
from .engine.session import EngineSession, load_netlist
from .engine.variables import VariableReader, VariableResult
from .exceptions import SessionNotInitializedError

__all__ = [
    "load_libs",
    "load_netlist",
    "exec_cmd",
    "get_var",
    "tran",
    "shooting",
    "envelope",
    "dc",
    "pz",
    "alter",
]


def _require(session: Optional[EngineSession]) -> EngineSession:
    if session is None:
        raise SessionNotInitializedError(
            "No session given; call load_netlist() first"
        )
    return session


def load_libs(
    engine_path: Optional[Union[str, Path]] = None,
    config: Optional[PanConfig] = None,
) -> LibrarySet:
    """Load the engine library and its dependencies.

    Args:
        engine_path: Path to the engine; the configured path if omitted
        config: Configuration to use

    Returns:
        LibrarySet that can be passed to ``EngineSession(libraries=...)``
    """
    loader = LibraryLoader(config)
    return loader.load(str(engine_path) if engine_path else None)


def exec_cmd(command: str, session: Optional[EngineSession] = None) -> CommandStatus:
    """Execute a raw command string."""
    return CommandExecutor(_require(session)).execute(command)


def get_var(name: str, session: Optional[EngineSession] = None) -> VariableResult:
    """Retrieve a fully qualified variable, e.g. ``"Tr.time"``."""
    return VariableReader(_require(session)).get(name)


def tran(
    name: str,
    tstop: Any,
    mem_vars: Sequence[str] = (),
    session: Optional[EngineSession] = None,
    **options: Any,
) -> Optional[AnalysisResult]:
    """Run a transient analysis."""
    return AnalysisBuilder(_require(session)).transient(name, tstop, mem_vars, **options)


def shooting(
    name: str,
    period: Any,
    mem_vars: Sequence[str] = (),
    session: Optional[EngineSession] = None,
    **options: Any,
) -> Optional[AnalysisResult]:
    """Run a shooting analysis."""
    return AnalysisBuilder(_require(session)).shooting(name, period, mem_vars, **options)


def envelope(
    name: str,
    tstop: Any,
    period: Any,
    mem_vars: Sequence[str] = (),
    session: Optional[EngineSession] = None,
    **options: Any,
) -> Optional[AnalysisResult]:
    """Run an envelope analysis."""
    return AnalysisBuilder(_require(session)).envelope(
        name, tstop, period, mem_vars, **options
    )


def dc(
    name: str,
    mem_vars: Sequence[str] = (),
    session: Optional[EngineSession] = None,
    **options: Any,
) -> Optional[AnalysisResult]:
    """Run a DC analysis."""
    return AnalysisBuilder(_require(session)).dc(name, mem_vars, **options)


def pz(
    name: str,
    mem_vars: Sequence[str] = (),
    session: Optional[EngineSession] = None,
    **options: Any,
) -> Optional[AnalysisResult]:
    """Run a pole-zero analysis."""
    return AnalysisBuilder(_require(session)).pole_zero(name, mem_vars, **options)


def alter(
    name: str,
    param: str,
    value: Any,
    session: Optional[EngineSession] = None,
    **options: Any,
) -> CommandStatus:
    """Change a circuit parameter of the loaded netlist."""
    return AnalysisBuilder(_require(session)).alter(name, param, value, **options)
