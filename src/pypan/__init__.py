"""pypan - Python bridge to the PAN circuit simulation engine.

This package loads the pre-built PAN engine library into the process,
initializes it from a netlist, runs analyses (transient, shooting, envelope,
DC, pole-zero, parameter alteration) and returns result variables as numpy
arrays.
"""

__version__ = "0.1.0"

from .analysis import AnalysisBuilder, AnalysisResult, ParameterSweep
from .api import (
    alter,
    dc,
    envelope,
    exec_cmd,
    get_var,
    load_libs,
    load_netlist,
    pz,
    shooting,
    tran,
)
from .config import ComplexPolicy, PanConfig, get_config, load_config, set_config
from .engine import (
    CommandExecutor,
    CommandStatus,
    EngineSession,
    LibraryLoader,
    LibrarySet,
    ResultVariable,
    UndefinedVariable,
    VariableKind,
    VariableReader,
)
from .exceptions import PanError

__all__ = [
    "AnalysisBuilder",
    "AnalysisResult",
    "ParameterSweep",
    "alter",
    "dc",
    "envelope",
    "exec_cmd",
    "get_var",
    "load_libs",
    "load_netlist",
    "pz",
    "shooting",
    "tran",
    "ComplexPolicy",
    "PanConfig",
    "get_config",
    "load_config",
    "set_config",
    "CommandExecutor",
    "CommandStatus",
    "EngineSession",
    "LibraryLoader",
    "LibrarySet",
    "ResultVariable",
    "UndefinedVariable",
    "VariableKind",
    "VariableReader",
    "PanError",
]
