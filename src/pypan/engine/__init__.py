"""Native engine access: library loading, sessions, commands and variables."""

from .bindings import EngineBindings, RawVariable
from .executor import CommandExecutor, CommandStatus, parse_command_header
from .loader import LibraryLoader, LibrarySet
from .session import EngineSession, load_netlist
from .variables import (
    ResultVariable,
    UndefinedVariable,
    VariableKind,
    VariableReader,
)

__all__ = [
    "EngineBindings",
    "RawVariable",
    "CommandExecutor",
    "CommandStatus",
    "parse_command_header",
    "LibraryLoader",
    "LibrarySet",
    "EngineSession",
    "load_netlist",
    "ResultVariable",
    "UndefinedVariable",
    "VariableKind",
    "VariableReader",
]
