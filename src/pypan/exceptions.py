"""
Exception hierarchy for pypan.

This module defines the exceptions raised by the PAN engine bridge, from
library loading and session initialization down to command execution and
result retrieval.
"""

from typing import Any, Dict, List, Mapping, Optional


class PanError(Exception):
    """Base exception for all pypan errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize PanError.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}


# Configuration exceptions
class ConfigurationError(PanError):
    """Base class for configuration-related errors."""


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration is missing."""


# Engine setup exceptions
class EngineSetupError(PanError):
    """Base class for errors raised while bringing the engine into the process."""


class LibraryLoadError(EngineSetupError):
    """Raised when a native library cannot be loaded."""


class LibraryResolutionError(LibraryLoadError):
    """Raised when a dependency library cannot be located by its logical name."""

    def __init__(self, name: str, searched: Optional[List[str]] = None) -> None:
        """
        Initialize LibraryResolutionError.

        Args:
            name: Logical name of the library (e.g. ``gfortran``)
            searched: Candidate names that were tried
        """
        message = f"Shared library not found: {name}"
        details = {"library": name, "searched": searched}
        super().__init__(message, details)
        self.name = name


class EngineLoadError(LibraryLoadError):
    """Raised when the engine library itself cannot be loaded."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        """
        Initialize EngineLoadError.

        Args:
            path: Filesystem path of the engine library
            reason: Optional description of the failure
        """
        message = f"Failed to load PAN engine library: {path}"
        if reason:
            message += f" ({reason})"
        details = {"path": path, "reason": reason}
        super().__init__(message, details)
        self.path = path


class EngineInitError(EngineSetupError):
    """Raised when the engine's global initialization does not succeed."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        """
        Initialize EngineInitError.

        Args:
            message: Error message
            status: Status code returned by the engine, if any
        """
        super().__init__(message, {"status": status})
        self.status = status


# Netlist exceptions
class NetlistError(PanError):
    """Base class for netlist-related errors."""


class NetlistNotFoundError(NetlistError):
    """Raised when the netlist file does not exist."""

    def __init__(self, path: str) -> None:
        """
        Initialize NetlistNotFoundError.

        Args:
            path: Path to the missing netlist
        """
        super().__init__(f"{path}: no such file.", {"path": path})
        self.path = path


class NetlistLoadError(NetlistError):
    """Raised when the engine rejects a netlist."""

    def __init__(self, path: str, status: Optional[int] = None) -> None:
        """
        Initialize NetlistLoadError.

        Args:
            path: Path to the netlist
            status: Status code returned by the engine
        """
        message = f"PAN failed to load netlist {path}"
        if status is not None:
            message += f" (status {status})"
        super().__init__(message, {"path": path, "status": status})
        self.path = path
        self.status = status


# Session exceptions
class SessionError(PanError):
    """Base class for session state errors."""


class SessionNotInitializedError(SessionError):
    """Raised when a command is issued against a session that is not ready."""


# Analysis exceptions
class AnalysisError(PanError):
    """Base class for analysis-related errors."""


class AnalysisFailedError(AnalysisError):
    """Raised when the engine reports that a command failed."""

    def __init__(self, analysis_name: str, analysis_type: str) -> None:
        """
        Initialize AnalysisFailedError.

        Args:
            analysis_name: User-chosen name of the analysis
            analysis_type: Analysis type token (e.g. ``tran``)
        """
        message = f"{analysis_type} analysis {analysis_name} failed"
        details = {"analysis": analysis_name, "type": analysis_type}
        super().__init__(message, details)
        self.analysis_name = analysis_name
        self.analysis_type = analysis_type


class MissingVariablesError(AnalysisError):
    """Raised when some requested variables do not exist in PAN's memory."""

    def __init__(self, names: List[str], analysis_name: Optional[str] = None) -> None:
        """
        Initialize MissingVariablesError.

        Args:
            names: Fully qualified names of the missing variables
            analysis_name: Analysis the variables were requested from
        """
        message = (
            "Some of the requested variables do not exist in PAN's memory: "
            + ", ".join(names)
        )
        details = {"missing": list(names), "analysis": analysis_name}
        super().__init__(message, details)
        self.names = list(names)


class VariableLengthMismatchError(AnalysisError):
    """Raised when retrieved variables cannot form a rectangular matrix."""

    def __init__(self, lengths: Mapping[str, int]) -> None:
        """
        Initialize VariableLengthMismatchError.

        Args:
            lengths: Mapping from variable name to its length
        """
        summary = ", ".join(f"{name}={n}" for name, n in lengths.items())
        message = f"Requested variables have different lengths: {summary}"
        super().__init__(message, {"lengths": dict(lengths)})
        self.lengths = dict(lengths)


# Variable exceptions
class VariableError(PanError):
    """Base class for result-variable errors."""


class UndefinedVariableError(VariableError):
    """Raised when a variable is not defined in the engine's memory."""

    def __init__(self, name: str, reason: Optional[str] = None) -> None:
        """
        Initialize UndefinedVariableError.

        Args:
            name: Fully qualified variable name
            reason: Optional description of why retrieval failed
        """
        message = f"Undefined variable: {name}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, {"variable": name, "reason": reason})
        self.name = name
