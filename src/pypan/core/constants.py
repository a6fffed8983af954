"""
Centralized constants for pypan.

This module contains the native symbol names, status codes, analysis tokens
and default values used throughout the PAN bridge.
"""

from typing import List, Tuple


class EntryPoints:
    """Symbols exported by the PAN engine library."""

    INIT_GLOBALS = "InitialiseGlobals"
    NETLIST_INIT = "JuliaPanInit"
    EXECUTE_COMMAND = "PanJuliaExecuteCommand"
    GET_VARIABLE = "PanJuliaGet"

    ALL = [INIT_GLOBALS, NETLIST_INIT, EXECUTE_COMMAND, GET_VARIABLE]


class StatusCodes:
    """Success values returned by each entry point."""

    INIT_GLOBALS_OK = 1
    NETLIST_INIT_OK = 0
    EXECUTE_COMMAND_OK = 1
    GET_VARIABLE_OK = 1


class AnalysisTypes:
    """Analysis type tokens understood by the PAN command interpreter."""

    TRANSIENT = "tran"
    SHOOTING = "shooting"
    ENVELOPE = "envelope"
    DC = "dc"
    POLE_ZERO = "pz"
    ALTER = "alter"

    ALL = [TRANSIENT, SHOOTING, ENVELOPE, DC, POLE_ZERO, ALTER]


class Libraries:
    """Library names used when loading the engine."""

    ENGINE = "pan"

    # C runtime (with the dynamic linker), math, compression, history, Fortran
    DEPENDENCIES: Tuple[str, ...] = ("c", "m", "z", "bz2", "history", "gfortran")


class EnvironmentVariables:
    """Environment variables read by the configuration layer."""

    ENGINE_LIBRARY = "PYPAN_ENGINE_LIB"
    LEGACY_ENGINE_LIBRARY = "JUPAN_SO"
    DEPENDENCIES = "PYPAN_DEPENDENCIES"
    LOG_LEVEL = "PYPAN_LOG_LEVEL"
    VERBOSE = "PYPAN_VERBOSE"
    COMPLEX_POLICY = "PYPAN_COMPLEX_POLICY"
    ENCODING = "PYPAN_ENCODING"


class Defaults:
    """Default configuration values."""

    PROGRAM_NAME = "pan"
    ENCODING = "utf-8"
    LOG_LEVEL = "WARNING"

    # Retention marker used by pole-zero analyses, which take no inline manifest
    RETAIN_MARKER = "1"

    # Options the pole-zero command manages itself
    POLE_ZERO_RESERVED_OPTIONS: List[str] = ["mem"]

