#!/usr/bin/env python
# coding=utf-8
"""Serialization of PAN analysis commands.

A command line has the form::

    <name> <type> [<mandatory k=v> ...] [mem=["v1", "v2"]] [<k>=<v> ...]

Option values are written with ``str()`` and forwarded unescaped; the engine
is the only judge of whether a literal is acceptable. Options keep the order
in which the caller supplied them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.constants import AnalysisTypes, Defaults


def format_value(value: Any) -> str:
    """Render an option value as a command-line literal."""
    return str(value)


def format_option(key: str, value: Any) -> str:
    """Render one ``key=value`` pair."""
    return f"{key}={format_value(value)}"


def format_manifest(variables: Sequence[str]) -> str:
    """Render a mem manifest, e.g. ``mem=["time", "x"]``."""
    quoted = ", ".join(f'"{var}"' for var in variables)
    return f"mem=[{quoted}]"


def qualified_name(analysis_name: str, variable: str) -> str:
    """Name under which the engine stores a variable of an analysis."""
    return f"{analysis_name}.{variable}"


@dataclass
class Command:
    """One analysis command, ready to be serialized."""

    analysis_name: str
    analysis_type: str
    parameters: List[Tuple[str, Any]] = field(default_factory=list)
    mem_vars: List[str] = field(default_factory=list)
    retain_marker: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.analysis_name or any(c.isspace() for c in self.analysis_name):
            raise ValueError(
                f"Analysis name must be a single non-empty token: {self.analysis_name!r}"
            )
        if self.mem_vars and self.retain_marker is not None:
            raise ValueError("A command takes either a mem manifest or a marker")

    def tokens(self) -> List[str]:
        """Command tokens in serialization order."""
        parts = [self.analysis_name, self.analysis_type]
        parts.extend(format_option(key, value) for key, value in self.parameters)
        if self.mem_vars:
            parts.append(format_manifest(self.mem_vars))
        elif self.retain_marker is not None:
            parts.append(format_option("mem", self.retain_marker))
        parts.extend(format_option(key, value) for key, value in self.options.items())
        return parts

    def to_string(self) -> str:
        return " ".join(self.tokens())

    def __str__(self) -> str:
        return self.to_string()


def _ordered(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    return dict(options) if options else {}


def analysis_command(
    analysis_name: str,
    analysis_type: str,
    parameters: Iterable[Tuple[str, Any]] = (),
    mem_vars: Sequence[str] = (),
    options: Optional[Mapping[str, Any]] = None,
) -> Command:
    """Build a command that retains ``mem_vars`` in engine memory."""
    return Command(
        analysis_name=analysis_name,
        analysis_type=analysis_type,
        parameters=list(parameters),
        mem_vars=list(mem_vars),
        options=_ordered(options),
    )


def pole_zero_command(
    analysis_name: str,
    retain: bool,
    options: Optional[Mapping[str, Any]] = None,
) -> Command:
    """Build a pole-zero command.

    Pole-zero analyses take no inline manifest; when results are wanted a bare
    retention marker is sent instead and any caller-supplied ``mem`` option is
    dropped.
    """
    filtered = {
        key: value
        for key, value in _ordered(options).items()
        if key not in Defaults.POLE_ZERO_RESERVED_OPTIONS
    }
    return Command(
        analysis_name=analysis_name,
        analysis_type=AnalysisTypes.POLE_ZERO,
        retain_marker=Defaults.RETAIN_MARKER if retain else None,
        options=filtered,
    )


def alter_command(
    analysis_name: str,
    param: str,
    value: Any,
    options: Optional[Mapping[str, Any]] = None,
) -> Command:
    """Build a parameter alteration command."""
    return Command(
        analysis_name=analysis_name,
        analysis_type=AnalysisTypes.ALTER,
        parameters=[("param", f'"{param}"'), ("value", value)],
        options=_ordered(options),
    )
