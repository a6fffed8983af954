"""Analysis commands and result assembly."""

from .builder import AnalysisBuilder, AnalysisResult
from .commands import Command, alter_command, analysis_command, pole_zero_command
from .sweep import ParameterSweep, sweep_lin, sweep_log

__all__ = [
    "AnalysisBuilder",
    "AnalysisResult",
    "Command",
    "alter_command",
    "analysis_command",
    "pole_zero_command",
    "ParameterSweep",
    "sweep_lin",
    "sweep_log",
]
