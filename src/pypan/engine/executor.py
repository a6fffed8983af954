#!/usr/bin/env python
# coding=utf-8
"""Submitting command strings to the PAN command interpreter."""

import logging
from dataclasses import dataclass
from typing import Tuple

from ..core.constants import StatusCodes
from ..exceptions import AnalysisFailedError
from .session import EngineSession

_logger = logging.getLogger("pypan.CommandExecutor")


def parse_command_header(command: str) -> Tuple[str, str]:
    """Split the analysis name and type off the front of a command.

    Args:
        command: Command string, e.g. ``"Tr tran tstop=1"``

    Returns:
        Tuple of (analysis_name, analysis_type); empty strings for missing
        tokens
    """
    tokens = command.split(None, 2)
    name = tokens[0] if tokens else ""
    analysis_type = tokens[1] if len(tokens) > 1 else ""
    return name, analysis_type


@dataclass(frozen=True)
class CommandStatus:
    """Outcome of one command."""

    command: str
    status: int
    analysis_name: str
    analysis_type: str

    @property
    def ok(self) -> bool:
        """True if the engine accepted and completed the command."""
        return self.status == StatusCodes.EXECUTE_COMMAND_OK

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_status(self) -> "CommandStatus":
        """Raise AnalysisFailedError if the command failed.

        Returns:
            This status, for chaining
        """
        if not self.ok:
            raise AnalysisFailedError(self.analysis_name, self.analysis_type)
        return self


class CommandExecutor:
    """Runs single commands against an initialized session.

    Each call blocks until the engine returns; there is no timeout, retry or
    cancellation.
    """

    def __init__(self, session: EngineSession) -> None:
        self.session = session

    def execute(self, command: str) -> CommandStatus:
        """Execute one command.

        Args:
            command: Complete command line

        Returns:
            CommandStatus describing the outcome

        Raises:
            SessionNotInitializedError: If the session has no loaded netlist
        """
        bindings = self.session.require_initialized()
        name, analysis_type = parse_command_header(command)

        _logger.debug("Executing: %s", command)
        status = CommandStatus(
            command=command,
            status=bindings.execute_command(command),
            analysis_name=name,
            analysis_type=analysis_type,
        )
        if not status.ok:
            _logger.warning(
                "%s analysis %s failed (status %d)", analysis_type, name, status.status
            )
        return status
