#!/usr/bin/env python
# coding=utf-8
"""Engine sessions: a loaded engine initialized from one netlist.

A session must complete both initialization calls (global initialization and
netlist parsing) before any command can be executed against it. Component and
node identifiers in later commands only make sense for the netlist used here.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from ..config import PanConfig, get_config
from ..core.constants import StatusCodes
from ..exceptions import (
    EngineInitError,
    NetlistError,
    NetlistLoadError,
    NetlistNotFoundError,
    PanError,
    SessionNotInitializedError,
)
from .bindings import EngineBindings
from .loader import LibraryLoader, LibrarySet

_logger = logging.getLogger("pypan.EngineSession")


class EngineSession:
    """Owns the engine's library handles and its initialization state.

    Sessions can be used as context managers; leaving the block releases the
    libraries the session loaded itself. The engine offers no shutdown entry
    point, so an engine that was initialized stays resident in the process.
    """

    def __init__(
        self,
        config: Optional[PanConfig] = None,
        libraries: Optional[LibrarySet] = None,
        loader: Optional[LibraryLoader] = None,
    ) -> None:
        """Create a session.

        Args:
            config: Configuration; the default configuration if omitted
            libraries: An already loaded LibrarySet to reuse
            loader: Loader used when libraries must be loaded lazily
        """
        self.config = config if config is not None else get_config()
        self._loader = loader
        self._libraries = libraries
        self._owns_libraries = False
        self._bindings: Optional[EngineBindings] = None
        self.initialized = False
        self.netlist: Optional[str] = None
        self.last_error: Optional[PanError] = None
        self.closed = False

        if self.config.verbose:
            self.config.apply_logging()

    @property
    def libraries(self) -> Optional[LibrarySet]:
        """The LibrarySet this session runs on, if loaded."""
        return self._libraries

    @property
    def bindings(self) -> EngineBindings:
        """Entry-point bindings of the engine.

        Raises:
            SessionNotInitializedError: If the engine has not been loaded
        """
        if self._bindings is None:
            raise SessionNotInitializedError("The PAN engine has not been loaded")
        return self._bindings

    def _ensure_libraries(self) -> LibrarySet:
        if self._libraries is None or self._libraries.closed:
            if self._loader is None:
                self._loader = LibraryLoader(self.config)
            self._libraries = self._loader.load()
            self._owns_libraries = True
            self._bindings = None
        if self._bindings is None:
            self._bindings = EngineBindings(
                self._libraries.engine, encoding=self.config.encoding
            )
        return self._libraries

    def initialize(self, netlist: Union[str, Path]) -> "EngineSession":
        """Initialize the engine from a netlist file.

        Args:
            netlist: Path to the netlist

        Returns:
            This session, now initialized

        Raises:
            NetlistNotFoundError: If the netlist file does not exist; the
                session is left unchanged
            EngineInitError: If global initialization fails, or failed earlier
                in this process
            NetlistLoadError: If the engine rejects the netlist
            LibraryLoadError: If the engine or a dependency cannot be loaded
            MissingConfigurationError: If no engine library is configured
        """
        if self.closed:
            raise SessionNotInitializedError("Session has been closed")

        path = str(netlist)
        if not os.path.isfile(path):
            raise NetlistNotFoundError(path)

        libraries = self._ensure_libraries()
        if libraries.global_init_failed:
            raise EngineInitError(
                "PAN global initialization already failed in this process; "
                "retrying requires a fresh process"
            )

        self.initialized = False
        status = self.bindings.initialise_globals()
        if status != StatusCodes.INIT_GLOBALS_OK:
            libraries.global_init_failed = True
            raise EngineInitError(
                f"PAN global initialization failed (status {status})", status
            )

        argv = [self.config.program_name, path]
        status = self.bindings.netlist_init(argv)
        if status != StatusCodes.NETLIST_INIT_OK:
            raise NetlistLoadError(path, status)

        self.initialized = True
        self.netlist = path
        self.last_error = None
        _logger.info("Loaded netlist %s", path)
        return self

    def require_initialized(self) -> EngineBindings:
        """Check that commands may be executed against this session.

        Returns:
            The engine bindings

        Raises:
            SessionNotInitializedError: If the session is closed or has not
                loaded a netlist
        """
        if self.closed:
            raise SessionNotInitializedError("Session has been closed")
        if not self.initialized:
            raise SessionNotInitializedError(
                "No netlist loaded; call load_netlist() first"
            )
        return self.bindings

    def close(self) -> None:
        """Release the libraries this session loaded and mark it unusable."""
        if self.closed:
            return
        if self._owns_libraries and self._loader is not None:
            self._loader.release()
        self._bindings = None
        self.initialized = False
        self.closed = True
        _logger.debug("Session closed")

    def __enter__(self) -> "EngineSession":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "initialized" if self.initialized else "not initialized"
        return f"EngineSession(netlist={self.netlist!r}, {state})"


def load_netlist(
    filename: Union[str, Path],
    session: Optional[EngineSession] = None,
    config: Optional[PanConfig] = None,
) -> Tuple[bool, EngineSession]:
    """Initialize a session from a netlist.

    Recoverable failures (missing netlist, failed initialization, rejected
    netlist) are logged, stored on ``session.last_error`` and reported through
    the returned flag. Failures to load the engine itself propagate.

    Args:
        filename: Path to the netlist
        session: Session to initialize; a new one is created if omitted
        config: Configuration for a newly created session

    Returns:
        Tuple of (success, session)
    """
    if session is None:
        session = EngineSession(config=config)

    try:
        session.initialize(filename)
    except (NetlistError, EngineInitError) as e:
        _logger.error("%s", e)
        session.last_error = e
        return False, session
    return True, session
