#!/usr/bin/env python
# coding=utf-8
"""Loading the PAN engine and its native dependencies into the process.

The engine is linked against the C runtime, libm, zlib, bzip2, readline's
history library and the Fortran runtime. These must be opened with globally
visible symbols before the engine itself, otherwise the engine is left with a
partially resolved symbol table.
"""

import ctypes
import logging
import os
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Set

from ..config import PanConfig, get_config
from ..core.constants import Libraries
from ..core.platform import (
    ResolvedLibrary,
    candidate_names,
    find_shared_library,
    global_mode,
    lazy_global_mode,
)
from ..exceptions import (
    EngineLoadError,
    LibraryLoadError,
    LibraryResolutionError,
)

_logger = logging.getLogger("pypan.LibraryLoader")

# (name, mode) -> handle
OpenerType = Callable[[str, int], Any]
ResolverType = Callable[[str], Optional[ResolvedLibrary]]

# The dynamic loader and the engine's globals are per process, so loaded
# library sets and failed global initializations are tracked per process too,
# keyed by absolute engine path.
_process_libraries: Dict[str, "LibrarySet"] = {}
_failed_global_init: Set[str] = set()


def engine_key(engine_path: str) -> str:
    """Process-table key of an engine library path."""
    return os.path.abspath(engine_path)


def default_opener(name: str, mode: int) -> Any:
    """Open a shared library with ctypes."""
    return ctypes.CDLL(name, mode=mode)


class LibrarySet(Mapping[str, Any]):
    """Read-only table of the native libraries loaded for one engine.

    Keys are logical library names; the engine itself is stored under
    ``Libraries.ENGINE``. The set owns its handles: they are never handed out
    for storage elsewhere, and ``close()`` drops all of them.
    """

    def __init__(self, handles: Dict[str, Any], engine_path: str) -> None:
        self._handles = dict(handles)
        self.engine_path = engine_path
        self.closed = False

    def __getitem__(self, name: str) -> Any:
        if self.closed:
            raise LibraryLoadError(f"Library set for {self.engine_path} is closed")
        return self._handles[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    @property
    def global_init_failed(self) -> bool:
        """True once the engine's global initialization failed in this process.

        The engine's state afterwards is unknown, so it is never initialized
        again; the record outlives this set and any loader.
        """
        return engine_key(self.engine_path) in _failed_global_init

    @global_init_failed.setter
    def global_init_failed(self, failed: bool) -> None:
        if failed:
            _failed_global_init.add(engine_key(self.engine_path))
        else:
            _failed_global_init.discard(engine_key(self.engine_path))

    @property
    def engine(self) -> Any:
        """Handle of the engine library."""
        return self[Libraries.ENGINE]

    def close(self) -> None:
        """Drop every handle held by this set.

        The engine has no shutdown entry point, so libraries are not unloaded
        from the process; only the references held here are released.
        """
        if self.closed:
            return
        _logger.debug("Releasing %d library handles", len(self._handles))
        self._handles.clear()
        self.closed = True
        key = engine_key(self.engine_path)
        if _process_libraries.get(key) is self:
            del _process_libraries[key]

    def __repr__(self) -> str:
        state = "closed" if self.closed else ", ".join(self._handles)
        return f"LibrarySet({self.engine_path!r}: {state})"


class LibraryLoader:
    """Resolves and loads the engine library plus its dependencies.

    Loaded sets are shared across the process: loading an engine that any
    loader already brought in returns that set instead of opening the
    libraries a second time. Only the loader that opened a set closes it on
    release; the others just forget it.
    """

    def __init__(
        self,
        config: Optional[PanConfig] = None,
        opener: Optional[OpenerType] = None,
        resolver: Optional[ResolverType] = None,
    ) -> None:
        """Initialize the loader.

        Args:
            config: Configuration; the default configuration if omitted
            opener: Callable ``(name, mode) -> handle``; ctypes by default
            resolver: Callable mapping a logical library name to a
                ResolvedLibrary; ``find_shared_library`` by default
        """
        self.config = config if config is not None else get_config()
        self._opener = opener or default_opener
        self._resolver = resolver or find_shared_library
        self._library_set: Optional[LibrarySet] = None
        self._opened_set = False

    @property
    def library_set(self) -> Optional[LibrarySet]:
        """The active LibrarySet, if any."""
        if self._library_set is not None and self._library_set.closed:
            self._library_set = None
        return self._library_set

    def resolve_dependencies(self) -> List[ResolvedLibrary]:
        """Resolve every configured dependency by its logical name.

        Returns:
            Resolved libraries in load order

        Raises:
            LibraryResolutionError: If any dependency cannot be found
        """
        resolved = []
        for lib_name in self.config.dependency_libraries:
            library = self._resolver(lib_name)
            if library is None:
                raise LibraryResolutionError(lib_name, candidate_names(lib_name))
            resolved.append(library)
        return resolved

    def load(self, engine_path: Optional[str] = None) -> LibrarySet:
        """Load the dependency libraries and then the engine.

        Args:
            engine_path: Path to the engine library; the configured path if
                omitted

        Returns:
            The LibrarySet holding every loaded handle

        Raises:
            LibraryResolutionError: If a dependency cannot be located
            LibraryLoadError: If a dependency cannot be opened, or a different
                engine is already loaded by this loader
            EngineLoadError: If the engine file does not exist (checked before
                any dependency is opened) or cannot be opened
        """
        path = engine_path or self.config.require_engine_library()

        active = self.library_set
        if active is not None:
            if engine_key(active.engine_path) == engine_key(path):
                _logger.debug("Engine %s already loaded", path)
                return active
            raise LibraryLoadError(
                f"Loader already holds engine {active.engine_path}; "
                f"release it before loading {path}",
                {"active": active.engine_path, "requested": path},
            )

        shared = _process_libraries.get(engine_key(path))
        if shared is not None and not shared.closed:
            _logger.debug("Engine %s already loaded in this process", path)
            self._library_set = shared
            self._opened_set = False
            return shared
        if engine_key(path) in _failed_global_init:
            _logger.warning(
                "PAN global initialization already failed for %s in this process", path
            )

        if not os.path.isfile(path):
            raise EngineLoadError(path, "no such file")

        handles: Dict[str, Any] = {}
        for library in self.resolve_dependencies():
            try:
                handles[library.logical_name] = self._opener(
                    library.loader_name, global_mode()
                )
            except OSError as e:
                raise LibraryLoadError(
                    f"Failed to load library {library.loader_name}: {e}",
                    {"library": library.logical_name, "file": library.loader_name},
                ) from e
            _logger.debug(
                "Successfully loaded library %s @ %s",
                library.loader_name,
                library.directory or "system path",
            )

        try:
            handles[Libraries.ENGINE] = self._opener(path, lazy_global_mode())
        except OSError as e:
            raise EngineLoadError(path, str(e)) from e
        _logger.info("Loaded PAN engine from %s", path)

        self._library_set = LibrarySet(handles, path)
        self._opened_set = True
        _process_libraries[engine_key(path)] = self._library_set
        return self._library_set

    def release(self) -> None:
        """Forget the active LibrarySet, closing it if this loader opened it."""
        if self._library_set is not None and self._opened_set:
            self._library_set.close()
        self._library_set = None
        self._opened_set = False
