#!/usr/bin/env python
# coding=utf-8
"""Platform-specific shared library resolution.

The engine depends on a handful of system libraries whose on-disk names
differ between platforms (``libm.so.6`` on Linux, ``libm.dylib`` on macOS and
so on). This module maps a logical library name to something the dynamic
loader can open.
"""

import ctypes
import ctypes.util
import logging
import os
from dataclasses import dataclass
from typing import List, Optional

_logger = logging.getLogger("pypan.Platform")


@dataclass
class ResolvedLibrary:
    """A logical library name together with the name the loader will open."""

    logical_name: str
    loader_name: str

    @property
    def directory(self) -> Optional[str]:
        """Directory part of the loader name, if it is a path."""
        head = os.path.dirname(self.loader_name)
        return head or None


def candidate_names(lib_name: str) -> List[str]:
    """List the names to try for a logical library name.

    ``find_library`` expects names without the ``lib`` prefix, but callers
    may pass either form.

    Args:
        lib_name: Logical library name, e.g. ``"z"`` or ``"libz"``

    Returns:
        Candidate names in lookup order
    """
    names = [lib_name]
    if len(lib_name) > 3 and lib_name.startswith("lib"):
        names.append(lib_name[3:])
    return names


def find_shared_library(lib_name: str) -> Optional[ResolvedLibrary]:
    """Resolve a logical library name to a loadable file name.

    Args:
        lib_name: Logical library name

    Returns:
        ResolvedLibrary, or None if the system has no such library
    """
    for candidate in candidate_names(lib_name):
        found = ctypes.util.find_library(candidate)
        if found:
            _logger.debug("Resolved library %s as %s", lib_name, found)
            return ResolvedLibrary(logical_name=lib_name, loader_name=found)
    return None


def global_mode() -> int:
    """Loader flags for globally visible symbols."""
    return getattr(os, "RTLD_GLOBAL", ctypes.RTLD_GLOBAL)


def lazy_global_mode() -> int:
    """Loader flags for lazy binding with globally visible symbols."""
    return getattr(os, "RTLD_LAZY", 0) | global_mode()
