"""
Core utilities package for pypan.

This package contains the constants and platform helpers shared by the
engine bridge.
"""

from pypan.core.constants import (
    AnalysisTypes,
    Defaults,
    EntryPoints,
    Libraries,
    StatusCodes,
)
from pypan.core.platform import (
    ResolvedLibrary,
    candidate_names,
    find_shared_library,
)

__all__ = [
    # Constants
    "AnalysisTypes",
    "Defaults",
    "EntryPoints",
    "Libraries",
    "StatusCodes",
    # Library resolution
    "ResolvedLibrary",
    "candidate_names",
    "find_shared_library",
]
