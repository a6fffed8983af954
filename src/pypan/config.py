"""
Configuration management for pypan.

This module provides the configuration consumed by engine sessions, with
support for environment variables, JSON configuration files and runtime
updates. Sessions take an explicit configuration; the module-level default is
only used when none is passed.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pypan.core.constants import Defaults, EnvironmentVariables, Libraries
from pypan.exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)

_logger = logging.getLogger("pypan.Config")


class ComplexPolicy(Enum):
    """How retrieved variables are classified as real or complex.

    The engine does not report whether a variable is complex. ``REAL_ONLY``
    returns the real part for every variable. ``NON_NULL_IMAGINARY`` treats a
    non-null imaginary buffer pointer as the engine's complex flag.
    """

    REAL_ONLY = "real_only"
    NON_NULL_IMAGINARY = "non_null_imaginary"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class PanConfig:
    """Configuration for the PAN engine bridge."""

    # Engine
    engine_library: Optional[str] = None
    dependency_libraries: List[str] = field(
        default_factory=lambda: list(Libraries.DEPENDENCIES)
    )
    program_name: str = Defaults.PROGRAM_NAME
    encoding: str = Defaults.ENCODING

    # Results
    complex_policy: ComplexPolicy = ComplexPolicy.REAL_ONLY

    # Logging
    log_level: str = Defaults.LOG_LEVEL
    verbose: bool = False

    def __post_init__(self) -> None:
        """Normalize values that may arrive as plain strings."""
        if isinstance(self.complex_policy, str):
            self.complex_policy = self._parse_complex_policy(self.complex_policy)
        if self.engine_library is not None:
            self.engine_library = str(self.engine_library)

    @staticmethod
    def _parse_complex_policy(value: str) -> ComplexPolicy:
        try:
            return ComplexPolicy(value.lower())
        except ValueError:
            raise InvalidConfigurationError(
                f"Unknown complex policy: {value}. "
                f"Valid options: {', '.join(p.value for p in ComplexPolicy)}"
            )

    def require_engine_library(self) -> str:
        """
        Get the engine library path.

        Returns:
            Path to the engine shared library

        Raises:
            MissingConfigurationError: If no engine library is configured
        """
        if not self.engine_library:
            raise MissingConfigurationError(
                "No PAN engine library configured. Set "
                f"{EnvironmentVariables.ENGINE_LIBRARY} or pass engine_library."
            )
        return self.engine_library

    def apply_logging(self) -> None:
        """Apply the configured log level to the ``pypan`` logger."""
        logger = logging.getLogger("pypan")
        if self.verbose:
            logger.setLevel(logging.DEBUG)
            return
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise InvalidConfigurationError(f"Unknown log level: {self.log_level}")
        logger.setLevel(level)

    def update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """
        Update configuration from a dictionary.

        Args:
            config_dict: Dictionary with configuration values
        """
        for key, value in config_dict.items():
            if key == "complex_policy" and isinstance(value, str):
                self.complex_policy = self._parse_complex_policy(value)
            elif key == "dependency_libraries":
                if isinstance(value, str):
                    value = _parse_list(value)
                self.dependency_libraries = list(value)
            elif hasattr(self, key):
                setattr(self, key, value)
            else:
                _logger.warning("Ignoring unknown configuration key: %s", key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result = asdict(self)
        result["complex_policy"] = self.complex_policy.value
        return result

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "PanConfig":
        """
        Load configuration from a JSON file.

        Args:
            filepath: Path to configuration file

        Returns:
            PanConfig instance

        Raises:
            ConfigurationError: If file cannot be read or parsed
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise ConfigurationError(f"Configuration file not found: {filepath}")

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidConfigurationError(f"Invalid JSON in configuration file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}")

        if not isinstance(config_dict, dict):
            raise InvalidConfigurationError(
                f"Configuration file must contain a JSON object: {filepath}"
            )

        config = cls()
        config.update_from_dict(config_dict)
        return config

    def save_to_file(self, filepath: Union[str, Path]) -> None:
        """
        Save configuration to a JSON file.

        Args:
            filepath: Path to save configuration
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_environment(cls) -> "PanConfig":
        """
        Create configuration from environment variables.

        Recognized variables:
        - PYPAN_ENGINE_LIB=/path/to/libpan.so (JUPAN_SO is accepted as well)
        - PYPAN_DEPENDENCIES=c,m,z,bz2,history,gfortran
        - PYPAN_LOG_LEVEL=DEBUG
        - PYPAN_VERBOSE=true
        - PYPAN_COMPLEX_POLICY=non_null_imaginary
        - PYPAN_ENCODING=utf-8

        Returns:
            PanConfig instance
        """
        config = cls()

        engine = os.environ.get(EnvironmentVariables.ENGINE_LIBRARY) or os.environ.get(
            EnvironmentVariables.LEGACY_ENGINE_LIBRARY
        )
        if engine:
            config.engine_library = engine

        env_mapping: Dict[str, Tuple[str, Callable[[str], Any]]] = {
            EnvironmentVariables.DEPENDENCIES: ("dependency_libraries", _parse_list),
            EnvironmentVariables.LOG_LEVEL: ("log_level", str),
            EnvironmentVariables.VERBOSE: ("verbose", _parse_bool),
            EnvironmentVariables.COMPLEX_POLICY: (
                "complex_policy",
                cls._parse_complex_policy,
            ),
            EnvironmentVariables.ENCODING: ("encoding", str),
        }

        for env_var, (attr, converter) in env_mapping.items():
            value = os.environ.get(env_var)
            if value is not None:
                try:
                    setattr(config, attr, converter(value))
                except (ValueError, ConfigurationError) as e:
                    _logger.warning("Failed to set %s from %s: %s", attr, env_var, e)

        return config


# Default configuration instance
_default_config: Optional[PanConfig] = None


def get_config() -> PanConfig:
    """
    Get the default configuration instance.

    Returns:
        Default PanConfig, created from the environment on first use
    """
    global _default_config
    if _default_config is None:
        _default_config = PanConfig.from_environment()
    return _default_config


def set_config(config: Optional[PanConfig]) -> None:
    """
    Set the default configuration instance.

    Args:
        config: PanConfig to use by default, or None to re-read the environment
    """
    global _default_config
    _default_config = config


def load_config(filepath: Optional[Union[str, Path]] = None) -> PanConfig:
    """
    Load configuration from file or environment and make it the default.

    Args:
        filepath: Optional path to configuration file

    Returns:
        Loaded configuration
    """
    if filepath:
        config = PanConfig.from_file(filepath)
    else:
        config = PanConfig.from_environment()
        for location in (Path.cwd() / "pypan.json", Path.home() / ".pypan.json"):
            if location.exists():
                config = PanConfig.from_file(location)
                break

    set_config(config)
    return config
