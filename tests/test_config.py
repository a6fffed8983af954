#!/usr/bin/env python
# coding=utf-8
"""Tests for configuration management."""

import json
import logging
from unittest.mock import patch

import pytest

from pypan import config as config_module
from pypan.config import (
    ComplexPolicy,
    PanConfig,
    get_config,
    load_config,
    set_config,
)
from pypan.core.constants import Defaults, Libraries
from pypan.exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)


@pytest.fixture(autouse=True)
def reset_default_config():
    """Keep the module-level default configuration isolated per test."""
    set_config(None)
    yield
    set_config(None)


class TestPanConfig:
    """Test the configuration dataclass."""

    def test_defaults(self):
        config = PanConfig()

        assert config.engine_library is None
        assert config.dependency_libraries == list(Libraries.DEPENDENCIES)
        assert config.program_name == Defaults.PROGRAM_NAME
        assert config.encoding == "utf-8"
        assert config.complex_policy is ComplexPolicy.REAL_ONLY
        assert not config.verbose

    def test_dependency_list_not_shared(self):
        first, second = PanConfig(), PanConfig()
        first.dependency_libraries.append("extra")
        assert "extra" not in second.dependency_libraries

    def test_complex_policy_from_string(self):
        config = PanConfig(complex_policy="NON_NULL_IMAGINARY")
        assert config.complex_policy is ComplexPolicy.NON_NULL_IMAGINARY

    def test_invalid_complex_policy(self):
        with pytest.raises(InvalidConfigurationError, match="Unknown complex policy"):
            PanConfig(complex_policy="probe_memory")

    def test_require_engine_library(self, tmp_path):
        config = PanConfig(engine_library=tmp_path / "libpan.so")
        assert config.require_engine_library() == str(tmp_path / "libpan.so")

    def test_require_engine_library_missing(self):
        with pytest.raises(MissingConfigurationError, match="PYPAN_ENGINE_LIB"):
            PanConfig().require_engine_library()

    def test_update_from_dict(self, caplog):
        config = PanConfig()

        with caplog.at_level(logging.WARNING, logger="pypan.Config"):
            config.update_from_dict(
                {
                    "engine_library": "/opt/libpan.so",
                    "dependency_libraries": "m, gfortran",
                    "complex_policy": "non_null_imaginary",
                    "bogus": 1,
                }
            )

        assert config.engine_library == "/opt/libpan.so"
        assert config.dependency_libraries == ["m", "gfortran"]
        assert config.complex_policy is ComplexPolicy.NON_NULL_IMAGINARY
        assert "bogus" in caplog.text

    def test_file_round_trip(self, tmp_path):
        path = tmp_path / "conf" / "pypan.json"
        original = PanConfig(
            engine_library="/opt/libpan.so",
            complex_policy=ComplexPolicy.NON_NULL_IMAGINARY,
            log_level="DEBUG",
        )

        original.save_to_file(path)
        loaded = PanConfig.from_file(path)

        assert json.loads(path.read_text())["complex_policy"] == "non_null_imaginary"
        assert loaded.to_dict() == original.to_dict()

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            PanConfig.from_file(tmp_path / "none.json")

    def test_from_file_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(InvalidConfigurationError):
            PanConfig.from_file(path)

    def test_from_file_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(InvalidConfigurationError, match="JSON object"):
            PanConfig.from_file(path)


class TestEnvironment:
    """Test configuration from environment variables."""

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("PYPAN_ENGINE_LIB", "/opt/libpan.so")
        monkeypatch.setenv("PYPAN_DEPENDENCIES", "c,m")
        monkeypatch.setenv("PYPAN_VERBOSE", "yes")
        monkeypatch.setenv("PYPAN_COMPLEX_POLICY", "non_null_imaginary")
        monkeypatch.setenv("PYPAN_ENCODING", "latin-1")

        config = PanConfig.from_environment()

        assert config.engine_library == "/opt/libpan.so"
        assert config.dependency_libraries == ["c", "m"]
        assert config.verbose
        assert config.complex_policy is ComplexPolicy.NON_NULL_IMAGINARY
        assert config.encoding == "latin-1"

    def test_legacy_engine_variable(self, monkeypatch):
        monkeypatch.delenv("PYPAN_ENGINE_LIB", raising=False)
        monkeypatch.setenv("JUPAN_SO", "/legacy/libpan.so")

        assert PanConfig.from_environment().engine_library == "/legacy/libpan.so"

    def test_primary_variable_wins(self, monkeypatch):
        monkeypatch.setenv("PYPAN_ENGINE_LIB", "/new/libpan.so")
        monkeypatch.setenv("JUPAN_SO", "/legacy/libpan.so")

        assert PanConfig.from_environment().engine_library == "/new/libpan.so"

    def test_invalid_value_logged_and_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("PYPAN_COMPLEX_POLICY", "guess")

        with caplog.at_level(logging.WARNING, logger="pypan.Config"):
            config = PanConfig.from_environment()

        assert config.complex_policy is ComplexPolicy.REAL_ONLY
        assert "PYPAN_COMPLEX_POLICY" in caplog.text


class TestLogging:
    """Test log level application."""

    @pytest.fixture(autouse=True)
    def restore_level(self):
        logger = logging.getLogger("pypan")
        level = logger.level
        yield
        logger.setLevel(level)

    def test_apply_log_level(self):
        PanConfig(log_level="info").apply_logging()
        assert logging.getLogger("pypan").level == logging.INFO

    def test_verbose_forces_debug(self):
        PanConfig(log_level="ERROR", verbose=True).apply_logging()
        assert logging.getLogger("pypan").level == logging.DEBUG

    def test_unknown_level(self):
        with pytest.raises(InvalidConfigurationError):
            PanConfig(log_level="LOUD").apply_logging()


class TestDefaultConfig:
    """Test the module-level default configuration."""

    def test_get_config_reads_environment_once(self, monkeypatch):
        monkeypatch.setenv("PYPAN_ENGINE_LIB", "/opt/libpan.so")

        with patch.object(
            PanConfig, "from_environment", wraps=PanConfig.from_environment
        ) as mock_env:
            first = get_config()
            second = get_config()

        assert first is second
        assert first.engine_library == "/opt/libpan.so"
        mock_env.assert_called_once()

    def test_set_config(self):
        config = PanConfig(engine_library="/opt/libpan.so")
        set_config(config)
        assert get_config() is config

    def test_load_config_from_file(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"program_name": "pan64"}))

        config = load_config(path)

        assert config.program_name == "pan64"
        assert config_module.get_config() is config

    def test_load_config_from_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "pypan.json").write_text(json.dumps({"encoding": "ascii"}))
        monkeypatch.chdir(tmp_path)

        assert load_config().encoding == "ascii"
