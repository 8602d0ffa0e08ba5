"""
Unit tests for configuration settings module.

Tests the TfvarConfig class including:
- Initialization with defaults
- Environment variable overrides
- Command line argument processing
- Validation
"""

import argparse
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from tfvar.config.defaults import DEBUG_FILES, get_env_flag
from tfvar.config.settings import TfvarConfig

FIXTURES_DIR = Path(__file__).parent.parent.parent / "fixtures"

CLEAN_ENV = {
    key: value for key, value in os.environ.items() if not key.startswith("TFVAR_")
}


@pytest.fixture(autouse=True)
def clean_environment():
    with patch.dict(os.environ, CLEAN_ENV, clear=True):
        yield


class TestTfvarConfigInitialization:
    """Test basic initialization and defaults."""

    def test_default_initialization(self):
        config = TfvarConfig()

        assert config.config_dir == Path(".")
        assert isinstance(config.debug_dir, Path)
        assert config.output_file is None

        assert config.env_var is False
        assert config.enable_descriptions is False
        assert config.describe_unset is True
        assert config.auto_assign is False
        assert config.ignore_default is False
        assert config.enable_debug is False
        assert config.loglevel == "WARNING"
        assert config.header == ""
        assert config.var_definitions == []
        assert config.var_files == []

    def test_path_conversion(self):
        config = TfvarConfig(
            config_dir="./infra",
            output_file="out/terraform.tfvars",
            var_files=["a.tfvars"],
        )

        assert isinstance(config.config_dir, Path)
        assert isinstance(config.output_file, Path)
        assert config.var_files == [Path("a.tfvars")]

    def test_debug_files_copied(self):
        config = TfvarConfig()
        config.debug_files["test"] = "test.csv"

        assert "test" not in DEBUG_FILES

    def test_get_debug_file_path(self, tmp_path):
        config = TfvarConfig(debug_dir=tmp_path)

        assert config.get_debug_file_path("variables") == tmp_path / "variables.csv"
        with pytest.raises(ValueError):
            config.get_debug_file_path("unknown")

    def test_log_level(self):
        assert TfvarConfig(loglevel="DEBUG").log_level == logging.DEBUG
        assert TfvarConfig(loglevel="nonsense").log_level == logging.WARNING


class TestEnvironmentVariableOverrides:
    """Test environment variable processing."""

    def test_env_override_paths(self, tmp_path):
        env_vars = {
            "TFVAR_DEBUG_DIR": str(tmp_path / "env_debug"),
            "TFVAR_LOG_FILE": str(tmp_path / "tfvar.log"),
        }

        with patch.dict(os.environ, env_vars):
            config = TfvarConfig()

        assert config.debug_dir == tmp_path / "env_debug"
        assert config.log_file == tmp_path / "tfvar.log"

    @pytest.mark.parametrize(
        "value, expected",
        [("true", True), ("1", True), ("yes", True), ("on", True), ("false", False), ("0", False)],
    )
    def test_env_override_boolean_flags(self, value, expected):
        with patch.dict(os.environ, {"TFVAR_DEBUG_ENABLED": value}):
            assert TfvarConfig().enable_debug is expected

    def test_env_override_describe_unset(self):
        with patch.dict(os.environ, {"TFVAR_DESCRIBE_UNSET": "false"}):
            assert TfvarConfig().describe_unset is False

    def test_env_override_loglevel(self):
        with patch.dict(os.environ, {"TFVAR_LOGLEVEL": "info"}):
            assert TfvarConfig().loglevel == "INFO"

    def test_unset_flag(self):
        assert get_env_flag("enable_debug") is None


class TestFromArgs:
    """Test command line argument processing."""

    def test_from_args(self, tmp_path):
        args = argparse.Namespace(
            dir=str(tmp_path),
            output=str(tmp_path / "out.tfvars"),
            debug_dir=None,
            debug=False,
            loglevel="INFO",
            env_var=True,
            descriptions=True,
            skip_unset_descriptions=True,
            header="# header",
            auto_assign=True,
            ignore_default=True,
            var=["region=x"],
            var_file=["a.tfvars"],
        )

        config = TfvarConfig.from_args(args)

        assert config.config_dir == tmp_path
        assert config.output_file == tmp_path / "out.tfvars"
        assert config.loglevel == "INFO"
        assert config.env_var is True
        assert config.enable_descriptions is True
        assert config.describe_unset is False
        assert config.header == "# header"
        assert config.auto_assign is True
        assert config.ignore_default is True
        assert config.var_definitions == ["region=x"]
        assert config.var_files == [Path("a.tfvars")]

    def test_debug_flag_forces_debug_loglevel(self):
        args = argparse.Namespace(debug=True, loglevel="ERROR")

        config = TfvarConfig.from_args(args)

        assert config.enable_debug is True
        assert config.loglevel == "DEBUG"

    def test_partial_namespace(self):
        config = TfvarConfig.from_args(argparse.Namespace())
        assert config.config_dir == Path(".")


class TestValidation:
    """Test configuration validation."""

    def test_valid(self):
        config = TfvarConfig(config_dir=FIXTURES_DIR / "normal")
        assert config.validate() == []

    def test_missing_directory(self, tmp_path):
        config = TfvarConfig(config_dir=tmp_path / "missing")

        errors = config.validate()

        assert len(errors) == 1
        assert "does not exist" in errors[0]

    def test_file_instead_of_directory(self):
        config = TfvarConfig(config_dir=FIXTURES_DIR / "normal" / "main.tf")
        assert "not a directory" in config.validate()[0]

    def test_missing_var_file_and_bad_definition(self, tmp_path):
        config = TfvarConfig(
            config_dir=FIXTURES_DIR / "normal",
            var_files=[tmp_path / "missing.tfvars"],
            var_definitions=["no-equals-sign"],
        )

        errors = config.validate()

        assert len(errors) == 2

    def test_ensure_directories_exist(self, tmp_path):
        config = TfvarConfig(
            debug_dir=tmp_path / "debug",
            output_file=tmp_path / "out" / "terraform.tfvars",
            enable_debug=True,
        )

        config.ensure_directories_exist()

        assert (tmp_path / "debug").is_dir()
        assert (tmp_path / "out").is_dir()
