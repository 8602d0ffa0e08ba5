"""
Shared test fixtures and configuration for the tfvar tests.

This module provides pytest fixtures and fixture directory constants that can
be reused across all test modules.
"""

from pathlib import Path

import pytest

from tfvar.config import TfvarConfig
from tfvar.domain.constants import ParsingMode, Variable


# Test data directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
NORMAL_DIR = FIXTURES_DIR / "normal"
BAD_DIR = FIXTURES_DIR / "bad"
DEFAULTS_DIR = FIXTURES_DIR / "defaults"
DESCRIPTIONS_DIR = FIXTURES_DIR / "descriptions"
AUTO_ASSIGN_DIR = FIXTURES_DIR / "auto_assign"


@pytest.fixture
def test_config(tmp_path, monkeypatch):
    """Create a test configuration isolated from TFVAR_* environment overrides."""
    for key in ("TFVAR_DEBUG_DIR", "TFVAR_DEBUG_ENABLED", "TFVAR_LOGLEVEL",
                "TFVAR_LOG_FILE", "TFVAR_DESCRIBE_UNSET"):
        monkeypatch.delenv(key, raising=False)

    config = TfvarConfig()
    config.config_dir = DEFAULTS_DIR
    config.debug_dir = tmp_path / "debug"
    return config


@pytest.fixture
def default_variables():
    """Variables of the defaults fixture, sorted by name."""
    return [
        Variable(
            name="availability_zone_names",
            value=["us-west-1a"],
            parsing_mode=ParsingMode.HCL,
        ),
        Variable(name="instance_name", value="my-instance"),
        Variable(name="region"),
    ]


@pytest.fixture
def described_variables():
    """Variables covering every combination of default and description presence."""
    return [
        Variable(name="enable_monitoring", value=True, parsing_mode=ParsingMode.HCL),
        Variable(
            name="instance_count",
            value=2,
            description="Number of instances",
            description_set=True,
            parsing_mode=ParsingMode.HCL,
        ),
        Variable(
            name="region",
            description="AWS region to deploy into",
            description_set=True,
        ),
        Variable(
            name="tags",
            value={"env": "dev", "team": "platform"},
            description="",
            description_set=True,
            parsing_mode=ParsingMode.HCL,
        ),
    ]
