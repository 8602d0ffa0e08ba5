"""
Configuration management for tfvar.
"""

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .defaults import (
    DEBUG_FILES,
    DEFAULT_LOGLEVEL,
    get_default_paths,
    get_env_flag,
    get_env_value,
)


@dataclass
class TfvarConfig:
    """Configuration settings for a single tfvar run."""

    # Input/Output paths
    config_dir: Path = field(default_factory=lambda: get_default_paths()["config_dir"])
    debug_dir: Path = field(default_factory=lambda: get_default_paths()["debug_dir"])
    output_file: Optional[Path] = None

    # Output options
    env_var: bool = False
    enable_descriptions: bool = False
    describe_unset: bool = True
    header: str = ""

    # Value assignment options
    auto_assign: bool = False
    ignore_default: bool = False
    var_definitions: List[str] = field(default_factory=list)
    var_files: List[Path] = field(default_factory=list)

    # Diagnostics
    enable_debug: bool = False
    loglevel: str = DEFAULT_LOGLEVEL
    log_file: Optional[Path] = None

    debug_files: Dict[str, str] = field(default_factory=lambda: DEBUG_FILES.copy())

    def __post_init__(self) -> None:
        """Post-initialization processing."""
        # Ensure paths are Path objects
        self.config_dir = Path(self.config_dir)
        self.debug_dir = Path(self.debug_dir)
        if self.output_file is not None:
            self.output_file = Path(self.output_file)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)
        self.var_files = [Path(p) for p in self.var_files]

        # Load environment variable overrides
        self._load_env_overrides()

    def _load_env_overrides(self) -> None:
        """Load configuration overrides from environment variables."""
        env_debug_dir = get_env_value("debug_dir")
        if env_debug_dir:
            self.debug_dir = Path(env_debug_dir)

        env_debug = get_env_flag("enable_debug")
        if env_debug is not None:
            self.enable_debug = env_debug

        env_loglevel = get_env_value("loglevel")
        if env_loglevel:
            self.loglevel = env_loglevel.upper()

        env_log_file = get_env_value("log_file")
        if env_log_file:
            self.log_file = Path(env_log_file)

        env_describe_unset = get_env_flag("describe_unset")
        if env_describe_unset is not None:
            self.describe_unset = env_describe_unset

    def get_debug_file_path(self, file_key: str) -> Path:
        """Get the full path for a debug file."""
        filename = self.debug_files.get(file_key)
        if not filename:
            raise ValueError(f"Unknown debug file key: {file_key}")
        return self.debug_dir / filename

    def ensure_directories_exist(self) -> None:
        """Create necessary directories if they don't exist."""
        if self.enable_debug:
            self.debug_dir.mkdir(parents=True, exist_ok=True)
        if self.output_file is not None:
            self.output_file.parent.mkdir(parents=True, exist_ok=True)

    @property
    def log_level(self) -> int:
        return getattr(logging, self.loglevel, logging.WARNING)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "TfvarConfig":
        """Create configuration from command line arguments."""
        config = cls()

        # Override with command line arguments if provided
        if getattr(args, "dir", None):
            config.config_dir = Path(args.dir)
        if getattr(args, "output", None):
            config.output_file = Path(args.output)
        if getattr(args, "debug_dir", None):
            config.debug_dir = Path(args.debug_dir)
        if getattr(args, "debug", False):
            config.enable_debug = True
            config.loglevel = "DEBUG"
        elif getattr(args, "loglevel", None):
            config.loglevel = args.loglevel
        if getattr(args, "env_var", False):
            config.env_var = True
        if getattr(args, "descriptions", False):
            config.enable_descriptions = True
        if getattr(args, "skip_unset_descriptions", False):
            config.describe_unset = False
        if getattr(args, "header", None):
            config.header = args.header
        if getattr(args, "auto_assign", False):
            config.auto_assign = True
        if getattr(args, "ignore_default", False):
            config.ignore_default = True
        if getattr(args, "var", None):
            config.var_definitions = list(args.var)
        if getattr(args, "var_file", None):
            config.var_files = [Path(p) for p in args.var_file]

        return config

    def validate(self) -> List[str]:
        """Validate the configuration and return any errors."""
        errors = []

        if not self.config_dir.exists():
            errors.append(f"Configuration directory does not exist: {self.config_dir}")
        elif not self.config_dir.is_dir():
            errors.append(f"Configuration path is not a directory: {self.config_dir}")

        for var_file in self.var_files:
            if not var_file.is_file():
                errors.append(f"Variable definitions file not found: {var_file}")

        for definition in self.var_definitions:
            if "=" not in definition:
                errors.append(f"Invalid --var value {definition!r}: expected NAME=VALUE")

        if not hasattr(logging, self.loglevel):
            errors.append(f"Unknown log level: {self.loglevel}")

        return errors
