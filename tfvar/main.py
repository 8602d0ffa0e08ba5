#!/usr/bin/env python3
"""
Main entry point for tfvar.

Loads the input variables of a Terraform module directory and prints them
as variable definitions (default) or as environment variable exports.
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from .config import TfvarConfig
from .config.defaults import DEBUG_LOG_FORMAT, LOG_FORMAT
from .data.definitions import (
    Definitions,
    collect_auto_files,
    collect_from_env_vars,
    collect_from_file,
    collect_from_string,
    drop_defaults,
    parse_values,
)
from .data.exporters import EnvVarExporter, TFVarsExporter
from .data.loaders import VariableLoader
from .domain.constants import Variable
from .domain.errors import TfvarError


def get_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse and return command line arguments."""
    parser = argparse.ArgumentParser(
        prog="tfvar",
        description="Generate variable definitions or environment variables "
        "from the input variables of a Terraform module",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ./infra > terraform.tfvars
  %(prog)s ./infra --env-var --descriptions
  %(prog)s ./infra --auto-assign --var 'region=ap-northeast-1'
        """,
    )

    parser.add_argument(
        "dir",
        nargs="?",
        default=".",
        help="Terraform module directory (default: current directory)",
    )

    # Output format
    parser.add_argument(
        "-e",
        "--env-var",
        action="store_true",
        help="Print output in export TF_VAR_image_id='ami-abc123' format",
    )
    parser.add_argument(
        "--descriptions",
        action="store_true",
        help="Annotate variables with their descriptions and REQUIRED/OPTIONAL markers",
    )
    parser.add_argument(
        "--skip-unset-descriptions",
        action="store_true",
        help="With --env-var --descriptions, skip the comment line of variables without a description",
    )
    parser.add_argument("--header", type=str, help="Text written at the top of the output")
    parser.add_argument(
        "-o", "--output", type=str, help="Write output to this file instead of stdout"
    )

    # Value assignment
    parser.add_argument(
        "-a",
        "--auto-assign",
        action="store_true",
        help="Use values from TF_VAR_* environment variables and terraform.tfvars[.json], "
        "*.auto.tfvars[.json] definitions files",
    )
    parser.add_argument(
        "--ignore-default", action="store_true", help="Do not use the declared default values"
    )
    parser.add_argument(
        "--var",
        action="append",
        metavar="NAME=VALUE",
        help="Set a value for a variable (can be repeated)",
    )
    parser.add_argument(
        "--var-file",
        action="append",
        metavar="FILE",
        help="Set values from a variable definitions file (can be repeated)",
    )

    # Logging
    parser.add_argument(
        "-d", "--debug", action="store_true", help="Enable debug logging and debug files"
    )
    parser.add_argument("--debug-dir", type=str, help="Directory for debug files (default: ./debug)")
    parser.add_argument(
        "--loglevel",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: WARNING)",
    )

    return parser.parse_args(argv)


def setup_logging(config: TfvarConfig) -> None:
    """Configure logging based on configuration.

    Log records go to stderr so they never mix with the generated output.
    """
    log_format = DEBUG_LOG_FORMAT if config.enable_debug else LOG_FORMAT

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(level=config.log_level, format=log_format, handlers=handlers, force=True)


def validate_environment(config: TfvarConfig) -> bool:
    """Validate the environment and configuration."""
    logging.info("Validating configuration...")

    config_errors = config.validate()
    if config_errors:
        logging.error("Configuration validation failed:")
        for error in config_errors:
            logging.error(f"  - {error}")
        return False

    try:
        config.ensure_directories_exist()
    except OSError as e:
        logging.error(f"Failed to create directories: {e}")
        return False

    return True


def collect_definitions(config: TfvarConfig) -> Definitions:
    """Collect values in Terraform's precedence order, later sources winning."""
    definitions: Definitions = {}

    if config.auto_assign:
        definitions.update(collect_from_env_vars())
        definitions.update(collect_auto_files(config.config_dir))

    for var_file in config.var_files:
        definitions.update(collect_from_file(var_file))

    for definition in config.var_definitions:
        name, value = collect_from_string(definition)
        definitions[name] = value

    return definitions


def resolve_variables(config: TfvarConfig) -> List[Variable]:
    """Load, assign and sort the variables of the configured directory."""
    variables = VariableLoader(config).load(config.config_dir)

    if config.ignore_default:
        variables = drop_defaults(variables)

    definitions = collect_definitions(config)
    if definitions:
        variables = parse_values(definitions, variables)

    return sorted(variables, key=lambda v: v.name)


def write_output(config: TfvarConfig, variables: List[Variable], stream: TextIO) -> None:
    if config.env_var:
        EnvVarExporter(config).export(
            stream, variables, config.header, config.enable_descriptions
        )
    else:
        TFVarsExporter(config).export(
            stream, variables, config.header, config.enable_descriptions
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Main orchestration function."""
    args = get_arguments(argv)
    config = TfvarConfig.from_args(args)

    setup_logging(config)

    logging.info(f"Configuration directory: {config.config_dir}")
    logging.info(f"Debug mode: {config.enable_debug}")

    if not validate_environment(config):
        logging.error("Environment validation failed")
        return 1

    try:
        variables = resolve_variables(config)

        if config.output_file is not None:
            with open(config.output_file, "w", encoding="utf-8") as stream:
                write_output(config, variables, stream)
        else:
            write_output(config, variables, sys.stdout)

    except TfvarError as e:
        logging.error(str(e))
        return 1
    except OSError as e:
        logging.error(f"Failed to open output: {e}")
        return 1

    logging.info(f"Wrote {len(variables)} variables")
    return 0


if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
