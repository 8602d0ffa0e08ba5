"""
Data loading module for tfvar.

Loads the input variables declared in a directory of Terraform configuration
files, following Terraform's own rules for which files make up a module.
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import hcl2
import pandas as pd

from ..config import TfvarConfig
from ..config.defaults import (
    CONFIG_FILE_SUFFIXES,
    OVERRIDE_FILE_NAMES,
    OVERRIDE_FILE_SUFFIXES,
)
from ..domain.constants import (
    RESERVED_VARIABLE_NAMES,
    ParsingMode,
    Variable,
    is_valid_identifier,
)
from ..domain.errors import ConfigLoadError
from ..utils.data_processing import (
    NonLiteralValueError,
    iter_blocks,
    normalize_value,
    type_expression,
)
from ..utils.hclwrite import tokens_for_value, tokens_to_string


def is_ignored_file(name: str) -> bool:
    """Check for hidden files, editor backups and emacs lock files."""
    return (
        name.startswith(".")
        or name.endswith("~")
        or (name.startswith("#") and name.endswith("#"))
    )


def is_config_file(name: str) -> bool:
    return name.endswith(CONFIG_FILE_SUFFIXES['hcl']) or name.endswith(CONFIG_FILE_SUFFIXES['json'])


def is_override_file(name: str) -> bool:
    return name in OVERRIDE_FILE_NAMES or name.endswith(OVERRIDE_FILE_SUFFIXES)


def parsing_mode_for_type(type_source: Optional[str]) -> ParsingMode:
    """Only a plain ``string`` constraint (or none at all) takes values literally."""
    if type_source is None or type_source == "string":
        return ParsingMode.LITERAL
    return ParsingMode.HCL


class ConfigFileReader:
    """Parses a single Terraform configuration file."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read(self, file_path: Path) -> Dict[str, Any]:
        """
        Parse a ``.tf`` or ``.tf.json`` file.

        Args:
            file_path: Path to the configuration file

        Returns:
            Parsed body as a dictionary

        Raises:
            ValueError: If the file is malformed
            OSError: If the file cannot be read
        """
        with open(file_path, encoding="utf-8") as fp:
            if file_path.name.endswith(CONFIG_FILE_SUFFIXES['json']):
                parsed = json.load(fp)
            else:
                parsed = hcl2.load(fp)

        if not isinstance(parsed, dict):
            raise ValueError("configuration root must be an object")
        return parsed


class VariableLoader:
    """Extracts input variable declarations from a Terraform module directory."""

    def __init__(self, config: Optional[TfvarConfig] = None):
        self.config = config
        self.reader = ConfigFileReader()
        self.logger = logging.getLogger(__name__)

    def load(self, directory: Union[str, Path]) -> List[Variable]:
        """
        Load all input variables declared in the configurations located in directory.

        Args:
            directory: Path to the Terraform module directory

        Returns:
            One Variable per declaration, in declaration order

        Raises:
            ConfigLoadError: If the directory cannot be read or holds invalid configuration
        """
        directory = Path(directory)
        self.logger.info(f"Loading Terraform configuration from {directory}")

        if not directory.is_dir():
            raise ConfigLoadError(
                [
                    f"Failed to read module directory: Module directory {directory} "
                    "does not exist or cannot be read."
                ],
                directory,
            )

        primary_files, override_files = self._config_files(directory)
        diagnostics: List[str] = []
        declared: Dict[str, Variable] = {}
        declared_in: Dict[str, Path] = {}

        for file_path in primary_files:
            for variable in self._read_variables(file_path, diagnostics):
                if variable.name in declared:
                    diagnostics.append(
                        f"{file_path}: Duplicate variable declaration; A variable named "
                        f"\"{variable.name}\" was already declared in {declared_in[variable.name]}. "
                        "Variable names must be unique within a module."
                    )
                    continue
                declared[variable.name] = variable
                declared_in[variable.name] = file_path

        for file_path in override_files:
            for variable, body in self._read_overrides(file_path, diagnostics):
                base = declared.get(variable.name)
                if base is None:
                    diagnostics.append(
                        f"{file_path}: Missing base variable declaration to override; There is "
                        f"no variable named \"{variable.name}\". An override file can only "
                        "override a variable that was already declared in a primary configuration file."
                    )
                    continue
                declared[variable.name] = self._merge_override(base, variable, body)

        if diagnostics:
            for diagnostic in diagnostics:
                self.logger.error(diagnostic)
            raise ConfigLoadError(diagnostics, directory)

        variables = list(declared.values())
        self.logger.info(f"Loaded {len(variables)} variables from {directory}")

        if self.config is not None and self.config.enable_debug:
            self._save_debug_file(variables)

        return variables

    def _config_files(self, directory: Path) -> Tuple[List[Path], List[Path]]:
        """Split the module's configuration files into primary and override files."""
        primary_files = []
        override_files = []

        for path in sorted(directory.iterdir()):
            name = path.name
            if path.is_dir() or is_ignored_file(name) or not is_config_file(name):
                continue
            if is_override_file(name):
                override_files.append(path)
            else:
                primary_files.append(path)

        self.logger.debug(
            f"Found {len(primary_files)} primary and {len(override_files)} override files in {directory}"
        )
        return primary_files, override_files

    def _parse_file(self, file_path: Path, diagnostics: List[str]) -> List[Tuple[str, Dict[str, Any]]]:
        try:
            parsed = self.reader.read(file_path)
            return iter_blocks(parsed, "variable")
        except Exception as e:
            diagnostics.append(f"{file_path}: Failed to parse configuration; {e}")
            return []

    def _read_variables(self, file_path: Path, diagnostics: List[str]) -> List[Variable]:
        variables = []
        for name, body in self._parse_file(file_path, diagnostics):
            variable = self._decode_variable(file_path, name, body, diagnostics)
            if variable is not None:
                variables.append(variable)
        return variables

    def _read_overrides(
        self, file_path: Path, diagnostics: List[str]
    ) -> List[Tuple[Variable, Dict[str, Any]]]:
        overrides = []
        for name, body in self._parse_file(file_path, diagnostics):
            variable = self._decode_variable(file_path, name, body, diagnostics)
            if variable is not None:
                overrides.append((variable, body))
        return overrides

    def _decode_variable(
        self,
        file_path: Path,
        name: str,
        body: Dict[str, Any],
        diagnostics: List[str],
    ) -> Optional[Variable]:
        """
        Build a Variable from a parsed ``variable`` block body.

        Appends a diagnostic and returns None when the declaration is invalid.
        """
        if not is_valid_identifier(name):
            diagnostics.append(
                f"{file_path}: Invalid variable name; A name must start with a letter or "
                f"underscore and may contain only letters, digits, underscores, and dashes: {name!r}"
            )
            return None
        if name in RESERVED_VARIABLE_NAMES:
            diagnostics.append(
                f"{file_path}: Invalid variable name; The variable name \"{name}\" is reserved "
                "due to its special meaning inside module blocks."
            )
            return None

        unquote = not file_path.name.endswith(CONFIG_FILE_SUFFIXES['json'])
        valid = True

        type_source = type_expression(body["type"]) if "type" in body else None

        value = None
        if "default" in body:
            try:
                value = normalize_value(body["default"], unquote)
            except NonLiteralValueError as e:
                diagnostics.append(
                    f"{file_path}: Invalid default value for variable \"{name}\"; {e}"
                )
                valid = False

        description = ""
        description_set = "description" in body
        if description_set:
            try:
                description = normalize_value(body["description"], unquote)
            except NonLiteralValueError as e:
                description = None
                self.logger.debug(f"Non-literal description for {name}: {e}")
            if not isinstance(description, str):
                diagnostics.append(
                    f"{file_path}: Invalid description for variable \"{name}\"; "
                    "A description must be a string literal."
                )
                valid = False

        if not valid:
            return None

        return Variable(
            name=name,
            value=value,
            description=description,
            description_set=description_set,
            parsing_mode=parsing_mode_for_type(type_source),
        )

    def _merge_override(self, base: Variable, override: Variable, body: Dict[str, Any]) -> Variable:
        """Apply the attributes an override declaration actually sets."""
        changes: Dict[str, Any] = {}
        if "default" in body:
            changes["value"] = override.value
        if "description" in body:
            changes["description"] = override.description
            changes["description_set"] = True
        if "type" in body:
            changes["parsing_mode"] = override.parsing_mode

        self.logger.debug(f"Overriding variable {base.name}: {sorted(changes)}")
        return replace(base, **changes)

    def _save_debug_file(self, variables: List[Variable]) -> None:
        """Dump the loaded variables to CSV for inspection."""
        self.config.ensure_directories_exist()
        debug_file = self.config.get_debug_file_path("variables")

        variables_df = pd.DataFrame(
            [
                {
                    "name": v.name,
                    "value": tokens_to_string(tokens_for_value(v.value)),
                    "required": v.required,
                    "description": v.description,
                    "description_set": v.description_set,
                    "parsing_mode": v.parsing_mode.value,
                }
                for v in variables
            ],
            columns=["name", "value", "required", "description", "description_set", "parsing_mode"],
        )
        variables_df.to_csv(debug_file, index=False)
        self.logger.debug(f"Saved debug file: {debug_file}")


def load(directory: Union[str, Path], config: Optional[TfvarConfig] = None) -> List[Variable]:
    """Extract all input variables declared in the Terraform configurations in directory."""
    return VariableLoader(config).load(directory)
