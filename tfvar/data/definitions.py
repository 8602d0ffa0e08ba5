"""
Variable value collection for tfvar.

Values can come from ``TF_VAR_*`` environment variables, ``NAME=VALUE``
command line strings and variable definitions files. Raw strings are
interpreted according to the parsing mode of the variable they are assigned
to; values from definitions files are already literal expressions.
"""

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import hcl2

from ..config.defaults import AUTO_DEFINITIONS_FILES, AUTO_DEFINITIONS_SUFFIXES
from ..domain.constants import VAR_ENV_PREFIX, ParsingMode, Variable
from ..domain.errors import ConfigLoadError, InvalidValueError
from ..utils.data_processing import NonLiteralValueError, normalize_key, normalize_value

logger = logging.getLogger(__name__)

Definitions = Dict[str, "UnparsedValue"]


def parse_hcl_expression(source: str) -> Any:
    """Parse a single HCL literal expression, e.g. ``["a", "b"]``."""
    try:
        parsed = hcl2.loads(f"value = {source}\n")
    except Exception as e:
        raise InvalidValueError(f"invalid expression {source!r}: {e}") from e
    if "value" not in parsed:
        raise InvalidValueError(f"invalid expression {source!r}")
    try:
        return normalize_value(parsed["value"])
    except NonLiteralValueError as e:
        raise InvalidValueError(f"invalid expression {source!r}: {e}") from e


@dataclass(frozen=True)
class UnparsedValue:
    """A value collected for a variable, not yet interpreted."""

    raw: Any
    source: str
    from_expression: bool = False

    def parse(self, mode: ParsingMode) -> Any:
        """
        Interpret the value for a variable with the given parsing mode.

        Raises:
            InvalidValueError: If an HCL-mode value cannot be parsed
        """
        if self.from_expression:
            return self.raw
        if mode is ParsingMode.LITERAL:
            return self.raw
        return parse_hcl_expression(self.raw)


def collect_from_env_vars(environ: Optional[Mapping[str, str]] = None) -> Definitions:
    """Collect values from ``TF_VAR_<name>`` environment variables."""
    if environ is None:
        environ = os.environ

    definitions: Definitions = {}
    for key in sorted(environ):
        if not key.startswith(VAR_ENV_PREFIX):
            continue
        name = key[len(VAR_ENV_PREFIX):]
        if not name:
            continue
        definitions[name] = UnparsedValue(environ[key], source=f"environment variable {key}")

    logger.debug(f"Collected {len(definitions)} values from environment variables")
    return definitions


def collect_from_string(text: str, source: str = "--var") -> Tuple[str, UnparsedValue]:
    """
    Collect a value from a ``NAME=VALUE`` string.

    Raises:
        InvalidValueError: If the string has no ``=`` or the name is empty
    """
    if "=" not in text:
        raise InvalidValueError(
            f"invalid {source} value {text!r}: expected a variable name, then =, then a value"
        )
    name, raw = text.split("=", 1)
    name = name.strip()
    if not name:
        raise InvalidValueError(f"invalid {source} value {text!r}: variable name is empty")
    return name, UnparsedValue(raw, source=source)


def collect_from_file(path: Union[str, Path]) -> Definitions:
    """
    Collect values from a ``.tfvars`` or ``.tfvars.json`` definitions file.

    Raises:
        ConfigLoadError: If the file cannot be read or holds non-literal values
    """
    path = Path(path)
    is_json = path.name.endswith(".json")

    try:
        with open(path, encoding="utf-8") as fp:
            parsed = json.load(fp) if is_json else hcl2.load(fp)
    except Exception as e:
        logger.error(f"Failed to read variable definitions from {path}: {e}")
        raise ConfigLoadError([f"{path}: Failed to read variable definitions file; {e}"], path) from e

    if not isinstance(parsed, dict):
        raise ConfigLoadError([f"{path}: Variable definitions file must contain an object"], path)

    definitions: Definitions = {}
    diagnostics: List[str] = []
    for key, raw in parsed.items():
        name = normalize_key(key)
        try:
            value = normalize_value(raw, unquote=not is_json)
        except NonLiteralValueError as e:
            diagnostics.append(f"{path}: Variables not allowed in value for \"{name}\"; {e}")
            continue
        definitions[name] = UnparsedValue(value, source=str(path), from_expression=True)

    if diagnostics:
        raise ConfigLoadError(diagnostics, path)

    logger.info(f"Collected {len(definitions)} values from {path}")
    return definitions


def auto_definitions_files(directory: Union[str, Path]) -> List[Path]:
    """Definitions files Terraform loads automatically, in precedence order."""
    directory = Path(directory)
    files = [directory / name for name in AUTO_DEFINITIONS_FILES if (directory / name).is_file()]
    files.extend(
        path
        for path in sorted(directory.iterdir())
        if path.is_file() and path.name.endswith(AUTO_DEFINITIONS_SUFFIXES)
    )
    return files


def collect_auto_files(directory: Union[str, Path]) -> Definitions:
    """Collect values from ``terraform.tfvars[.json]`` and ``*.auto.tfvars[.json]``."""
    definitions: Definitions = {}
    for path in auto_definitions_files(directory):
        definitions.update(collect_from_file(path))
    return definitions


def parse_values(definitions: Definitions, variables: List[Variable]) -> List[Variable]:
    """
    Assign collected values to the variables they name.

    Args:
        definitions: Collected values keyed by variable name
        variables: Loaded variables

    Returns:
        New list of variables; those without a definition are returned unchanged

    Raises:
        InvalidValueError: If a value cannot be parsed for its variable
    """
    declared = {variable.name for variable in variables}
    for name, definition in definitions.items():
        if name not in declared:
            logger.warning(f"Value for undeclared variable \"{name}\" from {definition.source} is ignored")

    assigned = []
    for variable in variables:
        definition = definitions.get(variable.name)
        if definition is None:
            assigned.append(variable)
            continue
        try:
            value = definition.parse(variable.parsing_mode)
        except InvalidValueError as e:
            raise InvalidValueError(
                f"Invalid value for variable \"{variable.name}\" from {definition.source}: {e}"
            ) from e
        logger.debug(f"Assigned {variable.name} from {definition.source}")
        assigned.append(replace(variable, value=value))

    return assigned


def drop_defaults(variables: List[Variable]) -> List[Variable]:
    """Return copies of the variables without their declared defaults."""
    return [replace(variable, value=None) for variable in variables]
