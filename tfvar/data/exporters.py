"""
Data export module for tfvar.

Renders loaded variables as shell environment-variable exports or as a
Terraform variable definitions (``.tfvars``) document.
"""

import logging
from typing import Iterable, Optional, TextIO

from ..config import TfvarConfig
from ..domain.constants import (
    DEFAULT_MARKER,
    OPTIONAL_MARKER,
    REQUIRED_MARKER,
    VAR_ENV_PREFIX,
    Variable,
)
from ..domain.errors import WriteError
from ..utils.hclwrite import (
    HCLFile,
    comment_tokens,
    newline_tokens,
    tokens_for_value,
    tokens_to_string,
)


def render_env_value(value) -> str:
    """
    Render a value for use inside single quotes in a shell export.

    A missing value renders as the empty string. The HCL literal form is used,
    minus one enclosing pair of double quotes.
    """
    if value is None:
        value = ""
    text = tokens_to_string(tokens_for_value(value))
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


class EnvVarExporter:
    """Writes variables as ``export TF_VAR_<name>='<value>'`` lines."""

    formatter_name = "env-vars"

    def __init__(self, config: Optional[TfvarConfig] = None):
        self.config = config
        self.logger = logging.getLogger(__name__)

    def export(
        self,
        stream: TextIO,
        variables: Iterable[Variable],
        header: str = "",
        enable_descriptions: bool = False,
        describe_unset: Optional[bool] = None,
    ) -> None:
        """
        Write the given variables in environment variables format, e.g.
        ``export TF_VAR_region='ap-northeast-1'``.

        Args:
            stream: Text stream to write to
            variables: Variables in output order
            header: Text written verbatim before the exports, followed by a blank line
            enable_descriptions: Precede each export with a ``# <description>`` line
            describe_unset: Also emit the comment line for variables whose
                description was never set; defaults to the configured value

        Raises:
            WriteError: On the first failed write, or when the final flush fails
        """
        if describe_unset is None:
            describe_unset = self.config.describe_unset if self.config is not None else True

        self._write(stream, f"{header}\n\n" if header else "")

        count = 0
        for variable in variables:
            rendered = render_env_value(variable.value)
            line = f"export {VAR_ENV_PREFIX}{variable.name}='{rendered}'\n"
            if enable_descriptions and (variable.description_set or describe_unset):
                line = f"# {variable.description}\n{line}"
            self._write(stream, line)
            count += 1

        self._flush(stream)
        self.logger.info(f"Exported {count} variables as environment variables")

    def _write(self, stream: TextIO, text: str) -> None:
        if not text:
            return
        try:
            stream.write(text)
        except Exception as e:
            self.logger.error(f"Failed to write environment variables: {e}")
            raise WriteError(self.formatter_name, e) from e

    def _flush(self, stream: TextIO) -> None:
        # Buffered streams report disk-full and broken-pipe errors here
        try:
            stream.flush()
        except Exception as e:
            self.logger.error(f"Failed to flush environment variables: {e}")
            raise WriteError(self.formatter_name, e) from e


class TFVarsExporter:
    """Writes variables as a Terraform variable definitions document."""

    formatter_name = "tfvars"

    def __init__(self, config: Optional[TfvarConfig] = None):
        self.config = config
        self.logger = logging.getLogger(__name__)

    def build_document(
        self,
        variables: Iterable[Variable],
        header: str = "",
        enable_descriptions: bool = False,
    ) -> HCLFile:
        """
        Build the definitions document without writing it.

        With descriptions enabled every variable is preceded by a
        ``## REQUIRED`` or ``## OPTIONAL`` marker and its description. Variables
        with a default get a trailing ``#`` so that their assignment is
        commented out, and each block is followed by a blank line.
        """
        document = HCLFile()
        body = document.body

        if header:
            body.append_unstructured_tokens(comment_tokens(header + "\n\n"))

        for variable in variables:
            if enable_descriptions:
                comment = REQUIRED_MARKER if variable.value is None else OPTIONAL_MARKER
                if variable.description_set:
                    comment += f"# {variable.description}\n"
                if variable.value is not None:
                    comment += DEFAULT_MARKER

                body.append_unstructured_tokens(comment_tokens(comment))
                body.set_attribute_value(variable.name, variable.value)
                body.append_unstructured_tokens(newline_tokens())
            else:
                body.set_attribute_value(variable.name, variable.value)

        return document

    def export(
        self,
        stream: TextIO,
        variables: Iterable[Variable],
        header: str = "",
        enable_descriptions: bool = False,
    ) -> None:
        """
        Write the given variables in Terraform's variable definitions format, e.g.
        ``region = "ap-northeast-1"``.

        The document is built completely before anything is written.

        Raises:
            WriteError: If writing or flushing the document fails
        """
        document = self.build_document(variables, header, enable_descriptions)

        try:
            written = document.write_to(stream)
            stream.flush()
        except Exception as e:
            self.logger.error(f"Failed to write variable definitions: {e}")
            raise WriteError(self.formatter_name, e) from e

        self.logger.info(f"Exported variable definitions ({written} characters)")


def write_as_env_vars(
    stream: TextIO,
    variables: Iterable[Variable],
    header: str = "",
    enable_descriptions: bool = False,
    describe_unset: bool = True,
) -> None:
    """Output the given variables in environment variables format."""
    EnvVarExporter().export(stream, variables, header, enable_descriptions, describe_unset)


def write_as_tfvars(
    stream: TextIO,
    variables: Iterable[Variable],
    header: str = "",
    enable_descriptions: bool = False,
) -> None:
    """Output the given variables in Terraform's variable definitions format."""
    TFVarsExporter().export(stream, variables, header, enable_descriptions)
