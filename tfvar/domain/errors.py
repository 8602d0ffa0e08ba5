"""
Exceptions raised by tfvar.
"""

from pathlib import Path
from typing import List, Optional, Union


class TfvarError(Exception):
    """Base class for all tfvar errors."""


class ConfigLoadError(TfvarError):
    """Terraform configuration could not be loaded.

    Carries every diagnostic collected while loading; the message shows the
    first one and how many others there were.
    """

    def __init__(
        self,
        diagnostics: List[str],
        path: Optional[Union[str, Path]] = None,
    ):
        self.diagnostics = list(diagnostics)
        self.path = Path(path) if path is not None else None
        super().__init__(f"tfvar: loading config: {self._summary()}")

    def _summary(self) -> str:
        if not self.diagnostics:
            return "no diagnostics"
        summary = self.diagnostics[0]
        others = len(self.diagnostics) - 1
        if others > 0:
            summary += f", and {others} other diagnostic(s)"
        return summary


class WriteError(TfvarError):
    """Output could not be written by one of the formatters."""

    def __init__(self, formatter: str, cause: Exception):
        self.formatter = formatter
        self.cause = cause
        super().__init__(f"tfvar: failed to write as {formatter}: {cause}")


class InvalidValueError(TfvarError):
    """A value supplied for a variable could not be parsed."""
