"""
Shared error types for the Pilcrow front end.

Every error raised by the lexer, the parser or the pipeline derives from
PilcrowError and carries a Diagnostic, so callers can report any failure
without knowing which stage produced it.

Author: xwest
"""

from typing import Any, List, Optional
from dataclasses import dataclass


@dataclass
class Diagnostic:
    """Structured description of an error or warning."""
    message: str
    location: Optional[Any] = None  # SourceLocation, when the stage knows one
    severity: str = "error"  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        if self.code:
            severity_prefix += f"[{self.code}]"
        result = f"{severity_prefix}: {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class PilcrowError(Exception):
    """
    Base class for all errors raised by the Pilcrow front end.
    """

    def __init__(
        self,
        message: str,
        location: Optional[Any] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


class UnsupportedFeature(PilcrowError):
    """Raised for a recognized construct that has no implementation yet."""

    def __init__(self, name: str, help_text: Optional[str] = None):
        super().__init__(
            message=f"{name} is not implemented",
            code="U001",
            help_text=help_text,
        )
        self.name = name
