"""Shared parser exceptions for VHDL lifting and configuration loading."""

from pathlib import Path
from typing import List, Optional


class ParseError(Exception):
    """Error during parsing."""

    def __init__(
        self, message: str, file_path: Optional[Path] = None, line: Optional[int] = None
    ):
        self.file_path = file_path
        self.line = line
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        """Format error message with file and line information."""
        parts = []
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.line is not None:
            parts.append(f"Line: {self.line}")
        parts.append(message)
        return " | ".join(parts)


class GrammarError(ParseError):
    """The grammar parser could not produce a syntax tree at all."""


class VhdlSyntaxError(ParseError):
    """A syntax tree was produced but contains error nodes."""

    def __init__(
        self,
        message: str,
        error_lines: Optional[List[int]] = None,
        file_path: Optional[Path] = None,
    ):
        self.error_lines = list(error_lines or [])
        line = self.error_lines[0] if self.error_lines else None
        super().__init__(message, file_path=file_path, line=line)


class ConfigError(ParseError):
    """Invalid transpiler configuration file."""


class LiftError(ParseError):
    """
    Structural error while lifting one entity.

    Fatal to the offending entity only; the other entities of the same
    source unit are still lifted.
    """

    def __init__(
        self,
        message: str,
        entity_name: Optional[str] = None,
        construct: Optional[str] = None,
        line: Optional[int] = None,
    ):
        self.entity_name = entity_name
        self.construct = construct
        parts = []
        if entity_name:
            parts.append(f"Entity: {entity_name}")
        parts.append(message)
        if construct:
            parts.append(f"Near: {construct}")
        super().__init__(" | ".join(parts), line=line)


class MissingEntityName(LiftError):
    """Entity declaration without an identifier."""


class InvalidPortDirection(LiftError):
    """Port mode is not one of in/out/inout/buffer."""


class MissingPortType(LiftError):
    """Port declaration without a subtype indication."""


class MissingGenericType(LiftError):
    """Generic declaration without a subtype indication."""


class UnresolvableRange(LiftError):
    """Vector range whose bounds cannot be resolved and have no fallback."""
