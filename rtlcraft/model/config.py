"""
Transpiler configuration model.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, field_validator

from .base import SettingsModel


class Dialect(str, Enum):
    """Target language of the generated module."""

    VERILOG = "verilog"
    SYSTEMVERILOG = "systemverilog"

    @property
    def file_extension(self) -> str:
        return ".v" if self == Dialect.VERILOG else ".sv"

    @classmethod
    def from_string(cls, value: str) -> "Dialect":
        """Accept common spellings such as 'sv', 'v' or 'SystemVerilog'."""
        normalized = value.lower().strip().lstrip(".")
        mapping = {
            "v": cls.VERILOG,
            "verilog": cls.VERILOG,
            "sv": cls.SYSTEMVERILOG,
            "systemverilog": cls.SYSTEMVERILOG,
        }
        if normalized not in mapping:
            raise ValueError(f"Unknown dialect '{value}'")
        return mapping[normalized]


class LifterKind(str, Enum):
    """Strategy used to lift VHDL text into the IR."""

    AST = "ast"
    REGEX = "regex"


class TranspilerConfig(SettingsModel):
    """
    Settings shared by the lifters, the generators and the file services.

    Loaded from YAML with camelCase keys (``rangeFallback``) or built in
    code with snake_case names.
    """

    dialect: Dialect = Field(default=Dialect.SYSTEMVERILOG, description="Target dialect")
    lifter: LifterKind = Field(default=LifterKind.AST, description="Lifting strategy")
    indent: int = Field(default=4, ge=1, le=8, description="Spaces per indentation level")
    range_fallback: int = Field(
        default=7, ge=0, description="Bound substituted for unresolvable range expressions"
    )
    strict: bool = Field(default=False, description="Raise on the first per-entity lift error")
    allowed_folders: List[str] = Field(
        default_factory=list, description="Folders that file operations may touch; empty allows all"
    )
    recursive: bool = Field(default=False, description="Descend into sub-folders in batch mode")
    output_extension: Optional[str] = Field(
        default=None, description="Override of the dialect file extension"
    )

    @field_validator("dialect", mode="before")
    @classmethod
    def normalize_dialect(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Dialect.from_string(v)
        return v

    @field_validator("lifter", mode="before")
    @classmethod
    def normalize_lifter(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("output_extension")
    @classmethod
    def validate_extension(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("outputExtension cannot be empty")
        return v if v.startswith(".") else f".{v}"

    @property
    def indent_unit(self) -> str:
        return " " * self.indent

    @property
    def extension(self) -> str:
        """File extension of generated files."""
        return self.output_extension or self.dialect.file_extension
