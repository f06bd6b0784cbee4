"""
VHDL type and vector-range definitions.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from .base import IrModel


class VectorRange(IrModel):
    """
    Bit range of a vector type as declared in VHDL.

    ``7 downto 0`` is ``VectorRange(left=7, right=0, descending=True)``;
    ``0 to 7`` is ``VectorRange(left=0, right=7, descending=False)``. Both
    describe the same physical span and render as ``[7:0]``.
    """

    left: int = Field(..., description="Left bound as written in the source")
    right: int = Field(..., description="Right bound as written in the source")
    descending: bool = Field(default=True, description="True for 'downto', False for 'to'")
    source: Optional[str] = Field(
        default=None,
        description="Original range text when a bound was replaced by the fallback constant",
    )

    @property
    def msb(self) -> int:
        return self.left if self.descending else self.right

    @property
    def lsb(self) -> int:
        return self.right if self.descending else self.left

    @property
    def width(self) -> int:
        """Number of bits spanned by the range."""
        return abs(self.msb - self.lsb) + 1

    @property
    def is_fallback(self) -> bool:
        """Check if a bound could not be resolved and was substituted."""
        return self.source is not None

    def to_brackets(self) -> str:
        """Render the range in target bracket form, e.g. ``[7:0]``."""
        return f"[{self.msb}:{self.lsb}]"

    def to_vhdl(self) -> str:
        """Render the range back in VHDL form, e.g. ``7 downto 0``."""
        keyword = "downto" if self.descending else "to"
        return f"{self.left} {keyword} {self.right}"


class TypeKind(str, Enum):
    """Supported VHDL base types."""

    STD_LOGIC = "std_logic"
    BIT = "bit"
    STD_LOGIC_VECTOR = "std_logic_vector"
    BIT_VECTOR = "bit_vector"
    INTEGER = "integer"
    NATURAL = "natural"
    POSITIVE = "positive"
    BOOLEAN = "boolean"
    SIGNED = "signed"
    UNSIGNED = "unsigned"
    CUSTOM = "custom"

    @property
    def is_vector(self) -> bool:
        return self in _VECTOR_KINDS


_VECTOR_KINDS = {
    TypeKind.STD_LOGIC_VECTOR,
    TypeKind.BIT_VECTOR,
    TypeKind.SIGNED,
    TypeKind.UNSIGNED,
}


class VhdlType(IrModel):
    """
    Abstract type of a port or signal.

    Vector kinds always carry a range. Custom types carry the source type
    name and, when the declaration had an index constraint, its range.
    """

    kind: TypeKind = Field(..., description="Base type")
    range: Optional[VectorRange] = Field(default=None, description="Index range of vector types")
    name: Optional[str] = Field(default=None, description="Type name of custom types")

    @model_validator(mode="after")
    def check_variant(self) -> "VhdlType":
        if self.kind.is_vector and self.range is None:
            raise ValueError(f"{self.kind.value} requires a range")
        if self.kind == TypeKind.CUSTOM and not self.name:
            raise ValueError("custom types require a name")
        return self

    @classmethod
    def scalar(cls, kind: TypeKind) -> "VhdlType":
        return cls(kind=kind)

    @classmethod
    def vector(cls, kind: TypeKind, vector_range: VectorRange) -> "VhdlType":
        return cls(kind=kind, range=vector_range)

    @classmethod
    def custom(cls, name: str, vector_range: Optional[VectorRange] = None) -> "VhdlType":
        return cls(kind=TypeKind.CUSTOM, name=name, range=vector_range)

    @property
    def is_vector(self) -> bool:
        return self.kind.is_vector

    @property
    def width(self) -> Optional[int]:
        """Bit width of the type, or None when it is not known."""
        if self.kind in (TypeKind.STD_LOGIC, TypeKind.BIT, TypeKind.BOOLEAN):
            return 1
        if self.kind in (TypeKind.INTEGER, TypeKind.NATURAL, TypeKind.POSITIVE):
            return 32
        if self.range is not None and self.kind != TypeKind.CUSTOM:
            return self.range.width
        return None

    def to_vhdl(self) -> str:
        """Render the type back in VHDL syntax, mostly for reports."""
        base = self.name if self.kind == TypeKind.CUSTOM else self.kind.value
        if self.range is not None:
            return f"{base}({self.range.to_vhdl()})"
        return base
