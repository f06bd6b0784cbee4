"""
Port and generic definitions of a VHDL entity.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from .base import NamedIrModel
from .types import VhdlType


class PortDirection(str, Enum):
    """Port direction enumeration."""

    IN = "in"
    OUT = "out"
    INOUT = "inout"
    BUFFER = "buffer"

    @classmethod
    def from_string(cls, value: str) -> "PortDirection":
        """Convert a VHDL mode keyword into ``PortDirection``.

        Raises:
            ValueError: If the keyword is not in/out/inout/buffer
        """
        normalized = value.lower().strip()
        for direction in cls:
            if direction.value == normalized:
                return direction
        raise ValueError(f"Invalid port direction '{value}'")


class Port(NamedIrModel):
    """
    Entity port. List order within the entity is the module port order.
    """

    direction: PortDirection = Field(..., description="Port direction")
    type: VhdlType = Field(..., description="VHDL type of the port")

    @property
    def is_input(self) -> bool:
        """Check if port is input."""
        return self.direction == PortDirection.IN

    @property
    def is_output(self) -> bool:
        """Check if port drives a value out of the entity (out or buffer)."""
        return self.direction in (PortDirection.OUT, PortDirection.BUFFER)

    @property
    def is_bidirectional(self) -> bool:
        """Check if port is bidirectional."""
        return self.direction == PortDirection.INOUT


class Generic(NamedIrModel):
    """
    Entity generic. The default value is kept as opaque expression text.
    """

    type_name: str = Field(..., description="VHDL type mark, e.g. 'integer'")
    default_value: Optional[str] = Field(default=None, description="Default expression text")
