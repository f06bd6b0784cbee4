"""
Base models for the transpiler IR.

Provides shared base models with centralized configuration for all IR
classes, so the ``model_config`` is declared only once.

Architecture Decision:
    Two policies exist on purpose:
    IrModel (frozen=True) is for lifted IR objects (Entity, Port, Signal,
    etc.) which must not change once the lifter has produced them.
    SettingsModel (validate_assignment=True) is for configuration objects
    that callers may tweak after loading.
"""

from enum import Enum

from pydantic import BaseModel, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class RtlBaseModel(BaseModel):
    """Base model with shared configuration for all rtlcraft models.

    Provides camelCase aliasing, forbids unknown fields, and allows field
    population by either alias or Python name.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "forbid",
    }


class IrModel(RtlBaseModel):
    """Immutable base model for lifted IR objects.

    Note: frozen models can be shared freely between threads once lifted.
    """

    model_config = {
        **RtlBaseModel.model_config,
        "frozen": True,
    }


class SettingsModel(RtlBaseModel):
    """Mutable base model that re-validates on assignment."""

    model_config = {
        **RtlBaseModel.model_config,
        "validate_assignment": True,
    }


class NamedIrModel(IrModel):
    """IR object identified by a VHDL identifier."""

    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str, info: ValidationInfo) -> str:
        """Ensure identifiers are not empty. Strips whitespace automatically."""
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} cannot be empty")
        return v


class Polarity(str, Enum):
    """Reset polarity enumeration."""

    ACTIVE_HIGH = "activeHigh"
    ACTIVE_LOW = "activeLow"
