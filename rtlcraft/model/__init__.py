"""
Pydantic-based intermediate representation of lifted VHDL designs.

Both lifters produce these models and both generators consume them; the
models hold plain values only, never references into a syntax tree.
"""

from .base import IrModel, NamedIrModel, Polarity, RtlBaseModel, SettingsModel
from .clocking import ClockEdge, EdgeKind, ProcessTiming
from .config import Dialect, LifterKind, TranspilerConfig
from .entity import (
    Architecture,
    Constant,
    Entity,
    EnumType,
    Instance,
    OpaqueKind,
    OpaqueStatement,
    Process,
    Signal,
    Variable,
)
from .port import Generic, Port, PortDirection
from .types import TypeKind, VectorRange, VhdlType

__all__ = [
    # Base
    "RtlBaseModel",
    "IrModel",
    "NamedIrModel",
    "SettingsModel",
    "Polarity",
    # Types
    "TypeKind",
    "VectorRange",
    "VhdlType",
    # Port
    "Port",
    "PortDirection",
    "Generic",
    # Entity
    "Entity",
    "Architecture",
    "Signal",
    "Process",
    "Constant",
    "EnumType",
    "Instance",
    "OpaqueKind",
    "OpaqueStatement",
    "Variable",
    # Clocking
    "ClockEdge",
    "EdgeKind",
    "ProcessTiming",
    # Config
    "Dialect",
    "LifterKind",
    "TranspilerConfig",
]
