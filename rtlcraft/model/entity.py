"""Entity model - the canonical representation produced by both lifters."""

from enum import Enum
from typing import List, Optional, Sequence, TypeVar

from pydantic import Field

from .base import IrModel, NamedIrModel
from .port import Generic, Port
from .types import VhdlType

NamedItem = TypeVar("NamedItem")


def _find_by_name(items: Sequence[NamedItem], name: str) -> Optional[NamedItem]:
    """Return the first item whose name matches, ignoring case like VHDL does."""
    lowered = name.lower()
    return next((item for item in items if item.name.lower() == lowered), None)


class Signal(NamedIrModel):
    """Internal architecture signal."""

    type: VhdlType = Field(..., description="VHDL type of the signal")


class Constant(NamedIrModel):
    """Architecture-level constant; value is opaque expression text."""

    type_name: str = Field(..., description="VHDL type mark")
    value: str = Field(..., description="Value expression text")


class EnumType(NamedIrModel):
    """Enumerated type declared in the architecture, e.g. a state type."""

    literals: List[str] = Field(default_factory=list, description="Literals in declaration order")


class Instance(IrModel):
    """
    Component or entity instantiation.

    Instantiations are not elaborated; the raw text is kept so the
    generator can surface it in the output.
    """

    label: str = Field(..., description="Instance label")
    unit: str = Field(..., description="Instantiated unit name, e.g. 'work.fifo'")
    text: str = Field(..., description="Source text of the instantiation")


class OpaqueKind(str, Enum):
    """Concurrent statements that are recognized but not translated."""

    GENERATE = "generate"
    BLOCK = "block"
    ASSERTION = "assertion"
    PROCEDURE_CALL = "procedure_call"


class OpaqueStatement(IrModel):
    """
    Concurrent statement kept as source text.

    Generate and block regions are kept whole, including everything nested
    inside them; the generator surfaces the text as a comment block.
    """

    kind: OpaqueKind = Field(..., description="Statement kind")
    label: Optional[str] = Field(default=None, description="Statement label")
    text: str = Field(..., description="Source text of the statement")


class Variable(NamedIrModel):
    """Variable declared in a process declarative part."""

    type: VhdlType = Field(..., description="VHDL type of the variable")


class Process(IrModel):
    """
    Process statement.

    The body is the raw sequential statement text between ``begin`` and
    ``end process``; it is translated by the generator.
    """

    label: Optional[str] = Field(default=None, description="Optional process label")
    sensitivity_list: List[str] = Field(default_factory=list, description="Sensitivity list entries")
    variables: List[Variable] = Field(default_factory=list, description="Process variables")
    body: str = Field(default="", description="Sequential statement text")


class Architecture(NamedIrModel):
    """Implementation body bound to an entity."""

    signals: List[Signal] = Field(default_factory=list, description="Internal signals")
    processes: List[Process] = Field(default_factory=list, description="Process statements")
    concurrent_statements: List[str] = Field(
        default_factory=list, description="Concurrent assignment text, without the trailing ';'"
    )
    constants: List[Constant] = Field(default_factory=list, description="Constant declarations")
    enum_types: List[EnumType] = Field(default_factory=list, description="Enumerated types")
    instances: List[Instance] = Field(default_factory=list, description="Unresolved instantiations")
    opaque_statements: List[OpaqueStatement] = Field(
        default_factory=list, description="Statements kept as text, in source order"
    )

    def get_signal(self, name: str) -> Optional[Signal]:
        return _find_by_name(self.signals, name)

    def get_enum_type(self, name: str) -> Optional[EnumType]:
        return _find_by_name(self.enum_types, name)


class Entity(NamedIrModel):
    """
    Lifted VHDL entity, the single unit consumed by the generators.

    It includes:
    - Interface (ports in declaration order, generics)
    - The first architecture body that names this entity, if any
    """

    ports: List[Port] = Field(default_factory=list, description="Ports in declaration order")
    generics: List[Generic] = Field(default_factory=list, description="Generics in declaration order")
    architecture: Optional[Architecture] = Field(default=None, description="Bound architecture")

    def get_port(self, name: str) -> Optional[Port]:
        return _find_by_name(self.ports, name)

    def get_generic(self, name: str) -> Optional[Generic]:
        return _find_by_name(self.generics, name)

    @property
    def has_architecture(self) -> bool:
        return self.architecture is not None

    @property
    def output_ports(self) -> List[Port]:
        return [p for p in self.ports if p.is_output]
