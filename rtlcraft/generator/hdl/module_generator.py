"""
Module generator shared by both target dialects.

Renders one lifted entity through the ``module.j2`` template:
- Parameter list from generics
- Port list in declaration order
- Enum, constant and signal declarations
- One always block per process, declaring its variables, with the body
  translated statement by statement
- Continuous assignments, then commented placeholders for instances
  and for generate, block, assertion and procedure call statements

Only leaf-level choices (keywords, enum style, fill literals) differ between
dialects; they come from the ``DialectStyle`` of the concrete subclass.
"""

import logging
from typing import Any, Dict, List, Optional, Set

from rtlcraft.generator.base_generator import BaseGenerator
from rtlcraft.generator.errors import GenerationError
from rtlcraft.generator.hdl import expressions as expr
from rtlcraft.generator.hdl.concurrent import (
    render_instance,
    render_opaque,
    translate_concurrent,
)
from rtlcraft.generator.hdl.dialect import DialectStyle
from rtlcraft.generator.hdl.statements import logical_lines, render_body, translate_body
from rtlcraft.model import (
    Architecture,
    Entity,
    EnumType,
    PortDirection,
    ProcessTiming,
    TranspilerConfig,
    TypeKind,
    VhdlType,
)
from rtlcraft.model.validators import validate_entity

logger = logging.getLogger(__name__)

DIRECTIONS = {
    PortDirection.IN: "input",
    PortDirection.OUT: "output",
    PortDirection.INOUT: "inout",
    PortDirection.BUFFER: "output",
}


def enum_width(enum_type: EnumType) -> int:
    """Bits needed to encode every literal, at least one."""
    return max(1, (len(enum_type.literals) - 1).bit_length())


class ModuleGenerator(BaseGenerator):
    """
    Parameterized module generator.

    Subclasses only select ``style``; the traversal of the entity is shared.
    """

    style: DialectStyle

    TEMPLATE = "module.j2"

    def __init__(self, config: Optional[TranspilerConfig] = None, template_dir: Optional[str] = None):
        super().__init__(template_dir)
        self.config = config or TranspilerConfig()

    @property
    def indent(self) -> str:
        return self.config.indent_unit

    def generate(self, entity: Entity) -> str:
        """
        Render one entity as a module.

        Raises:
            GenerationError: If the entity fails semantic validation
        """
        is_valid, errors, warnings = validate_entity(entity)
        if not is_valid:
            raise GenerationError(
                "Entity cannot be rendered",
                entity_name=entity.name,
                issues=[f"{err.location}: {err.message}" for err in errors],
            )
        for warning in warnings:
            logger.debug(f"{entity.name}: {warning.message}")

        template = self.env.get_template(self.TEMPLATE)
        return template.render(**self._get_template_context(entity))

    def _get_template_context(self, entity: Entity) -> Dict[str, Any]:
        """Build the template context for one entity."""
        procedural = self._collect_procedural_targets(entity)
        widths = self._collect_widths(entity)
        return {
            "module_name": entity.name,
            "indent": self.indent,
            "parameters": self._prepare_parameters(entity),
            "ports": self._prepare_ports(entity, procedural),
            "declarations": self._prepare_declarations(entity.architecture, procedural),
            "processes": self._prepare_processes(entity.architecture, widths),
            "blocks": self._prepare_blocks(entity.architecture, widths),
        }

    def _collect_procedural_targets(self, entity: Entity) -> Set[str]:
        """Lower-case base names of every target assigned inside a process."""
        targets: Set[str] = set()
        if entity.architecture is None:
            return targets
        for process in entity.architecture.processes:
            for line in logical_lines(process.body):
                target = expr.assignment_target(line)
                if target:
                    targets.add(target.lower())
        return targets

    def _collect_widths(self, entity: Entity) -> Dict[str, int]:
        """Declared widths by lower-case name, for sized fill literals."""
        widths: Dict[str, int] = {}
        typed = [(p.name, p.type) for p in entity.ports]
        if entity.architecture:
            typed += [(s.name, s.type) for s in entity.architecture.signals]
            for process in entity.architecture.processes:
                typed += [(v.name, v.type) for v in process.variables]
        for name, vhdl_type in typed:
            width = vhdl_type.width
            if width is None and entity.architecture and vhdl_type.name:
                enum_type = entity.architecture.get_enum_type(vhdl_type.name)
                width = enum_width(enum_type) if enum_type else None
            if width is not None:
                widths.setdefault(name.lower(), width)
        return widths

    def _prepare_parameters(self, entity: Entity) -> List[str]:
        parameters = []
        for generic in entity.generics:
            if generic.default_value is None:
                value = "0 /* no default */"
            else:
                value = expr.rewrite_expression(generic.default_value, self.style)
            parameters.append(f"parameter {generic.name} = {value}")
        return parameters

    def _prepare_ports(self, entity: Entity, procedural: Set[str]) -> List[str]:
        ports = []
        for port in entity.ports:
            promoted = port.is_output and port.name.lower() in procedural
            keyword = self.style.keyword(promoted)
            vhdl_type = self.render_type(port.type, keyword, entity.architecture)
            ports.append(f"{DIRECTIONS[port.direction]} {vhdl_type} {port.name}")
        return ports

    def _prepare_declarations(
        self, architecture: Optional[Architecture], procedural: Set[str]
    ) -> List[str]:
        if architecture is None:
            return []

        declarations: List[str] = []
        for enum_type in architecture.enum_types:
            declarations.extend(self.render_enum(enum_type))
        for constant in architecture.constants:
            value = expr.rewrite_expression(constant.value, self.style)
            declarations.append(f"localparam {constant.name} = {value};")
        for signal in architecture.signals:
            keyword = self.style.keyword(signal.name.lower() in procedural)
            declarations.append(
                f"{self.render_type(signal.type, keyword, architecture)} {signal.name};"
            )
        return declarations

    def _prepare_processes(
        self, architecture: Optional[Architecture], widths: Dict[str, int]
    ) -> List[Dict[str, Any]]:
        if architecture is None:
            return []

        processes = []
        for index, process in enumerate(architecture.processes):
            timing = ProcessTiming.from_process(process)
            if timing.sequential:
                header = f"{self.style.sequential_header(timing.render_edges())} begin"
            else:
                header = f"{self.style.combinational_block} begin"
            # Declarations inside a Verilog block need a named block
            label = process.label or (f"process_{index}" if process.variables else None)
            if label:
                header += f" : {label}"

            body = []
            keyword = self.style.variable_keyword
            for variable in process.variables:
                declared = self.render_type(variable.type, keyword, architecture)
                body.append(f"{self.indent * 2}{declared} {variable.name};")
            lines = translate_body(process.body, self.style, widths)
            body += render_body(lines, self.indent)
            processes.append({"header": header, "body": body})
        return processes

    def _prepare_blocks(
        self, architecture: Optional[Architecture], widths: Dict[str, int]
    ) -> List[List[str]]:
        if architecture is None:
            return []

        blocks = [
            translate_concurrent(statement, self.style, widths)
            for statement in architecture.concurrent_statements
        ]
        blocks += [render_instance(instance) for instance in architecture.instances]
        blocks += [render_opaque(statement) for statement in architecture.opaque_statements]
        return blocks

    def render_enum(self, enum_type: EnumType) -> List[str]:
        """Declare an enumerated type, as a typedef or as localparams."""
        width = enum_width(enum_type)
        if self.style.typed_enums:
            literals = ", ".join(enum_type.literals)
            return [f"typedef enum logic [{width - 1}:0] {{{literals}}} {enum_type.name};"]
        return [
            f"localparam [{width - 1}:0] {literal} = {width}'d{index};"
            for index, literal in enumerate(enum_type.literals)
        ]

    def render_type(
        self, vhdl_type: VhdlType, keyword: str, architecture: Optional[Architecture] = None
    ) -> str:
        """
        Render a type with the given net keyword.

        Args:
            vhdl_type: Port or signal type
            keyword: ``wire``, ``reg`` or ``logic``
            architecture: Used to resolve enumerated custom types

        Returns:
            Type text placed before the declared name
        """
        kind = vhdl_type.kind
        if kind == TypeKind.CUSTOM:
            enum_type = architecture.get_enum_type(vhdl_type.name) if architecture else None
            if enum_type is not None:
                if self.style.typed_enums:
                    return enum_type.name
                return f"{keyword} [{enum_width(enum_type) - 1}:0] /* {enum_type.name} */"
            suffix = f"({vhdl_type.range.to_vhdl()})" if vhdl_type.range else ""
            return f"{keyword} /* {vhdl_type.name}{suffix} */"

        if kind in (TypeKind.STD_LOGIC, TypeKind.BIT, TypeKind.BOOLEAN):
            return keyword
        if kind == TypeKind.INTEGER:
            return f"{keyword} signed [31:0]"
        if kind in (TypeKind.NATURAL, TypeKind.POSITIVE):
            return f"{keyword} [31:0]"

        signed = " signed" if kind == TypeKind.SIGNED else ""
        text = f"{keyword}{signed} {vhdl_type.range.to_brackets()}"
        if vhdl_type.range.is_fallback:
            text += f" /* {vhdl_type.range.source} */"
        return text
