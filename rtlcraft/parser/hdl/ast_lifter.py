"""
Tree-based VHDL lifter.

Walks the concrete syntax tree from ``VhdlGrammar`` and produces the
entity IR. Only the four query helpers of ``tree`` are used to navigate.
"""

import logging
from typing import List, Optional

from rtlcraft.model import (
    Architecture,
    Constant,
    Entity,
    EnumType,
    Generic,
    Instance,
    OpaqueKind,
    OpaqueStatement,
    Port,
    Process,
    Signal,
    TranspilerConfig,
    Variable,
    VhdlType,
)
from rtlcraft.parser.errors import (
    LiftError,
    MissingEntityName,
    MissingGenericType,
    MissingPortType,
    VhdlSyntaxError,
)
from rtlcraft.parser.hdl.protocols import LiftResult, LifterBase
from rtlcraft.parser.hdl.tree import (
    Node,
    SyntaxTree,
    find_child,
    find_children,
    find_descendants,
    node_text,
)
from rtlcraft.parser.hdl.type_resolver import (
    Bounds,
    clean_body,
    resolve_direction,
    resolve_type,
    statement_text,
)
from rtlcraft.parser.hdl.vhdl_grammar import VhdlGrammar

logger = logging.getLogger(__name__)

ASSIGNMENT_KINDS = (
    "conditional_signal_assignment",
    "simple_concurrent_signal_assignment",
    "selected_signal_assignment",
)

OPAQUE_KINDS = {
    "generate_statement": OpaqueKind.GENERATE,
    "block_statement": OpaqueKind.BLOCK,
    "concurrent_assertion_statement": OpaqueKind.ASSERTION,
    "concurrent_procedure_call_statement": OpaqueKind.PROCEDURE_CALL,
}


class AstLifter(LifterBase):
    """Lifter that builds the IR from the pyparsing syntax tree."""

    def __init__(self, config: Optional[TranspilerConfig] = None):
        super().__init__(config)
        self.grammar = VhdlGrammar()

    def lift(self, source_text: str) -> LiftResult:
        """
        Lift every entity declared in ``source_text``.

        Raises:
            GrammarError: If no syntax tree could be produced
            VhdlSyntaxError: If the tree contains error nodes
        """
        tree = self.grammar.parse(source_text)
        if tree.has_error:
            lines = sorted({tree.line_of(node.start) for node in tree.error_nodes()})
            raise VhdlSyntaxError(
                f"VHDL syntax error(s) at line(s) {', '.join(map(str, lines))}",
                error_lines=lines,
            )

        result = LiftResult()
        architectures = find_descendants(tree.root, "architecture_body")
        for entity_node in find_descendants(tree.root, "entity_declaration"):
            try:
                result.entities.append(self._lift_entity(entity_node, architectures, tree))
            except LiftError as e:
                result.errors.append(e)
        logger.debug(
            "Lifted %d entities (%d failed) from syntax tree",
            len(result.entities),
            len(result.errors),
        )
        return result

    def _lift_entity(self, node: Node, architectures: List[Node], tree: SyntaxTree) -> Entity:
        src = tree.source
        ident = find_child(node, "identifier")
        if ident is None:
            raise MissingEntityName(
                "Entity declaration has no name",
                construct=_first_line(node_text(node, src)),
                line=tree.line_of(node.start),
            )
        name = node_text(ident, src)

        generics: List[Generic] = []
        ports: List[Port] = []
        header = find_child(node, "entity_header")
        if header is not None:
            generic_clause = find_child(header, "generic_clause")
            if generic_clause is not None:
                interface_list = find_child(generic_clause, "generic_interface_list")
                for decl in find_children(interface_list, "interface_constant_declaration"):
                    generics.extend(self._lift_generics(decl, name, tree))

            port_clause = find_child(header, "port_clause")
            if port_clause is not None:
                for decl in find_children(port_clause, "signal_interface_declaration"):
                    ports.extend(self._lift_ports(decl, name, tree))

        architecture = self._bind_architecture(name, architectures, tree)
        return Entity(name=name, ports=ports, generics=generics, architecture=architecture)

    def _lift_generics(self, decl: Node, entity_name: str, tree: SyntaxTree) -> List[Generic]:
        names = self._identifiers(decl, tree.source)
        subtype = find_child(decl, "subtype_indication")
        if subtype is None:
            raise MissingGenericType(
                f"Generic '{names[0]}' has no type",
                entity_name=entity_name,
                construct=node_text(decl, tree.source).strip(),
                line=tree.line_of(decl.start),
            )
        type_name = node_text(find_child(subtype, "type_mark"), tree.source)
        default = find_child(decl, "expression")
        default_value = node_text(default, tree.source).strip() if default is not None else None
        return [Generic(name=n, type_name=type_name, default_value=default_value) for n in names]

    def _lift_ports(self, decl: Node, entity_name: str, tree: SyntaxTree) -> List[Port]:
        src = tree.source
        names = self._identifiers(decl, src)
        construct = node_text(decl, src).strip()

        mode = find_child(decl, "mode")
        direction = resolve_direction(
            node_text(mode, src) if mode is not None else None,
            entity_name=entity_name,
            construct=construct,
        )
        subtype = find_child(decl, "subtype_indication")
        if subtype is None:
            raise MissingPortType(
                f"Port '{names[0]}' has no type",
                entity_name=entity_name,
                construct=construct,
                line=tree.line_of(decl.start),
            )
        port_type = self._resolve_subtype(subtype, entity_name, src)
        return [Port(name=n, direction=direction, type=port_type) for n in names]

    def _resolve_subtype(self, subtype: Node, entity_name: str, src: str) -> VhdlType:
        type_mark = find_child(subtype, "type_mark")
        type_name = node_text(find_children(type_mark, "simple_name")[-1], src)

        bounds: Optional[Bounds] = None
        constraint = find_child(subtype, "array_constraint")
        if constraint is not None:
            bounds = self._bounds(find_child(constraint, "index_constraint"), src)
        return resolve_type(type_name, bounds, self.config.range_fallback, entity_name)

    @staticmethod
    def _bounds(index_constraint: Node, src: str) -> Optional[Bounds]:
        """Bound texts of the first range in an index constraint."""
        for child in index_constraint.children:
            if child.kind in ("descending_range", "ascending_range"):
                left, right = find_children(child, "simple_expression")[:2]
                descending = child.kind == "descending_range"
                return node_text(left, src), node_text(right, src), descending
            if child.kind == "discrete_subtype":
                return None
        return None

    @staticmethod
    def _identifiers(decl: Node, src: str) -> List[str]:
        identifier_list = find_child(decl, "identifier_list")
        return [node_text(n, src) for n in find_children(identifier_list, "identifier")]

    def _bind_architecture(
        self, entity_name: str, architectures: List[Node], tree: SyntaxTree
    ) -> Optional[Architecture]:
        """Lift the first architecture whose 'of' clause names the entity."""
        for arch in architectures:
            identifiers = find_children(arch, "identifier")
            if len(identifiers) < 2:
                continue
            arch_name, of_name = (node_text(n, tree.source) for n in identifiers[:2])
            if of_name != entity_name:
                continue
            try:
                return self._lift_architecture(arch, arch_name, entity_name, tree)
            except LiftError as e:
                logger.warning(
                    "Skipping architecture '%s' of '%s': %s", arch_name, entity_name, e
                )
        logger.debug("No architecture bound to entity '%s'", entity_name)
        return None

    def _lift_architecture(
        self, arch: Node, arch_name: str, entity_name: str, tree: SyntaxTree
    ) -> Architecture:
        src = tree.source
        declarations = find_child(arch, "declarative_part")

        signals: List[Signal] = []
        constants: List[Constant] = []
        enum_types: List[EnumType] = []
        for item in declarations.children:
            if item.kind == "signal_declaration":
                signal_type = self._resolve_subtype(
                    find_child(item, "subtype_indication"), entity_name, src
                )
                signals.extend(
                    Signal(name=n, type=signal_type) for n in self._identifiers(item, src)
                )
            elif item.kind == "constant_declaration":
                value = find_child(item, "expression")
                if value is None:
                    continue
                type_mark = find_child(find_child(item, "subtype_indication"), "type_mark")
                constants.extend(
                    Constant(
                        name=n,
                        type_name=node_text(type_mark, src),
                        value=node_text(value, src).strip(),
                    )
                    for n in self._identifiers(item, src)
                )
            elif item.kind == "type_declaration":
                enum_type = self._lift_enum_type(item, src)
                if enum_type is not None:
                    enum_types.append(enum_type)

        statements = find_child(arch, "concurrent_statement_part")
        processes = [
            self._lift_process(p, entity_name, src)
            for p in find_children(statements, "process_statement")
        ]

        assignments = sorted(
            (n for kind in ASSIGNMENT_KINDS for n in find_descendants(statements, kind)),
            key=lambda n: n.start,
        )
        concurrent: List[str] = []
        for node in assignments:
            text = clean_body(node_text(node, src))
            if text not in concurrent:
                concurrent.append(text)

        instances = []
        for node in find_children(statements, "component_instantiation_statement"):
            instances.append(
                Instance(
                    label=node_text(find_child(node, "label"), src),
                    unit=node_text(find_child(node, "instantiated_unit"), src),
                    text=clean_body(node_text(node, src)),
                )
            )

        opaque = sorted(
            (n for kind in OPAQUE_KINDS for n in find_children(statements, kind)),
            key=lambda n: n.start,
        )
        opaque_statements = [
            OpaqueStatement(
                kind=OPAQUE_KINDS[node.kind],
                label=_label_text(node, src),
                text=statement_text(node_text(node, src)),
            )
            for node in opaque
        ]

        return Architecture(
            name=arch_name,
            signals=signals,
            processes=processes,
            concurrent_statements=concurrent,
            constants=constants,
            enum_types=enum_types,
            instances=instances,
            opaque_statements=opaque_statements,
        )

    @staticmethod
    def _lift_enum_type(item: Node, src: str) -> Optional[EnumType]:
        definition = find_child(item, "enumeration_type_definition")
        if definition is None:
            return None
        literals = [
            node_text(n, src) for n in find_children(definition, "enumeration_literal")
        ]
        # Character enumerations (e.g. '0', '1') have no identifier literals to emit
        if any(lit.startswith("'") for lit in literals):
            return None
        return EnumType(name=node_text(find_child(item, "identifier"), src), literals=literals)

    def _lift_process(self, node: Node, entity_name: str, src: str) -> Process:
        sensitivity = find_child(node, "sensitivity_list")
        body = find_child(node, "sequence_of_statements")

        declarations = find_child(node, "process_declarative_part")
        variables: List[Variable] = []
        for decl in find_children(declarations, "variable_declaration"):
            subtype = find_child(decl, "subtype_indication")
            if subtype is None:
                continue
            variable_type = self._resolve_subtype(subtype, entity_name, src)
            variables.extend(
                Variable(name=n, type=variable_type) for n in self._identifiers(decl, src)
            )

        return Process(
            label=_label_text(node, src),
            sensitivity_list=[
                node_text(n, src) for n in find_children(sensitivity, "simple_name")
            ]
            if sensitivity is not None
            else [],
            variables=variables,
            body=clean_body(node_text(body, src)),
        )


def _label_text(node: Node, src: str) -> Optional[str]:
    label = find_child(node, "label")
    return node_text(label, src) if label is not None else None


def _first_line(text: str) -> str:
    return text.strip().splitlines()[0] if text.strip() else ""
