"""
Regex-based VHDL lifter.

Alternate lifting strategy that works on the raw (comment-blanked) text
without building a syntax tree. It is more lenient than the tree-based
lifter and must produce identical IR for every input both accept.
"""

import logging
import re
from typing import Iterator, List, Optional, Tuple

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
    Variable,
    VhdlType,
)
from rtlcraft.parser.errors import (
    LiftError,
    MissingEntityName,
    MissingGenericType,
    MissingPortType,
)
from rtlcraft.parser.hdl.protocols import LiftResult, LifterBase
from rtlcraft.parser.hdl.tree import blank_comments
from rtlcraft.parser.hdl.type_resolver import (
    Bounds,
    clean_body,
    resolve_direction,
    resolve_type,
    statement_text,
)

logger = logging.getLogger(__name__)

_FLAGS = re.IGNORECASE | re.DOTALL

ENTITY_RE = re.compile(
    r"\bentity\s+(\w*)\s*\bis\b(.*?)\bend\b(?:\s+entity\b)?(?:\s+\w+)?\s*;", _FLAGS
)
ARCHITECTURE_RE = re.compile(r"\barchitecture\s+(\w+)\s+of\s+(\w+)\s+is\b", _FLAGS)
UNIT_START_RE = re.compile(
    r"^\s*(?:entity|architecture|package|configuration|library|context)\b",
    re.IGNORECASE | re.MULTILINE,
)
BEGIN_RE = re.compile(r"\bbegin\b", re.IGNORECASE)
END_RE = re.compile(r"\bend\b(?:\s+architecture\b)?(?:\s+\w+)?\s*;", re.IGNORECASE)
COMPONENT_RE = re.compile(r"\bcomponent\b.*?\bend\s+component\b[^;]*;", _FLAGS)

SIGNAL_RE = re.compile(r"\bsignal\s+([\w\s,]+?)\s*:\s*([^;]+);", _FLAGS)
CONSTANT_RE = re.compile(r"\bconstant\s+([\w\s,]+?)\s*:\s*([^;]*?)\s*:=\s*([^;]*?)\s*;", _FLAGS)
ENUM_TYPE_RE = re.compile(r"\btype\s+(\w+)\s+is\s*\(([^;]*)\)\s*;", _FLAGS)
PROCESS_RE = re.compile(
    r"(?:\b(\w+)\s*:\s*)?(?:\bpostponed\s+)?\bprocess\b\s*(?:\(([^)]*)\))?(?:\s*\bis\b)?"
    r"(.*?)\bbegin\b(.*?)\bend\s+(?:postponed\s+)?process\b[^;]*;",
    _FLAGS,
)
INSTANCE_RE = re.compile(
    r"^(\w+)\s*:\s*(?:(?:component|entity|configuration)\s+)?(\w+(?:\.\w+)*)"
    r"(?:\s*\(\s*\w+\s*\))?\s+(?:generic|port)\s+map\b",
    _FLAGS,
)
LABEL_RE = re.compile(r"^\w+\s*:(?!=)\s*(?:postponed\s+)?", re.IGNORECASE)
VARIABLE_RE = re.compile(r"\b(?:shared\s+)?variable\s+([\w\s,]+?)\s*:\s*([^;]+);", _FLAGS)
SUBPROGRAM_BODY_RE = re.compile(
    r"\b(?:(?:pure|impure)\s+)?(?:function|procedure)\s+(\w+|\"[^\"]*\")\s*"
    r"(?:\((?:[^()]|\([^()]*\))*\)\s*)?(?:return\s+[\w.]+\s+)?is\b"
    r".*?\bbegin\b.*?"
    r"\bend\b\s*(?:(?:function|procedure)\b)?\s*(?:\1(?!\w))?\s*;",
    _FLAGS,
)
REGION_OPEN = r"\b\w+\s*:\s*(?:(?:for|if|case)\b[^;]*?\bgenerate\b|block\b)"
REGION_START_RE = re.compile(
    r"\b(\w+)\s*:\s*(?:(?P<generate>(?:for|if|case)\b[^;]*?\bgenerate\b)|block\b)",
    re.IGNORECASE,
)
REGION_TOKEN_RE = re.compile(
    rf"(?P<open>{REGION_OPEN})|(?P<close>\bend\s+(?:generate|block)\b[^;]*;)", re.IGNORECASE
)
ASSERTION_RE = re.compile(r"^(?:(\w+)\s*:\s*)?(?:postponed\s+)?assert\b", re.IGNORECASE)
PROCEDURE_CALL_RE = re.compile(
    r"^(?:(\w+)\s*:\s*)?(?:postponed\s+)?[A-Za-z_][\w.]*\s*(?:\(.*\))?$", _FLAGS
)

PORT_DECL_RE = re.compile(
    r"^(?:signal\s+)?([\w\s,]+?)\s*:\s*(?:(inout|in|out|buffer|linkage)\b)?\s*(.*)$", _FLAGS
)
GENERIC_DECL_RE = re.compile(
    r"^(?:constant\s+)?([\w\s,]+?)\s*:\s*(?:in\b\s*)?([^:]*?)\s*(?::=\s*(.*))?$", _FLAGS
)
TYPE_TEXT_RE = re.compile(r"^([\w.]+)\s*(?:\((.*)\))?", _FLAGS)
RANGE_TEXT_RE = re.compile(r"^(.+?)\s+(downto|to)\s+(.+)$", _FLAGS)
TYPE_MARK_RE = re.compile(r"^([\w.]+)")


class RegexLifter(LifterBase):
    """Lifter that extracts the IR with regular expressions."""

    def lift(self, source_text: str) -> LiftResult:
        text = blank_comments(source_text)
        result = LiftResult()
        architectures = list(self._architectures(text))
        for match in ENTITY_RE.finditer(text):
            try:
                result.entities.append(self._lift_entity(match, architectures))
            except LiftError as e:
                result.errors.append(e)
        logger.debug(
            "Lifted %d entities (%d failed) with regex lifter",
            len(result.entities),
            len(result.errors),
        )
        return result

    def _lift_entity(self, match: re.Match, architectures: List[Tuple[str, str, str]]) -> Entity:
        name = match.group(1)
        if not name:
            raise MissingEntityName(
                "Entity declaration has no name", construct=match.group(0).splitlines()[0]
            )
        header = match.group(2)

        generics: List[Generic] = []
        generic_text, generic_end = _clause_body(header, "generic")
        if generic_text is not None:
            for decl in _split_top_level(generic_text):
                generics.extend(self._lift_generics(decl, name))

        ports: List[Port] = []
        port_text, _ = _clause_body(header[generic_end:], "port")
        if port_text is not None:
            for decl in _split_top_level(port_text):
                ports.extend(self._lift_ports(decl, name))

        architecture = self._bind_architecture(name, architectures)
        return Entity(name=name, ports=ports, generics=generics, architecture=architecture)

    def _lift_generics(self, decl: str, entity_name: str) -> List[Generic]:
        match = GENERIC_DECL_RE.match(decl)
        if match is None:
            raise MissingGenericType(
                "Malformed generic declaration", entity_name=entity_name, construct=decl
            )
        names = _split_names(match.group(1))
        type_match = TYPE_MARK_RE.match(match.group(2).strip())
        if type_match is None:
            raise MissingGenericType(
                f"Generic '{names[0]}' has no type", entity_name=entity_name, construct=decl
            )
        default = match.group(3).strip() if match.group(3) else None
        return [
            Generic(name=n, type_name=type_match.group(1), default_value=default) for n in names
        ]

    def _lift_ports(self, decl: str, entity_name: str) -> List[Port]:
        match = PORT_DECL_RE.match(decl)
        if match is None:
            raise MissingPortType(
                "Malformed port declaration", entity_name=entity_name, construct=decl
            )
        names = _split_names(match.group(1))
        direction = resolve_direction(match.group(2), entity_name=entity_name, construct=decl)
        type_text = _strip_default(match.group(3))
        type_text = re.sub(r"\s+bus\s*$", "", type_text, flags=re.IGNORECASE)
        if not type_text:
            raise MissingPortType(
                f"Port '{names[0]}' has no type", entity_name=entity_name, construct=decl
            )
        port_type = self._resolve_type_text(type_text, entity_name)
        return [Port(name=n, direction=direction, type=port_type) for n in names]

    def _resolve_type_text(self, type_text: str, entity_name: str) -> VhdlType:
        match = TYPE_TEXT_RE.match(type_text.strip())
        if match is None:
            return resolve_type(type_text.strip(), None, self.config.range_fallback, entity_name)
        bounds = _parse_bounds(match.group(2)) if match.group(2) else None
        return resolve_type(match.group(1), bounds, self.config.range_fallback, entity_name)

    def _architectures(self, text: str) -> Iterator[Tuple[str, str, str]]:
        """Yield (name, entity name, body text) for every architecture."""
        unit_starts = [m.start() for m in UNIT_START_RE.finditer(text)]
        for match in ARCHITECTURE_RE.finditer(text):
            region_end = next((s for s in unit_starts if s > match.end()), len(text))
            yield match.group(1), match.group(2), text[match.end():region_end]

    def _bind_architecture(
        self, entity_name: str, architectures: List[Tuple[str, str, str]]
    ) -> Optional[Architecture]:
        """Lift the first architecture whose 'of' clause names the entity."""
        for arch_name, of_name, body in architectures:
            if of_name != entity_name:
                continue
            try:
                architecture = self._lift_architecture(arch_name, body, entity_name)
            except LiftError as e:
                logger.warning(
                    "Skipping architecture '%s' of '%s': %s", arch_name, entity_name, e
                )
                continue
            if architecture is not None:
                return architecture
        logger.debug("No architecture bound to entity '%s'", entity_name)
        return None

    def _lift_architecture(
        self, arch_name: str, body: str, entity_name: str
    ) -> Optional[Architecture]:
        body = SUBPROGRAM_BODY_RE.sub(lambda m: " " * len(m.group(0)), body)
        begin = BEGIN_RE.search(body)
        ends = list(END_RE.finditer(body))
        if begin is None or not ends or ends[-1].start() < begin.end():
            logger.warning("Architecture '%s' has no recognizable body", arch_name)
            return None
        declarations = COMPONENT_RE.sub(" ", body[: begin.start()])
        statements = body[begin.end(): ends[-1].start()]

        signals: List[Signal] = []
        for match in SIGNAL_RE.finditer(declarations):
            type_text = _strip_default(match.group(2))
            type_text = re.sub(r"\s+(?:register|bus)\s*$", "", type_text, flags=re.IGNORECASE)
            signal_type = self._resolve_type_text(type_text, entity_name)
            signals.extend(Signal(name=n, type=signal_type) for n in _split_names(match.group(1)))

        constants: List[Constant] = []
        for match in CONSTANT_RE.finditer(declarations):
            type_mark = TYPE_MARK_RE.match(match.group(2).strip())
            constants.extend(
                Constant(
                    name=n,
                    type_name=type_mark.group(1) if type_mark else match.group(2).strip(),
                    value=match.group(3).strip(),
                )
                for n in _split_names(match.group(1))
            )

        enum_types: List[EnumType] = []
        for match in ENUM_TYPE_RE.finditer(declarations):
            literals = [lit.strip() for lit in match.group(2).split(",") if lit.strip()]
            if any(lit.startswith("'") for lit in literals):
                continue
            enum_types.append(EnumType(name=match.group(1), literals=literals))

        statements, regions = _extract_regions(statements)
        opaque: List[Tuple[int, OpaqueStatement]] = list(regions)

        processes: List[Process] = []
        for match in PROCESS_RE.finditer(statements):
            sensitivity = match.group(2)
            processes.append(
                Process(
                    label=match.group(1),
                    sensitivity_list=_split_names(sensitivity) if sensitivity else [],
                    variables=self._lift_variables(match.group(3), entity_name),
                    body=clean_body(match.group(4)),
                )
            )

        concurrent: List[str] = []
        instances: List[Instance] = []
        remaining = PROCESS_RE.sub(lambda m: " " * len(m.group(0)), statements)
        for piece in re.finditer(r"[^;]+", remaining):
            fragment = clean_body(piece.group(0))
            if not fragment:
                continue
            instance = INSTANCE_RE.match(fragment)
            if instance is not None:
                instances.append(
                    Instance(label=instance.group(1), unit=instance.group(2), text=fragment)
                )
                continue
            assertion = ASSERTION_RE.match(fragment)
            if assertion is not None:
                opaque.append(
                    (piece.start(), _opaque(OpaqueKind.ASSERTION, assertion.group(1), fragment))
                )
                continue
            statement = clean_body(LABEL_RE.sub("", fragment, count=1))
            if "<=" not in statement:
                call = PROCEDURE_CALL_RE.match(fragment)
                if call is not None:
                    call_statement = _opaque(OpaqueKind.PROCEDURE_CALL, call.group(1), fragment)
                    opaque.append((piece.start(), call_statement))
                else:
                    logger.warning("Ignoring unsupported concurrent statement: %s", statement)
                continue
            if statement not in concurrent:
                concurrent.append(statement)

        return Architecture(
            name=arch_name,
            signals=signals,
            processes=processes,
            concurrent_statements=concurrent,
            constants=constants,
            enum_types=enum_types,
            instances=instances,
            opaque_statements=[statement for _, statement in sorted(opaque, key=lambda o: o[0])],
        )

    def _lift_variables(self, declarations: str, entity_name: str) -> List[Variable]:
        variables: List[Variable] = []
        for match in VARIABLE_RE.finditer(declarations):
            variable_type = self._resolve_type_text(_strip_default(match.group(2)), entity_name)
            variables.extend(
                Variable(name=n, type=variable_type) for n in _split_names(match.group(1))
            )
        return variables


def _opaque(kind: OpaqueKind, label: Optional[str], text: str) -> OpaqueStatement:
    return OpaqueStatement(kind=kind, label=label, text=statement_text(text))


def _extract_regions(statements: str) -> Tuple[str, List[Tuple[int, OpaqueStatement]]]:
    """
    Cut generate and block regions out of the statement part.

    Regions are matched with their own ``end generate``/``end block`` by
    counting nested openers, then blanked so offsets stay valid.

    Returns:
        Tuple of (statements with regions blanked, (offset, statement) pairs)
    """
    regions: List[Tuple[int, OpaqueStatement]] = []
    search_from = 0
    while True:
        start = REGION_START_RE.search(statements, search_from)
        if start is None:
            break

        depth = 0
        end = None
        for token in REGION_TOKEN_RE.finditer(statements, start.start()):
            depth += 1 if token.group("open") else -1
            if depth == 0:
                end = token.end()
                break
        if end is None:
            logger.warning("Unterminated region '%s' is left in place", start.group(1))
            break

        kind = OpaqueKind.GENERATE if start.group("generate") else OpaqueKind.BLOCK
        regions.append(
            (start.start(), _opaque(kind, start.group(1), statements[start.start() : end]))
        )
        statements = statements[: start.start()] + " " * (end - start.start()) + statements[end:]
        search_from = end
    return statements, regions


def _clause_body(text: str, keyword: str) -> Tuple[Optional[str], int]:
    """Content between the parentheses of ``<keyword> ( ... )`` and the offset after it."""
    match = re.search(rf"\b{keyword}\s*\(", text, re.IGNORECASE)
    if match is None:
        return None, 0

    # Simple paren counting
    paren_start = match.end() - 1
    paren_count = 0
    for i in range(paren_start, len(text)):
        if text[i] == "(":
            paren_count += 1
        elif text[i] == ")":
            paren_count -= 1
            if paren_count == 0:
                return text[paren_start + 1: i], i + 1
    return None, 0


def _split_top_level(text: str, separator: str = ";") -> List[str]:
    """Split on ``separator`` outside parentheses, dropping empty parts."""
    parts, depth, current = [], 0, []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def _split_names(text: str) -> List[str]:
    return [name.strip() for name in text.split(",") if name.strip()]


def _strip_default(text: str) -> str:
    return text.split(":=", 1)[0].strip()


def _parse_bounds(constraint: str) -> Optional[Bounds]:
    first = _split_top_level(constraint, ",")
    if not first or re.match(r"^\w+\s+range\b", first[0], re.IGNORECASE):
        return None
    match = RANGE_TEXT_RE.match(first[0])
    if match is None:
        return None
    return match.group(1).strip(), match.group(3).strip(), match.group(2).lower() == "downto"
