"""
Type, range and direction resolution shared by both lifters.

Both lifters hand raw source text to these functions so that the same
declaration always resolves to the same IR, whichever strategy found it.
"""

import logging
import re
from typing import Optional, Tuple

from rtlcraft.model import PortDirection, TypeKind, VectorRange, VhdlType
from rtlcraft.parser.errors import InvalidPortDirection, UnresolvableRange

logger = logging.getLogger(__name__)

SCALAR_TYPES = {
    "std_logic": TypeKind.STD_LOGIC,
    "std_ulogic": TypeKind.STD_LOGIC,
    "bit": TypeKind.BIT,
    "integer": TypeKind.INTEGER,
    "natural": TypeKind.NATURAL,
    "positive": TypeKind.POSITIVE,
    "boolean": TypeKind.BOOLEAN,
}

VECTOR_TYPES = {
    "std_logic_vector": TypeKind.STD_LOGIC_VECTOR,
    "std_ulogic_vector": TypeKind.STD_LOGIC_VECTOR,
    "bit_vector": TypeKind.BIT_VECTOR,
    "signed": TypeKind.SIGNED,
    "unsigned": TypeKind.UNSIGNED,
}

# Non-literal bounds shorter than this that contain '-' (e.g. WIDTH-1) get the fallback
FALLBACK_MAX_LENGTH = 20

_LITERAL_RE = re.compile(r"\d[\d_]*")

# (left text, right text, descending)
Bounds = Tuple[str, str, bool]


def normalize_space(text: str) -> str:
    return " ".join(text.split())


def resolve_bound(text: str, fallback: int, entity_name: Optional[str] = None) -> Tuple[int, bool]:
    """
    Resolve one range bound.

    Args:
        text: Bound expression text, e.g. ``7`` or ``WIDTH-1``
        fallback: Value substituted for short generic-dependent expressions
        entity_name: Entity being lifted, for error context

    Returns:
        Tuple of (value, used_fallback)

    Raises:
        UnresolvableRange: If the bound is neither a literal nor eligible for the fallback
    """
    text = normalize_space(text)
    if _LITERAL_RE.fullmatch(text):
        return int(text.replace("_", "")), False
    if "-" in text and len(text) < FALLBACK_MAX_LENGTH:
        return fallback, True
    raise UnresolvableRange(
        f"Cannot resolve range bound '{text}'", entity_name=entity_name, construct=text
    )


def resolve_range(bounds: Bounds, fallback: int, entity_name: Optional[str] = None) -> VectorRange:
    """Resolve a (left, right, descending) triple into a ``VectorRange``."""
    left_text, right_text, descending = bounds
    left, left_fallback = resolve_bound(left_text, fallback, entity_name)
    right, right_fallback = resolve_bound(right_text, fallback, entity_name)

    source = None
    if left_fallback or right_fallback:
        keyword = "downto" if descending else "to"
        source = f"{normalize_space(left_text)} {keyword} {normalize_space(right_text)}"
        logger.warning(
            "Range '%s' in entity '%s' is not literal; using fallback bound %d",
            source,
            entity_name,
            fallback,
        )
    return VectorRange(left=left, right=right, descending=descending, source=source)


def resolve_type(
    type_name: str,
    bounds: Optional[Bounds],
    fallback: int,
    entity_name: Optional[str] = None,
) -> VhdlType:
    """
    Map a VHDL type mark and optional index bounds onto a ``VhdlType``.

    Unknown names, and vector names without a usable constraint, become
    custom types; they never fail.

    Raises:
        UnresolvableRange: If a known vector type has an unresolvable range
    """
    base = type_name.split(".")[-1].strip()
    key = base.lower()
    if key in SCALAR_TYPES:
        return VhdlType.scalar(SCALAR_TYPES[key])

    vector_range = None
    if bounds is not None:
        try:
            vector_range = resolve_range(bounds, fallback, entity_name)
        except UnresolvableRange:
            if key in VECTOR_TYPES:
                raise
            logger.warning("Dropping unresolvable range of custom type '%s'", base)

    if key in VECTOR_TYPES and vector_range is not None:
        return VhdlType.vector(VECTOR_TYPES[key], vector_range)
    return VhdlType.custom(base, vector_range)


def resolve_direction(
    mode: Optional[str], entity_name: Optional[str] = None, construct: Optional[str] = None
) -> PortDirection:
    """Resolve a port mode keyword; a missing mode means ``in``."""
    if mode is None or not mode.strip():
        return PortDirection.IN
    try:
        return PortDirection.from_string(mode)
    except ValueError as e:
        raise InvalidPortDirection(str(e), entity_name=entity_name, construct=construct) from e


def clean_body(text: str) -> str:
    """Strip a statement block and the trailing blanks that comment removal leaves."""
    return "\n".join(line.rstrip() for line in text.strip().splitlines())


def statement_text(text: str) -> str:
    """Statement source as stored in the IR: cleaned and without its ``;``."""
    return clean_body(text.strip().rstrip(";"))
