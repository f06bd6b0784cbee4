"""
VHDL lifters: source text to entity IR.
"""

from typing import List, Optional

from rtlcraft.model import Entity, LifterKind, TranspilerConfig
from rtlcraft.parser.hdl.ast_lifter import AstLifter
from rtlcraft.parser.hdl.protocols import EntityLifter, LiftResult
from rtlcraft.parser.hdl.regex_lifter import RegexLifter
from rtlcraft.parser.hdl.vhdl_grammar import VhdlGrammar


def create_lifter(config: Optional[TranspilerConfig] = None) -> EntityLifter:
    """Build the lifter selected by ``config.lifter``."""
    config = config or TranspilerConfig()
    if config.lifter == LifterKind.REGEX:
        return RegexLifter(config)
    return AstLifter(config)


def parse_entities(source_text: str, config: Optional[TranspilerConfig] = None) -> List[Entity]:
    """
    Parse VHDL source text into a list of entities.

    A fresh lifter (and grammar) is built for every call.

    Args:
        source_text: One VHDL compilation unit
        config: Optional settings; selects the lifter and error policy

    Returns:
        Entities in declaration order
    """
    return create_lifter(config).parse_entities(source_text)


__all__ = [
    "AstLifter",
    "RegexLifter",
    "VhdlGrammar",
    "EntityLifter",
    "LiftResult",
    "create_lifter",
    "parse_entities",
]
