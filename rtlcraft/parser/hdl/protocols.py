"""Typing protocols and shared results for the VHDL lifters."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from rtlcraft.model import Entity, TranspilerConfig
from rtlcraft.parser.errors import LiftError

logger = logging.getLogger(__name__)


@dataclass
class LiftResult:
    """Entities lifted from one source unit plus the per-entity failures."""

    entities: List[Entity] = field(default_factory=list)
    errors: List[LiftError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class EntityLifter(Protocol):
    """Contract shared by the tree-based and regex-based lifters."""

    def lift(self, source_text: str) -> LiftResult:
        """Lift every entity of a source unit, collecting per-entity errors."""
        ...

    def parse_entities(self, source_text: str) -> List[Entity]:
        """Lift a source unit and apply the error policy of the configuration."""
        ...


class LifterBase:
    """
    Error policy common to all lifters.

    Subclasses implement ``lift``; ``parse_entities`` decides which
    per-entity errors are tolerated.
    """

    def __init__(self, config: Optional[TranspilerConfig] = None):
        self.config = config or TranspilerConfig()

    def lift(self, source_text: str) -> LiftResult:
        raise NotImplementedError

    def parse_entities(self, source_text: str) -> List[Entity]:
        """
        Lift all entities of a source unit.

        Entities that fail to lift are skipped with a warning, unless the
        configuration is strict or nothing could be lifted at all.

        Raises:
            GrammarError: If no syntax tree could be produced
            VhdlSyntaxError: If the source contains syntax errors
            LiftError: See above
        """
        result = self.lift(source_text)
        if result.errors and (self.config.strict or not result.entities):
            raise result.errors[0]
        for error in result.errors:
            logger.warning("Skipping entity: %s", error)
        return result.entities
