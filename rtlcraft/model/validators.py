"""
Validation utilities for lifted entities.

Provides validation rules beyond basic Pydantic validation, checking
that an entity can be rendered as a module: unique names, legal
identifiers, and no signal shadowing a port.
"""

import re
from dataclasses import dataclass
from typing import List, Set

from .entity import Entity
from .types import VhdlType

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class ValidationError:
    """Validation error with context."""

    severity: str  # 'error' or 'warning'
    message: str
    location: str  # e.g. 'port:count', 'signal:state'
    suggestion: str = ""


class EntityValidator:
    """
    Semantic validator for one entity.

    Errors make an entity unrenderable; warnings point at degraded
    translations a reviewer should look at.
    """

    def __init__(self, entity: Entity):
        self.entity = entity
        self.errors: List[ValidationError] = []
        self.warnings: List[ValidationError] = []

    def validate_all(self) -> bool:
        """
        Run all validation checks.

        Returns:
            True if no errors (warnings are allowed)
        """
        self.errors.clear()
        self.warnings.clear()

        self.validate_identifiers()
        self.validate_unique_names()
        self.validate_degraded_types()

        return len(self.errors) == 0

    def validate_identifiers(self) -> None:
        """Check that every name is a legal identifier in the target languages."""
        names = [("entity", self.entity.name)]
        names += [("port", p.name) for p in self.entity.ports]
        names += [("generic", g.name) for g in self.entity.generics]
        if self.entity.architecture:
            names += [("signal", s.name) for s in self.entity.architecture.signals]

        for category, name in names:
            if not IDENTIFIER_RE.match(name):
                self.errors.append(
                    ValidationError(
                        severity="error",
                        message=f"Illegal {category} identifier: '{name}'",
                        location=f"{category}:{name}",
                    )
                )

    def validate_unique_names(self) -> None:
        """Check for duplicate names within each category (case-insensitive)."""
        port_names = [p.name for p in self.entity.ports]
        self._check_duplicates(port_names, "port")
        self._check_duplicates([g.name for g in self.entity.generics], "generic")

        arch = self.entity.architecture
        if arch is None:
            return
        self._check_duplicates([s.name for s in arch.signals], "signal")

        ports = {name.lower() for name in port_names}
        for signal in arch.signals:
            if signal.name.lower() in ports:
                self.errors.append(
                    ValidationError(
                        severity="error",
                        message=f"Signal '{signal.name}' shadows a port of '{self.entity.name}'",
                        location=f"signal:{signal.name}",
                        suggestion="Rename the signal",
                    )
                )

    def validate_degraded_types(self) -> None:
        """Warn about types whose rendering is a best-effort guess."""
        typed = [("port", p.name, p.type) for p in self.entity.ports]
        if self.entity.architecture:
            typed += [("signal", s.name, s.type) for s in self.entity.architecture.signals]

        for category, name, vhdl_type in typed:
            self._check_type(category, name, vhdl_type)

    def _check_type(self, category: str, name: str, vhdl_type: VhdlType) -> None:
        if vhdl_type.range is not None and vhdl_type.range.is_fallback:
            self.warnings.append(
                ValidationError(
                    severity="warning",
                    message=f"Range '{vhdl_type.range.source}' resolved by fallback to "
                    f"{vhdl_type.range.to_vhdl()}",
                    location=f"{category}:{name}",
                    suggestion="Replace the generic expression with literal bounds",
                )
            )

    def _check_duplicates(self, names: List[str], category: str) -> None:
        """Check for duplicate names in a list."""
        seen: Set[str] = set()
        for name in names:
            if name.lower() in seen:
                self.errors.append(
                    ValidationError(
                        severity="error",
                        message=f"Duplicate {category} name: '{name}'",
                        location=f"{category}:{name}",
                        suggestion=f"Rename one of the {category}s with name '{name}'",
                    )
                )
            seen.add(name.lower())

    def get_error_summary(self) -> str:
        """Get human-readable error summary."""
        lines = []
        for err in self.errors + self.warnings:
            lines.append(f"[{err.severity.upper()}] {err.location}: {err.message}")
        return "\n".join(lines)


def validate_entity(
    entity: Entity,
) -> tuple[bool, List[ValidationError], List[ValidationError]]:
    """
    Convenience function to validate an entity.

    Args:
        entity: Entity to validate

    Returns:
        Tuple of (is_valid, errors, warnings)
    """
    validator = EntityValidator(entity)
    is_valid = validator.validate_all()
    return is_valid, validator.errors, validator.warnings
