"""Exceptions raised by the code generators."""

from typing import List, Optional


class GenerationError(Exception):
    """An entity is structurally invalid and cannot be rendered."""

    def __init__(self, message: str, entity_name: Optional[str] = None, issues: Optional[List[str]] = None):
        self.entity_name = entity_name
        self.issues = list(issues or [])
        parts = []
        if entity_name:
            parts.append(f"Entity: {entity_name}")
        parts.append(message)
        text = " | ".join(parts)
        if self.issues:
            text += "\n  " + "\n  ".join(self.issues)
        super().__init__(text)
