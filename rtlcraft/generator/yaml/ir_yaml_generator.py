"""
IR YAML Generator module.

Dumps lifted entities to YAML so the intermediate representation can be
inspected or diffed between the two lifters.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from rtlcraft.model import Entity

API_VERSION = "rtlcraft/ir/v1"


class IrYamlGenerator:
    """Serializes entities with camelCase keys, omitting unset fields."""

    def to_dict(self, entities: List[Entity], source: Optional[str] = None) -> Dict[str, Any]:
        """Build the YAML dictionary structure."""
        data: Dict[str, Any] = {"apiVersion": API_VERSION}
        if source:
            data["source"] = source
        data["entities"] = [
            entity.model_dump(by_alias=True, mode="json", exclude_none=True) for entity in entities
        ]
        return data

    def generate(self, entities: List[Entity], source: Optional[str] = None) -> str:
        """
        Generate YAML content.

        Args:
            entities: Lifted entities
            source: Optional source file name recorded in the document

        Returns:
            YAML string content
        """
        data = self.to_dict(entities, source)
        return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def write_file(
        self, entities: List[Entity], output_path: Union[str, Path], source: Optional[str] = None
    ) -> Path:
        file_path = Path(output_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(self.generate(entities, source), encoding="utf-8")
        return file_path
