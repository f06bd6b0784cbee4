"""
Base generator interface for module code generation.

Provides the abstract interface the dialect generators implement, so the
Verilog and SystemVerilog outputs share one API and one Jinja2 setup.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

from jinja2 import Environment, FileSystemLoader

from rtlcraft.model import Entity


class BaseGenerator(ABC):
    """
    Abstract base class for code generators.

    Templates are loaded from a 'templates' subdirectory.
    """

    def __init__(self, template_dir: Optional[str] = None):
        """
        Initialize the generator with Jinja2 environment.

        Args:
            template_dir: Optional custom template directory.
                Defaults to 'templates' subdirectory of this package.
        """
        if template_dir is None:
            template_dir = os.path.join(os.path.dirname(__file__), "hdl", "templates")

        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    @abstractmethod
    def generate(self, entity: Entity) -> str:
        """
        Render one entity.

        Args:
            entity: Lifted entity

        Returns:
            Module text
        """
        pass

    def generate_all(self, entities: List[Entity]) -> str:
        """
        Render several entities into one text, separated by blank lines.

        Args:
            entities: Entities in output order

        Returns:
            Concatenated module text
        """
        return "\n".join(self.generate(entity) for entity in entities)

    def write_file(self, entities: List[Entity], output_path: Union[str, Path]) -> Path:
        """
        Generate all entities and write them to one file.

        Args:
            entities: Entities to render
            output_path: Destination file

        Returns:
            Path of the written file
        """
        file_path = Path(output_path)
        # Create parent directories if needed
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(self.generate_all(entities), encoding="utf-8")
        return file_path
