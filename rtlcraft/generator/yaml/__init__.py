"""
YAML generators.
"""

from .ir_yaml_generator import IrYamlGenerator

__all__ = ["IrYamlGenerator"]
