"""
YAML parsers for transpiler configuration.
"""

from .config_parser import YamlConfigParser

__all__ = ["YamlConfigParser"]
