"""
Parsers for VHDL sources and transpiler configuration files.
"""

from .errors import (
    ConfigError,
    GrammarError,
    InvalidPortDirection,
    LiftError,
    MissingEntityName,
    MissingGenericType,
    MissingPortType,
    ParseError,
    UnresolvableRange,
    VhdlSyntaxError,
)
from .hdl import AstLifter, RegexLifter, create_lifter, parse_entities
from .yaml import YamlConfigParser

__all__ = [
    "AstLifter",
    "RegexLifter",
    "create_lifter",
    "parse_entities",
    "YamlConfigParser",
    "ParseError",
    "GrammarError",
    "VhdlSyntaxError",
    "ConfigError",
    "LiftError",
    "MissingEntityName",
    "InvalidPortDirection",
    "MissingPortType",
    "MissingGenericType",
    "UnresolvableRange",
]
