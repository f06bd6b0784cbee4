"""
rtlcraft - VHDL to Verilog / SystemVerilog transpiler.

The two core operations are ``parse_entities`` (source text to IR) and
``generate`` (IR to module text)::

    from rtlcraft import Dialect, generate, parse_entities

    for entity in parse_entities(vhdl_text):
        print(generate(entity, Dialect.VERILOG))
"""

from rtlcraft.generator import GenerationError, generate
from rtlcraft.model import Dialect, Entity, TranspilerConfig
from rtlcraft.parser.hdl import parse_entities

__version__ = "0.1.0"

__all__ = [
    "parse_entities",
    "generate",
    "Dialect",
    "Entity",
    "TranspilerConfig",
    "GenerationError",
]
