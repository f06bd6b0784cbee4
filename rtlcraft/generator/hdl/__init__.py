"""
Verilog and SystemVerilog module generators.
"""

from .dialect import SYSTEMVERILOG, VERILOG, DialectStyle, style_for
from .module_generator import ModuleGenerator
from .systemverilog_generator import SystemVerilogGenerator
from .verilog_generator import VerilogGenerator

__all__ = [
    "DialectStyle",
    "VERILOG",
    "SYSTEMVERILOG",
    "style_for",
    "ModuleGenerator",
    "VerilogGenerator",
    "SystemVerilogGenerator",
]
