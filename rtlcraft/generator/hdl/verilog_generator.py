"""Verilog-2001 module generator."""

from rtlcraft.generator.hdl import dialect
from rtlcraft.generator.hdl.module_generator import ModuleGenerator


class VerilogGenerator(ModuleGenerator):
    """
    Renders entities as Verilog-2001 modules.

    Nets default to ``wire``; outputs and signals assigned inside a process
    are declared ``reg``. Enumerated types become ``localparam`` lists.
    """

    style = dialect.VERILOG
