"""SystemVerilog (IEEE 1800-2012) module generator."""

from rtlcraft.generator.hdl import dialect
from rtlcraft.generator.hdl.module_generator import ModuleGenerator


class SystemVerilogGenerator(ModuleGenerator):
    """Renders entities with ``logic``, ``always_ff``/``always_comb`` and ``unique case``."""

    style = dialect.SYSTEMVERILOG
