"""
Code generators: module text, analysis reports and IR YAML.
"""

from typing import Optional

from rtlcraft.generator.base_generator import BaseGenerator
from rtlcraft.generator.errors import GenerationError
from rtlcraft.generator.hdl import ModuleGenerator, SystemVerilogGenerator, VerilogGenerator
from rtlcraft.generator.report_generator import AnalysisReportGenerator, AnalysisType
from rtlcraft.generator.yaml import IrYamlGenerator
from rtlcraft.model import Dialect, Entity, TranspilerConfig


def create_generator(
    dialect: Dialect = Dialect.SYSTEMVERILOG, config: Optional[TranspilerConfig] = None
) -> ModuleGenerator:
    """Build the module generator of ``dialect``."""
    if Dialect(dialect) == Dialect.VERILOG:
        return VerilogGenerator(config)
    return SystemVerilogGenerator(config)


def generate(
    entity: Entity,
    dialect: Dialect = Dialect.SYSTEMVERILOG,
    config: Optional[TranspilerConfig] = None,
) -> str:
    """
    Render one entity as Verilog or SystemVerilog text.

    Args:
        entity: Lifted entity
        dialect: Target dialect
        config: Optional settings (indentation)

    Returns:
        Module text

    Raises:
        GenerationError: If the entity fails semantic validation
    """
    return create_generator(dialect, config).generate(entity)


__all__ = [
    "BaseGenerator",
    "ModuleGenerator",
    "VerilogGenerator",
    "SystemVerilogGenerator",
    "AnalysisReportGenerator",
    "AnalysisType",
    "IrYamlGenerator",
    "GenerationError",
    "create_generator",
    "generate",
]
