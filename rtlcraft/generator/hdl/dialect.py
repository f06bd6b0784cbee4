"""
Keyword and literal choices that differ between the two target dialects.
"""

from dataclasses import dataclass

from rtlcraft.model import Dialect


@dataclass(frozen=True)
class DialectStyle:
    """Leaf-level rendering choices of one target dialect."""

    dialect: Dialect
    net_keyword: str
    variable_keyword: str
    case_keyword: str
    sequential_block: str
    combinational_block: str
    typed_enums: bool
    sized_fill: bool

    def keyword(self, procedural: bool) -> str:
        """Declaration keyword of a net, ``reg`` when driven from a block."""
        return self.variable_keyword if procedural else self.net_keyword

    def fill_literal(self, bit: str, width: int) -> str:
        """Literal with every bit set to ``bit``."""
        if not self.sized_fill:
            return f"'{bit}"
        return f"{width}'b{bit * width}" if bit == "1" else f"{width}'b0"

    def sequential_header(self, edges: str) -> str:
        return f"{self.sequential_block} @({edges})"


VERILOG = DialectStyle(
    dialect=Dialect.VERILOG,
    net_keyword="wire",
    variable_keyword="reg",
    case_keyword="case",
    sequential_block="always",
    combinational_block="always @(*)",
    typed_enums=False,
    sized_fill=True,
)

SYSTEMVERILOG = DialectStyle(
    dialect=Dialect.SYSTEMVERILOG,
    net_keyword="logic",
    variable_keyword="logic",
    case_keyword="unique case",
    sequential_block="always_ff",
    combinational_block="always_comb",
    typed_enums=True,
    sized_fill=False,
)


def style_for(dialect: Dialect) -> DialectStyle:
    return VERILOG if dialect == Dialect.VERILOG else SYSTEMVERILOG
