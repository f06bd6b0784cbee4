"""
Tests for concurrent statement and instantiation translation.
"""

from rtlcraft.generator.hdl.concurrent import (
    render_instance,
    render_opaque,
    translate_concurrent,
)
from rtlcraft.generator.hdl.dialect import SYSTEMVERILOG, VERILOG
from rtlcraft.model import Instance, OpaqueKind, OpaqueStatement


class TestTranslateConcurrent:
    def test_simple_assignment(self):
        assert translate_concurrent("y <= a and b", VERILOG) == ["assign y = a & b;"]

    def test_cast_removed(self):
        assert translate_concurrent("count <= std_logic_vector(count_reg)", SYSTEMVERILOG) == [
            "assign count = count_reg;"
        ]

    def test_conditional_assignment(self):
        """'when ... else' becomes a ternary."""
        assert translate_concurrent("y <= a when sel = '0' else b", VERILOG) == [
            "assign y = (sel == 1'b0) ? a : b;"
        ]

    def test_chained_conditional(self):
        statement = 'y <= a when s = "00" else\n     b when s = "01" else\n     c'
        assert translate_concurrent(statement, SYSTEMVERILOG) == [
            "assign y = (s == 2'b00) ? a : (s == 2'b01) ? b : c;"
        ]

    def test_conditional_with_bit_values(self):
        assert translate_concurrent("busy <= '1' when state = RUN else '0'", VERILOG) == [
            "assign busy = (state == RUN) ? 1'b1 : 1'b0;"
        ]

    def test_others_fill_uses_target_width(self):
        assert translate_concurrent("q <= (others => '1')", VERILOG, {"q": 3}) == [
            "assign q = 3'b111;"
        ]

    def test_selected_assignment_is_commented(self):
        statement = 'with sel select\n    y <= a when "0",\n         b when others'
        assert translate_concurrent(statement, VERILOG) == [
            "// TODO: convert VHDL 'with ... select' assignment:",
            "// with sel select",
            '// y <= a when "0",',
            "// b when others",
        ]

    def test_unrecognized_statement(self):
        assert translate_concurrent("assert ready", VERILOG) == ["// untranslated: assert ready"]


def test_render_instance():
    instance = Instance(
        label="u_core",
        unit="work.core",
        text="u_core : entity work.core\n    port map (clk => clk)",
    )
    assert render_instance(instance) == [
        "// instance u_core of work.core is not translated",
        "// u_core : entity work.core",
        "// port map (clk => clk)",
    ]


def test_render_opaque_region():
    statement = OpaqueStatement(
        kind=OpaqueKind.GENERATE,
        label="g_bits",
        text="g_bits : for i in 0 to 3 generate\n    y(i) <= x(i);\nend generate g_bits",
    )
    assert render_opaque(statement) == [
        "// generate g_bits is not translated",
        "// g_bits : for i in 0 to 3 generate",
        "// y(i) <= x(i);",
        "// end generate g_bits",
    ]


def test_render_opaque_unlabeled_call():
    statement = OpaqueStatement(kind=OpaqueKind.PROCEDURE_CALL, text="check(clk)")
    assert render_opaque(statement) == [
        "// unlabeled procedure call is not translated",
        "// check(clk)",
    ]
