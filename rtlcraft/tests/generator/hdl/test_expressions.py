"""
Tests for expression-level literal and operator rewrites.
"""

import pytest

from rtlcraft.generator.hdl import expressions as expr
from rtlcraft.generator.hdl.dialect import SYSTEMVERILOG, VERILOG


class TestLiterals:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ('data <= x"FF";', "data <= 8'hFF;"),
            ('data <= x"0";', "data <= 4'h0;"),
            ('data <= X"1A2B";', "data <= 16'h1A2B;"),
        ],
    )
    def test_hex(self, text, expected):
        """Each hex digit counts four bits."""
        assert expr.rewrite_hex(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ('sel = "0101"', "sel = 4'b0101"),
            ('y <= b"0101";', "y <= 4'b0101;"),
            ('y <= B"1111_0000";', "y <= 8'b1111_0000;"),
        ],
    )
    def test_binary(self, text, expected):
        """The optional b prefix is consumed; underscores do not count as bits."""
        assert expr.rewrite_binary(text) == expected

    def test_octal(self):
        assert expr.rewrite_octal('y <= o"17";') == "y <= 6'o17;"

    def test_prefixed_literals_in_statement(self):
        assert expr.rewrite_expression('y <= b"0101";', VERILOG) == "y <= 4'b0101;"
        assert expr.rewrite_expression('y <= o"7";', VERILOG) == "y <= 3'o7;"

    def test_bit_literals(self):
        assert expr.rewrite_bit_literals("q <= '1'") == "q <= 1'b1"
        assert expr.rewrite_bit_literals("oe <= 'Z'") == "oe <= 1'bz"
        assert expr.rewrite_bit_literals("en = '0'") == "en == 1'b0"

    @pytest.mark.parametrize(
        "style,width,expected",
        [
            (VERILOG, 4, "q <= 4'b0"),
            (VERILOG, None, "q <= 8'b0"),
            (SYSTEMVERILOG, 4, "q <= '0"),
        ],
    )
    def test_others_zero(self, style, width, expected):
        assert expr.rewrite_others("q <= (others => '0')", style, width) == expected

    def test_others_ones(self):
        assert expr.rewrite_others("q <= (others=>'1')", VERILOG, 4) == "q <= 4'b1111"
        assert expr.rewrite_others("q <= (others=>'1')", SYSTEMVERILOG, 4) == "q <= '1"


class TestOperatorsAndCasts:
    def test_logical_operators(self):
        assert expr.rewrite_operators("a and not b or c xor d") == "a & ~b | c ^ d"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("count <= std_logic_vector(count_reg)", "count <= count_reg"),
            ("n <= to_unsigned(5, 8) + 1", "n <= 5 + 1"),
            ("i <= to_integer(unsigned(addr))", "i <= addr"),
            ("y <= resize(x, 16)", "y <= x"),
        ],
    )
    def test_strip_casts(self, text, expected):
        """Conversion calls collapse to their first argument."""
        assert expr.strip_casts(text) == expected

    def test_dangling_cast_is_rebalanced(self):
        """A call closed on a later line leaves a balanced line."""
        assert expr.strip_casts("y <= unsigned(a") == "y <= a"

    def test_rewrite_expression(self):
        text = 'if_ok := (a /= b) and data = x"0F"'
        assert expr.rewrite_expression(text, SYSTEMVERILOG) == "if_ok = (a != b) & data = 8'h0F"

    def test_translate_condition(self):
        assert expr.translate_condition("state = RUN and en = '1'", VERILOG) == (
            "state == RUN & en == 1'b1"
        )
        assert expr.translate_condition("a >= b", VERILOG) == "a >= b"


class TestConditionHelpers:
    @pytest.mark.parametrize(
        "condition",
        ["rising_edge(clk)", "falling_edge( clk )", "(rising_edge(clk))", "clk'event and clk = '1'"],
    )
    def test_edge_guard(self, condition):
        assert expr.is_edge_guard(condition)

    def test_edge_with_other_terms(self):
        condition = "rising_edge(clk) and en = '1'"
        assert not expr.is_edge_guard(condition)
        assert expr.contains_edge(condition)
        assert expr.remove_edge_terms(condition) == "en = '1'"
        assert expr.remove_edge_terms("en = '1' and rising_edge(clk)") == "en = '1'"

    def test_wrap_parens(self):
        assert expr.wrap_parens("a == b") == "(a == b)"
        assert expr.wrap_parens("(a == b)") == "(a == b)"
        assert expr.wrap_parens("(a) & (b)") == "((a) & (b))"

    @pytest.mark.parametrize(
        "text,target",
        [("q <= d;", "q"), ("q(3) <= d;", "q"), ("v := v + 1;", "v"), ("null;", None)],
    )
    def test_assignment_target(self, text, target):
        assert expr.assignment_target(text) == target

    def test_split_top_level(self):
        assert expr.split_top_level("a, f(b, c), d") == ["a", " f(b, c)", " d"]


class TestConcatenationAndSlices:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("q <= a & b;", "q <= {a, b};"),
            ("q <= a(6 downto 0) & '0';", "q <= {a[6:0], 1'b0};"),
            ("v := f(x, y) & z;", "v = {f(x, y), z};"),
            ("a & b", "{a, b}"),
        ],
    )
    def test_concatenation(self, text, expected):
        """VHDL '&' is concatenation, never a bitwise and."""
        assert expr.rewrite_expression(text, VERILOG) == expected

    def test_concatenation_with_comparison_untouched(self):
        assert expr.rewrite_concatenation("a & b = c") == "a & b = c"

    def test_and_keyword_is_not_concatenation(self):
        assert expr.rewrite_expression("q <= a and b;", VERILOG) == "q <= a & b;"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("y <= a(7 downto 4);", "y <= a[7:4];"),
            ("y(3 downto 0) <= b(0 to 3);", "y[3:0] <= b[0:3];"),
            ("y <= a(WIDTH-1 downto 1);", "y <= a[WIDTH-1:1];"),
        ],
    )
    def test_slices(self, text, expected):
        assert expr.rewrite_slices(text) == expected

    def test_loop_range_is_not_a_slice(self):
        assert expr.rewrite_slices("for i in 0 to 7 loop") == "for i in 0 to 7 loop"
