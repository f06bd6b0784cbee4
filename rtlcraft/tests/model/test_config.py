"""Tests for the transpiler configuration model."""

import pytest
from pydantic import ValidationError

from rtlcraft.model import Dialect, LifterKind, TranspilerConfig


class TestDialect:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("v", Dialect.VERILOG),
            ("Verilog", Dialect.VERILOG),
            (".sv", Dialect.SYSTEMVERILOG),
            ("SystemVerilog", Dialect.SYSTEMVERILOG),
        ],
    )
    def test_from_string(self, text, expected):
        """Common spellings map to the dialect."""
        assert Dialect.from_string(text) == expected

    def test_unknown_dialect(self):
        with pytest.raises(ValueError, match="Unknown dialect"):
            Dialect.from_string("vhdl")

    def test_file_extension(self):
        assert Dialect.VERILOG.file_extension == ".v"
        assert Dialect.SYSTEMVERILOG.file_extension == ".sv"


class TestTranspilerConfig:
    def test_defaults(self):
        """Defaults: SystemVerilog, AST lifter, four-space indent, fallback bound 7."""
        config = TranspilerConfig()
        assert config.dialect == Dialect.SYSTEMVERILOG
        assert config.lifter == LifterKind.AST
        assert config.indent_unit == "    "
        assert config.range_fallback == 7
        assert not config.strict
        assert config.allowed_folders == []
        assert config.extension == ".sv"

    def test_camel_case_keys(self):
        """YAML-style keys are accepted."""
        config = TranspilerConfig.model_validate(
            {"dialect": "v", "rangeFallback": 15, "outputExtension": "vh", "lifter": "REGEX"}
        )
        assert config.dialect == Dialect.VERILOG
        assert config.range_fallback == 15
        assert config.extension == ".vh"
        assert config.lifter == LifterKind.REGEX

    @pytest.mark.parametrize("indent", [0, 9])
    def test_indent_bounds(self, indent):
        with pytest.raises(ValidationError):
            TranspilerConfig(indent=indent)

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            TranspilerConfig.model_validate({"dialekt": "v"})

    def test_assignment_is_validated(self):
        """Settings may be tweaked after loading and are re-validated."""
        config = TranspilerConfig()
        config.dialect = "verilog"
        assert config.dialect == Dialect.VERILOG
        with pytest.raises(ValidationError):
            config.indent = 0
