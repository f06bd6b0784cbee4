"""
Tests for the file-level transpiler service.
"""

import pytest

from rtlcraft.model import Dialect, TranspilerConfig
from rtlcraft.parser.errors import VhdlSyntaxError
from rtlcraft.transpiler import Transpiler

BROKEN_VHDL = "entity broken is\n    port (a : in std_logic;\nend entity broken;\n"


@pytest.fixture
def rtl_dir(tmp_path, counter_vhdl, multi_vhdl):
    rtl = tmp_path / "rtl"
    (rtl / "sub").mkdir(parents=True)
    (rtl / "counter.vhd").write_text(counter_vhdl)
    (rtl / "sub" / "multi.vhdl").write_text(multi_vhdl)
    return rtl


class TestTranspileFile:
    def test_output_next_to_source(self, rtl_dir):
        result = Transpiler().transpile_file(rtl_dir / "counter.vhd")

        assert result.success
        assert result.output == rtl_dir / "counter.sv"
        assert result.entities == ["counter"]
        assert result.output.read_text().startswith("module counter (")

    def test_dialect_and_explicit_output(self, rtl_dir, tmp_path):
        transpiler = Transpiler(TranspilerConfig(dialect=Dialect.VERILOG))
        result = transpiler.transpile_file(rtl_dir / "counter.vhd", tmp_path / "gen" / "c.v")

        assert result.output.read_text().count("always @(") == 1

    def test_output_extension_override(self, rtl_dir):
        result = Transpiler(TranspilerConfig(output_extension="svh")).transpile_file(
            rtl_dir / "counter.vhd"
        )
        assert result.output.suffix == ".svh"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Transpiler().transpile_file(tmp_path / "missing.vhd")

    def test_syntax_error_propagates(self, tmp_path):
        source = tmp_path / "broken.vhd"
        source.write_text(BROKEN_VHDL)
        with pytest.raises(VhdlSyntaxError):
            Transpiler().transpile_file(source)
        assert not (tmp_path / "broken.sv").exists()

    def test_access_outside_allowed_folders(self, rtl_dir, tmp_path):
        outside = tmp_path / "outside.vhd"
        outside.write_text("entity e is end e;")
        transpiler = Transpiler(TranspilerConfig(allowed_folders=[str(rtl_dir)]))

        with pytest.raises(PermissionError, match="Access denied"):
            transpiler.transpile_file(outside)
        with pytest.raises(PermissionError):
            transpiler.transpile_file(rtl_dir / "counter.vhd", tmp_path / "elsewhere.sv")

        assert transpiler.transpile_file(rtl_dir / "counter.vhd").success

    def test_transpile_text(self, multi_vhdl):
        text = Transpiler().transpile_text(multi_vhdl)
        assert text.count("endmodule") == 2


class TestTranspileFolder:
    def test_flat(self, rtl_dir):
        report = Transpiler().transpile_folder(rtl_dir)

        assert [r.source.name for r in report.results] == ["counter.vhd"]
        assert (rtl_dir / "counter.sv").exists()
        assert not (rtl_dir / "sub" / "multi.sv").exists()

    def test_recursive_with_mirror(self, rtl_dir, tmp_path):
        out = tmp_path / "out"
        config = TranspilerConfig(dialect="verilog", recursive=True)
        report = Transpiler(config).transpile_folder(rtl_dir, out)

        assert len(report.succeeded) == 2
        assert (out / "counter.v").exists()
        assert (out / "sub" / "multi.v").exists()
        assert report.to_dict()["failed"] == 0

    def test_failures_are_recorded(self, rtl_dir):
        (rtl_dir / "broken.vhd").write_text(BROKEN_VHDL)
        report = Transpiler().transpile_folder(rtl_dir)

        assert len(report.results) == 2
        assert [r.source.name for r in report.failed] == ["broken.vhd"]
        assert "syntax error" in report.failed[0].error
        summary = report.summary()
        assert summary.startswith(f"Transpiled 1 of 2 files in {rtl_dir}")
        assert "FAIL" in summary

    def test_not_a_directory(self, rtl_dir):
        with pytest.raises(NotADirectoryError):
            Transpiler().transpile_folder(rtl_dir / "counter.vhd")

    def test_folder_outside_allowed(self, rtl_dir, tmp_path):
        config = TranspilerConfig(allowed_folders=[str(rtl_dir / "sub")])
        with pytest.raises(PermissionError):
            Transpiler(config).transpile_folder(rtl_dir)
