#!/usr/bin/env python3
"""
rtlcraft - VHDL to Verilog / SystemVerilog transpiler.

Usage:
    python scripts/rtlcraft.py transpile counter.vhd --dialect verilog
    python scripts/rtlcraft.py transpile-folder ./rtl --output ./gen -r
    python scripts/rtlcraft.py analyze counter.vhd --type ports
    python scripts/rtlcraft.py export-ir counter.vhd --output counter.ir.yml

Subcommands:
    transpile         Transpile one VHDL file
    transpile-folder  Transpile every VHDL file of a folder
    analyze           Print a structural report of a VHDL file
    export-ir         Dump the lifted IR as YAML
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rtlcraft.generator import AnalysisReportGenerator, AnalysisType, GenerationError, IrYamlGenerator
from rtlcraft.model import Dialect, LifterKind, TranspilerConfig
from rtlcraft.parser.errors import ParseError
from rtlcraft.parser.yaml import YamlConfigParser
from rtlcraft.transpiler import Transpiler
from rtlcraft.utils import is_path_allowed

logger = logging.getLogger("rtlcraft")

EXPECTED_ERRORS = (ParseError, GenerationError, PermissionError, OSError, ValueError)


def load_config(args) -> TranspilerConfig:
    """Build the configuration from ``--config`` plus command-line overrides."""
    config = YamlConfigParser().parse_file(args.config) if args.config else TranspilerConfig()
    if getattr(args, "dialect", None):
        config.dialect = Dialect.from_string(args.dialect)
    if getattr(args, "lifter", None):
        config.lifter = LifterKind(args.lifter)
    if getattr(args, "strict", False):
        config.strict = True
    if getattr(args, "recursive", False):
        config.recursive = True
    return config


def fail(error: Exception, use_json: bool) -> None:
    """Report an error and exit with status 1."""
    if use_json:
        print(json.dumps({"success": False, "error": str(error)}))
    else:
        print(f"Error: {error}", file=sys.stderr)
    sys.exit(1)


def read_source(path: Path, config: TranspilerConfig) -> str:
    if not is_path_allowed(path, config.allowed_folders):
        raise PermissionError(f"Access denied: '{path}' is not in allowed folders")
    if not path.is_file():
        raise FileNotFoundError(f"VHDL file not found: {path}")
    return path.read_text(encoding="utf-8")


def cmd_transpile(args):
    """Transpile one VHDL file."""
    try:
        config = load_config(args)
        transpiler = Transpiler(config)
        if args.stdout:
            print(transpiler.transpile_text(read_source(Path(args.input), config)), end="")
            return

        result = transpiler.transpile_file(args.input, args.output)
        if args.json:
            print(json.dumps(result.to_dict()))
        else:
            print(f"✓ Generated: {result.output} ({', '.join(result.entities) or 'no entities'})")
    except EXPECTED_ERRORS as e:
        fail(e, args.json)


def cmd_transpile_folder(args):
    """Transpile every VHDL file of a folder."""
    try:
        transpiler = Transpiler(load_config(args))
        report = transpiler.transpile_folder(args.input, args.output)
    except EXPECTED_ERRORS as e:
        fail(e, args.json)
        return

    if args.json:
        print(json.dumps({"success": not report.failed, **report.to_dict()}))
    else:
        print(report.summary())
    if report.failed:
        sys.exit(1)


def cmd_analyze(args):
    """Print a structural analysis of a VHDL file."""
    try:
        config = load_config(args)
        path = Path(args.input)
        entities = Transpiler(config).parse_text(read_source(path, config))
    except EXPECTED_ERRORS as e:
        fail(e, args.json)
        return

    if args.json:
        data = IrYamlGenerator().to_dict(entities, source=path.name)
        print(json.dumps({"success": True, **data}))
    else:
        report = AnalysisReportGenerator().generate(entities, AnalysisType(args.type), str(path))
        print(report, end="")


def cmd_export_ir(args):
    """Dump the lifted IR of a VHDL file as YAML."""
    try:
        config = load_config(args)
        path = Path(args.input)
        entities = Transpiler(config).parse_text(read_source(path, config))
        generator = IrYamlGenerator()
        if args.output:
            written = generator.write_file(entities, args.output, source=path.name)
            if args.json:
                print(json.dumps({"success": True, "output": str(written)}))
            else:
                print(f"✓ Generated: {written}")
        else:
            print(generator.generate(entities, source=path.name), end="")
    except EXPECTED_ERRORS as e:
        fail(e, args.json)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", "-c", help="Transpiler configuration YAML")
    parser.add_argument(
        "--lifter", choices=[k.value for k in LifterKind], help="Lifting strategy (default: ast)"
    )
    parser.add_argument("--strict", action="store_true", help="Fail on the first entity error")
    parser.add_argument("--json", action="store_true", help="JSON output")
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase log verbosity (-v, -vv)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rtlcraft", description="VHDL to Verilog / SystemVerilog transpiler"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # transpile subcommand
    tr_parser = subparsers.add_parser("transpile", help="Transpile one VHDL file")
    tr_parser.add_argument("input", help="VHDL source file")
    tr_parser.add_argument("--output", "-o", help="Output file (default: next to the input)")
    tr_parser.add_argument("--dialect", "-d", help="verilog (v) or systemverilog (sv)")
    tr_parser.add_argument("--stdout", action="store_true", help="Print instead of writing a file")
    add_common_arguments(tr_parser)
    tr_parser.set_defaults(func=cmd_transpile)

    # transpile-folder subcommand
    folder_parser = subparsers.add_parser("transpile-folder", help="Transpile a folder")
    folder_parser.add_argument("input", help="Folder of VHDL sources")
    folder_parser.add_argument("--output", "-o", help="Output folder (default: next to sources)")
    folder_parser.add_argument("--dialect", "-d", help="verilog (v) or systemverilog (sv)")
    folder_parser.add_argument(
        "--recursive", "-r", action="store_true", help="Descend into sub-folders"
    )
    add_common_arguments(folder_parser)
    folder_parser.set_defaults(func=cmd_transpile_folder)

    # analyze subcommand
    an_parser = subparsers.add_parser("analyze", help="Analyze a VHDL file")
    an_parser.add_argument("input", help="VHDL source file")
    an_parser.add_argument(
        "--type",
        "-t",
        default=AnalysisType.ALL.value,
        choices=[t.value for t in AnalysisType],
        help="Report section (default: all)",
    )
    add_common_arguments(an_parser)
    an_parser.set_defaults(func=cmd_analyze)

    # export-ir subcommand
    ir_parser = subparsers.add_parser("export-ir", help="Dump the lifted IR as YAML")
    ir_parser.add_argument("input", help="VHDL source file")
    ir_parser.add_argument("--output", "-o", help="Output .yml path (default: stdout)")
    add_common_arguments(ir_parser)
    ir_parser.set_defaults(func=cmd_export_ir)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    args.func(args)


if __name__ == "__main__":
    main()
