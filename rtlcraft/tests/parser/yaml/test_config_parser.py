"""
Tests for the YAML transpiler configuration parser.
"""

# editorconfig-checker-disable-file
# This file contains YAML fixtures that use 2-space indentation per YAML standard

import pytest

from rtlcraft.model import Dialect, LifterKind
from rtlcraft.parser import ConfigError, ParseError, YamlConfigParser


def test_parse_full_config(tmp_path):
    """Test parsing every supported key."""
    yaml_content = """
dialect: verilog
lifter: regex
indent: 2
rangeFallback: 15
strict: true
recursive: true
outputExtension: vh
"""
    yaml_file = tmp_path / "rtlcraft.yml"
    yaml_file.write_text(yaml_content)

    config = YamlConfigParser().parse_file(yaml_file)

    assert config.dialect == Dialect.VERILOG
    assert config.lifter == LifterKind.REGEX
    assert config.indent_unit == "  "
    assert config.range_fallback == 15
    assert config.strict
    assert config.recursive
    assert config.extension == ".vh"


def test_empty_file_gives_defaults(tmp_path):
    """An empty file is a valid, default configuration."""
    yaml_file = tmp_path / "empty.yml"
    yaml_file.write_text("")

    config = YamlConfigParser().parse_file(yaml_file)

    assert config.dialect == Dialect.SYSTEMVERILOG
    assert config.indent == 4


def test_null_values_keep_defaults(tmp_path):
    yaml_file = tmp_path / "nulls.yml"
    yaml_file.write_text("dialect: sv\nindent: null\n")

    config = YamlConfigParser().parse_file(yaml_file)

    assert config.indent == 4


def test_allowed_folders_resolved_against_file(tmp_path):
    """Relative allowedFolders entries are relative to the config file."""
    (tmp_path / "rtl").mkdir()
    yaml_file = tmp_path / "rtlcraft.yml"
    yaml_file.write_text("allowedFolders:\n  - rtl\n  - ./gen\n")

    config = YamlConfigParser().parse_file(yaml_file)

    assert config.allowed_folders == [
        str((tmp_path / "rtl").resolve()),
        str((tmp_path / "gen").resolve()),
    ]


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="File not found"):
        YamlConfigParser().parse_file(tmp_path / "missing.yml")


def test_yaml_syntax_error_reports_line(tmp_path):
    """YAML syntax errors carry the file and line."""
    yaml_file = tmp_path / "broken.yml"
    yaml_file.write_text("dialect: verilog\nindent: [2\nstrict: true\n")

    with pytest.raises(ConfigError) as exc_info:
        YamlConfigParser().parse_file(yaml_file)

    assert "YAML syntax error" in str(exc_info.value)
    assert exc_info.value.line is not None
    assert exc_info.value.file_path == yaml_file.resolve()


def test_root_must_be_mapping(tmp_path):
    yaml_file = tmp_path / "list.yml"
    yaml_file.write_text("- verilog\n- sv\n")

    with pytest.raises(ConfigError, match="Root element"):
        YamlConfigParser().parse_file(yaml_file)


@pytest.mark.parametrize(
    "yaml_content,location",
    [
        ("indent: 12\n", "indent"),
        ("dialect: vhdl\n", "dialect"),
        ("lifter: magic\n", "lifter"),
        ("unknownKey: 1\n", "unknownKey"),
    ],
)
def test_validation_errors(tmp_path, yaml_content, location):
    """Validation errors name the offending key."""
    yaml_file = tmp_path / "invalid.yml"
    yaml_file.write_text(yaml_content)

    with pytest.raises(ConfigError) as exc_info:
        YamlConfigParser().parse_file(yaml_file)

    message = str(exc_info.value)
    assert "Validation failed" in message
    assert location in message


def test_config_error_is_parse_error():
    assert issubclass(ConfigError, ParseError)


def test_parse_dict_without_base_dir():
    config = YamlConfigParser().parse_dict({"dialect": "v", "allowed_folders": ["rtl"]})
    assert config.dialect == Dialect.VERILOG
    assert config.allowed_folders == ["rtl"]
