"""
Tests for the IR YAML dump.
"""

import yaml

from rtlcraft import parse_entities
from rtlcraft.generator import IrYamlGenerator
from rtlcraft.generator.yaml.ir_yaml_generator import API_VERSION
from rtlcraft.model import Entity


def test_to_dict_uses_camel_case(counter_vhdl):
    data = IrYamlGenerator().to_dict(parse_entities(counter_vhdl), source="counter.vhd")

    assert data["apiVersion"] == API_VERSION
    assert data["source"] == "counter.vhd"
    entity = data["entities"][0]
    assert entity["name"] == "counter"
    assert entity["ports"][3]["type"]["range"] == {"left": 7, "right": 0, "descending": True}
    process = entity["architecture"]["processes"][0]
    assert process["sensitivityList"] == ["clk", "reset"]
    assert "label" not in process


def test_yaml_reloads_into_entities(fsm_vhdl):
    """The dump is complete: it validates back into identical entities."""
    entities = parse_entities(fsm_vhdl)
    data = yaml.safe_load(IrYamlGenerator().generate(entities))

    reloaded = [Entity.model_validate(item) for item in data["entities"]]
    assert reloaded == entities


def test_fallback_source_is_kept(fsm_vhdl):
    data = IrYamlGenerator().to_dict(parse_entities(fsm_vhdl))
    data_port = next(p for p in data["entities"][0]["ports"] if p["name"] == "data")
    assert data_port["type"]["range"]["source"] == "WIDTH-1 downto 0"


def test_write_file(tmp_path, counter_vhdl):
    output = IrYamlGenerator().write_file(
        parse_entities(counter_vhdl), tmp_path / "ir" / "counter.yml", source="counter.vhd"
    )
    assert output.exists()
    assert yaml.safe_load(output.read_text())["source"] == "counter.vhd"
