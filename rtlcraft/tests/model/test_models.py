"""
Tests for the IR models, the process timing classifier and the validator.
"""

import pytest
from pydantic import ValidationError

from rtlcraft.model import (
    Architecture,
    ClockEdge,
    EdgeKind,
    Entity,
    Generic,
    Polarity,
    Port,
    PortDirection,
    Process,
    ProcessTiming,
    Signal,
    TypeKind,
    VectorRange,
    VhdlType,
)
from rtlcraft.model.validators import validate_entity


def _logic() -> VhdlType:
    return VhdlType.scalar(TypeKind.STD_LOGIC)


class TestVectorRange:
    """Range orientation and width."""

    @pytest.mark.parametrize(
        "left,right,descending",
        [(7, 0, True), (0, 7, False)],
    )
    def test_both_orientations_render_msb_first(self, left, right, descending):
        """'7 downto 0' and '0 to 7' both map to [7:0]."""
        vector_range = VectorRange(left=left, right=right, descending=descending)
        assert vector_range.to_brackets() == "[7:0]"
        assert vector_range.width == 8

    def test_to_vhdl_keeps_source_orientation(self):
        """Reports show the range the way it was written."""
        assert VectorRange(left=0, right=3, descending=False).to_vhdl() == "0 to 3"
        assert VectorRange(left=3, right=0).to_vhdl() == "3 downto 0"

    def test_fallback_flag(self):
        """A range carrying its source text is a fallback range."""
        assert not VectorRange(left=7, right=0).is_fallback
        flagged = VectorRange(left=7, right=0, source="WIDTH-1 downto 0")
        assert flagged.is_fallback

    def test_range_is_frozen(self):
        """Lifted IR values cannot be modified."""
        vector_range = VectorRange(left=7, right=0)
        with pytest.raises(ValidationError):
            vector_range.left = 3


class TestVhdlType:
    """Type variants and widths."""

    def test_vector_requires_range(self):
        """Vector kinds must carry a range."""
        with pytest.raises(ValidationError, match="requires a range"):
            VhdlType(kind=TypeKind.STD_LOGIC_VECTOR)

    def test_custom_requires_name(self):
        """Custom types must be named."""
        with pytest.raises(ValidationError, match="require a name"):
            VhdlType(kind=TypeKind.CUSTOM)

    @pytest.mark.parametrize(
        "vhdl_type,width",
        [
            (VhdlType.scalar(TypeKind.STD_LOGIC), 1),
            (VhdlType.scalar(TypeKind.BOOLEAN), 1),
            (VhdlType.scalar(TypeKind.INTEGER), 32),
            (VhdlType.vector(TypeKind.UNSIGNED, VectorRange(left=3, right=0)), 4),
            (VhdlType.custom("state_t"), None),
        ],
    )
    def test_width(self, vhdl_type, width):
        """Width is known for built-in types only."""
        assert vhdl_type.width == width

    def test_to_vhdl(self):
        """Types render back in VHDL form."""
        vector = VhdlType.vector(TypeKind.STD_LOGIC_VECTOR, VectorRange(left=7, right=0))
        assert vector.to_vhdl() == "std_logic_vector(7 downto 0)"
        assert VhdlType.custom("state_t").to_vhdl() == "state_t"


class TestPortsAndEntity:
    """Port directions and entity lookups."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("in", PortDirection.IN),
            ("OUT", PortDirection.OUT),
            (" inout ", PortDirection.INOUT),
            ("Buffer", PortDirection.BUFFER),
        ],
    )
    def test_direction_from_string(self, text, expected):
        """Mode keywords are case-insensitive."""
        assert PortDirection.from_string(text) == expected

    def test_linkage_is_rejected(self):
        """Linkage ports have no counterpart in the target languages."""
        with pytest.raises(ValueError, match="Invalid port direction"):
            PortDirection.from_string("linkage")

    def test_buffer_counts_as_output(self):
        """Buffer ports drive a value out of the entity."""
        port = Port(name="q", direction=PortDirection.BUFFER, type=_logic())
        assert port.is_output
        assert not port.is_input

    def test_lookups_ignore_case(self):
        """VHDL identifiers are case-insensitive."""
        entity = Entity(
            name="top",
            ports=[Port(name="Clk", direction=PortDirection.IN, type=_logic())],
            generics=[Generic(name="WIDTH", type_name="integer", default_value="8")],
            architecture=Architecture(name="rtl", signals=[Signal(name="Busy", type=_logic())]),
        )
        assert entity.get_port("clk").name == "Clk"
        assert entity.get_generic("width").default_value == "8"
        assert entity.architecture.get_signal("BUSY") is not None
        assert entity.get_port("missing") is None
        assert entity.has_architecture

    def test_empty_name_rejected(self):
        """Names are stripped and must not be empty."""
        with pytest.raises(ValidationError):
            Signal(name="   ", type=_logic())

    def test_camel_case_aliases(self):
        """IR can be loaded from camelCase keys."""
        process = Process.model_validate({"sensitivityList": ["clk"], "body": "q <= d;"})
        assert process.sensitivity_list == ["clk"]


class TestProcessTiming:
    """Sequential / combinational classification."""

    def test_clock_and_active_high_reset(self):
        """Clock plus an active-high reset gives two posedge entries."""
        process = Process(
            sensitivity_list=["clk", "reset"],
            body="if reset = '1' then\n  q <= '0';\nelsif rising_edge(clk) then\n  q <= d;\nend if;",
        )
        timing = ProcessTiming.from_process(process)
        assert timing.sequential
        assert timing.render_edges() == "posedge clk or posedge reset"
        assert timing.edges[1].polarity == Polarity.ACTIVE_HIGH

    def test_active_low_reset(self):
        """A reset compared against '0' triggers on negedge."""
        process = Process(
            sensitivity_list=["clk", "rst_n"],
            body="if rst_n = '0' then\n  q <= '0';\nelsif rising_edge(clk) then\n  q <= d;\nend if;",
        )
        timing = ProcessTiming.from_process(process)
        assert timing.render_edges() == "posedge clk or negedge rst_n"

    def test_falling_edge_clock(self):
        """falling_edge() selects negedge."""
        process = Process(
            sensitivity_list=["clk"],
            body="if falling_edge(clk) then\n  q <= d;\nend if;",
        )
        assert ProcessTiming.from_process(process).render_edges() == "negedge clk"

    def test_combinational(self):
        """No clock-like entry means a combinational process."""
        process = Process(sensitivity_list=["a", "b"], body="y <= a and b;")
        timing = ProcessTiming.from_process(process)
        assert not timing.sequential
        assert timing.edges == []

    def test_reset_only_gets_default_clock(self):
        """A clock entry is prepended when only a reset matched."""
        process = Process(sensitivity_list=["rising_edge(sys)", "rst"], body="")
        timing = ProcessTiming.from_process(process)
        assert timing.sequential
        assert timing.render_edges() == "posedge clk or negedge rst"
        assert timing.edges[0] == ClockEdge(signal="clk", edge=EdgeKind.POSEDGE)


class TestValidator:
    """Semantic validation of entities."""

    def test_valid_entity(self):
        """A plain entity has no errors."""
        entity = Entity(name="top", ports=[Port(name="a", direction=PortDirection.IN, type=_logic())])
        is_valid, errors, warnings = validate_entity(entity)
        assert is_valid
        assert errors == []
        assert warnings == []

    def test_signal_shadowing_port(self):
        """A signal named like a port is an error."""
        entity = Entity(
            name="top",
            ports=[Port(name="a", direction=PortDirection.IN, type=_logic())],
            architecture=Architecture(name="rtl", signals=[Signal(name="A", type=_logic())]),
        )
        is_valid, errors, _ = validate_entity(entity)
        assert not is_valid
        assert "shadows a port" in errors[0].message

    def test_duplicate_ports(self):
        """Duplicate port names are an error."""
        port = Port(name="a", direction=PortDirection.IN, type=_logic())
        is_valid, errors, _ = validate_entity(Entity(name="top", ports=[port, port]))
        assert not is_valid
        assert errors[0].location == "port:a"

    def test_fallback_range_warning(self):
        """Fallback ranges are reported as warnings."""
        vector = VhdlType.vector(
            TypeKind.STD_LOGIC_VECTOR, VectorRange(left=7, right=0, source="N-1 downto 0")
        )
        entity = Entity(name="top", ports=[Port(name="d", direction=PortDirection.IN, type=vector)])
        is_valid, _, warnings = validate_entity(entity)
        assert is_valid
        assert "N-1 downto 0" in warnings[0].message
