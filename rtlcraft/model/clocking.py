"""
Clock and reset classification of processes.
"""

import re
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import IrModel, Polarity
from .entity import Process

CLOCK_TOKENS = ("clk", "clock")
EDGE_CALLS = ("rising_edge", "falling_edge")
RESET_TOKENS = ("reset", "rst")
DEFAULT_CLOCK = "clk"


class EdgeKind(str, Enum):
    """Edge keyword used in a sequential event control."""

    POSEDGE = "posedge"
    NEGEDGE = "negedge"


class ClockEdge(IrModel):
    """One ``posedge``/``negedge`` entry of an event control list."""

    signal: str = Field(..., description="Signal name")
    edge: EdgeKind = Field(default=EdgeKind.POSEDGE, description="Triggering edge")
    polarity: Optional[Polarity] = Field(
        default=None, description="Reset polarity when the signal is a reset"
    )

    @property
    def is_reset(self) -> bool:
        return self.polarity is not None

    def render(self) -> str:
        return f"{self.edge.value} {self.signal}"


class ProcessTiming(IrModel):
    """
    Sequential or combinational classification of a process.

    A process is sequential when a sensitivity entry names a clock-like
    signal or an edge detection call. Edges are listed in sensitivity order.
    """

    sequential: bool = Field(default=False, description="True for clocked processes")
    edges: List[ClockEdge] = Field(default_factory=list, description="Event control entries")

    @classmethod
    def from_process(cls, process: Process) -> "ProcessTiming":
        entries = [entry.strip() for entry in process.sensitivity_list if entry.strip()]
        sequential = any(_is_clock_like(e) or _is_edge_call(e) for e in entries)
        if not sequential:
            return cls(sequential=False)

        edges: List[ClockEdge] = []
        for entry in entries:
            if _is_clock_like(entry):
                edge = EdgeKind.NEGEDGE if _uses_falling_edge(process.body, entry) else EdgeKind.POSEDGE
                edges.append(ClockEdge(signal=entry, edge=edge))
            elif _is_reset_like(entry):
                polarity = reset_polarity(process.body, entry)
                edge = EdgeKind.POSEDGE if polarity == Polarity.ACTIVE_HIGH else EdgeKind.NEGEDGE
                edges.append(ClockEdge(signal=entry, edge=edge, polarity=polarity))

        if not any(not e.is_reset for e in edges):
            edges.insert(0, ClockEdge(signal=DEFAULT_CLOCK))
        return cls(sequential=True, edges=edges)

    def render_edges(self) -> str:
        return " or ".join(edge.render() for edge in self.edges)


def reset_polarity(body: str, signal: str) -> Polarity:
    """Active high when the body compares the reset against a high literal."""
    pattern = rf"\b{re.escape(signal)}\s*=\s*(?:'1'|\"1\")"
    if re.search(pattern, body, re.IGNORECASE):
        return Polarity.ACTIVE_HIGH
    return Polarity.ACTIVE_LOW


def _is_clock_like(entry: str) -> bool:
    lowered = entry.lower()
    return any(token in lowered for token in CLOCK_TOKENS)


def _is_edge_call(entry: str) -> bool:
    lowered = entry.lower()
    return any(call in lowered for call in EDGE_CALLS)


def _is_reset_like(entry: str) -> bool:
    lowered = entry.lower()
    return any(token in lowered for token in RESET_TOKENS)


def _uses_falling_edge(body: str, signal: str) -> bool:
    return re.search(rf"falling_edge\s*\(\s*{re.escape(signal)}\s*\)", body, re.IGNORECASE) is not None
