"""
Structural analysis reports of lifted entities.

Produces a plain-text summary of the entities, ports, signals and
processes found in one VHDL source, for review before transpiling.
"""

from enum import Enum
from typing import List, Optional

from rtlcraft.model import Architecture, Entity, Port, Process, Signal


class AnalysisType(str, Enum):
    """Sections of an analysis report."""

    ENTITIES = "entities"
    PORTS = "ports"
    SIGNALS = "signals"
    PROCESSES = "processes"
    ALL = "all"


def process_label(process: Process, index: int) -> str:
    return process.label or f"process_{index}"


class AnalysisReportGenerator:
    """Renders analysis reports; one method per ``AnalysisType``."""

    def generate(
        self,
        entities: List[Entity],
        analysis_type: AnalysisType = AnalysisType.ALL,
        source_name: Optional[str] = None,
    ) -> str:
        """
        Build the report text.

        Args:
            entities: Lifted entities
            analysis_type: Section to render
            source_name: File name shown in the ``all`` heading

        Returns:
            Report text ending with a newline
        """
        if not entities:
            return "No entities found in VHDL file\n"

        analysis_type = AnalysisType(analysis_type)
        if analysis_type == AnalysisType.ENTITIES:
            lines = self._entities(entities)
        elif analysis_type == AnalysisType.PORTS:
            lines = self._ports(entities)
        elif analysis_type == AnalysisType.SIGNALS:
            lines = self._signals(entities)
        elif analysis_type == AnalysisType.PROCESSES:
            lines = self._processes(entities)
        else:
            lines = self._all(entities, source_name)
        return "\n".join(lines) + "\n"

    @staticmethod
    def _port_line(port: Port) -> str:
        return f"{port.name} : {port.direction.value} {port.type.to_vhdl()}"

    @staticmethod
    def _signal_line(signal: Signal) -> str:
        return f"{signal.name} : {signal.type.to_vhdl()}"

    def _entities(self, entities: List[Entity]) -> List[str]:
        lines = [f"Found {len(entities)} entities:", ""]
        for entity in entities:
            lines.append(f"Entity: {entity.name}")
            lines.append(f"  Ports: {len(entity.ports)}")
            lines.append(f"  Generics: {len(entity.generics)}")
            if entity.architecture:
                lines.append(f"  Architecture: {entity.architecture.name}")
            else:
                lines.append("  No architecture found")
            lines.append("")
        return lines

    def _ports(self, entities: List[Entity]) -> List[str]:
        lines = ["Port Analysis:", ""]
        for entity in entities:
            lines.append(f"Entity: {entity.name}")
            if not entity.ports:
                lines.append("  No ports")
            lines.extend(f"  {self._port_line(port)}" for port in entity.ports)
            lines.append("")
        return lines

    def _with_architecture(self, entities: List[Entity], heading: str, section) -> List[str]:
        lines = [heading, ""]
        for entity in entities:
            lines.append(f"Entity: {entity.name}")
            if entity.architecture is None:
                lines.append("  No architecture found")
            else:
                lines.append(f"  Architecture: {entity.architecture.name}")
                lines.extend(section(entity.architecture))
            lines.append("")
        return lines

    def _signals(self, entities: List[Entity]) -> List[str]:
        def section(arch: Architecture) -> List[str]:
            if not arch.signals:
                return ["    No signals"]
            return [f"    {self._signal_line(signal)}" for signal in arch.signals]

        return self._with_architecture(entities, "Signal Analysis:", section)

    def _processes(self, entities: List[Entity]) -> List[str]:
        def section(arch: Architecture) -> List[str]:
            if not arch.processes:
                return ["    No processes"]
            lines = []
            for index, process in enumerate(arch.processes):
                lines.append(f"    Process: {process_label(process, index)}")
                lines.append(f"      Sensitivity: {', '.join(process.sensitivity_list)}")
                lines.append(f"      Body length: {len(process.body)} chars")
                if process.variables:
                    names = ", ".join(var.name for var in process.variables)
                    lines.append(f"      Variables: {names}")
            return lines

        return self._with_architecture(entities, "Process Analysis:", section)

    def _all(self, entities: List[Entity], source_name: Optional[str]) -> List[str]:
        heading = "Complete VHDL Analysis"
        if source_name:
            heading += f" for: {source_name}"
        lines = [heading, f"Found {len(entities)} entities", ""]
        for entity in entities:
            lines.append(f"Entity: {entity.name}")
            lines.append(f"  Generics: {len(entity.generics)}")
            for generic in entity.generics:
                default = f" := {generic.default_value}" if generic.default_value else ""
                lines.append(f"    {generic.name} : {generic.type_name}{default}")
            lines.append(f"  Ports: {len(entity.ports)}")
            lines.extend(f"    {self._port_line(port)}" for port in entity.ports)

            arch = entity.architecture
            if arch is None:
                lines.append("  No architecture found")
            else:
                lines.append(f"  Architecture: {arch.name}")
                lines.append(f"    Signals: {len(arch.signals)}")
                lines.extend(f"      {self._signal_line(signal)}" for signal in arch.signals)
                lines.append(f"    Processes: {len(arch.processes)}")
                for index, process in enumerate(arch.processes):
                    sensitivity = ", ".join(process.sensitivity_list)
                    lines.append(f"      {process_label(process, index)}: sensitivity ({sensitivity})")
                lines.append(f"    Concurrent statements: {len(arch.concurrent_statements)}")
                if arch.opaque_statements:
                    lines.append(f"    Untranslated statements: {len(arch.opaque_statements)}")
            lines.append("")
        return lines
