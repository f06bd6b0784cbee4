"""
File-level transpiler service.

Wraps the two core operations (``parse_entities`` and ``generate``) with
file I/O, the allowed-folders check and batch folder processing. The core
itself never touches the file system.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from rtlcraft.generator import GenerationError, create_generator
from rtlcraft.model import Entity, TranspilerConfig
from rtlcraft.parser.errors import ParseError
from rtlcraft.parser.hdl import parse_entities
from rtlcraft.utils import collect_vhdl_files, is_path_allowed, output_path_for

logger = logging.getLogger(__name__)


@dataclass
class TranspileResult:
    """Outcome of one source file."""

    source: Path
    output: Optional[Path] = None
    entities: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "source": str(self.source),
            "output": str(self.output) if self.output else None,
            "entities": list(self.entities),
            "success": self.success,
            "error": self.error,
        }


@dataclass
class FolderReport:
    """Per-file outcomes of a folder run."""

    folder: Path
    results: List[TranspileResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[TranspileResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[TranspileResult]:
        return [r for r in self.results if not r.success]

    def summary(self) -> str:
        lines = [
            f"Transpiled {len(self.succeeded)} of {len(self.results)} files in {self.folder}"
        ]
        for result in self.results:
            if result.success:
                lines.append(f"  OK    {result.source} -> {result.output}")
            else:
                lines.append(f"  FAIL  {result.source}: {result.error}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "folder": str(self.folder),
            "count": len(self.results),
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "results": [r.to_dict() for r in self.results],
        }


class Transpiler:
    """
    Transpiles VHDL files to the configured dialect.

    Example::

        transpiler = Transpiler(TranspilerConfig(dialect="verilog"))
        result = transpiler.transpile_file("rtl/counter.vhd")
        # result.output == Path("rtl/counter.v")
    """

    def __init__(self, config: Optional[TranspilerConfig] = None):
        self.config = config or TranspilerConfig()
        self.generator = create_generator(self.config.dialect, self.config)

    def _check_allowed(self, path: Path) -> None:
        if not is_path_allowed(path, self.config.allowed_folders):
            raise PermissionError(f"Access denied: '{path}' is not in allowed folders")

    def parse_text(self, text: str) -> List[Entity]:
        return parse_entities(text, self.config)

    def transpile_text(self, text: str) -> str:
        """Parse ``text`` and render every entity, separated by blank lines."""
        return self.generator.generate_all(self.parse_text(text))

    def transpile_file(
        self, path: Union[str, Path], output_path: Optional[Union[str, Path]] = None
    ) -> TranspileResult:
        """
        Transpile one file.

        Args:
            path: VHDL source file
            output_path: Destination; defaults to the source path with the
                dialect extension

        Returns:
            TranspileResult of the written file

        Raises:
            PermissionError: If a path is outside ``allowed_folders``
            FileNotFoundError: If the source does not exist
            ParseError: If the source cannot be parsed
            GenerationError: If an entity cannot be rendered
        """
        source = Path(path)
        self._check_allowed(source)
        if not source.is_file():
            raise FileNotFoundError(f"File not found: {source}")

        target = Path(output_path) if output_path else output_path_for(source, self.config.extension)
        self._check_allowed(target.parent)

        logger.debug(f"Transpiling {source} -> {target}")
        entities = self.parse_text(source.read_text(encoding="utf-8"))
        self.generator.write_file(entities, target)
        return TranspileResult(source=source, output=target, entities=[e.name for e in entities])

    def transpile_folder(
        self,
        folder: Union[str, Path],
        output_folder: Optional[Union[str, Path]] = None,
        recursive: Optional[bool] = None,
    ) -> FolderReport:
        """
        Transpile every VHDL file of a folder.

        A failing file is recorded in the report and does not stop the run.

        Args:
            folder: Source folder
            output_folder: Mirror root for outputs; defaults to next to each source
            recursive: Override of ``config.recursive``

        Returns:
            FolderReport with one entry per source file

        Raises:
            PermissionError: If the folder is outside ``allowed_folders``
            NotADirectoryError: If ``folder`` is not a directory
        """
        root = Path(folder)
        self._check_allowed(root)
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")

        recursive = self.config.recursive if recursive is None else recursive
        report = FolderReport(folder=root)
        for source in collect_vhdl_files(root, recursive):
            target = None
            if output_folder is not None:
                relative = source.relative_to(root)
                target = Path(output_folder) / relative.with_suffix(self.config.extension)
            try:
                report.results.append(self.transpile_file(source, target))
            except (ParseError, GenerationError, PermissionError, OSError) as e:
                logger.warning(f"Failed to transpile {source}: {e}")
                report.results.append(TranspileResult(source=source, error=str(e)))
            except Exception as e:
                logger.exception(f"Unexpected failure while transpiling {source}")
                report.results.append(TranspileResult(source=source, error=str(e)))
        return report
