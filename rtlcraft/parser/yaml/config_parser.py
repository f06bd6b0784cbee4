"""
YAML parser for transpiler configuration files.

Example file::

    dialect: verilog
    lifter: ast
    indent: 2
    rangeFallback: 7
    allowedFolders:
      - ./rtl
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from rtlcraft.model import TranspilerConfig
from rtlcraft.parser.errors import ConfigError


class YamlConfigParser:
    """
    Parser for ``TranspilerConfig`` YAML files.

    Handles:
    - YAML syntax errors, reported with line numbers
    - Validation errors, reported per offending key
    - Relative ``allowedFolders`` entries, resolved against the file's folder
    """

    def __init__(self):
        self._current_file: Optional[Path] = None

    @staticmethod
    def _filter_none(data: Dict[str, Any]) -> Dict[str, Any]:
        """Drop None values so that model defaults apply."""
        return {k: v for k, v in data.items() if v is not None}

    def parse_file(self, file_path: Union[str, Path]) -> TranspilerConfig:
        """
        Parse a configuration YAML file.

        Args:
            file_path: Path to the configuration file

        Returns:
            TranspilerConfig: Validated configuration

        Raises:
            ConfigError: If parsing or validation fails
        """
        file_path = Path(file_path).resolve()
        self._current_file = file_path

        if not file_path.exists():
            raise ConfigError(f"File not found: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            line = getattr(e, "problem_mark", None)
            line_num = line.line + 1 if line else None
            raise ConfigError(f"YAML syntax error: {e}", file_path, line_num)

        if data is None:
            return TranspilerConfig()
        if not isinstance(data, dict):
            raise ConfigError("Root element must be a YAML object/dictionary", file_path)

        return self.parse_dict(data, base_dir=file_path.parent)

    def parse_dict(
        self, data: Dict[str, Any], base_dir: Optional[Path] = None
    ) -> TranspilerConfig:
        """
        Build a configuration from already-loaded data.

        Raises:
            ConfigError: If validation fails
        """
        data = self._filter_none(data)
        folders = data.get("allowedFolders", data.get("allowed_folders"))
        if base_dir is not None and isinstance(folders, list):
            resolved = [str((base_dir / str(folder)).resolve()) for folder in folders]
            data.pop("allowed_folders", None)
            data["allowedFolders"] = resolved

        try:
            return TranspilerConfig(**data)
        except ValidationError as e:
            # Convert Pydantic validation errors to ConfigError
            errors = []
            for error in e.errors():
                loc = " -> ".join(str(x) for x in error["loc"])
                errors.append(f"{loc}: {error['msg']}")
            raise ConfigError("Validation failed:\n  " + "\n  ".join(errors), self._current_file)
