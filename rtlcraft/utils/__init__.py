"""Shared utility helpers for rtlcraft."""

from pathlib import Path
from typing import Iterable, List, Union

VHDL_EXTENSIONS = (".vhd", ".vhdl")


def is_path_allowed(path: Union[str, Path], allowed_folders: Iterable[Union[str, Path]]) -> bool:
    """Check that ``path`` lies inside one of ``allowed_folders``.

    An empty folder list allows every path.

    Args:
        path: File or folder to check.
        allowed_folders: Folders that may be accessed.

    Returns:
        True if access is permitted.
    """
    folders = [Path(folder).resolve() for folder in allowed_folders]
    if not folders:
        return True

    resolved = Path(path).resolve()
    return any(resolved == folder or folder in resolved.parents for folder in folders)


def collect_vhdl_files(folder: Union[str, Path], recursive: bool = False) -> List[Path]:
    """List VHDL sources below ``folder`` in sorted order.

    Args:
        folder: Folder to scan.
        recursive: Descend into sub-folders.

    Returns:
        Sorted list of ``.vhd``/``.vhdl`` files.
    """
    root = Path(folder)
    candidates = root.rglob("*") if recursive else root.glob("*")
    return sorted(p for p in candidates if p.is_file() and p.suffix.lower() in VHDL_EXTENSIONS)


def output_path_for(source: Union[str, Path], extension: str) -> Path:
    """Output file next to ``source`` with the target extension."""
    return Path(source).with_suffix(extension)
