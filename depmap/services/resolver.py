"""
Heuristic import → file resolution.

This is substring matching over the scanned file list, not a module
resolver: the first file in scan order that fits wins. Repos with
repeated basenames (src/utils.js, lib/utils.js) resolve to whichever
was scanned first.
"""

from typing import Optional, Sequence

from depmap.models.graph import RawImport
from depmap.models.repo import FileRecord
from depmap.services.languages import extension_of


def normalize_target(path: str) -> str:
    """Drop one leading "./" or one leading "../"."""
    if path.startswith("./"):
        return path[2:]
    if path.startswith("../"):
        return path[3:]
    return path


def resolve_import(raw: RawImport, files: Sequence[FileRecord]) -> Optional[int]:
    """Index of the first file `raw` can refer to, or None."""
    normalized = normalize_target(raw.target_path)

    for index, f in enumerate(files):
        if normalized and normalized in f.path:
            return index
        if f.name == raw.target_path:
            return index
        if normalized and f.path.endswith(normalized + extension_of(f.name)):
            return index
    return None
