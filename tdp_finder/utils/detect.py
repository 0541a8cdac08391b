# tdp_finder/utils/detect.py
from __future__ import annotations
from pathlib import Path
import zipfile
from dataclasses import dataclass
from typing import Literal

from ..loaders.table_loader import TABLE_SUFFIXES

DetectedKind = Literal["csv", "tablezip", "unknown"]

@dataclass(frozen=True)
class DetectedItem:
    path: Path        # actual path on disk
    kind: DetectedKind

def _is_zip_with_tables(p: Path) -> bool:
    if not p.is_file() or not zipfile.is_zipfile(p):
        return False
    try:
        with zipfile.ZipFile(p, "r") as zf:
            return any(name.lower().endswith(TABLE_SUFFIXES) for name in zf.namelist())
    except zipfile.BadZipFile:
        # looks like an archive but is damaged; the reader reports it
        return True

def detect_kind(p: Path) -> DetectedKind:
    """
    Classify a single path.
    - .csv / .txt -> 'csv'
    - .zip (with any .csv/.txt member) -> 'tablezip'
    else          -> 'unknown'
    """
    suffix = p.suffix.lower()
    if suffix in TABLE_SUFFIXES:
        return "csv"
    if suffix == ".zip" and _is_zip_with_tables(p):
        return "tablezip"
    return "unknown"

def discover_sources(root: Path, recurse: bool = False) -> list[DetectedItem]:
    """
    If 'root' is a file -> return that one item regardless of suffix.
    If 'root' is a folder -> collect table files, ordered by path so that
    precedence between files is reproducible (first file is the primary).
    """
    if root.is_file():
        kind = detect_kind(root)
        return [DetectedItem(root.resolve(), "csv" if kind == "unknown" else kind)]

    it = root.rglob("*") if recurse else root.glob("*")
    items = [DetectedItem(p.resolve(), detect_kind(p)) for p in it if p.is_file()]
    items = [d for d in items if d.kind != "unknown"]

    # deterministic ordering
    items.sort(key=lambda x: str(x.path))
    return items
