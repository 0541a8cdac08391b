# tdp_finder/core/dataset.py
from __future__ import annotations
from pathlib import Path
from typing import Iterable, Sequence
import logging
import zipfile

from .errors import DataLoadError
from .model import ReferenceDataset
from ..loaders.table_loader import parse_table, read_tables
from ..utils.detect import discover_sources

_LOG = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
# primary first; later tables may only raise a value
DEFAULT_SOURCES: tuple[str, ...] = ("data.csv", "data2.csv", "boavizta_data.csv")


def default_source_paths() -> list[Path]:
    return [DATA_DIR / name for name in DEFAULT_SOURCES]


def build_dataset(sources: Sequence[str], labels: Sequence[str] | None = None) -> ReferenceDataset:
    """
    Merge ordered raw tables into one ReferenceDataset.

    Precedence:
      1) The first table is authoritative: every entry is written, and a
         duplicate name further down the same table overwrites the earlier one.
      2) Every later table only adds names not seen yet, or raises an existing
         value when it reports a strictly greater TDP. Ties and lower values
         are dropped.
    """
    if isinstance(sources, (str, bytes)):
        raise DataLoadError("sources must be a sequence of tables, not a single string")
    if labels is not None and len(labels) != len(sources):
        raise DataLoadError("labels and sources differ in length")

    data: dict[str, float] = {}
    for k, text in enumerate(sources):
        label = labels[k] if labels is not None else f"source {k + 1}"
        if not isinstance(text, str):
            raise DataLoadError(f"{label}: expected table text, got {type(text).__name__}")
        df = parse_table(text, label)

        added = raised = kept = 0
        for name, tdp in zip(df["name"], df["tdp_W"]):
            tdp = float(tdp)
            if k == 0:
                data[name] = tdp
                added += 1
            elif name not in data:
                data[name] = tdp
                added += 1
            elif data[name] < tdp:
                _LOG.debug("%s raises %s: %.1f -> %.1f W", label, name, data[name], tdp)
                data[name] = tdp
                raised += 1
            else:
                kept += 1
        _LOG.info("merged %s: %d row(s), %d written, %d raised, %d ignored",
                  label, len(df), added, raised, kept)

    return ReferenceDataset(entries=data, n_sources=len(sources))


def expand_sources(paths: Iterable[Path | str], recurse: bool = False) -> list[Path]:
    """Resolve files and directories into an ordered list of table files."""
    files: list[Path] = []
    for p in paths:
        p = Path(p)
        if not p.exists():
            raise DataLoadError(f"reference source not found: {p}")
        try:
            found = discover_sources(p, recurse=recurse)
        except (OSError, zipfile.BadZipFile) as e:
            raise DataLoadError(f"cannot scan reference source {p}: {e}") from e
        # an empty folder must not let the next table take over as primary
        if not found:
            raise DataLoadError(f"no reference tables found under {p}")
        files.extend(d.path for d in found)
    return files


def load_dataset(paths: Iterable[Path | str] | None = None, recurse: bool = False) -> ReferenceDataset:
    """
    Read reference tables from disk (files, .zip archives or folders) in the
    given order and merge them. ``None`` loads the bundled tables.
    """
    files = expand_sources(default_source_paths() if paths is None else paths, recurse=recurse)
    if not files:
        raise DataLoadError("no reference tables to load")

    labels: list[str] = []
    texts: list[str] = []
    for f in files:
        for label, text in read_tables(f):
            labels.append(label)
            texts.append(text)

    dataset = build_dataset(texts, labels)
    _LOG.info("reference dataset ready: %d processor(s) from %d table(s)", len(dataset), len(texts))
    return dataset
