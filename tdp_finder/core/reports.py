# tdp_finder/core/reports.py
from __future__ import annotations
from pathlib import Path
from typing import Literal, Sequence, Mapping
import pandas as pd
import yaml

from .model import ReferenceDataset, PROCESSOR_FIELD, TDP_FIELD

ReportFormat = Literal["csv", "yaml", "both"]


def _build_dataframe(records: Sequence[Mapping]) -> pd.DataFrame:
    """One row per record; the processor and TDP columns lead, the rest keep input order."""
    df = pd.DataFrame([dict(r) for r in records])
    if df.empty:
        return pd.DataFrame(columns=[PROCESSOR_FIELD, TDP_FIELD])
    lead = [c for c in (PROCESSOR_FIELD, TDP_FIELD) if c in df.columns]
    return df[lead + [c for c in df.columns if c not in lead]]


def write_report(records: Sequence[Mapping], out_base: Path, fmt: ReportFormat = "csv") -> list[Path]:
    """Write annotated records to ``out_base.csv`` and/or ``out_base.yaml``."""
    fmt = str(fmt).lower()
    if fmt not in ("csv", "yaml", "both"):
        raise ValueError(f"Unknown report format: {fmt}. Valid formats: csv, yaml, both")
    out_base.parent.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    if fmt in ("csv", "both"):
        path = out_base.with_suffix(".csv")
        _build_dataframe(records).to_csv(path, index=False)
        written.append(path)
    if fmt in ("yaml", "both"):
        path = out_base.with_suffix(".yaml")
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump([dict(r) for r in records], f, sort_keys=False, allow_unicode=True)
        written.append(path)
    return written


def write_dataset(dataset: ReferenceDataset, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    dataset.to_frame().to_csv(path, index=False)
    return path
