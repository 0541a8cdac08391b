# tdp_finder/main.py
from __future__ import annotations
from pathlib import Path
import logging
import sys
import pandas as pd
import yaml

from .plugin import TdpFinderModel
from .core.errors import TdpFinderError, InvalidArgument
from .core.reports import write_report, write_dataset

def load_config(cfg_path: Path) -> dict:
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def load_records(path: Path) -> list[dict]:
    """YAML: a list of mappings. CSV: one record per row, all values kept as text."""
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        return df.to_dict(orient="records")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict) and "inputs" in data:
        data = data["inputs"]
    if not isinstance(data, list):
        raise InvalidArgument(f"{path.name}: expected a list of records")
    return data

def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    # ---------- config ----------
    here = Path(__file__).resolve().parent
    cfg_path = Path(argv[0]).resolve() if argv else here / "config.yaml"
    cfg = load_config(cfg_path)
    base = cfg_path.parent

    log_cfg = cfg.get("logging", {}) or {}
    verbose = bool(log_cfg.get("verbose", True))
    logging.basicConfig(level=str(log_cfg.get("level", "INFO")).upper(),
                        format="%(levelname)s %(name)s: %(message)s")

    reports_cfg = cfg.get("reports", {}) or {}
    in_path = base / (cfg.get("input", {}) or {}).get("path", "records.yaml")
    out_root = base / (cfg.get("output", {}) or {}).get("root", "out")
    fmt = str(reports_cfg.get("format", "csv")).lower()
    if verbose:
        print(f"[cfg] config={cfg_path}")
        print(f"[cfg] input={in_path}")
        print(f"[cfg] output={out_root} (format={fmt})")

    try:
        # ---------- dataset ----------
        model = TdpFinderModel()
        model.authenticate(cfg.get("auth"))
        model.configure_from_config(cfg, base_dir=base)
        if verbose:
            print(f"[dataset] {len(model.dataset)} processor(s) from {model.dataset.n_sources} table(s)")

        # ---------- annotate ----------
        if not in_path.is_file():
            print(f"[INFO] No records file at: {in_path}")
            return 0
        records = model.execute(load_records(in_path))
    except TdpFinderError as e:
        print(f"[ERROR] {e}")
        return 1

    # ---------- reports ----------
    for path in write_report(records, out_root / "annotated", fmt=fmt):
        print(f"[OK] wrote {len(records)} record(s): {path}")
    if bool(reports_cfg.get("export_dataset", False)):
        path = write_dataset(model.dataset, out_root / "reference_dataset.csv")
        print(f"[OK] wrote reference dataset: {path}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
