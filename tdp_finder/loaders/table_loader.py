# tdp_finder/loaders/table_loader.py
from __future__ import annotations
from pathlib import Path
import zipfile, logging
import pandas as pd

from ..core.normalize import normalize_names, to_float
from ..core.errors import DataLoadError

_LOG = logging.getLogger(__name__)

TABLE_SUFFIXES: tuple[str, ...] = (".csv", ".txt")

# ---------- table text -> canonical frame ----------
def _empty_frame() -> pd.DataFrame:
    return pd.DataFrame({"line": pd.Series(dtype="int64"),
                         "name": pd.Series(dtype="object"),
                         "tdp_W": pd.Series(dtype="float64")})


def parse_table(text: str, label: str = "<table>") -> pd.DataFrame:
    """
    Parse one power-rating table into columns ``line``, ``name``, ``tdp_W``.

    Each line is ``<name>[@<variant>],<tdp>``; the split happens on the first
    comma only. Blank lines and lines with an empty name field are skipped.
    A TDP field that is not a number raises DataLoadError.
    """
    raw = pd.Series(text.split("\n"), dtype="object")
    df = pd.DataFrame({"line": range(1, len(raw) + 1), "raw": raw})
    df = df[df["raw"].str.strip() != ""]
    if df.empty:
        return _empty_frame()

    parts = df["raw"].str.partition(",")
    df = df.assign(raw_name=parts[0], raw_tdp=parts[2])
    df = df[df["raw_name"] != ""]
    if df.empty:
        return _empty_frame()

    out = pd.DataFrame({
        "line":  df["line"].astype("int64"),
        "name":  normalize_names(df["raw_name"]),
        "tdp_W": to_float(df["raw_tdp"]),
    })
    bad = out[out["tdp_W"].isna()]
    if not bad.empty:
        shown = ", ".join(str(n) for n in bad["line"].head(5))
        more = f" (+{len(bad) - 5} more)" if len(bad) > 5 else ""
        raise DataLoadError(f"{label}: non-numeric TDP on line(s) {shown}{more}")
    return out.reset_index(drop=True)

# ---------- file readers ----------
def _decode(buff: bytes, label: str) -> str:
    try:
        return buff.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DataLoadError(f"{label}: not valid UTF-8 ({e.reason})") from e


def read_tables(path: Path) -> list[tuple[str, str]]:
    """
    Accepts: a loose .csv/.txt table, or a .zip with CSV members.
    Returns: list of (label, raw text) in archive order.
    """
    path = Path(path)
    try:
        if path.suffix.lower() != ".zip":
            return [(path.name, _decode(path.read_bytes(), path.name))]

        tables: list[tuple[str, str]] = []
        with zipfile.ZipFile(path, "r") as zf:
            members = [m for m in zf.namelist() if m.lower().endswith(TABLE_SUFFIXES)]
            if not members:
                raise DataLoadError(f"{path.name}: archive has no table members")
            for member in members:
                label = f"{path.name}:{member}"
                tables.append((label, _decode(zf.read(member), label)))
        _LOG.debug("read %d table(s) from %s", len(tables), path.name)
        return tables
    except (OSError, zipfile.BadZipFile) as e:
        raise DataLoadError(f"cannot read reference source {path}: {e}") from e
