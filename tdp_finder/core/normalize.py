# tdp_finder/core/normalize.py
from __future__ import annotations
import pandas as pd

VARIANT_MARKER = "@"


def normalize_name(raw: str) -> str:
    """'Intel Xeon E5 @2.1GHz ' -> 'Intel Xeon E5'"""
    return raw.split(VARIANT_MARKER, 1)[0].strip()


def normalize_names(s: pd.Series) -> pd.Series:
    return s.astype(str).map(normalize_name)


def to_float(s) -> pd.Series:
    if pd.api.types.is_numeric_dtype(s):
        return s.astype(float)
    cleaned = s.astype(str).str.replace("\r", "", regex=False).str.strip()
    return pd.to_numeric(cleaned, errors="coerce")


def split_processors(value: str) -> list[str]:
    return [p.strip() for p in str(value).split(",")]
