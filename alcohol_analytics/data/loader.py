"""
Source CSV reading and model construction.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from alcohol_analytics.config import DATA_FILE, REQUIRED_COLUMNS
from alcohol_analytics.data.model import DataModel, build_model
from alcohol_analytics.data.normalize import normalize_rows
from alcohol_analytics.data.schemas import RawRow


class LoadError(RuntimeError):
    """The source table could not be obtained or is not the expected shape."""


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def read_raw_rows(filepath: Path = DATA_FILE) -> list[dict[str, str]]:
    """Read the CSV as all-string cells, in file order.

    Empty cells stay as "" (not NaN) so the normaliser sees the file verbatim.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise LoadError(f"Data file not found: {filepath}")

    try:
        df = pd.read_csv(filepath, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as exc:
        raise LoadError(f"Data file is empty: {filepath}") from exc
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise LoadError(f"Could not parse {filepath.name}: {exc}") from exc

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise LoadError(f"{filepath.name} is missing required columns: {', '.join(missing)}")

    return df.to_dict("records")


# ---------------------------------------------------------------------------
# Model construction
# ---------------------------------------------------------------------------

def build_model_from_rows(rows: list[RawRow]) -> DataModel:
    """Normalise in-memory rows and index them."""
    records = normalize_rows(rows)
    dropped = len(rows) - len(records)
    print(f"  Normalised {len(rows):,} rows → {len(records):,} records"
          + (f" ({dropped:,} without a series label dropped)" if dropped else ""))
    return build_model(records)


def load_model(filepath: Path = DATA_FILE) -> DataModel:
    """Read the source file and build the full model. Raises LoadError."""
    rows = read_raw_rows(filepath)
    print(f"  {Path(filepath).name}: {len(rows):,} raw rows")
    return build_model_from_rows(rows)
