"""
Export projection — flatten derived view structures into rounded tabular rows.

Rounding policy: volumes to VOLUME_DIGITS, shares and ratios to SHARE_DIGITS.
Projection is idempotent, so re-exporting unchanged data is byte-identical.
"""
from __future__ import annotations

import io
from typing import Iterable, Mapping, Optional

import pandas as pd

from alcohol_analytics.config import VOLUME_DIGITS, SHARE_DIGITS

ExportRow = dict[str, object]

DIGITS = {
    "volume": VOLUME_DIGITS,
    "share": SHARE_DIGITS,
    "ratio": SHARE_DIGITS,
}


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_value(value, kind: str):
    """Round a numeric cell according to its semantic kind. None stays None."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    digits = DIGITS.get(kind)
    if digits is None:
        return value
    return round(float(value), digits)


def project_rows(rows: Iterable[Mapping], kinds: Mapping[str, str]) -> list[ExportRow]:
    """Round the typed columns of each row, keeping column order."""
    return [
        {col: round_value(val, kinds[col]) if col in kinds else val for col, val in row.items()}
        for row in rows
    ]


# ---------------------------------------------------------------------------
# Per-view projectors
# ---------------------------------------------------------------------------

def long_run_rows(result: dict) -> list[ExportRow]:
    rows = []
    for point in result["points"]:
        row: ExportRow = {
            "year": point["year"],
            "month": point["month"],
            "total_litres": point["total"],
        }
        for key in result["keys"]:
            row[f"{key}_share"] = point["shares"].get(key)
        rows.append(row)
    kinds = {"total_litres": "volume", **{f"{k}_share": "share" for k in result["keys"]}}
    return project_rows(rows, kinds)


def per_capita_rows(result: dict) -> list[ExportRow]:
    rows = []
    for index, date in enumerate(result["dates"]):
        row: ExportRow = {"year": date.year, "month": date.month}
        for series in result["series"]:
            row[series["key"]] = series["values"][index]
        rows.append(row)
    return project_rows(rows, {s["key"]: "volume" for s in result["series"]})


def composition_rows(buckets: list[dict], as_share: bool = False) -> list[ExportRow]:
    rows = []
    kinds: dict[str, str] = {"total": "volume"}
    for bucket in buckets:
        row: ExportRow = {"period": bucket["label"], "total": bucket["total"]}
        for key, value in bucket["values"].items():
            if as_share:
                row[f"{key}_share"] = bucket["shares"][key]
                kinds[f"{key}_share"] = "share"
            else:
                row[key] = value
                kinds[key] = "volume"
        rows.append(row)
    return project_rows(rows, kinds)


def seasonality_rows(result: dict) -> list[ExportRow]:
    kind = "share" if result["normalize"] else "volume"
    rows = [{"year": c["year"], "month": c["month"], "value": c["value"]} for c in result["cells"]]
    return project_rows(rows, {"value": kind})


def unit_check_rows(points: list[dict], smoothed: bool = False) -> list[ExportRow]:
    rows = []
    for point in points:
        row: ExportRow = {
            "date": point["date"].isoformat(),
            "litres": point["litres"],
            "proof": point["proof"],
            "ratio": point["ratio"],
        }
        if smoothed:
            row["ratio_smoothed"] = point["ratio_smoothed"]
        rows.append(row)
    return project_rows(rows, {
        "litres": "volume", "proof": "volume", "ratio": "ratio", "ratio_smoothed": "ratio",
    })


# ---------------------------------------------------------------------------
# Tabular form
# ---------------------------------------------------------------------------

def header_for(rows: Iterable[Mapping]) -> list[str]:
    """Union of row keys in first-seen order."""
    seen: dict[str, None] = {}
    for row in rows:
        for col in row:
            seen.setdefault(col, None)
    return list(seen)


def rows_to_frame(rows: list[ExportRow]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=header_for(rows))


def to_csv_text(rows: list[ExportRow]) -> str:
    """CSV text; missing values are written as empty cells."""
    buf = io.StringIO()
    rows_to_frame(rows).to_csv(buf, index=False, lineterminator="\n")
    return buf.getvalue()


def read_csv_rows(text: str) -> list[dict[str, Optional[object]]]:
    """Re-ingest exported CSV text; empty cells come back as None."""
    if not text.strip():
        return []
    frame = pd.read_csv(io.StringIO(text), float_precision="round_trip")
    frame = frame.astype(object).where(frame.notna(), None)
    return frame.to_dict("records")
