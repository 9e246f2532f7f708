"""
DataStore — owns the loaded DataModel.

Loaded once at startup and passed explicitly to whoever needs it (the API keeps
it on ``app.state``, the CLI builds its own). A failed load never exposes a
partial model. ``load_error`` carries the message; a failed reload keeps the
previous model in place.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from alcohol_analytics.config import DATA_FILE
from alcohol_analytics.data.loader import LoadError, build_model_from_rows, load_model
from alcohol_analytics.data.model import DataModel
from alcohol_analytics.data.schemas import RawRow, SeriesMeta


class DataStore:
    """Holds the shared read-only model plus load status."""

    def __init__(self, source: Path | None = None) -> None:
        self.source = Path(source) if source is not None else DATA_FILE
        self.model: Optional[DataModel] = None
        self.load_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> "DataStore":
        """Load the source file. Failure is recorded, not raised.

        The model is swapped only after a complete build, so a failed reload
        leaves the last good model serving.
        """
        print(f"Loading alcohol data from {self.source}...")
        try:
            model = load_model(self.source)
        except LoadError as exc:
            self.load_error = f"Failed to load data: {exc}"
            print(f"  {self.load_error}" + (" (keeping previous model)" if self.model else ""))
            return self

        self.model = model
        self.load_error = None
        print(f"  Ready — {len(model):,} records, {len(model.groups)} groups, {len(model.series)} series")
        return self

    def load_rows(self, rows: list[RawRow]) -> "DataStore":
        """Build the model from rows already in memory (embedded assets, tests)."""
        self.model = build_model_from_rows(rows)
        self.load_error = None
        return self

    @property
    def is_loaded(self) -> bool:
        return self.model is not None

    def require_model(self) -> DataModel:
        if self.model is None:
            raise LoadError(self.load_error or "Data not loaded yet")
        return self.model

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    def record_count(self) -> int:
        return len(self.model) if self.model else 0

    def groups(self) -> list[dict]:
        if not self.model:
            return []
        return [g.as_dict() for g in self.model.groups]

    def series(self, group: str | None = None) -> list[dict]:
        """Series metadata, optionally restricted to a group label or key."""
        if not self.model:
            return []
        if group is None:
            return [s.as_dict() for s in self.model.series]

        # Series metadata is keyed by series alone, so scan the group's records
        seen: dict[str, SeriesMeta] = {}
        for rec in self.model.records:
            if group in (rec.group_label, rec.group_key) and rec.series_key not in seen:
                seen[rec.series_key] = SeriesMeta(
                    rec.series_key, rec.series_label, rec.group_key, rec.group_label, rec.units,
                )
        return [s.as_dict() for s in sorted(seen.values(), key=lambda s: (s.label, s.key))]

    def years(self) -> list[int]:
        return list(self.model.years) if self.model else []

    def date_range(self) -> str:
        """Human-readable first-to-last period string."""
        if not self.model or not self.model.records:
            return "N/A"
        first, last = self.model.records[0], self.model.records[-1]
        return f"{first.date:%b %Y} to {last.date:%b %Y}"
