"""Pytest fixtures: the sample dataset as rows, records, a model and a CSV file."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from alcohol_analytics.data.model import DataModel, build_model
from alcohol_analytics.data.normalize import normalize_rows
from alcohol_analytics.data.schemas import NormalizedRecord
from tests.factories import sample_rows


@pytest.fixture
def raw_rows() -> list[dict[str, str]]:
    return sample_rows()


@pytest.fixture
def records(raw_rows: list[dict[str, str]]) -> list[NormalizedRecord]:
    return normalize_rows(raw_rows)


@pytest.fixture
def model(records: list[NormalizedRecord]) -> DataModel:
    return build_model(records)


@pytest.fixture
def csv_path(tmp_path: Path, raw_rows: list[dict[str, str]]) -> Path:
    """The sample rows written as a source CSV."""
    path = tmp_path / "alcohol.csv"
    pd.DataFrame(raw_rows).to_csv(path, index=False)
    return path
