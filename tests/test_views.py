"""Tests for the view catalogue and activate / update / deactivate lifecycle."""

from __future__ import annotations

import pytest

from alcohol_analytics.data.model import build_model
from alcohol_analytics.data.normalize import normalize_rows
from alcohol_analytics.views.registry import (
    VIEWS,
    ViewNotFound,
    activate,
    deactivate,
    export_rows,
    get_view,
    toggle_key,
    update,
)
from tests.factories import quarter


class RecordingContainer:
    """Rendering collaborator that remembers every render call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def render(self, view_id: str, result: object) -> None:
        self.calls.append((view_id, result))


def test_catalogue_is_closed_and_ordered() -> None:
    assert [v.id for v in VIEWS] == ["longrun", "percapita", "beerstrength", "seasonality", "spiritscheck"]
    assert get_view("percapita").describe()["params"] == {"smoothed": "bool"}


def test_unknown_view_raises_view_not_found(model) -> None:
    """ViewNotFound is a KeyError."""
    with pytest.raises(ViewNotFound):
        activate("nope", model)
    with pytest.raises(KeyError):
        get_view("nope")


def test_activate_computes_and_renders(model) -> None:
    container = RecordingContainer()
    state = activate("longrun", model, container=container)
    assert state.params == {"group": "Litres of Beverage", "active": ("total-beer", "total-wine", "total-spirits")}
    assert state.filename == "long-run-litres-of-beverage"
    assert container.calls == [("longrun", state.result)]
    assert len(state.result["points"]) == 2


def test_update_recomputes_fully(model) -> None:
    container = RecordingContainer()
    state = activate("longrun", model, container=container)
    update(state, group="Litres of Alcohol", active="total-beer,total-wine")
    assert state.filename == "long-run-litres-of-alcohol"
    assert state.result["keys"] == ["total-beer", "total-wine"]
    assert state.computations == 2
    assert len(container.calls) == 2


def test_invalid_params_are_value_errors(model) -> None:
    with pytest.raises(ValueError):
        activate("longrun", model, {"group": "Litres of Milk"})
    with pytest.raises(ValueError):
        activate("longrun", model, {"colour": "red"})
    with pytest.raises(ValueError):
        activate("percapita", model, {"smoothed": "maybe"})
    with pytest.raises(ValueError):
        activate("beerstrength", model, {"active": ""})
    with pytest.raises(ValueError):
        activate("beerstrength", model, {"active": "lager"})


def test_toggle_key_never_empties_the_set() -> None:
    assert toggle_key(("a", "b"), "a") == ("b",)
    assert toggle_key(("b",), "b") == ("b",)
    assert toggle_key(("b",), "a") == ("b", "a")


def test_beer_strength_filenames(model) -> None:
    state = activate("beerstrength", model)
    assert state.filename == "beer-strength-year-litres"
    update(state, by_decade="true", as_share="1")
    assert state.filename == "beer-strength-decade-share"
    row = export_rows(state)[0]
    assert row["period"] == "2020-2029"
    assert all(k == "period" or k == "total" or k.endswith("_share") for k in row)


def test_per_capita_and_spirits_filenames(model) -> None:
    assert activate("percapita", model).filename == "per-capita-raw"
    assert activate("percapita", model, {"smoothed": True}).filename == "per-capita-smoothed"
    assert activate("spiritscheck", model).filename == "spirits-check-raw"
    assert activate("spiritscheck", model, {"smoothed": "yes"}).filename == "spirits-check-smooth"


def test_seasonality_defaults_and_group_switch(model) -> None:
    """Switching group falls back to the first series of the new group."""
    state = activate("seasonality", model)
    assert state.params == {"group": "Litres of Beverage", "series": "Beer", "normalize": False}
    assert state.filename == "seasonality-litres-of-beverage-beer"

    update(state, group="Litres of Alcohol")
    assert state.params["series"] == "Total beer"
    update(state, normalize=True)
    assert state.filename == "seasonality-litres-of-alcohol-total-beer-share"

    with pytest.raises(ValueError):
        update(state, series="Beer")
    with pytest.raises(ValueError):
        update(state, group="Nope")


def test_seasonality_defaults_without_preferred_group() -> None:
    model = build_model(normalize_rows([
        quarter("2020.03", "Other", "Zeta", "1"),
        quarter("2020.03", "Other", "Alpha", "2"),
    ]))
    state = activate("seasonality", model)
    assert state.params["group"] == "Other"
    assert state.params["series"] == "Alpha"


def test_views_over_empty_model() -> None:
    """Every view activates over an empty model and yields no rows."""
    model = build_model([])
    for view in VIEWS:
        state = activate(view.id, model)
        assert export_rows(state) == []


def test_deactivate_releases_state(model) -> None:
    container = RecordingContainer()
    state = activate("percapita", model, container=container)
    deactivate(state)
    assert state.result is None
    assert state.model is None
    assert not state.active
    with pytest.raises(ValueError):
        update(state, smoothed=True)
    with pytest.raises(ValueError):
        export_rows(state)
    assert len(container.calls) == 1


def test_views_share_the_model_frame(model) -> None:
    """Activating views builds the model's frame once and reuses it."""
    assert "frame" not in vars(model)
    activate("longrun", model)
    frame = model.frame
    activate("beerstrength", model)
    activate("seasonality", model)
    assert model.frame is frame
