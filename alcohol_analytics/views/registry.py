"""
View catalogue and lifecycle.

Each analytical view is a ViewDefinition: params, defaults, compute, export and
download filename. A ViewState is one activation of a view over a shared
DataModel. It caches the last result and recomputes it in full on every
parameter change.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional

from alcohol_analytics.config import (
    LONG_RUN_GROUPS, LONG_RUN_SERIES, BEER_STRENGTH_LABELS,
    SEASONALITY_DEFAULT_GROUP, SEASONALITY_DEFAULT_SERIES,
)
from alcohol_analytics.data.model import DataModel
from alcohol_analytics.data.normalize import slugify
from alcohol_analytics.analytics.common import keys_for
from alcohol_analytics.analytics.composition import composition
from alcohol_analytics.analytics.longrun import long_run
from alcohol_analytics.analytics.percapita import per_capita
from alcohol_analytics.analytics.seasonality import heatmap, series_lookup
from alcohol_analytics.analytics.spirits import unit_check
from alcohol_analytics.export import projector
from alcohol_analytics.export.projector import ExportRow


class ViewNotFound(KeyError):
    """No view is registered under the requested id."""


# ---------------------------------------------------------------------------
# Parameter coercion
# ---------------------------------------------------------------------------

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _as_bool(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Parameter {name!r} expects a boolean, got {value!r}")


def _as_keys(value) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(k.strip() for k in value.split(",") if k.strip())
    return tuple(value)


_COERCERS: dict[str, Callable[[str, Any], Any]] = {
    "bool": _as_bool,
    "str": lambda name, value: str(value),
    "keys": lambda name, value: _as_keys(value),
}


def _check_active(active: Iterable[str], known: list[str]) -> tuple[str, ...]:
    active = tuple(active)
    unknown = [k for k in active if k not in known]
    if unknown:
        raise ValueError(f"Unknown keys: {unknown}. Valid: {known}")
    if not active:
        raise ValueError("At least one key must stay active")
    return active


def toggle_key(active: Iterable[str], key: str) -> tuple[str, ...]:
    """Flip one key in an active set. The last active key can't be switched off."""
    active = tuple(active)
    if key in active:
        if len(active) == 1:
            return active
        return tuple(k for k in active if k != key)
    return active + (key,)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ViewDefinition:
    id: str
    title: str
    summary: str
    params: Mapping[str, str]                                   # name → "bool" | "str" | "keys"
    defaults: Callable[[DataModel], dict]
    compute: Callable[[DataModel, dict], Any]
    export: Callable[[Any, dict], list[ExportRow]]
    filename: Callable[[dict], str]
    resolve: Callable[[DataModel, dict, dict], dict] = lambda model, params, changes: params

    def coerce(self, raw: Mapping[str, Any] | None) -> dict:
        """Type raw parameter values (query strings, CLI pairs)."""
        typed = {}
        for name, value in (raw or {}).items():
            kind = self.params.get(name)
            if kind is None:
                raise ValueError(f"Unknown parameter {name!r} for view {self.id!r}. Valid: {list(self.params)}")
            typed[name] = _COERCERS[kind](name, value)
        return typed

    def describe(self) -> dict:
        return {"id": self.id, "title": self.title, "summary": self.summary, "params": dict(self.params)}


# --- long-run ---------------------------------------------------------------

_LONG_RUN_KEYS = keys_for(LONG_RUN_SERIES)


def _long_run_resolve(model: DataModel, params: dict, changes: dict) -> dict:
    if params["group"] not in LONG_RUN_GROUPS:
        raise ValueError(f"Unknown measurement group: {params['group']!r}. Valid: {LONG_RUN_GROUPS}")
    params["active"] = _check_active(params["active"], _LONG_RUN_KEYS)
    return params


# --- beer strength ----------------------------------------------------------

_BEER_STRENGTH_KEYS = keys_for(BEER_STRENGTH_LABELS)


def _beer_strength_resolve(model: DataModel, params: dict, changes: dict) -> dict:
    params["active"] = _check_active(params["active"], _BEER_STRENGTH_KEYS)
    return params


# --- seasonality ------------------------------------------------------------

def _seasonality_defaults(model: DataModel) -> dict:
    lookup = series_lookup(model)
    group = SEASONALITY_DEFAULT_GROUP
    if group not in lookup and lookup:
        group = next(iter(lookup))
    options = [o["label"] for o in lookup.get(group, [])]
    series = SEASONALITY_DEFAULT_SERIES
    if series not in options and options:
        series = options[0]
    return {"group": group, "series": series, "normalize": False}


def _seasonality_resolve(model: DataModel, params: dict, changes: dict) -> dict:
    lookup = series_lookup(model)
    if not lookup:
        return params
    if params["group"] not in lookup:
        raise ValueError(f"Unknown group: {params['group']!r}")
    options = [o["label"] for o in lookup[params["group"]]]
    if params["series"] not in options:
        if "series" in changes:
            raise ValueError(f"Series {params['series']!r} is not in group {params['group']!r}")
        # Switching group falls back to the first series of the new group
        params["series"] = options[0] if options else params["series"]
    return params


def _seasonality_filename(params: dict) -> str:
    base = f"seasonality-{slugify(params['group'])}-{slugify(params['series'])}"
    return f"{base}-share" if params["normalize"] else base


VIEWS: tuple[ViewDefinition, ...] = (
    ViewDefinition(
        id="longrun",
        title="Long-run volumes",
        summary="Track total litres of beer, wine, and spirits and how their shares "
                "evolve under different measurement groups.",
        params={"group": "str", "active": "keys"},
        defaults=lambda model: {"group": LONG_RUN_GROUPS[0], "active": tuple(_LONG_RUN_KEYS)},
        compute=lambda model, p: long_run(model, p["group"], p["active"]),
        export=lambda result, p: projector.long_run_rows(result),
        filename=lambda p: f"long-run-{slugify(p['group'])}",
        resolve=_long_run_resolve,
    ),
    ViewDefinition(
        id="percapita",
        title="Per-capita trends",
        summary="Compare per-person availability of beer, wine, and spirits and mark "
                "where the lines cross.",
        params={"smoothed": "bool"},
        defaults=lambda model: {"smoothed": False},
        compute=lambda model, p: per_capita(model, p["smoothed"]),
        export=lambda result, p: projector.per_capita_rows(result),
        filename=lambda p: "per-capita-smoothed" if p["smoothed"] else "per-capita-raw",
    ),
    ViewDefinition(
        id="beerstrength",
        title="Beer strength mix",
        summary="See how the strength bands of beer contribute to the total volume "
                "over decades or individual years.",
        params={"by_decade": "bool", "as_share": "bool", "active": "keys"},
        defaults=lambda model: {"by_decade": False, "as_share": False, "active": tuple(_BEER_STRENGTH_KEYS)},
        compute=lambda model, p: composition(model, p["by_decade"], p["active"]),
        export=lambda result, p: projector.composition_rows(result, p["as_share"]),
        filename=lambda p: "beer-strength-{}-{}".format(
            "decade" if p["by_decade"] else "year",
            "share" if p["as_share"] else "litres",
        ),
        resolve=_beer_strength_resolve,
    ),
    ViewDefinition(
        id="seasonality",
        title="Seasonality heatmap",
        summary="Explore quarterly patterns for any category with a year-by-month colour grid.",
        params={"group": "str", "series": "str", "normalize": "bool"},
        defaults=_seasonality_defaults,
        compute=lambda model, p: heatmap(model, p["group"], p["series"], p["normalize"]),
        export=lambda result, p: projector.seasonality_rows(result),
        filename=_seasonality_filename,
        resolve=_seasonality_resolve,
    ),
    ViewDefinition(
        id="spiritscheck",
        title="Spirits unit check",
        summary="Compare spirits reported in litres versus proof litres to spot "
                "methodology changes.",
        params={"smoothed": "bool"},
        defaults=lambda model: {"smoothed": False},
        compute=lambda model, p: unit_check(model, p["smoothed"]),
        export=lambda result, p: projector.unit_check_rows(result, p["smoothed"]),
        filename=lambda p: "spirits-check-smooth" if p["smoothed"] else "spirits-check-raw",
    ),
)

VIEW_MAP: dict[str, ViewDefinition] = {view.id: view for view in VIEWS}


def get_view(view_id: str) -> ViewDefinition:
    try:
        return VIEW_MAP[view_id]
    except KeyError:
        raise ViewNotFound(f"Unknown view: {view_id!r}. Valid: {list(VIEW_MAP)}") from None


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

@dataclass
class ViewState:
    definition: ViewDefinition
    model: Optional[DataModel]
    params: dict
    container: Any = None
    result: Any = None
    active: bool = True
    computations: int = field(default=0, repr=False)

    @property
    def view_id(self) -> str:
        return self.definition.id

    @property
    def filename(self) -> str:
        return self.definition.filename(self.params)


def _recompute(state: ViewState) -> ViewState:
    state.result = state.definition.compute(state.model, state.params)
    state.computations += 1
    render = getattr(state.container, "render", None)
    if callable(render):
        render(state.view_id, state.result)
    return state


def activate(
    view_id: str,
    model: DataModel,
    params: Mapping[str, Any] | None = None,
    container: Any = None,
) -> ViewState:
    """Start a view over the shared model and compute its first result."""
    definition = get_view(view_id)
    changes = definition.coerce(params)
    merged = {**definition.defaults(model), **changes}
    state = ViewState(
        definition=definition,
        model=model,
        params=definition.resolve(model, merged, changes),
        container=container,
    )
    return _recompute(state)


def update(state: ViewState, **changes: Any) -> ViewState:
    """Apply parameter changes and recompute the view from scratch."""
    if not state.active:
        raise ValueError(f"View {state.view_id!r} has been deactivated")
    typed = state.definition.coerce(changes)
    merged = {**state.params, **typed}
    state.params = state.definition.resolve(state.model, merged, typed)
    return _recompute(state)


def deactivate(state: ViewState) -> None:
    """Release the view's cache and its references to the model and container."""
    state.active = False
    state.result = None
    state.model = None
    state.container = None


def export_rows(state: ViewState) -> list[ExportRow]:
    """Flat rows of the current result, rounded for download."""
    if not state.active:
        raise ValueError(f"View {state.view_id!r} has been deactivated")
    return state.definition.export(state.result, state.params)
