"""
View endpoints — catalogue, derived structures as JSON, CSV / Excel downloads.
"""
from __future__ import annotations

import io

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, StreamingResponse

from alcohol_analytics.analytics.common import sanitize_for_json
from alcohol_analytics.data.model import DataModel
from alcohol_analytics.api.dependencies import get_model, view_params
from alcohol_analytics.api.response_models import ViewsResponse
from alcohol_analytics.export.projector import to_csv_text
from alcohol_analytics.export.writer import build_workbook
from alcohol_analytics.views.registry import (
    VIEWS, ViewNotFound, ViewState, activate, deactivate, export_rows,
)

router = APIRouter(prefix="/api/views", tags=["views"])

_MEDIA_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def _activate(view_id: str, model: DataModel, params: dict[str, str]) -> ViewState:
    try:
        return activate(view_id, model, params)
    except ViewNotFound as exc:
        raise HTTPException(404, exc.args[0])
    except ValueError as exc:
        raise HTTPException(400, str(exc))


@router.get("", response_model=ViewsResponse)
def list_views():
    return ViewsResponse(views=[view.describe() for view in VIEWS])


@router.get("/{view_id}")
def view_json(
    view_id: str,
    model: DataModel = Depends(get_model),
    params: dict[str, str] = Depends(view_params),
):
    state = _activate(view_id, model, params)
    content = {
        "view": view_id,
        "params": state.params,
        "filename": state.filename,
        "result": sanitize_for_json(state.result),
    }
    deactivate(state)
    return JSONResponse(content=jsonable_encoder(content))


@router.get("/{view_id}/export")
def view_export(
    view_id: str,
    fmt: str = Query("csv", description="csv|xlsx"),
    model: DataModel = Depends(get_model),
    params: dict[str, str] = Depends(view_params),
):
    """Download the view's export rows. Each request is built in memory."""
    if fmt not in _MEDIA_TYPES:
        raise HTTPException(400, f"Invalid fmt: {fmt}. Valid: {list(_MEDIA_TYPES)}")

    state = _activate(view_id, model, params)
    rows = export_rows(state)
    if fmt == "xlsx":
        buf = build_workbook(rows, state.definition.title, state.definition.summary).to_buffer()
    else:
        buf = io.BytesIO(to_csv_text(rows).encode("utf-8"))
    filename = f"{state.filename}.{fmt}"
    deactivate(state)

    return StreamingResponse(
        buf,
        media_type=_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
