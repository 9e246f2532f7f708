"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    records: int
    groups: int
    series: int
    first_year: Optional[int] = None
    last_year: Optional[int] = None
    error: Optional[str] = None


class GroupInfo(BaseModel):
    key: str
    label: str
    units: list[str]


class GroupsResponse(BaseModel):
    groups: list[GroupInfo]


class SeriesInfo(BaseModel):
    key: str
    label: str
    group_key: str
    group_label: str
    units: Optional[str] = None


class SeriesResponse(BaseModel):
    series: list[SeriesInfo]
    count: int


class YearsResponse(BaseModel):
    years: list[int]


class ViewInfo(BaseModel):
    id: str
    title: str
    summary: str
    params: dict[str, str]


class ViewsResponse(BaseModel):
    views: list[ViewInfo]
