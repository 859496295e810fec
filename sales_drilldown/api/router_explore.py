"""
Drill-down endpoints — current scene, drill into city/product, back, reset, trend.
"""
from __future__ import annotations

import math

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from sales_drilldown.data.errors import InvalidTransitionError
from sales_drilldown.data.store import DataStore
from sales_drilldown.data.schemas import PeriodFilter
from sales_drilldown.api.dependencies import get_navigator, get_store, parse_period
from sales_drilldown.api.response_models import DrillCityRequest, DrillProductRequest
from sales_drilldown.analytics.dashboard import overview_kpis, scene_summary, trend
from sales_drilldown.analytics.navigator import Navigator

router = APIRouter(prefix="/api", tags=["explore"])


def _clean(obj):
    """Recursively replace NaN/Inf floats with 0.0 for JSON safety."""
    if isinstance(obj, dict):
        return {k: _clean(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_clean(v) for v in obj]
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        return 0.0
    return obj


def _safe_json(data: dict) -> JSONResponse:
    return JSONResponse(content=_clean(data))


@router.get("/scene")
def current_scene(
    navigator: Navigator = Depends(get_navigator),
    period: PeriodFilter | None = Depends(parse_period),
):
    """Aggregation, breadcrumb and top-performer insight for the current level."""
    return _safe_json(scene_summary(navigator, period))


@router.post("/drill/city")
def drill_city(
    req: DrillCityRequest,
    navigator: Navigator = Depends(get_navigator),
    period: PeriodFilter | None = Depends(parse_period),
):
    try:
        navigator.drill_to_city(req.city)
    except InvalidTransitionError as e:
        raise HTTPException(409, str(e))
    return _safe_json(scene_summary(navigator, period))


@router.post("/drill/product")
def drill_product(
    req: DrillProductRequest,
    navigator: Navigator = Depends(get_navigator),
    period: PeriodFilter | None = Depends(parse_period),
):
    try:
        navigator.drill_to_product(req.city, req.product)
    except InvalidTransitionError as e:
        raise HTTPException(409, str(e))
    return _safe_json(scene_summary(navigator, period))


@router.post("/back")
def go_back(
    navigator: Navigator = Depends(get_navigator),
    period: PeriodFilter | None = Depends(parse_period),
):
    """Undo the last drill-down. At the overview this changes nothing."""
    navigator.go_back()
    return _safe_json(scene_summary(navigator, period))


@router.post("/reset")
def reset(
    navigator: Navigator = Depends(get_navigator),
    period: PeriodFilter | None = Depends(parse_period),
):
    navigator.reset()
    return _safe_json(scene_summary(navigator, period))


@router.get("/kpis")
def kpis(
    store: DataStore = Depends(get_store),
    period: PeriodFilter | None = Depends(parse_period),
):
    return _safe_json(overview_kpis(store, period))


@router.get("/trend")
def revenue_trend(
    store: DataStore = Depends(get_store),
    period: PeriodFilter | None = Depends(parse_period),
):
    """Monthly revenue over dated orders; undated orders are reported separately."""
    return _safe_json(trend(store, period))
