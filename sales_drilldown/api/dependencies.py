"""
FastAPI dependencies — DataStore / Navigator singletons, period parsing.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import HTTPException, Query

from sales_drilldown.data.store import DataStore
from sales_drilldown.data.schemas import PeriodFilter, PeriodType
from sales_drilldown.analytics.navigator import Navigator

# ---------------------------------------------------------------------------
# Session singletons (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None
_navigator: Navigator | None = None
_load_error: str | None = None


def set_store(store: DataStore, load_error: str | None = None) -> None:
    """Install the store, start a fresh navigator on it and remember any load failure."""
    global _store, _navigator, _load_error
    _store = store
    _navigator = Navigator(store)
    _load_error = load_error


def set_load_error(message: str | None) -> None:
    global _load_error
    _load_error = message


def get_load_error() -> str | None:
    return _load_error


def get_store() -> DataStore:
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    if not _store.is_loaded:
        raise HTTPException(503, _load_error or "Data not loaded yet")
    return _store


def get_store_or_empty() -> DataStore:
    """Return the store even if it has no data (for health/reload endpoints)."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    return _store


def get_navigator() -> Navigator:
    get_store()
    return _navigator


# ---------------------------------------------------------------------------
# Period parsing from query params
# ---------------------------------------------------------------------------

def parse_period(
    period_type: Optional[str] = Query(None, description="month|quarter|year|custom|all"),
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    quarter: Optional[int] = Query(None, ge=1, le=4),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
) -> PeriodFilter | None:
    """Parse period query parameters into a PeriodFilter."""
    if period_type is None:
        return None

    try:
        pt = PeriodType(period_type)
    except ValueError:
        raise HTTPException(400, f"Invalid period_type: {period_type}")

    try:
        sd = dt.date.fromisoformat(start_date) if start_date else None
        ed = dt.date.fromisoformat(end_date) if end_date else None
    except ValueError:
        raise HTTPException(400, "start_date/end_date must be YYYY-MM-DD")

    period = PeriodFilter(
        period_type=pt,
        year=year,
        month=month,
        quarter=quarter,
        start_date=sd,
        end_date=ed,
    )
    missing = period.missing_fields()
    if missing:
        raise HTTPException(400, f"period_type={pt.value} requires: {', '.join(missing)}")
    return period
