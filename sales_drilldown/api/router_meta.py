"""
Meta endpoints: health, cities, products, purchase types, periods, skipped rows, reload.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from sales_drilldown.data.errors import DatasetLoadError
from sales_drilldown.data.store import DataStore
from sales_drilldown.api.dependencies import (
    get_load_error, get_navigator, get_store, get_store_or_empty, set_load_error,
)
from sales_drilldown.api.response_models import (
    HealthResponse, CitiesResponse, ProductsResponse, PurchaseTypesResponse,
    PeriodsResponse, SkippedRow, SkippedRowsResponse,
)

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store_or_empty)):
    error = get_load_error()
    return HealthResponse(
        status="ok" if store.is_loaded and error is None else "error",
        rows=store.row_count(),
        skipped_rows=store.skipped_count(),
        undated_rows=store.undated_count(),
        cities=len(store.cities()),
        products=len(store.products()),
        periods=len(store.periods_available()),
        source=store.source,
        error=error,
    )


@router.get("/cities", response_model=CitiesResponse)
def list_cities(store: DataStore = Depends(get_store)):
    return CitiesResponse(cities=store.cities())


@router.get("/products", response_model=ProductsResponse)
def list_products(
    city: str | None = Query(None, description="Only products sold in this city"),
    store: DataStore = Depends(get_store),
):
    return ProductsResponse(city=city, products=store.products(city))


@router.get("/purchase-types", response_model=PurchaseTypesResponse)
def list_purchase_types(store: DataStore = Depends(get_store)):
    return PurchaseTypesResponse(purchase_types=store.purchase_types())


@router.get("/periods", response_model=PeriodsResponse)
def list_periods(store: DataStore = Depends(get_store)):
    return PeriodsResponse(periods=store.periods_available())


@router.get("/skipped", response_model=SkippedRowsResponse)
def list_skipped(store: DataStore = Depends(get_store)):
    """Rows dropped during normalization, for data-quality review."""
    return SkippedRowsResponse(
        count=store.skipped_count(),
        rows=[SkippedRow(row_number=w.row_number, reason=w.reason) for w in store.skipped],
    )


@router.post("/reload")
def reload_data(request: Request, store: DataStore = Depends(get_store_or_empty)):
    """Re-read the dataset and return the navigator to the overview.

    On failure the previously loaded data stays in place.
    """
    path = request.app.state.dataset_path
    try:
        store.load(path)
    except DatasetLoadError as exc:
        print(f"  Reload failed: {exc}")
        if not store.is_loaded:
            set_load_error(str(exc))
        raise HTTPException(503, str(exc))

    set_load_error(None)
    get_navigator().reset()
    print(f"  Reload complete — {store.row_count():,} rows, {store.skipped_count():,} skipped")
    return {"status": "reloaded", "rows": store.row_count(), "skipped_rows": store.skipped_count()}
