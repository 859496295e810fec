"""
Sales Drill-Down — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sales_drilldown.config import DATASET_PATH
from sales_drilldown.data.errors import DatasetLoadError
from sales_drilldown.data.store import DataStore
from sales_drilldown.api.dependencies import set_store
from sales_drilldown.api.router_meta import router as meta_router
from sales_drilldown.api.router_explore import router as explore_router


def create_app(dataset_path: Path | str | None = None) -> FastAPI:
    dataset = Path(dataset_path) if dataset_path is not None else DATASET_PATH

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the dataset once at startup. A failure is reported, not raised."""
        print(f"  SALES_DRILLDOWN_DATASET = {dataset}")
        store = DataStore()
        try:
            store.load(dataset)
        except DatasetLoadError as exc:
            print(f"\nSales Drill-Down started without data — {exc}\n")
            set_store(store, load_error=str(exc))
        else:
            set_store(store)
            print(f"\nSales Drill-Down ready — {store.row_count():,} orders, "
                  f"{len(store.cities())} cities, {len(store.products())} products\n")
        yield

    app = FastAPI(
        title="Sales Drill-Down API",
        description="Restaurant sales exploration — city → product → purchase channel",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.dataset_path = dataset

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(explore_router)

    return app


app = create_app()
