"""
DataStore — In-memory order records with a pandas view for grouped queries.

Loaded once, shared read-only by every aggregation and by the navigator.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from sales_drilldown.config import DATASET_PATH
from sales_drilldown.data.errors import RowNormalizationWarning
from sales_drilldown.data.loader import load_dataset
from sales_drilldown.data.normalize import normalize
from sales_drilldown.data.schemas import LoadResult, PeriodFilter, Record


FRAME_COLUMNS = ["city", "product", "purchase_type", "price", "quantity", "revenue", "order_date"]


def _build_frame(records: tuple[Record, ...]) -> pd.DataFrame:
    if not records:
        df = pd.DataFrame(columns=FRAME_COLUMNS)
    else:
        df = pd.DataFrame([r.to_dict() for r in records], columns=FRAME_COLUMNS)
    df["price"] = df["price"].astype("float64")
    df["quantity"] = df["quantity"].astype("int64")
    df["revenue"] = df["revenue"].astype("float64")
    df["order_date"] = pd.to_datetime(df["order_date"])
    return df


class DataStore:
    """Immutable order records plus period/city/product filtered accessors."""

    def __init__(self) -> None:
        self.records: tuple[Record, ...] = ()
        self.skipped: list[RowNormalizationWarning] = []
        self.source: Optional[str] = None
        self.df: pd.DataFrame = _build_frame(())
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, path: Path = DATASET_PATH) -> "DataStore":
        """Load the CSV at path. DatasetLoadError propagates and leaves the store untouched."""
        print("Loading sales data...")
        return self._apply(load_dataset(path))

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "DataStore":
        """Build a store from already-parsed rows (field name → value)."""
        return cls()._apply(normalize(rows))

    def _apply(self, result: LoadResult) -> "DataStore":
        self.records = result.records
        self.skipped = list(result.skipped)
        self.source = result.source
        self.df = _build_frame(result.records)
        self._loaded = True
        return self

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def _apply_period(self, df: pd.DataFrame, period: PeriodFilter) -> pd.DataFrame:
        """Filter by the period's date window. Undated orders fall outside any bounded window."""
        start, end = period.resolve()
        if start is not None:
            df = df[df["order_date"] >= pd.Timestamp(start)]
        if end is not None:
            df = df[df["order_date"] <= pd.Timestamp(end)]
        return df

    def get_frame(
        self,
        period: PeriodFilter | None = None,
        city: str | None = None,
        product: str | None = None,
    ) -> pd.DataFrame:
        """Orders filtered by period, city and product.

        Returns a filtered view (not a copy); callers must not mutate it.
        """
        df = self.df
        if period:
            df = self._apply_period(df, period)
        if city is not None:
            df = df[df["city"] == city]
        if product is not None:
            df = df[df["product"] == product]
        return df

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    def cities(self) -> list[str]:
        """Unique city names sorted alphabetically."""
        if self.df.empty:
            return []
        return sorted(self.df["city"].unique().tolist())

    def products(self, city: str | None = None) -> list[str]:
        """Unique product names (optionally within one city) sorted alphabetically."""
        df = self.get_frame(city=city)
        if df.empty:
            return []
        return sorted(df["product"].unique().tolist())

    def purchase_types(self) -> list[str]:
        """Canonical purchase types; orders without a category are not listed."""
        if self.df.empty:
            return []
        return sorted(self.df["purchase_type"].dropna().unique().tolist())

    def date_range(self, period: PeriodFilter | None = None) -> str:
        """Human-readable date range string."""
        dates = self.get_frame(period)["order_date"].dropna()
        if dates.empty:
            return "N/A"
        return f"{dates.min():%Y-%m-%d} to {dates.max():%Y-%m-%d}"

    def periods_available(self) -> list[dict]:
        """Return list of {year, month, label} dicts for months with dated orders."""
        dates = self.df["order_date"].dropna()
        if dates.empty:
            return []
        ym = pd.DataFrame({"year": dates.dt.year, "month": dates.dt.month})
        ym = ym.drop_duplicates().sort_values(["year", "month"])
        result = []
        for _, row in ym.iterrows():
            y, m = int(row["year"]), int(row["month"])
            label = f"{pd.Timestamp(year=y, month=m, day=1):%B %Y}"
            result.append({"year": y, "month": m, "label": label})
        return result

    def row_count(self) -> int:
        return len(self.records)

    def skipped_count(self) -> int:
        return len(self.skipped)

    def undated_count(self) -> int:
        return int(self.df["order_date"].isna().sum())

    def total_revenue(self, period: PeriodFilter | None = None) -> float:
        return float(self.get_frame(period)["revenue"].sum())
