"""
Drill-Down Report — city, product and purchase-channel tables in one workbook.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from sales_drilldown.data.store import DataStore
from sales_drilldown.data.schemas import Level, PeriodFilter
from sales_drilldown.analytics.common import sanitize_for_json
from sales_drilldown.analytics.dashboard import drilldown_sections, drilldown_tables, overview_kpis
from sales_drilldown.analytics.navigator import LEVEL_AGGREGATIONS
from sales_drilldown.excel.styles import CHANNEL_ORANGE, CITY_BLUE, COUNT_FORMAT, CURRENCY_FORMAT, PRODUCT_GREEN
from sales_drilldown.excel.writer import DrilldownWorkbook


# Sheet title, key column headers and header color per drill level
LEVEL_SHEETS = {
    Level.OVERVIEW: ("By City", ["City"], CITY_BLUE),
    Level.CITY: ("By Product", ["City", "Product"], PRODUCT_GREEN),
    Level.PRODUCT: ("By Purchase Type", ["City", "Product", "Purchase Type"], CHANNEL_ORANGE),
}


def generate_json(store: DataStore, period: PeriodFilter | None = None) -> dict:
    tables = drilldown_tables(store, period)
    return sanitize_for_json({
        "date_range": store.date_range(period),
        "period": period.label if period else "All Time",
        "kpis": overview_kpis(store, period),
        "skipped_rows": store.skipped_count(),
        **tables,
    })


def generate_excel(
    store: DataStore,
    output_path: str | Path,
    period: PeriodFilter | None = None,
) -> Path:
    k = overview_kpis(store, period)
    label = period.label if period else "All Time"
    book = DrilldownWorkbook()

    notes = []
    if k["top_city"]:
        notes.append((f"{k['top_city']} leads in sales", f"Highest revenue: ${k['top_city_revenue']:,.2f}"))
    if store.skipped_count():
        notes.append(("Data quality", f"{store.skipped_count():,} malformed rows were skipped while loading"))

    book.summary_sheet(
        "RESTAURANT SALES",
        f"Drill-Down Report  |  {label}  |  {store.date_range(period)}  |  "
        f"Generated {pd.Timestamp.now():%B %d, %Y}",
        [
            ("TOTAL REVENUE", k["total_revenue"], CURRENCY_FORMAT),
            ("ORDERS", k["orders"], COUNT_FORMAT),
            ("UNITS SOLD", k["total_units"], COUNT_FORMAT),
            ("CITIES", k["cities"], COUNT_FORMAT),
        ],
        notes,
    )

    sections = drilldown_sections(store, period)
    for level, (title, key_headers, color) in LEVEL_SHEETS.items():
        _, measure = LEVEL_AGGREGATIONS[level]
        book.level_sheet(title, key_headers, measure, sections[level], color,
                         highlight_top=level == Level.OVERVIEW)

    return book.save(output_path)
