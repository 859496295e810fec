"""
Group-by-sum aggregation shared by every drill-down level.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, Union

import pandas as pd

from sales_drilldown.data.schemas import AggregationResult, GroupTotal, Record


KeyFn = Callable[[Record], Any]
MeasureFn = Callable[[Record], float]


def group_totals(df: pd.DataFrame, key: str, measure: str) -> AggregationResult:
    """Sum `measure` per distinct `key` value.

    Groups come back in the order their key first appears in df. Rows with a
    missing key (e.g. no purchase type) are left out of the grouping.
    """
    if df.empty:
        return AggregationResult(key_field=key, measure=measure)

    g = df.groupby(key, sort=False, dropna=True)
    totals = g[measure].sum()
    revenue = g["revenue"].sum()
    orders = g.size()

    groups = tuple(
        GroupTotal(
            key=str(k),
            total=float(totals[k]),
            revenue=float(revenue[k]),
            orders=int(orders[k]),
        )
        for k in totals.index
    )
    return AggregationResult(key_field=key, measure=measure, groups=groups)


def aggregate(
    records: Iterable[Record],
    key: Union[str, KeyFn],
    measure: Union[str, MeasureFn],
) -> AggregationResult:
    """group_totals over a Record sequence, with a field name or callable for key and measure."""
    records = list(records)
    key_fn = key if callable(key) else (lambda r: getattr(r, key))
    measure_fn = measure if callable(measure) else (lambda r: getattr(r, measure))
    key_name = key if isinstance(key, str) else getattr(key, "__name__", "key")
    measure_name = measure if isinstance(measure, str) else getattr(measure, "__name__", "measure")

    df = pd.DataFrame({
        "key": [key_fn(r) for r in records],
        "value": [measure_fn(r) for r in records],
        "revenue": [r.revenue for r in records],
    })
    result = group_totals(df, "key", "value")
    return AggregationResult(key_field=key_name, measure=measure_name, groups=result.groups)


def revenue_by_month(df: pd.DataFrame) -> dict:
    """Monthly revenue over dated orders, plus what undated orders contribute."""
    dated = df[df["order_date"].notna()]
    undated = df[df["order_date"].isna()]

    months = []
    if not dated.empty:
        grouped = dated.groupby(
            [dated["order_date"].dt.year.rename("year"), dated["order_date"].dt.month.rename("month")]
        ).agg(
            revenue=("revenue", "sum"),
            units=("quantity", "sum"),
            orders=("revenue", "size"),
        ).reset_index().sort_values(["year", "month"])

        for _, r in grouped.iterrows():
            y, m = int(r["year"]), int(r["month"])
            months.append({
                "month": f"{y}-{m:02d}",
                "label": f"{pd.Timestamp(year=y, month=m, day=1):%B %Y}",
                "revenue": float(r["revenue"]),
                "units": int(r["units"]),
                "orders": int(r["orders"]),
            })

    return {
        "months": months,
        "undated_revenue": float(undated["revenue"].sum()),
        "undated_orders": int(len(undated)),
    }
