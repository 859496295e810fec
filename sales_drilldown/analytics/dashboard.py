"""
Dashboard analytics — payloads handed to the rendering front end and to reports.

Scene summary for the current drill-down position, KPI totals, and the flat
drill-down tables used by the Excel export.
"""
from __future__ import annotations

from typing import Optional

from sales_drilldown.config import SCENE_TITLES
from sales_drilldown.data.schemas import AggregationResult, GroupTotal, Level, NavigationState, PeriodFilter
from sales_drilldown.data.store import DataStore
from sales_drilldown.analytics.aggregate import group_totals, revenue_by_month
from sales_drilldown.analytics.common import safe_divide, sanitize_for_json, share_pct
from sales_drilldown.analytics.navigator import LEVEL_AGGREGATIONS, Navigator


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _scene_title(state: NavigationState) -> str:
    return SCENE_TITLES[state.level.value].format(
        city=state.selected_city, product=state.selected_product,
    )


def _insight(state: NavigationState, top: Optional[GroupTotal]) -> Optional[dict]:
    """Callout for the top performer at this level."""
    if top is None:
        return None
    if state.level == Level.OVERVIEW:
        return {
            "key": top.key,
            "title": f"{top.key} leads in sales",
            "label": f"Highest revenue: ${top.total:,.2f}",
        }
    if state.level == Level.CITY:
        return {
            "key": top.key,
            "title": f"Top seller in {state.selected_city}",
            "label": f"{top.key}: ${top.total:,.2f} revenue",
        }
    return {
        "key": top.key,
        "title": f"Most popular way to buy {state.selected_product}",
        "label": f"{top.key}: {top.total:,.0f} units",
    }


def _group_rows(agg: AggregationResult) -> list[dict]:
    grand = agg.grand_total
    return [
        {
            "key": g.key,
            "total": g.total,
            "revenue": g.revenue,
            "orders": g.orders,
            "share": share_pct(g.total, grand),
        }
        for g in agg.ranked()
    ]


# ---------------------------------------------------------------------------
# Scene summary
# ---------------------------------------------------------------------------

def scene_summary(navigator: Navigator, period: PeriodFilter | None = None) -> dict:
    """Everything the renderer needs for the current drill-down scene."""
    state = navigator.state
    agg = navigator.current_aggregation(period)

    return sanitize_for_json({
        "state": state.to_dict(),
        "title": _scene_title(state),
        "breadcrumb": navigator.breadcrumb(),
        "can_go_back": navigator.can_go_back,
        "key_field": agg.key_field,
        "measure": agg.measure,
        "empty": agg.is_empty,
        "grand_total": agg.grand_total,
        "orders": agg.order_count,
        "groups": _group_rows(agg),
        "insight": _insight(state, agg.top()),
        "period": period.label if period else "All Time",
    })


# ---------------------------------------------------------------------------
# KPI totals
# ---------------------------------------------------------------------------

def overview_kpis(store: DataStore, period: PeriodFilter | None = None) -> dict:
    df = store.get_frame(period)
    revenue = float(df["revenue"].sum())
    orders = int(len(df))
    top = group_totals(df, "city", "revenue").top()

    return {
        "total_revenue": revenue,
        "total_units": int(df["quantity"].sum()),
        "orders": orders,
        "avg_order_value": safe_divide(revenue, orders),
        "cities": int(df["city"].nunique()),
        "products": int(df["product"].nunique()),
        "top_city": top.key if top else None,
        "top_city_revenue": top.total if top else 0.0,
    }


def trend(store: DataStore, period: PeriodFilter | None = None) -> dict:
    return sanitize_for_json(revenue_by_month(store.get_frame(period)))


# ---------------------------------------------------------------------------
# Flat drill-down tables
# ---------------------------------------------------------------------------

Section = tuple[tuple[str, ...], AggregationResult]


def drilldown_sections(store: DataStore, period: PeriodFilter | None = None) -> dict[Level, list[Section]]:
    """Every scene the navigator can reach, keyed by level.

    Each section pairs its parent selections, e.g. ("Paris", "Burger"), with the
    aggregation shown there. Parents are visited in ranked order.
    """
    df = store.get_frame(period)
    cities = group_totals(df, *LEVEL_AGGREGATIONS[Level.OVERVIEW])
    sections: dict[Level, list[Section]] = {
        Level.OVERVIEW: [((), cities)],
        Level.CITY: [],
        Level.PRODUCT: [],
    }
    for city in cities.ranked():
        city_df = df[df["city"] == city.key]
        products = group_totals(city_df, *LEVEL_AGGREGATIONS[Level.CITY])
        sections[Level.CITY].append(((city.key,), products))
        for product in products.ranked():
            product_df = city_df[city_df["product"] == product.key]
            channels = group_totals(product_df, *LEVEL_AGGREGATIONS[Level.PRODUCT])
            sections[Level.PRODUCT].append(((city.key, product.key), channels))
    return sections


def drilldown_tables(store: DataStore, period: PeriodFilter | None = None) -> dict:
    """drilldown_sections flattened into one row per group, ranked within each parent."""
    sections = drilldown_sections(store, period)
    ((_, cities),) = sections[Level.OVERVIEW]

    return sanitize_for_json({
        "by_city": [
            {"city": g.key, "revenue": g.total, "orders": g.orders}
            for g in cities.ranked()
        ],
        "by_product": [
            {"city": city, "product": g.key, "revenue": g.total, "orders": g.orders}
            for (city,), agg in sections[Level.CITY]
            for g in agg.ranked()
        ],
        "by_purchase_type": [
            {
                "city": city, "product": product, "purchase_type": g.key,
                "quantity": g.total, "revenue": g.revenue, "orders": g.orders,
            }
            for (city, product), agg in sections[Level.PRODUCT]
            for g in agg.ranked()
        ],
    })
