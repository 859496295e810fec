import pytest

from sales_drilldown.data.normalize import normalize
from sales_drilldown.data.schemas import AggregationResult, GroupTotal
from sales_drilldown.data.store import DataStore
from sales_drilldown.analytics.aggregate import aggregate, group_totals, revenue_by_month


def test_group_totals_by_city(paris_lyon_store):
    result = group_totals(paris_lyon_store.df, "city", "revenue")

    assert result.as_dict() == {"Paris": 20.0, "Lyon": 15.0}
    assert result.keys() == ["Paris", "Lyon"]
    assert [g.orders for g in result.groups] == [2, 1]


def test_overview_totals_conserve_revenue(sample_csv):
    store = DataStore().load(sample_csv)
    result = group_totals(store.df, "city", "revenue")

    assert result.grand_total == pytest.approx(sum(r.revenue for r in store.records))
    assert result.order_count == store.row_count()


def test_missing_purchase_type_is_excluded_but_revenue_kept(sample_csv):
    store = DataStore().load(sample_csv)
    lyon_fries = store.get_frame(city="Lyon", product="Fries")

    assert group_totals(lyon_fries, "purchase_type", "quantity").is_empty
    assert group_totals(lyon_fries, "product", "revenue").as_dict() == {"Fries": 7.0}


def test_no_matching_rows_gives_empty_result(paris_lyon_store):
    result = group_totals(paris_lyon_store.get_frame(city="Tokyo"), "product", "revenue")

    assert result.is_empty
    assert result.as_dict() == {}
    assert result.top() is None
    assert result.grand_total == 0


def test_aggregate_with_callables(paris_lyon_rows):
    records = normalize(paris_lyon_rows).records
    result = aggregate(records, lambda r: r.product, lambda r: r.quantity)

    assert result.as_dict() == {"Burger": 5, "Pizza": 1}


def test_aggregate_with_field_names(paris_lyon_rows):
    records = normalize(paris_lyon_rows).records
    result = aggregate(records, "city", "revenue")

    assert result.key_field == "city"
    assert result.as_dict() == {"Paris": 20.0, "Lyon": 15.0}


def test_aggregate_empty_sequence():
    assert aggregate([], "city", "revenue").is_empty


def test_top_first_encountered_wins_a_tie():
    result = AggregationResult("product", "revenue", (
        GroupTotal("Burger", 10.0),
        GroupTotal("Fries", 4.0),
        GroupTotal("Pizza", 10.0),
    ))
    assert result.top().key == "Burger"
    assert [g.key for g in result.ranked()] == ["Burger", "Pizza", "Fries"]


def test_revenue_by_month_reports_undated(sample_csv):
    store = DataStore().load(sample_csv)
    trend = revenue_by_month(store.df)

    assert [m["month"] for m in trend["months"]] == ["2022-11", "2022-12", "2023-01"]
    assert trend["months"][0]["revenue"] == pytest.approx(20.0)
    assert trend["undated_revenue"] == pytest.approx(20.0)
    assert trend["undated_orders"] == 1
