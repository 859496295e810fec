import threading

import pytest

from sales_drilldown.data.errors import InvalidTransitionError
from sales_drilldown.data.schemas import Level, NavigationState
from sales_drilldown.data.store import DataStore
from sales_drilldown.analytics.navigator import Navigator


def test_starts_at_overview(navigator):
    assert navigator.state == NavigationState.root()
    assert navigator.level == Level.OVERVIEW
    assert not navigator.can_go_back


def test_overview_aggregation(navigator):
    assert navigator.current_aggregation().as_dict() == {"Paris": 20.0, "Lyon": 15.0}


def test_city_aggregation_and_tie_break(navigator):
    navigator.drill_to_city("Paris")
    agg = navigator.current_aggregation()

    assert agg.as_dict() == {"Burger": 10.0, "Pizza": 10.0}
    assert agg.top().key == "Burger"


def test_product_aggregation_single_channel():
    store = DataStore.from_rows([
        {"city": "Paris", "product": "Burger", "Purchase Type": "Delivery", "price": 5, "quantity": 2},
        {"city": "Paris", "product": "Burger", "Purchase Type": "Delivery  App", "price": 5, "quantity": 3},
        {"city": "Paris", "product": "Pizza", "Purchase Type": "In-store", "price": 10, "quantity": 1},
        {"city": "Lyon", "product": "Burger", "Purchase Type": "Online", "price": 5, "quantity": 7},
    ])
    nav = Navigator(store)
    nav.drill_to_city("Paris")
    nav.drill_to_product("Paris", "Burger")
    agg = nav.current_aggregation()

    assert agg.as_dict() == {"Delivery": 5}
    (group,) = agg.groups
    assert group.revenue == 25.0
    assert group.orders == 2


def test_drill_then_back_restores_overview(navigator):
    before = navigator.state
    navigator.drill_to_city("Paris")
    assert navigator.go_back() == before
    assert navigator.state == NavigationState.root()


def test_drill_sequence_unwinds_in_lifo_order(navigator):
    root = navigator.state
    city = navigator.drill_to_city("Paris")
    product = navigator.drill_to_product("Paris", "Burger")

    assert product.depth == 2
    assert navigator.go_back() == city
    assert navigator.go_back() == root

    navigator.drill_to_city("Lyon")
    navigator.drill_to_product("Lyon", "Burger")
    navigator.go_back()
    navigator.go_back()
    assert navigator.state == root


def test_back_at_root_is_a_no_op(navigator):
    root = navigator.state
    assert navigator.go_back() == root
    assert navigator.go_back() == root
    assert navigator.state == root
    assert navigator.current_aggregation().as_dict() == {"Paris": 20.0, "Lyon": 15.0}


def test_drill_to_city_only_from_overview(navigator):
    navigator.drill_to_city("Paris")
    before = navigator.state
    with pytest.raises(InvalidTransitionError):
        navigator.drill_to_city("Lyon")
    assert navigator.state == before


def test_drill_to_product_requires_city_level(navigator):
    with pytest.raises(InvalidTransitionError):
        navigator.drill_to_product("Paris", "Burger")
    assert navigator.state == NavigationState.root()


def test_drill_to_product_requires_matching_city(navigator):
    navigator.drill_to_city("Paris")
    before = navigator.state
    with pytest.raises(InvalidTransitionError):
        navigator.drill_to_product("Lyon", "Burger")
    assert navigator.state == before


def test_unknown_city_gives_empty_aggregation(navigator):
    navigator.drill_to_city("Tokyo")
    agg = navigator.current_aggregation()
    assert agg.is_empty
    assert agg.key_field == "product"


def test_reset_clears_history(navigator):
    navigator.drill_to_city("Paris")
    navigator.drill_to_product("Paris", "Pizza")
    assert navigator.reset() == NavigationState.root()
    assert not navigator.can_go_back


def test_breadcrumb(navigator):
    assert navigator.breadcrumb() == ["City Overview"]
    navigator.drill_to_city("Paris")
    navigator.drill_to_product("Paris", "Burger")
    assert navigator.breadcrumb() == ["City Overview", "Paris Products", "Burger Details"]


@pytest.mark.parametrize("kwargs", [
    {"level": Level.OVERVIEW, "selected_city": "Paris"},
    {"level": Level.CITY},
    {"level": Level.CITY, "selected_city": "Paris", "selected_product": "Burger"},
    {"level": Level.PRODUCT, "selected_city": "Paris"},
    {"level": Level.PRODUCT, "selected_product": "Burger"},
])
def test_inconsistent_states_cannot_be_built(kwargs):
    with pytest.raises(InvalidTransitionError):
        NavigationState(**kwargs)


def test_selections_are_trimmed(navigator):
    navigator.drill_to_city("  Paris ")
    state = navigator.drill_to_product("Paris", " Burger  ")
    assert (state.selected_city, state.selected_product) == ("Paris", "Burger")
    assert navigator.aggregation_for(state.history[-1]).as_dict() == {"Burger": 10.0, "Pizza": 10.0}


def test_concurrent_drills_accept_exactly_one(navigator):
    for _ in range(200):
        navigator.reset()
        barrier = threading.Barrier(2)
        accepted = []

        def drill(city):
            barrier.wait()
            try:
                navigator.drill_to_city(city)
                accepted.append(city)
            except InvalidTransitionError:
                pass

        threads = [threading.Thread(target=drill, args=(c,)) for c in ("Paris", "Lyon")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(accepted) == 1
        assert navigator.state.history == (NavigationState.root(),)
        assert navigator.state.selected_city == accepted[0]
