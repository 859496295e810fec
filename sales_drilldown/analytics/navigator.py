"""
Drill-down navigator — city → product → purchase channel.

Owns the session's NavigationState. Forward moves push the current state onto
the history; go_back pops it (strict LIFO, no redo). Transitions hold a lock,
so concurrent API requests see each check-and-replace as one step.
"""
from __future__ import annotations

import threading

from sales_drilldown.config import LEVEL_LABELS
from sales_drilldown.data.errors import InvalidTransitionError
from sales_drilldown.data.schemas import AggregationResult, Level, NavigationState, PeriodFilter
from sales_drilldown.data.store import DataStore
from sales_drilldown.analytics.aggregate import group_totals


# (group-by column, summed column) per level
LEVEL_AGGREGATIONS = {
    Level.OVERVIEW: ("city", "revenue"),
    Level.CITY: ("product", "revenue"),
    Level.PRODUCT: ("purchase_type", "quantity"),
}


class Navigator:
    """Drill-down state machine over a loaded DataStore."""

    def __init__(self, store: DataStore) -> None:
        self.store = store
        self._state = NavigationState.root()
        self._lock = threading.Lock()

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def level(self) -> Level:
        return self._state.level

    @property
    def can_go_back(self) -> bool:
        return bool(self._state.history)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def drill_to_city(self, city: str) -> NavigationState:
        """Overview → City. Any other starting level is rejected."""
        city = city.strip()
        with self._lock:
            if self._state.level != Level.OVERVIEW:
                raise InvalidTransitionError(
                    f"Cannot drill into a city from the {self._state.level.value} level"
                )
            return self._push(NavigationState(Level.CITY, selected_city=city))

    def drill_to_product(self, city: str, product: str) -> NavigationState:
        """City → Product, only for the city currently selected."""
        city, product = city.strip(), product.strip()
        with self._lock:
            if self._state.level != Level.CITY:
                raise InvalidTransitionError(
                    f"Cannot drill into a product from the {self._state.level.value} level"
                )
            if self._state.selected_city != city:
                raise InvalidTransitionError(
                    f"Cannot drill into {city!r}: the selected city is {self._state.selected_city!r}"
                )
            return self._push(NavigationState(Level.PRODUCT, selected_city=city, selected_product=product))

    def go_back(self) -> NavigationState:
        """Restore the most recent snapshot. No-op at the root."""
        with self._lock:
            if self._state.history:
                self._state = self._state.history[-1]
            return self._state

    def reset(self) -> NavigationState:
        """Return to the overview and forget the history (e.g. after a reload)."""
        with self._lock:
            self._state = NavigationState.root()
            return self._state

    def _push(self, target: NavigationState) -> NavigationState:
        # caller holds self._lock
        self._state = NavigationState(
            level=target.level,
            selected_city=target.selected_city,
            selected_product=target.selected_product,
            history=self._state.history + (self._state,),
        )
        return self._state

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def aggregation_for(self, state: NavigationState, period: PeriodFilter | None = None) -> AggregationResult:
        key, measure = LEVEL_AGGREGATIONS[state.level]
        df = self.store.get_frame(
            period,
            city=state.selected_city,
            product=state.selected_product,
        )
        return group_totals(df, key, measure)

    def current_aggregation(self, period: PeriodFilter | None = None) -> AggregationResult:
        """Aggregation for the active level; empty (not an error) when nothing matches."""
        return self.aggregation_for(self._state, period)

    def breadcrumb(self) -> list[str]:
        s = self._state
        crumbs = [LEVEL_LABELS["overview"]]
        if s.selected_city is not None:
            crumbs.append(LEVEL_LABELS["city"].format(city=s.selected_city))
        if s.selected_product is not None:
            crumbs.append(LEVEL_LABELS["product"].format(product=s.selected_product))
        return crumbs
