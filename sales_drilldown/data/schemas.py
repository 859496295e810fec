"""
Record, aggregation, navigation-state and period filter schemas.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from sales_drilldown.data.errors import InvalidTransitionError, RowNormalizationWarning


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Record:
    """One normalized order line."""
    city: str
    product: str
    purchase_type: Optional[str]     # canonical channel, None = no category
    price: float
    quantity: int
    order_date: Optional[dt.date] = None

    @property
    def revenue(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "city": self.city,
            "product": self.product,
            "purchase_type": self.purchase_type,
            "price": self.price,
            "quantity": self.quantity,
            "revenue": self.revenue,
            "order_date": self.order_date,
        }


@dataclass
class LoadResult:
    """Valid records in input order plus diagnostics for the rows that were skipped."""
    records: tuple[Record, ...] = ()
    skipped: list[RowNormalizationWarning] = field(default_factory=list)
    source: Optional[str] = None

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def __len__(self) -> int:
        return len(self.records)


# ---------------------------------------------------------------------------
# Aggregation results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GroupTotal:
    key: str
    total: float                 # the level's measure (revenue or quantity)
    revenue: float = 0.0
    orders: int = 0


@dataclass(frozen=True)
class AggregationResult:
    """Group-by-sum output. Groups are kept in first-encountered key order."""
    key_field: str
    measure: str
    groups: tuple[GroupTotal, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.groups

    @property
    def grand_total(self) -> float:
        return sum(g.total for g in self.groups)

    @property
    def order_count(self) -> int:
        return sum(g.orders for g in self.groups)

    def keys(self) -> list[str]:
        return [g.key for g in self.groups]

    def as_dict(self) -> dict[str, float]:
        return {g.key: g.total for g in self.groups}

    def ranked(self) -> list[GroupTotal]:
        """Groups sorted by total descending; ties keep first-encountered order."""
        return sorted(self.groups, key=lambda g: g.total, reverse=True)

    def top(self) -> Optional[GroupTotal]:
        """Group with the largest total. First-encountered key wins a tie."""
        best: Optional[GroupTotal] = None
        for g in self.groups:
            if best is None or g.total > best.total:
                best = g
        return best


# ---------------------------------------------------------------------------
# Navigation state
# ---------------------------------------------------------------------------

class Level(str, Enum):
    OVERVIEW = "overview"
    CITY = "city"
    PRODUCT = "product"


@dataclass(frozen=True)
class NavigationState:
    """Current drill-down position plus the snapshots it was reached through.

    The constructor rejects any combination of level and selections that the
    drill-down cannot reach, so an inconsistent state is never held.
    """
    level: Level = Level.OVERVIEW
    selected_city: Optional[str] = None
    selected_product: Optional[str] = None
    history: tuple["NavigationState", ...] = ()

    def __post_init__(self) -> None:
        if self.level == Level.OVERVIEW:
            if self.selected_city is not None or self.selected_product is not None:
                raise InvalidTransitionError("Overview cannot carry a city or product selection")
        elif self.level == Level.CITY:
            if self.selected_city is None:
                raise InvalidTransitionError("City level requires a selected city")
            if self.selected_product is not None:
                raise InvalidTransitionError("City level cannot carry a product selection")
        elif self.level == Level.PRODUCT:
            if self.selected_city is None or self.selected_product is None:
                raise InvalidTransitionError("Product level requires a selected city and product")

    @classmethod
    def root(cls) -> "NavigationState":
        return cls()

    @property
    def depth(self) -> int:
        return len(self.history)

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "selected_city": self.selected_city,
            "selected_product": self.selected_product,
            "depth": self.depth,
        }


# ---------------------------------------------------------------------------
# Period filter
# ---------------------------------------------------------------------------

class PeriodType(str, Enum):
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"
    ALL = "all"


def _month_end(year: int, month: int) -> dt.date:
    if month == 12:
        return dt.date(year + 1, 1, 1) - dt.timedelta(days=1)
    return dt.date(year, month + 1, 1) - dt.timedelta(days=1)


@dataclass
class PeriodFilter:
    """Defines a date range for scoping aggregations to dated orders."""
    period_type: PeriodType = PeriodType.ALL
    year: Optional[int] = None
    month: Optional[int] = None          # 1-12
    quarter: Optional[int] = None        # 1-4
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    def resolve(self) -> tuple[Optional[dt.date], Optional[dt.date]]:
        """Return (start_date, end_date) based on period_type."""
        if self.period_type == PeriodType.ALL:
            return None, None

        if self.period_type == PeriodType.CUSTOM:
            return self.start_date, self.end_date

        if self.year is None:
            return None, None

        if self.period_type == PeriodType.MONTH:
            if self.month is None:
                return None, None
            return dt.date(self.year, self.month, 1), _month_end(self.year, self.month)

        if self.period_type == PeriodType.QUARTER:
            if self.quarter is None:
                return None, None
            start_month = (self.quarter - 1) * 3 + 1
            return dt.date(self.year, start_month, 1), _month_end(self.year, start_month + 2)

        if self.period_type == PeriodType.YEAR:
            return dt.date(self.year, 1, 1), dt.date(self.year, 12, 31)

        return None, None

    def missing_fields(self) -> list[str]:
        """Parameters this period type needs but was not given."""
        required = {
            PeriodType.MONTH: ("year", "month"),
            PeriodType.QUARTER: ("year", "quarter"),
            PeriodType.YEAR: ("year",),
        }.get(self.period_type, ())
        return [name for name in required if getattr(self, name) is None]

    @property
    def is_unbounded(self) -> bool:
        return self.resolve() == (None, None)

    @property
    def label(self) -> str:
        """Human-readable label for the period."""
        if self.period_type == PeriodType.ALL:
            return "All Time"
        if self.period_type == PeriodType.MONTH and self.year and self.month:
            return f"{dt.date(self.year, self.month, 1):%B %Y}"
        if self.period_type == PeriodType.QUARTER and self.year and self.quarter:
            return f"Q{self.quarter} {self.year}"
        if self.period_type == PeriodType.YEAR and self.year:
            return str(self.year)
        if self.period_type == PeriodType.CUSTOM:
            s = self.start_date.isoformat() if self.start_date else "?"
            e = self.end_date.isoformat() if self.end_date else "?"
            return f"{s} to {e}"
        return "Unknown"
