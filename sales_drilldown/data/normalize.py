"""
Column mapping, field coercion, purchase-type canonicalization, row → Record.
"""
from __future__ import annotations

import datetime as dt
import math
import re
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from sales_drilldown.config import (
    COLUMN_MAP, DATE_FORMAT, MALFORMED_COLUMN, PURCHASE_TYPE_SEPARATOR, UNKNOWN_PURCHASE_TYPE,
)
from sales_drilldown.data.errors import DataFormatError, RowNormalizationWarning
from sales_drilldown.data.schemas import LoadResult, Record


_SEPARATOR_RE = re.compile(PURCHASE_TYPE_SEPARATOR)
_CURRENCY_RE = re.compile(r"[\$,\s]")

# How many skipped rows are echoed individually before only the count is printed
_MAX_ROW_WARNINGS = 5


# ---------------------------------------------------------------------------
# Column normalisation
# ---------------------------------------------------------------------------

def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename raw restaurant CSV headers to internal names."""
    df = df.rename(columns=lambda c: COLUMN_MAP.get(str(c).strip(), str(c).strip()))
    # "Purchase Type" and "PurchaseType" both map to purchase_type; keep the first
    return df.loc[:, ~df.columns.duplicated()]


def _internal_key(key: Any) -> str:
    key = str(key).strip()
    return COLUMN_MAP.get(key, key)


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def _clean_text(value: Any) -> str:
    if _is_missing(value):
        return ""
    return str(value).strip()


def _to_number(value: Any, field_name: str) -> float:
    """Parse a price/quantity value; strips currency symbols and thousands separators."""
    if isinstance(value, bool):
        raise DataFormatError(f"{field_name} is not numeric: {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = _CURRENCY_RE.sub("", str(value))
        try:
            number = float(text)
        except ValueError:
            raise DataFormatError(f"{field_name} is not numeric: {value!r}") from None
    if math.isnan(number) or math.isinf(number):
        raise DataFormatError(f"{field_name} is not a finite number: {value!r}")
    if number < 0:
        raise DataFormatError(f"{field_name} is negative: {value!r}")
    return number


def coerce_price(value: Any) -> float:
    if _is_missing(value):
        return 0.0
    return _to_number(value, "price")


def coerce_quantity(value: Any) -> int:
    if _is_missing(value):
        return 0
    number = _to_number(value, "quantity")
    if not number.is_integer():
        raise DataFormatError(f"quantity is not a whole number: {value!r}")
    return int(number)


def parse_order_date(value: Any) -> Optional[dt.date]:
    """Parse a DD-MM-YYYY date. Absent or malformed values yield None."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = _clean_text(value)
    if not text:
        return None
    try:
        return dt.datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Purchase type canonicalization
# ---------------------------------------------------------------------------

def canonical_purchase_type(value: Any) -> Optional[str]:
    """Reduce a compound purchase type to its channel.

    "Online   Gift Card" → "Online", "In-store  " → "In-store".
    Blank and "Unknown" mean no category and return None.
    """
    text = _clean_text(value)
    if not text:
        return None
    channel = _SEPARATOR_RE.split(text, maxsplit=1)[0].strip()
    if not channel or channel.casefold() == UNKNOWN_PURCHASE_TYPE.casefold():
        return None
    return channel


# ---------------------------------------------------------------------------
# Row → Record
# ---------------------------------------------------------------------------

def normalize_row(raw: Mapping[str, Any]) -> Record:
    """Build a Record from one raw row (raw CSV headers or internal names)."""
    row: dict[str, Any] = {}
    for key, value in raw.items():
        # first alias wins, as in normalize_columns
        row.setdefault(_internal_key(key), value)

    malformed = _clean_text(row.get(MALFORMED_COLUMN))
    if malformed:
        raise DataFormatError(malformed)

    city = _clean_text(row.get("city"))
    product = _clean_text(row.get("product"))
    if not city:
        raise DataFormatError("city is blank")
    if not product:
        raise DataFormatError("product is blank")

    price_raw, qty_raw = row.get("price"), row.get("quantity")
    if _is_missing(price_raw) and _is_missing(qty_raw):
        raise DataFormatError("price and quantity are both missing")

    date_raw = row.get("date")
    if _is_missing(date_raw):
        date_raw = row.get("order_date_alt")

    return Record(
        city=city,
        product=product,
        purchase_type=canonical_purchase_type(row.get("purchase_type")),
        price=coerce_price(price_raw),
        quantity=coerce_quantity(qty_raw),
        order_date=parse_order_date(date_raw),
    )


def normalize(raw_rows: Iterable[Mapping[str, Any]], source: str | None = None) -> LoadResult:
    """Normalize every row; malformed rows are skipped and reported, never fatal."""
    records: list[Record] = []
    skipped: list[RowNormalizationWarning] = []

    for row_number, raw in enumerate(raw_rows, 1):
        try:
            records.append(normalize_row(raw))
        except DataFormatError as exc:
            skipped.append(RowNormalizationWarning(row_number, str(exc), dict(raw)))

    if skipped:
        for warning in skipped[:_MAX_ROW_WARNINGS]:
            print(f"  Warning: skipping {warning}")
        if len(skipped) > _MAX_ROW_WARNINGS:
            print(f"  Warning: ... and {len(skipped) - _MAX_ROW_WARNINGS:,} more malformed rows")
        print(f"  Skipped {len(skipped):,} of {len(records) + len(skipped):,} rows")

    return LoadResult(records=tuple(records), skipped=skipped, source=source)
