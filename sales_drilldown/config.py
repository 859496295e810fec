"""
Sales Drill-Down — Configuration: paths, column mapping, normalization constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with SALES_DRILLDOWN_DATA_DIR / SALES_DRILLDOWN_DATASET
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("SALES_DRILLDOWN_DATA_DIR", str(Path.home() / "Desktop" / "Sales Drilldown")))
DATASET_PATH = Path(os.environ.get("SALES_DRILLDOWN_DATASET", str(_data_dir / "restaurant.csv")))
REPORTS_FOLDER = _data_dir / "reports"

# ---------------------------------------------------------------------------
# Column mapping from raw restaurant CSV → internal names
# ---------------------------------------------------------------------------
COLUMN_MAP = {
    "City": "city",
    "Product": "product",
    "Purchase Type": "purchase_type",
    "PurchaseType": "purchase_type",
    "Price": "price",
    "Quantity": "quantity",
    "Date": "date",
    "OrderDate": "order_date_alt",
    "Manager": "manager",
}

# Internal names (after COLUMN_MAP) a dataset must carry to be explored at all
REQUIRED_COLUMNS = ["city", "product", "price", "quantity"]

# Set by the loader on lines the CSV parser could not split into the header's fields
MALFORMED_COLUMN = "_malformed"

# ---------------------------------------------------------------------------
# Field normalization
# ---------------------------------------------------------------------------
DATE_FORMAT = "%d-%m-%Y"                     # e.g. 07-11-2022

# "Online   Gift Card" / "Online\tGift Card" → "Online"
PURCHASE_TYPE_SEPARATOR = r"\t|\s{2,}"
UNKNOWN_PURCHASE_TYPE = "Unknown"

# ---------------------------------------------------------------------------
# Drill-down labels (breadcrumb + scene titles)
# ---------------------------------------------------------------------------
LEVEL_LABELS = {
    "overview": "City Overview",
    "city": "{city} Products",
    "product": "{product} Details",
}

SCENE_TITLES = {
    "overview": "City Sales Performance",
    "city": "Product Performance in {city}",
    "product": "{product} Purchase Patterns in {city}",
}
