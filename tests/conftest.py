from __future__ import annotations

import csv
from pathlib import Path

import pytest

from sales_drilldown.data.store import DataStore
from sales_drilldown.analytics.navigator import Navigator


HEADER = ["City", "Product", "Purchase Type", "Price", "Quantity", "Date", "Manager"]

CSV_ROWS = [
    ["Paris", "Burger", "Online   Gift Card", "5", "2", "07-11-2022", "Joao Silva"],
    ["Paris", "Pizza", "In-store  ", "10", "1", "08-11-2022", "Joao Silva"],
    ["Lyon", "Burger", "Drive-thru", "5", "3", "15-12-2022", "Tom Jackson"],
    ["Paris", "Burger", "In-store", "5", "4", "", "Joao Silva"],
    ["Lyon", "Fries", "Unknown", "$3.50", "2", "02-01-2023", "Tom Jackson"],
    ["Lyon", "Fries", "Online", "abc", "1", "03-01-2023", "Tom Jackson"],
    ["Madrid", "Beverages", "", "", "", "04-01-2023", "Pablo Perez"],
]


def write_csv(path: Path, header: list[str], rows: list[list[str]]) -> Path:
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)
    return path


@pytest.fixture
def sample_csv(tmp_path) -> Path:
    return write_csv(tmp_path / "restaurant.csv", HEADER, CSV_ROWS)


@pytest.fixture
def paris_lyon_rows() -> list[dict]:
    return [
        {"city": "Paris", "product": "Burger", "price": 5, "quantity": 2},
        {"city": "Paris", "product": "Pizza", "price": 10, "quantity": 1},
        {"city": "Lyon", "product": "Burger", "price": 5, "quantity": 3},
    ]


@pytest.fixture
def paris_lyon_store(paris_lyon_rows) -> DataStore:
    return DataStore.from_rows(paris_lyon_rows)


@pytest.fixture
def navigator(paris_lyon_store) -> Navigator:
    return Navigator(paris_lyon_store)
