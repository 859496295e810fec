import pytest
from openpyxl import load_workbook

from sales_drilldown.data.store import DataStore
from sales_drilldown.reports.drilldown_report import generate_excel, generate_json


def test_generate_json(sample_csv):
    data = generate_json(DataStore().load(sample_csv))

    assert data["kpis"]["total_revenue"] == pytest.approx(62.0)
    assert data["skipped_rows"] == 2
    assert data["date_range"] == "2022-11-07 to 2023-01-02"
    assert data["by_city"][0] == {"city": "Paris", "revenue": 40.0, "orders": 3}


def test_generate_excel(sample_csv, tmp_path):
    out = generate_excel(DataStore().load(sample_csv), tmp_path / "reports" / "drilldown.xlsx")

    assert out.exists()
    wb = load_workbook(out)
    assert wb.sheetnames == ["Summary", "By City", "By Product", "By Purchase Type"]

    ws = wb["By City"]
    assert [c.value for c in ws[1]] == ["City", "Revenue", "Orders"]
    assert ws["A2"].value == "Paris"
    assert ws["B2"].value == 40.0
    assert ws["A4"].value == "TOTAL"
    assert ws["B4"].value == pytest.approx(62.0)


def test_generate_excel_empty_store(tmp_path):
    out = generate_excel(DataStore.from_rows([]), tmp_path / "empty.xlsx")
    wb = load_workbook(out)
    assert wb["By City"].max_row == 1


def test_purchase_type_sheet_ranks_channels_within_each_product(sample_csv, tmp_path):
    out = generate_excel(DataStore().load(sample_csv), tmp_path / "drilldown.xlsx")
    ws = load_workbook(out)["By Purchase Type"]

    assert [c.value for c in ws[1]] == ["City", "Product", "Purchase Type", "Quantity", "Revenue", "Orders"]
    rows = [[c.value for c in r] for r in ws.iter_rows(min_row=2, max_row=5)]
    assert [r[:4] for r in rows] == [
        ["Paris", "Burger", "In-store", 4],
        ["Paris", "Burger", "Online", 2],
        ["Paris", "Pizza", "In-store", 1],
        ["Lyon", "Burger", "Drive-thru", 3],
    ]
    assert ws["A6"].value == "TOTAL"
    assert ws["D6"].value == pytest.approx(10)
    assert ws["E6"].value == pytest.approx(55.0)


def test_top_city_is_highlighted(sample_csv, tmp_path):
    out = generate_excel(DataStore().load(sample_csv), tmp_path / "drilldown.xlsx")
    ws = load_workbook(out)["By City"]
    assert ws["A2"].fill.start_color.rgb.endswith("FFF8DC")
    assert not ws["A3"].fill.start_color.rgb.endswith("FFF8DC")
