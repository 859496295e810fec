import pytest
from openpyxl import load_workbook

from sales_drilldown.cli import main


def test_summary_overview(sample_csv, capsys):
    assert main(["--data", str(sample_csv), "summary"]) == 0
    out = capsys.readouterr().out
    assert "City Sales Performance" in out
    assert "Paris leads in sales" in out


def test_summary_drill_path(sample_csv, capsys):
    assert main(["--data", str(sample_csv), "summary", "--city", "Paris", "--product", "Burger"]) == 0
    out = capsys.readouterr().out
    assert "City Overview → Paris Products → Burger Details" in out
    assert "In-store" in out


def test_summary_unknown_city_prints_no_data(sample_csv, capsys):
    assert main(["--data", str(sample_csv), "summary", "--city", "Tokyo"]) == 0
    assert "No orders match this selection." in capsys.readouterr().out


def test_missing_dataset_exits_1(tmp_path, capsys):
    assert main(["--data", str(tmp_path / "missing.csv"), "summary"]) == 1
    assert "Could not load dataset" in capsys.readouterr().out


def test_export(sample_csv, tmp_path):
    out = tmp_path / "report.xlsx"
    assert main(["--data", str(sample_csv), "export", "--output", str(out)]) == 0
    assert load_workbook(out)["By City"]["A2"].value == "Paris"


def test_summary_trims_city_and_product(sample_csv, capsys):
    assert main(["--data", str(sample_csv), "summary", "--city", " Paris ", "--product", "Burger "]) == 0
    assert "City Overview → Paris Products → Burger Details" in capsys.readouterr().out


@pytest.mark.parametrize("argv, flag", [
    (["summary", "--period", "month", "--year", "2022"], "--month"),
    (["summary", "--period", "quarter", "--year", "2022"], "--quarter"),
    (["export", "--period", "year"], "--year"),
])
def test_incomplete_period_is_rejected(sample_csv, capsys, argv, flag):
    with pytest.raises(SystemExit) as exc:
        main(["--data", str(sample_csv), *argv])
    assert exc.value.code == 2
    assert flag in capsys.readouterr().err


def test_summary_for_a_month(sample_csv, capsys):
    assert main(["--data", str(sample_csv), "summary", "--period", "month", "--year", "2022", "--month", "12"]) == 0
    out = capsys.readouterr().out
    assert "(December 2022)" in out
    assert "Lyon leads in sales" in out
