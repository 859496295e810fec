"""
DrilldownWorkbook — a summary sheet plus one sheet per drill-down level.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from sales_drilldown.data.schemas import AggregationResult
from sales_drilldown.excel.styles import (
    ALTERNATE_FILL, CENTER, COUNT_FORMAT, CURRENCY_FORMAT, DATA_FONT, GRID_BORDER,
    HEADER_FONT, KPI_LABEL_FONT, KPI_VALUE_FONT, LEFT, NOTE_BODY_FONT, NOTE_TITLE_FONT,
    RIGHT, SECTION_FONT, SUBTITLE_FONT, TITLE_FONT, TOP_GROUP_FILL, TOTAL_BORDER,
    TOTAL_FILL, TOTAL_FONT, solid,
)


# Value columns after the key columns: (header, GroupTotal attribute, number format)
MEASURE_COLUMNS = {
    "revenue": [
        ("Revenue", "revenue", CURRENCY_FORMAT),
        ("Orders", "orders", COUNT_FORMAT),
    ],
    "quantity": [
        ("Quantity", "total", COUNT_FORMAT),
        ("Revenue", "revenue", CURRENCY_FORMAT),
        ("Orders", "orders", COUNT_FORMAT),
    ],
}

Section = tuple[tuple[str, ...], AggregationResult]


def _fit_columns(ws: Worksheet, min_width: int = 10, max_width: int = 45) -> None:
    for column in ws.columns:
        longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(max(longest + 2, min_width), max_width)


class DrilldownWorkbook:
    """Builds the export workbook sheet by sheet, in call order."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self.wb.remove(self.wb.active)

    # ------------------------------------------------------------------
    # Summary sheet
    # ------------------------------------------------------------------

    def summary_sheet(
        self,
        title: str,
        subtitle: str,
        kpis: list[tuple[str, float, str]],
        notes: Iterable[tuple[str, str]] = (),
    ) -> Worksheet:
        """Title block, a row of KPI cards (label, value, number format) and notes."""
        ws = self.wb.create_sheet("Summary")
        width = max(len(kpis) * 2, 8)

        ws.cell(row=1, column=1, value=title).font = TITLE_FONT
        ws.cell(row=2, column=1, value=subtitle).font = SUBTITLE_FONT
        for r in (1, 2):
            ws.merge_cells(start_row=r, start_column=1, end_row=r, end_column=width)
        ws.cell(row=4, column=1, value="REVENUE OVERVIEW").font = SECTION_FONT

        for i, (label, value, number_format) in enumerate(kpis):
            col = 1 + i * 2
            card = ws.cell(row=6, column=col, value=value)
            card.font = KPI_VALUE_FONT
            card.alignment = CENTER
            card.number_format = number_format
            caption = ws.cell(row=7, column=col, value=label)
            caption.font = KPI_LABEL_FONT
            caption.alignment = CENTER

        row = 9
        for note_title, body in notes:
            ws.cell(row=row, column=1, value=note_title).font = NOTE_TITLE_FONT
            ws.cell(row=row + 1, column=1, value=body).font = NOTE_BODY_FONT
            ws.merge_cells(start_row=row + 1, start_column=1, end_row=row + 1, end_column=width)
            row += 3

        for col in range(1, width + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18
        return ws

    # ------------------------------------------------------------------
    # Level sheets
    # ------------------------------------------------------------------

    def level_sheet(
        self,
        title: str,
        key_headers: list[str],
        measure: str,
        sections: Iterable[Section],
        header_color: str,
        highlight_top: bool = False,
    ) -> Worksheet:
        """One row per group of every section, ranked within its parents, then a TOTAL row.

        key_headers name the parent columns followed by the grouped column, e.g.
        ["City", "Product"] for products within each city.
        """
        ws = self.wb.create_sheet(title)
        measures = MEASURE_COLUMNS[measure]
        formats = [None] * len(key_headers) + [fmt for _, _, fmt in measures]

        header_fill = solid(header_color)
        for col, label in enumerate(key_headers + [h for h, _, _ in measures], 1):
            cell = ws.cell(row=1, column=col, value=label)
            cell.font = HEADER_FONT
            cell.fill = header_fill
            cell.alignment = CENTER
            cell.border = GRID_BORDER

        row = 2
        sums = [0.0] * len(measures)
        for parents, agg in sections:
            top = agg.top() if highlight_top else None
            for g in agg.ranked():
                values = [*parents, g.key] + [getattr(g, attr) for _, attr, _ in measures]
                if top is not None and g.key == top.key:
                    fill = TOP_GROUP_FILL
                else:
                    fill = ALTERNATE_FILL if row % 2 == 0 else None
                self._write_row(ws, row, values, formats, DATA_FONT, fill)
                sums = [s + v for s, v in zip(sums, values[len(key_headers):])]
                row += 1

        if row > 2:
            totals = ["TOTAL"] + [""] * (len(key_headers) - 1) + sums
            self._write_row(ws, row, totals, formats, TOTAL_FONT, TOTAL_FILL, TOTAL_BORDER)

        _fit_columns(ws)
        ws.freeze_panes = "A2"
        return ws

    @staticmethod
    def _write_row(
        ws: Worksheet,
        row: int,
        values: list,
        formats: list[Optional[str]],
        font: Font,
        fill: Optional[PatternFill],
        border=GRID_BORDER,
    ) -> None:
        for col, (value, number_format) in enumerate(zip(values, formats), 1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.font = font
            cell.border = border
            if number_format:
                cell.number_format = number_format
                cell.alignment = RIGHT
            else:
                cell.alignment = LEFT
            if fill is not None:
                cell.fill = fill

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path
