"""
Colors, fonts, fills and number formats for the drill-down workbook.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side


def solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


# Header color of each level sheet, matching the chart palette per drill level
CITY_BLUE = "3498DB"
PRODUCT_GREEN = "2ECC71"
CHANNEL_ORANGE = "F39C12"

NAVY = "1F4E79"
GRAY = "666666"

CURRENCY_FORMAT = '"$"#,##0.00'
COUNT_FORMAT = "#,##0"

TITLE_FONT = Font(name="Calibri", size=24, bold=True, color=NAVY)
SUBTITLE_FONT = Font(name="Calibri", size=12, italic=True, color=GRAY)
SECTION_FONT = Font(name="Calibri", size=14, bold=True, color=NAVY)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
DATA_FONT = Font(name="Calibri", size=10)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True)
KPI_VALUE_FONT = Font(name="Calibri", size=28, bold=True, color=NAVY)
KPI_LABEL_FONT = Font(name="Calibri", size=10, color=GRAY)
NOTE_TITLE_FONT = Font(name="Calibri", size=11, bold=True)
NOTE_BODY_FONT = Font(name="Calibri", size=10, italic=True)

ALTERNATE_FILL = solid("F5F5F5")
TOTAL_FILL = solid("E3F2FD")
TOP_GROUP_FILL = solid("FFF8DC")

_grid = Side(style="thin", color="CCCCCC")
GRID_BORDER = Border(left=_grid, right=_grid, top=_grid, bottom=_grid)
TOTAL_BORDER = Border(left=_grid, right=_grid, top=Side(style="medium", color="999999"), bottom=_grid)

CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")
