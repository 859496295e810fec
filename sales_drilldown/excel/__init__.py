"""Styled openpyxl workbook for the drill-down export."""
from .writer import DrilldownWorkbook
