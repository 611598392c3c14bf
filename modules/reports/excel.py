from io import BytesIO
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

MAX_COLUMN_WIDTH = 48


def _create_styles():
    """Create reusable style definitions."""
    thin_border = Side(style="thin", color="000000")
    return {
        "title_font": Font(bold=True, size=14),
        "header_font": Font(bold=True, size=10),
        "header_fill": PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid"),
        "warning_fill": PatternFill(start_color="FFF2CC", end_color="FFF2CC", fill_type="solid"),
        "border": Border(left=thin_border, right=thin_border, top=thin_border, bottom=thin_border),
        "center_align": Alignment(horizontal="center", vertical="center"),
        "left_align": Alignment(horizontal="left", vertical="center"),
    }


def _apply_header_row(ws, row: int, columns: List[str], styles: dict):
    """Apply formatting to a header row."""
    for col_idx, col_name in enumerate(columns, start=1):
        cell = ws.cell(row=row, column=col_idx, value=col_name)
        cell.font = styles["header_font"]
        cell.fill = styles["header_fill"]
        cell.border = styles["border"]
        cell.alignment = styles["center_align"]


def _apply_data_row(ws, row: int, values: List[Any], styles: dict):
    for col_idx, value in enumerate(values, start=1):
        cell = ws.cell(row=row, column=col_idx, value=value)
        cell.border = styles["border"]
        cell.alignment = styles["left_align"]


def _fit_column_widths(ws, columns: List[str], rows: List[List[Any]]):
    for col_idx, col_name in enumerate(columns, start=1):
        longest = max([len(str(col_name))] + [len(str(row[col_idx - 1])) for row in rows if len(row) >= col_idx])
        ws.column_dimensions[get_column_letter(col_idx)].width = min(longest + 2, MAX_COLUMN_WIDTH)


def build_report_excel(report: Dict[str, Any], columns: List[str], rows: List[List[Any]]) -> BytesIO:
    """Render a report as a one-sheet workbook: title, date, then a table."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Report"
    styles = _create_styles()

    current_row = 1
    ws.cell(row=current_row, column=1, value=report.get("title", "Report")).font = styles["title_font"]
    ws.merge_cells(start_row=current_row, start_column=1, end_row=current_row, end_column=max(len(columns), 1))
    current_row += 1

    ws.cell(row=current_row, column=1, value="Generated:").font = Font(bold=True)
    ws.cell(row=current_row, column=2, value=report.get("date", "-"))
    current_row += 2

    _apply_header_row(ws, current_row, columns, styles)
    current_row += 1

    if not rows:
        cell = ws.cell(row=current_row, column=1, value="No records")
        cell.fill = styles["warning_fill"]
    for values in rows:
        _apply_data_row(ws, current_row, values, styles)
        current_row += 1

    _fit_column_widths(ws, columns, rows)

    stream = BytesIO()
    wb.save(stream)
    stream.seek(0)
    return stream
