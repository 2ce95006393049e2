# sheetmerge/formatter.py
import os
import tempfile
from typing import List, Sequence

import pandas as pd
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

DEFAULT_SHEET_TITLE = "Merged"
MAX_COLUMN_WIDTH = 60

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill("solid", fgColor="D9E1F2")


def write_table(
    path: str,
    sheet_title: str,
    header: Sequence[str],
    rows: Sequence[Sequence[str]],
) -> None:
    """
    Write `header` and `rows` to a new workbook at `path` with one sheet.

    Each row is a sequence of values in header order. An empty header still
    produces the sheet, just without cells. The workbook is built next to
    `path` and only moved into place once it is complete, so a failed write
    leaves any existing file untouched.
    """
    frame = pd.DataFrame(list(rows), columns=list(header), dtype=str)

    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(suffix=".xlsx", dir=directory)
    os.close(fd)
    try:
        with pd.ExcelWriter(tmp_path, engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name=sheet_title, index=False, header=True)
            ws = writer.sheets[sheet_title]
            keep_as_text(ws, len(header), len(frame) + 1)
            style_header(ws, len(header))
            fit_column_widths(ws, header, rows)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def keep_as_text(ws: Worksheet, n_columns: int, n_rows: int) -> None:
    # openpyxl turns strings starting with "=" into formulas
    if not n_columns:
        return
    for row in ws.iter_rows(min_row=1, max_row=n_rows, max_col=n_columns):
        for cell in row:
            if isinstance(cell.value, str) and cell.value.startswith("="):
                cell.data_type = "s"


def style_header(ws: Worksheet, n_columns: int) -> None:
    for col in range(1, n_columns + 1):
        cell = ws.cell(row=1, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
    if n_columns:
        ws.freeze_panes = "A2"


def fit_column_widths(ws: Worksheet, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    widths: List[int] = [len(str(h)) for h in header]
    for row in rows:
        for idx, value in enumerate(row[:len(widths)]):
            widths[idx] = max(widths[idx], len(str(value)))
    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, MAX_COLUMN_WIDTH)
