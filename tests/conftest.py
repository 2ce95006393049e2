"""
Shared pytest fixtures for sheetmerge tests.

Provides a temporary directory and a helper that writes small workbooks
with openpyxl.
"""

import tempfile
from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test inputs and outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_workbook(temp_dir):
    """
    Write a workbook and return its path.

    `sheets` maps sheet title -> list of rows; the first sheet is the active one.
    """
    def _make(name, sheets):
        wb = Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title)
            for row in rows:
                ws.append(list(row))
        path = temp_dir / name
        wb.save(path)
        wb.close()
        return str(path)

    return _make


@pytest.fixture
def read_rows():
    """Read all rows of a written workbook, empty cells read back as ""."""
    def _read(path, sheet_name=None):
        wb = load_workbook(path)
        ws = wb[sheet_name] if sheet_name else wb.active
        rows = [
            ["" if v is None else v for v in row]
            for row in ws.iter_rows(values_only=True)
        ]
        wb.close()
        return rows

    return _read


@pytest.fixture
def stored_rows():
    """Rows exactly as stored in the sheet (read-only mode yields no padding rows)."""
    def _read(path, sheet_name=None):
        wb = load_workbook(path, read_only=True)
        ws = wb[sheet_name] if sheet_name else wb.worksheets[0]
        rows = [list(row) for row in ws.iter_rows(values_only=True)]
        wb.close()
        return rows

    return _read
