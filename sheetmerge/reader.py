"""
Reader module: loads worksheets into header-keyed record tables.
"""
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from openpyxl import load_workbook

from .merge_service import Table


def cell_text(value: Any) -> Optional[str]:
    """Text of a cell value, or None for an empty cell."""
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text if text != "" else None


def _header_names(header_row: Tuple[Any, ...]) -> List[Optional[str]]:
    # blank header cells leave their column unnamed so it is never read
    names: List[Optional[str]] = []
    for value in header_row:
        text = cell_text(value)
        text = text.strip() if text is not None else None
        names.append(text or None)
    return names


def read_table(path: str, sheet_name: Optional[str] = None) -> Table:
    """
    Read one worksheet into a Table.

    Row 1 is the header. Each later row with a value under at least one
    named column becomes a record keyed by the header names; empty cells
    are left out of the record instead of being stored as "".

    Args:
        path: workbook path.
        sheet_name: worksheet to read; the first worksheet when None.

    Raises:
        FileNotFoundError: the workbook does not exist.
        KeyError: `sheet_name` is not a worksheet of the workbook.
    """
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb[sheet_name] if sheet_name else wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)

        first = next(rows, None)
        if first is None:
            logger.debug("Sheet '{}' of {} is empty", ws.title, path)
            return Table()
        names = _header_names(first)
        header = tuple(dict.fromkeys(n for n in names if n is not None))

        records: List[Dict[str, str]] = []
        for row in rows:
            record: Dict[str, str] = {}
            for name, value in zip(names, row):
                text = cell_text(value)
                if name is not None and text is not None:
                    record[name] = text
            # cells under blank headers do not make a row present
            if record:
                records.append(record)
    finally:
        wb.close()

    logger.debug("Read {} records x {} columns from {} [{}]", len(records), len(header), path, sheet_name or ws.title)
    return Table(header=header, records=tuple(records))


def read_first_row(path: str) -> Tuple[Optional[str], ...]:
    """Cell texts of the first row of the first sheet; empty tuple for an empty sheet."""
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        first = next(wb.worksheets[0].iter_rows(max_row=1, values_only=True), None)
    finally:
        wb.close()
    if first is None:
        return ()
    return tuple(cell_text(v) for v in first)
