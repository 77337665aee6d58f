"""
Workbook Access
===============
The compiler reads definition sheets through a small ``GridSource``
interface (sheet names, row extent, cell text, recalculation).  This
module defines that interface and an openpyxl-backed implementation.
"""

import datetime
import logging
from typing import Optional, Protocol, Set

import openpyxl
from openpyxl import Workbook

logger = logging.getLogger(__name__)


class GridSource(Protocol):
    """What the builder needs from a spreadsheet."""

    def exists(self, name: str) -> bool: ...

    def row_extent(self, name: str) -> int: ...

    def cell_text(self, name: str, row: int, col: int) -> str: ...

    def sheet_names(self) -> Set[str]: ...

    def recalculate(self, name: str) -> None: ...


def cell_to_text(value) -> str:
    """Render a raw cell value the way it would display as text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime.datetime):
        if value.time() == datetime.time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


class OpenpyxlGridSource:
    """``GridSource`` over an openpyxl workbook.

    Args:
        workbook: Workbook holding the raw cell values (formulas as text).
        values_workbook: Optional second copy loaded with ``data_only=True``.
            Once a sheet is recalculated its reads come from this copy, so
            formula cells yield their cached computed values.
    """

    def __init__(self, workbook: Workbook,
                 values_workbook: Optional[Workbook] = None,
                 owns_workbooks: bool = False):
        self.workbook = workbook
        self.values_workbook = values_workbook
        self._owns = owns_workbooks
        self._recalculated = set()

    @classmethod
    def from_file(cls, file_path: str) -> "OpenpyxlGridSource":
        logger.info(f"Loading workbook: {file_path}")
        wb = openpyxl.load_workbook(file_path, data_only=False)
        wb_data = openpyxl.load_workbook(file_path, data_only=True)
        return cls(wb, wb_data, owns_workbooks=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        if not self._owns:
            return
        self.workbook.close()
        if self.values_workbook is not None:
            self.values_workbook.close()

    def exists(self, name):
        return name in self.workbook.sheetnames

    def sheet_names(self):
        return set(self.workbook.sheetnames)

    def row_extent(self, name):
        ws = self.workbook[name]
        if ws.max_row == 1 and ws.max_column == 1 and ws.cell(1, 1).value is None:
            return 0
        return ws.max_row

    def recalculate(self, name):
        # openpyxl has no calculation engine; the cached values written by
        # the last application that saved the file are used instead.
        self._recalculated.add(name)
        if self.values_workbook is None:
            logger.debug(f"No cached values for '{name}', reading raw cells")

    def cell_text(self, name, row, col):
        ws = self.workbook[name]
        value = ws.cell(row=row, column=col).value
        if name in self._recalculated and self.values_workbook is not None:
            if isinstance(value, str) and value.startswith("="):
                cached = self.values_workbook[name].cell(row=row, column=col).value
                value = cached
        return cell_to_text(value)
