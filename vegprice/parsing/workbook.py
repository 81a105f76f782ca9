# vegprice/parsing/workbook.py

"""Turn downloaded spreadsheet bytes into sheet grids.

``.xlsx`` files are read with openpyxl and legacy ``.xls`` files with
xlrd.  Both are loaded from a temporary file that is removed when the
:func:`open_workbook` context exits, whether extraction succeeded or not.
"""

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

import xlrd  # type: ignore[import-untyped]
from openpyxl import load_workbook
from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger("vegprice.workbook")


class ConversionError(RuntimeError):
    """Raised when downloaded bytes cannot be read as a spreadsheet."""


class SheetGrid(Protocol):
    """Read-only view of one sheet's cells (1-indexed)."""

    name: str
    hidden: bool
    max_row: int

    def cell(self, row: int, col: int) -> Any:
        """Cell value, or ``None`` for a blank or out-of-range cell."""
        ...


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


class OpenpyxlSheet:
    """:class:`SheetGrid` over an openpyxl worksheet."""

    def __init__(self, worksheet: Worksheet) -> None:
        self._ws = worksheet
        self.name: str = worksheet.title
        self.hidden: bool = worksheet.sheet_state != "visible"
        self.max_row: int = worksheet.max_row

    def cell(self, row: int, col: int) -> Any:
        return _blank_to_none(
            self._ws.cell(row=row, column=col).value
        )


class XlrdSheet:
    """:class:`SheetGrid` over an xlrd sheet (``.xls``)."""

    def __init__(self, sheet: Any) -> None:
        self._sheet = sheet
        self.name: str = str(sheet.name)
        self.hidden: bool = int(sheet.visibility) != 0
        self.max_row: int = int(sheet.nrows)

    def cell(self, row: int, col: int) -> Any:
        r, c = row - 1, col - 1
        if r < 0 or c < 0 or r >= self._sheet.nrows:
            return None
        if c >= self._sheet.row_len(r):
            return None
        return _blank_to_none(self._sheet.cell_value(r, c))


def _load_sheets(path: str, suffix: str) -> tuple[list[SheetGrid], Any]:
    """Load every sheet; returns the grids and the handle to release."""
    if suffix == ".xls":
        book: Any = xlrd.open_workbook(path, on_demand=False)
        xls_sheets: list[SheetGrid] = [
            XlrdSheet(s) for s in book.sheets()
        ]
        return xls_sheets, book
    wb = load_workbook(filename=path, data_only=True)
    xlsx_sheets: list[SheetGrid] = [
        OpenpyxlSheet(ws) for ws in wb.worksheets
    ]
    return xlsx_sheets, wb


def _release(handle: Any) -> None:
    release = getattr(handle, "release_resources", None) or getattr(
        handle, "close", None
    )
    if release is not None:
        release()


@contextmanager
def open_workbook(
    content: bytes, suffix: str = ".xlsx",
) -> Iterator[list[SheetGrid]]:
    """Yield the sheets of a downloaded workbook, in workbook order.

    The bytes are written to a temporary file for the reader libraries;
    the file is deleted on exit even if loading or extraction raises.
    """
    suffix = suffix.lower()
    if suffix not in (".xls", ".xlsx"):
        raise ConversionError(f"Unsupported spreadsheet type: {suffix!r}")

    fd, path = tempfile.mkstemp(prefix="vegprice_", suffix=suffix)
    handle: Any = None
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        logger.debug("Wrote %d bytes to temp workbook %s", len(content), path)
        try:
            sheets, handle = _load_sheets(path, suffix)
        except Exception as exc:
            raise ConversionError(
                f"Could not read {suffix} workbook: {exc}"
            ) from exc
        logger.info(
            "Opened workbook with %d sheets: %s",
            len(sheets),
            ", ".join(s.name for s in sheets),
        )
        yield sheets
    finally:
        if handle is not None:
            _release(handle)
        os.remove(path)
        logger.debug("Removed temp workbook %s", path)
