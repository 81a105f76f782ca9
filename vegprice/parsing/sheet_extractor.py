# vegprice/parsing/sheet_extractor.py

"""Extract ``(date, item, price)`` records from one weekday sheet."""

import logging
import math
from typing import Any

from vegprice.config.settings import Settings
from vegprice.models.price_record import PriceRecord
from vegprice.parsing.era_date import parse_era_date, to_iso
from vegprice.parsing.workbook import SheetGrid

logger = logging.getLogger("vegprice.extractor")


def is_eligible_sheet(sheet: SheetGrid) -> bool:
    """Visible sheets named after one of the weekday labels."""
    return (
        not sheet.hidden
        and sheet.name.strip() in Settings.WEEKDAY_SHEETS
    )


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_price(value: Any) -> float | None:
    """Coerce a price cell; ``None`` unless a finite positive number."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        price = float(value)
    else:
        try:
            price = float(str(value).replace(",", "").strip())
        except ValueError:
            return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def extract_sheet_records(sheet: SheetGrid) -> list[PriceRecord]:
    """Return the sheet's price rows in sheet order.

    Iteration stops at the first row whose sequence-number cell is blank.
    Rows with a sequence number but no item name or no price are dropped
    without stopping.
    """
    if not is_eligible_sheet(sheet):
        logger.debug(
            "Skipping sheet %r (hidden=%s)", sheet.name, sheet.hidden,
        )
        return []

    date_row, date_col = Settings.SHEET_DATE_CELL
    raw_date = sheet.cell(date_row, date_col)
    if _is_blank(raw_date):
        logger.info("Sheet %r has no publication date", sheet.name)
        return []
    date_str = to_iso(parse_era_date(str(raw_date)))

    records: list[PriceRecord] = []
    dropped = 0
    for row in range(Settings.SHEET_DATA_START_ROW, sheet.max_row + 1):
        if _is_blank(sheet.cell(row, Settings.SHEET_SEQ_COL)):
            break
        item = sheet.cell(row, Settings.SHEET_ITEM_COL)
        price = _to_price(sheet.cell(row, Settings.SHEET_PRICE_COL))
        if _is_blank(item) or price is None:
            dropped += 1
            continue
        records.append(
            PriceRecord(date=date_str, item=str(item).strip(), price=price)
        )

    logger.info(
        "Sheet %r (%s): %d records, %d rows dropped",
        sheet.name,
        date_str,
        len(records),
        dropped,
    )
    return records
