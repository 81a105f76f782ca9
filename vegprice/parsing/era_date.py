# vegprice/parsing/era_date.py

"""Convert Japanese era dates (e.g. ``令和6年3月15日``) to calendar dates.

Only the era configured in ``Settings.ERA_NAME`` is recognised.  Any other
era, missing component, or surrounding text is rejected with
:class:`DateFormatError` so callers never store a guessed date.
"""

import re
import unicodedata
from datetime import date

from vegprice.config.settings import Settings


class DateFormatError(ValueError):
    """Raised when a string is not a supported era date."""


_ERA_DATE_RE = re.compile(
    rf"^{re.escape(Settings.ERA_NAME)}"
    r"(?P<year>元|\d{1,2})年"
    r"(?P<month>\d{1,2})月"
    r"(?P<day>\d{1,2})日$"
)


def parse_era_date(text: str) -> date:
    """Parse ``<era><N>年<M>月<D>日`` into a :class:`datetime.date`.

    Full-width digits are folded to ASCII first, and ``元`` stands for
    the first year of the era.
    """
    normalized = unicodedata.normalize("NFKC", str(text)).strip()
    match = _ERA_DATE_RE.match(normalized)
    if not match:
        raise DateFormatError(f"Unsupported era date: {text!r}")

    raw_year = match.group("year")
    era_year = 1 if raw_year == "元" else int(raw_year)
    if era_year < 1:
        raise DateFormatError(f"Era year must start at 1: {text!r}")

    try:
        return date(
            Settings.ERA_OFFSET_YEAR + era_year,
            int(match.group("month")),
            int(match.group("day")),
        )
    except ValueError as exc:
        raise DateFormatError(
            f"Impossible calendar date: {text!r}"
        ) from exc


def to_iso(value: date) -> str:
    """Render a date as the ``yyyy-mm-dd`` string stored in the database."""
    return value.strftime("%Y-%m-%d")
