# vegprice/services/projections.py

"""Read views over the stored price history.

Each function takes the full row list (insertion order) and recomputes its
view from scratch; nothing is cached between queries.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from vegprice.config.settings import Settings
from vegprice.models.price_record import PricePoint, PriceRecord


@dataclass
class LatestPriceView:
    """Item names (sorted) and each item's most recent price."""

    items: list[str] = field(default_factory=list)
    latest: dict[str, PricePoint] = field(default_factory=dict)


@dataclass
class HistoryView:
    """Per-item price series within the window, plus the dates seen."""

    history: dict[str, list[PricePoint]] = field(default_factory=dict)
    dates: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SnapshotEntry:
    name: str
    price: float


def latest_prices(records: list[PriceRecord]) -> LatestPriceView:
    """Most recent price per item, scanning newest rows first."""
    latest: dict[str, PricePoint] = {}
    for r in reversed(records):
        if r.item not in latest:
            latest[r.item] = PricePoint(price=r.price, date=r.date)
    return LatestPriceView(items=sorted(latest), latest=latest)


def recent_history(
    records: list[PriceRecord],
    now: datetime | None = None,
    days: int | None = None,
) -> HistoryView:
    """Rows dated on or after ``now - days``, grouped by item.

    The cutoff is compared at date granularity so a row dated exactly on
    the cutoff day is included.
    """
    window = Settings.HISTORY_WINDOW_DAYS if days is None else days
    cutoff = ((now or datetime.now()) - timedelta(days=window)).date()

    history: dict[str, list[PricePoint]] = {}
    dates: set[str] = set()
    for r in records:
        if date.fromisoformat(r.date) < cutoff:
            continue
        history.setdefault(r.item, []).append(
            PricePoint(price=r.price, date=r.date)
        )
        dates.add(r.date)
    return HistoryView(history=history, dates=sorted(dates))


def latest_snapshot(records: list[PriceRecord]) -> list[SnapshotEntry]:
    """Every row sharing the last row's date; empty for an empty store."""
    if not records:
        return []
    last_date = records[-1].date
    return [
        SnapshotEntry(name=r.item, price=r.price)
        for r in records
        if r.date == last_date
    ]
