# vegprice/storage/price_store.py

"""SQLite-backed append-only store of daily item prices."""

import csv
import logging
import sqlite3
from pathlib import Path

from vegprice.config.settings import Settings
from vegprice.models.price_record import PriceRecord

logger = logging.getLogger("vegprice.store")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS prices (
    id    INTEGER PRIMARY KEY AUTOINCREMENT,
    date  TEXT    NOT NULL,
    item  TEXT    NOT NULL,
    price REAL    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_prices_date ON prices(date);
"""


class MissingStoreError(FileNotFoundError):
    """Raised when reading a store that has never been written."""


class PriceStore:
    """Append-only price table, deduplicated by publication date.

    Rows keep their insertion order (``id``); the read projections rely on
    the last row belonging to the most recent batch.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.PRICE_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self.path = path
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("PriceStore opened at %s", path)

    @classmethod
    def open_existing(
        cls, db_path: Path | None = None,
    ) -> "PriceStore":
        """Open for reading without creating a new, empty database."""
        path = db_path or Settings.PRICE_DB_PATH
        if not path.exists():
            raise MissingStoreError(
                f"No price data has been collected yet ({path})"
            )
        return cls(path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Recording ────────────────────────────────────────

    def existing_dates(self) -> set[str]:
        """Distinct publication dates already stored."""
        rows = self._conn.execute(
            "SELECT DISTINCT date FROM prices",
        ).fetchall()
        return {r[0] for r in rows}

    def append_batch(self, records: list[PriceRecord]) -> int:
        """Append records whose date is not stored yet.

        Deduplication is by date only: a date already present blocks every
        candidate row for that date, while repeated items within a new date
        are all kept.  Returns the number of rows appended.
        """
        known = self.existing_dates()
        fresh = [r for r in records if r.date not in known]
        skipped = len(records) - len(fresh)
        if skipped:
            logger.info(
                "Skipping %d records for already stored dates", skipped,
            )
        if not fresh:
            return 0

        with self._conn:
            self._conn.executemany(
                "INSERT INTO prices (date, item, price) "
                "VALUES (?, ?, ?)",
                [(r.date, r.item, r.price) for r in fresh],
            )
        logger.info(
            "Appended %d records for dates %s",
            len(fresh),
            ", ".join(sorted({r.date for r in fresh})),
        )
        return len(fresh)

    # ── Querying ─────────────────────────────────────────

    def records(self) -> list[PriceRecord]:
        """All stored rows in insertion order."""
        rows = self._conn.execute(
            "SELECT date, item, price FROM prices ORDER BY id ASC",
        ).fetchall()
        return [
            PriceRecord(date=str(r[0]), item=r[1], price=r[2])
            for r in rows
        ]

    # ── Export ───────────────────────────────────────────

    def export_csv(self, filepath: Path) -> int:
        """Write the header row and every stored row to a CSV file.

        Encoded as UTF-8 with BOM so spreadsheet tools show the Japanese
        header correctly.  Returns the number of data rows written.
        """
        rows = self.records()
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding="utf-8-sig", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(Settings.STORE_HEADER)
            for r in rows:
                writer.writerow([r.date, r.item, r.price])
        logger.info("Exported %d rows to %s", len(rows), filepath)
        return len(rows)
