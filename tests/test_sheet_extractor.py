# tests/test_sheet_extractor.py

"""Tests for per-sheet record extraction."""

import unittest

from fakes import FakeSheet

from vegprice.config.settings import Settings
from vegprice.models.price_record import PriceRecord
from vegprice.parsing.era_date import DateFormatError
from vegprice.parsing.sheet_extractor import (
    extract_sheet_records,
    is_eligible_sheet,
)


class TestEligibility(unittest.TestCase):
    """Which sheets are read at all."""

    def test_weekday_sheets_eligible(self) -> None:
        """All six weekday labels are accepted."""
        for name in Settings.WEEKDAY_SHEETS:
            with self.subTest(name=name):
                self.assertTrue(is_eligible_sheet(FakeSheet(name=name)))

    def test_other_names_ineligible(self) -> None:
        """Summary or Sunday sheets are ignored."""
        for name in ("日曜日", "集計", "Sheet1"):
            with self.subTest(name=name):
                self.assertFalse(is_eligible_sheet(FakeSheet(name=name)))

    def test_hidden_sheet_ineligible(self) -> None:
        """Hidden weekday sheets are skipped."""
        self.assertFalse(
            is_eligible_sheet(FakeSheet(name="火曜日", hidden=True)),
        )


class TestExtractSheetRecords(unittest.TestCase):
    """Termination and inclusion rules."""

    def test_termination_and_inclusion(self) -> None:
        """Only complete rows before the blank sequence cell are kept."""
        sheet = FakeSheet(rows=[
            [1, "Cabbage", 120],
            [2, "", 150],
            [3, "Onion", 0],
            ["", "Leek", 90],
        ])
        self.assertEqual(
            extract_sheet_records(sheet),
            [PriceRecord(date="2024-03-15", item="Cabbage", price=120.0)],
        )
        stop_row = Settings.SHEET_DATA_START_ROW + 3
        self.assertNotIn((stop_row, Settings.SHEET_ITEM_COL), sheet.reads)
        self.assertNotIn((stop_row, Settings.SHEET_PRICE_COL), sheet.reads)

    def test_rows_after_stop_not_read(self) -> None:
        """Populated rows after the stop row are never emitted."""
        sheet = FakeSheet(rows=[
            [1, "キャベツ", 120],
            [None, None, None],
            [3, "だいこん", 98],
        ])
        records = extract_sheet_records(sheet)
        self.assertEqual([r.item for r in records], ["キャベツ"])

    def test_dropped_rows_do_not_stop(self) -> None:
        """A missing price is skipped and iteration continues."""
        sheet = FakeSheet(rows=[
            [1, "はくさい", None],
            [2, "たまねぎ", 85],
        ])
        records = extract_sheet_records(sheet)
        self.assertEqual([r.item for r in records], ["たまねぎ"])

    def test_preserves_sheet_order(self) -> None:
        """Output order follows row order."""
        sheet = FakeSheet(rows=[
            [1, "にんじん", 60],
            [2, "きゅうり", 45],
            [3, "トマト", 210],
        ])
        self.assertEqual(
            [r.item for r in extract_sheet_records(sheet)],
            ["にんじん", "きゅうり", "トマト"],
        )

    def test_string_price_parsed(self) -> None:
        """Thousands separators in text prices are handled."""
        sheet = FakeSheet(rows=[[1, "まつたけ", "1,280"]])
        self.assertEqual(extract_sheet_records(sheet)[0].price, 1280.0)

    def test_unparseable_price_dropped(self) -> None:
        """Non-numeric price text drops the row."""
        sheet = FakeSheet(rows=[[1, "ねぎ", "－"], [2, "ごぼう", 150]])
        self.assertEqual(
            [r.item for r in extract_sheet_records(sheet)], ["ごぼう"],
        )

    def test_non_finite_price_dropped(self) -> None:
        """Infinity and NaN, as text or float, never become records."""
        sheet = FakeSheet(rows=[
            [1, "ねぎ", "inf"],
            [2, "しそ", "Infinity"],
            [3, "みょうが", "nan"],
            [4, "わさび", float("inf")],
            [5, "ごぼう", 150],
        ])
        self.assertEqual(
            [r.item for r in extract_sheet_records(sheet)], ["ごぼう"],
        )

    def test_negative_price_dropped(self) -> None:
        """Prices must be positive."""
        sheet = FakeSheet(rows=[[1, "ねぎ", -30], [2, "ごぼう", 150]])
        self.assertEqual(
            [r.item for r in extract_sheet_records(sheet)], ["ごぼう"],
        )

    def test_item_name_trimmed(self) -> None:
        """Whitespace around item names is stripped."""
        sheet = FakeSheet(rows=[[1, " レタス ", 130]])
        self.assertEqual(extract_sheet_records(sheet)[0].item, "レタス")

    def test_blank_date_yields_nothing(self) -> None:
        """A sheet without a publication date produces no records."""
        sheet = FakeSheet(date_text=None, rows=[[1, "なす", 70]])
        self.assertEqual(extract_sheet_records(sheet), [])

    def test_bad_date_propagates(self) -> None:
        """Malformed dates raise instead of being guessed."""
        sheet = FakeSheet(date_text="2024/03/15", rows=[[1, "なす", 70]])
        with self.assertRaises(DateFormatError):
            extract_sheet_records(sheet)

    def test_hidden_sheet_yields_nothing(self) -> None:
        """Hidden sheets are skipped without reading the date."""
        sheet = FakeSheet(hidden=True, rows=[[1, "なす", 70]])
        self.assertEqual(extract_sheet_records(sheet), [])
        self.assertEqual(sheet.reads, [])

    def test_empty_sheet(self) -> None:
        """A dated sheet without rows yields nothing."""
        self.assertEqual(extract_sheet_records(FakeSheet(rows=[])), [])


if __name__ == "__main__":
    unittest.main()
