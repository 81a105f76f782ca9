# tests/test_link_resolver.py

"""Tests for download link resolution from listing HTML."""

import unittest

from fakes import LISTING_HTML

from vegprice.scrapers.link_resolver import (
    HrefPatternLinkResolver,
    LinkNotFoundError,
    LinkResolver,
    resolve_download_link,
)

_BASE = "https://www.city.example.lg.jp"


class TestHrefPatternLinkResolver(unittest.TestCase):
    """Href matching and URL assembly."""

    def setUp(self) -> None:
        """Resolver with a fixed base URL."""
        self.resolver = HrefPatternLinkResolver(base_url=_BASE)

    def test_simple_xlsx_link(self) -> None:
        """A matching href is appended to the base URL."""
        html = '<a href="/foo/_res/bar_yasai_2024.xlsx">dl</a>'
        self.assertEqual(
            self.resolver.resolve(html),
            f"{_BASE}/foo/_res/bar_yasai_2024.xlsx",
        )

    def test_xls_extension(self) -> None:
        """Legacy .xls files also match."""
        html = '<a href="/_res/p/yasai.xls">dl</a>'
        self.assertEqual(
            self.resolver.resolve(html), f"{_BASE}/_res/p/yasai.xls",
        )

    def test_first_match_wins(self) -> None:
        """The first matching anchor in document order is used."""
        html = (
            '<a href="/_res/a/yasai_new.xlsx">1</a>'
            '<a href="/_res/b/yasai_old.xlsx">2</a>'
        )
        self.assertTrue(
            self.resolver.resolve(html).endswith("/_res/a/yasai_new.xlsx"),
        )

    def test_skips_non_matching_links(self) -> None:
        """Fruit sheets and pages in the listing are ignored."""
        self.assertEqual(
            self.resolver.resolve(LISTING_HTML),
            f"{_BASE}/_res/projects/default/_page_/001/yasai_20240315.xlsx",
        )

    def test_order_of_segments_matters(self) -> None:
        """'yasai' before '_res' does not match."""
        html = '<a href="/yasai/_res/file.xlsx">dl</a>'
        with self.assertRaises(LinkNotFoundError):
            self.resolver.resolve(html)

    def test_pdf_not_matched(self) -> None:
        """Non-spreadsheet files are ignored."""
        html = '<a href="/_res/yasai_2024.pdf">dl</a>'
        with self.assertRaises(LinkNotFoundError):
            self.resolver.resolve(html)

    def test_no_links_raises(self) -> None:
        """A page without anchors raises LinkNotFoundError."""
        with self.assertRaises(LinkNotFoundError):
            self.resolver.resolve("<html><body>準備中</body></html>")

    def test_text_outside_href_ignored(self) -> None:
        """Only href attribute values are matched."""
        html = "<p>/_res/yasai.xlsx</p><a href='/other.html'>x</a>"
        with self.assertRaises(LinkNotFoundError):
            self.resolver.resolve(html)

    def test_is_link_resolver(self) -> None:
        """The default strategy implements the LinkResolver interface."""
        self.assertIsInstance(self.resolver, LinkResolver)


class TestResolveDownloadLink(unittest.TestCase):
    """Module-level convenience wrapper."""

    def test_uses_given_base(self) -> None:
        """The base URL argument is honoured."""
        html = '<a href="/_res/yasai.xlsx">dl</a>'
        self.assertEqual(
            resolve_download_link(html, base_url="https://x.jp"),
            "https://x.jp/_res/yasai.xlsx",
        )


if __name__ == "__main__":
    unittest.main()
