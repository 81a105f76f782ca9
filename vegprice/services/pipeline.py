# vegprice/services/pipeline.py

"""Resolve, download, convert, and extract the current price workbook."""

import logging
from pathlib import PurePosixPath
from urllib.parse import urlparse

from vegprice.config.settings import Settings
from vegprice.models.price_record import PriceRecord
from vegprice.parsing.sheet_extractor import extract_sheet_records
from vegprice.parsing.workbook import open_workbook
from vegprice.scrapers.link_resolver import (
    HrefPatternLinkResolver,
    LinkResolver,
)
from vegprice.scrapers.source_fetcher import SourceFetcher

logger = logging.getLogger("vegprice.pipeline")


def _workbook_suffix(url: str) -> str:
    return PurePosixPath(urlparse(url).path).suffix.lower()


class ExtractionPipeline:
    """One pass from the listing page to a flat batch of records.

    Errors from any stage propagate unchanged; the caller decides how to
    log them.  Nothing here writes to the store.
    """

    def __init__(
        self,
        fetcher: SourceFetcher | None = None,
        resolver: LinkResolver | None = None,
        listing_url: str | None = None,
    ) -> None:
        self.fetcher = fetcher or SourceFetcher()
        self.resolver = resolver or HrefPatternLinkResolver()
        self.listing_url = listing_url or Settings.SOURCE_PAGE_URL

    def resolve_download_url(self) -> str:
        html = self.fetcher.get_text(self.listing_url)
        return self.resolver.resolve(html)

    def run(self) -> list[PriceRecord]:
        """Return every eligible sheet's records, in workbook order."""
        url = self.resolve_download_url()
        content = self.fetcher.get_bytes(url)

        batch: list[PriceRecord] = []
        with open_workbook(content, _workbook_suffix(url)) as sheets:
            for sheet in sheets:
                batch.extend(extract_sheet_records(sheet))

        logger.info(
            "Extracted %d records from %s", len(batch), url,
        )
        return batch
