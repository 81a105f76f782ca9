# vegprice/scrapers/link_resolver.py

"""Locate the current price spreadsheet link on the listing page."""

import logging
import re
from abc import ABC, abstractmethod

from bs4 import BeautifulSoup

from vegprice.config.settings import Settings

logger = logging.getLogger("vegprice.link_resolver")


class LinkNotFoundError(LookupError):
    """Raised when the listing page holds no matching download link."""


class LinkResolver(ABC):
    """Strategy for turning a listing page into a download URL."""

    @abstractmethod
    def resolve(self, html: str) -> str:
        """Return the absolute URL of the spreadsheet to download."""
        ...


class HrefPatternLinkResolver(LinkResolver):
    """Match anchor hrefs against a regex and prefix the site base URL.

    The listing page is markup-scraped, so any layout change upstream can
    break it; swap in another :class:`LinkResolver` rather than patching
    callers.
    """

    def __init__(
        self,
        base_url: str | None = None,
        pattern: str | None = None,
    ) -> None:
        self.base_url = base_url or Settings.SITE_BASE_URL
        self.pattern = re.compile(
            pattern or Settings.DOWNLOAD_HREF_PATTERN
        )

    def resolve(self, html: str) -> str:
        soup = BeautifulSoup(html, "lxml")
        for anchor in soup.find_all("a", href=True):
            href = str(anchor["href"]).strip()
            if self.pattern.match(href):
                url = f"{self.base_url}{href}"
                logger.info("Resolved download link: %s", url)
                return url
        raise LinkNotFoundError(
            "No spreadsheet link matching "
            f"{self.pattern.pattern!r} on the listing page"
        )


def resolve_download_link(
    html: str, base_url: str | None = None,
) -> str:
    """Resolve with the default href pattern."""
    return HrefPatternLinkResolver(base_url=base_url).resolve(html)
