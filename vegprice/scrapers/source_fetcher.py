# vegprice/scrapers/source_fetcher.py

"""HTTP client for the listing page and the published spreadsheet."""

import logging
import time
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from vegprice.config.settings import Settings


class FetchError(RuntimeError):
    """Raised when a resource cannot be downloaded after all retries."""


class SourceFetcher:
    """GET with retries and adaptive delay, falling back to cloudscraper.

    Government sites occasionally sit behind a WAF that rejects plain
    clients, so the primary session impersonates a browser TLS stack.
    """

    def __init__(self, referer: str | None = None) -> None:
        self.logger = logging.getLogger("vegprice.fetcher")
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self.referer = referer or self.settings.SITE_BASE_URL
        self._current_delay: float = self.settings.REQUEST_DELAY

    def _headers(self) -> dict[str, str]:
        return {
            **self.settings.DEFAULT_HEADERS,
            "Referer": self.referer,
        }

    def _escalate_delay(self) -> None:
        """Double the current delay up to the configured max."""
        max_delay = (
            self.settings.REQUEST_DELAY
            * self.settings.MAX_DELAY_MULTIPLIER
        )
        self._current_delay = min(
            self._current_delay * 2, max_delay
        )
        self.logger.warning(
            "Rate-limited, delay escalated to %.1fs",
            self._current_delay,
        )

    def _fetch_get(self, url: str) -> curl_requests.Response | None:
        """GET with retries; ``None`` once every attempt has failed."""
        headers = self._headers()
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    headers=headers,
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
                if resp.status_code == 200:
                    self._current_delay = self.settings.REQUEST_DELAY
                    return resp
                self.logger.warning(
                    "HTTP %d on attempt %d for %s",
                    resp.status_code,
                    attempt + 1,
                    url,
                )
                if resp.status_code in (429, 403):
                    self._escalate_delay()
                    time.sleep(self._current_delay)
            except Exception as exc:
                self.logger.warning(
                    "Request error on attempt %d for %s: %s",
                    attempt + 1,
                    url,
                    exc,
                    exc_info=True,
                )
                time.sleep(
                    self._current_delay * (attempt + 1)
                )
        return None

    def _fallback_get(self, url: str) -> Any:
        """Single cloudscraper attempt; ``None`` on failure."""
        self.logger.info(
            "curl_cffi exhausted, falling back to cloudscraper for %s",
            url,
        )
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            resp: Any = scraper.get(
                url,
                headers=self._headers(),
                timeout=self.settings.REQUEST_TIMEOUT,
            )
            if resp.status_code == 200:
                return resp
            self.logger.warning(
                "cloudscraper got HTTP %d for %s",
                resp.status_code,
                url,
            )
        except Exception as exc:
            self.logger.error(
                "cloudscraper fallback also failed for %s: %s",
                url,
                exc,
                exc_info=True,
            )
        return None

    def _get(self, url: str) -> Any:
        time.sleep(self._current_delay)
        resp = self._fetch_get(url)
        if resp is None:
            resp = self._fallback_get(url)
        if resp is None:
            raise FetchError(f"Failed to download {url}")
        return resp

    def get_text(self, url: str) -> str:
        """Download a page and return its decoded body."""
        resp = self._get(url)
        text = str(resp.text)
        self.logger.debug("Fetched %d chars from %s", len(text), url)
        return text

    def get_bytes(self, url: str) -> bytes:
        """Download a binary resource such as a spreadsheet."""
        resp = self._get(url)
        content = bytes(resp.content)
        self.logger.info("Downloaded %d bytes from %s", len(content), url)
        return content
