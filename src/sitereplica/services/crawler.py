"""Crawl orchestration: normalise, vet, fetch and fingerprint a user-supplied URL."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from bs4 import BeautifulSoup

from sitereplica.errors import InvalidInputError, ReplicaError, SecurityRejectionError
from sitereplica.models import CrawledPage, CrawlResult
from sitereplica.services import design_extractor, url_safety
from sitereplica.services.crawl_client import PageFetcher, RawPage

__all__ = ["PageCrawler", "extract_page_metadata", "MAX_HTML_CHARS", "MAX_MARKDOWN_CHARS", "MAX_LINKS"]

logger = logging.getLogger(__name__)

MAX_HTML_CHARS = 50_000
MAX_MARKDOWN_CHARS = 50_000
MAX_LINKS = 20


def extract_page_metadata(html: str) -> tuple[str, str]:
    """Return the ``<title>`` text and meta description found in ``html``."""

    if not html:
        return "", ""

    soup = BeautifulSoup(html, "lxml")
    title = soup.title.get_text(strip=True) if soup.title else ""
    description = ""
    meta = soup.find("meta", attrs={"name": "description"})
    if meta is not None:
        content = meta.get("content")
        if isinstance(content, str):
            description = content.strip()
    return title, description


def _metadata_text(metadata: Mapping[str, Any], key: str) -> str:
    value = metadata.get(key)
    return value.strip() if isinstance(value, str) else ""


class PageCrawler:
    """Turn free-form user input into a :class:`CrawlResult`."""

    def __init__(self, fetcher: PageFetcher) -> None:
        self._fetcher = fetcher

    def crawl(self, raw_url: str) -> CrawlResult:
        """Crawl ``raw_url``; failures are returned as ``success=False`` results."""

        try:
            page = self.crawl_page(raw_url)
        except ReplicaError as exc:
            return CrawlResult.failure(exc.message, exc.status_code)
        return CrawlResult.ok(page)

    def crawl_page(self, raw_url: str) -> CrawledPage:
        """Crawl ``raw_url`` and raise a :class:`ReplicaError` subclass on failure."""

        url = url_safety.normalize_url(raw_url or "")
        if not url:
            raise InvalidInputError("URL is required")

        verdict = url_safety.classify(url)
        if not verdict.allowed:
            logger.warning("Rejected crawl target %s: %s", url, verdict.reason)
            raise SecurityRejectionError(verdict.reason or "URL is not allowed")

        logger.info("Crawling URL: %s", url)
        raw = self._fetcher.fetch_page(url)
        logger.info("Crawl successful, extracting design data for %s", url)
        return self._build_page(url, raw)

    def _build_page(self, url: str, raw: RawPage) -> CrawledPage:
        fingerprint = design_extractor.extract(raw.html)
        logger.info("Extracted design: %s", fingerprint.to_wire())

        title = _metadata_text(raw.metadata, "title")
        description = _metadata_text(raw.metadata, "description")
        if not title or not description:
            html_title, html_description = extract_page_metadata(raw.html[:MAX_HTML_CHARS])
            title = title or html_title
            description = description or html_description

        return CrawledPage(
            url=url,
            title=title or "Untitled",
            description=description,
            markdown_body=raw.markdown[:MAX_MARKDOWN_CHARS],
            raw_html=raw.html[:MAX_HTML_CHARS],
            screenshot=raw.screenshot,
            links=raw.links[:MAX_LINKS],
            fingerprint=fingerprint,
            metadata=dict(raw.metadata),
        )
