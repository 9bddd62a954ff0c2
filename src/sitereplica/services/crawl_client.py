"""Client for the external crawl service that renders and scrapes a page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

import requests

from sitereplica.config import ServiceConfig
from sitereplica.errors import ConfigurationError, UpstreamError

__all__ = ["RawPage", "PageFetcher", "FirecrawlClient", "SCRAPE_FORMATS"]

logger = logging.getLogger(__name__)

SCRAPE_FORMATS = ("markdown", "html", "links", "screenshot")


@dataclass(slots=True)
class RawPage:
    """Untrimmed page capture as returned by the crawl service."""

    html: str = ""
    markdown: str = ""
    links: List[str] = field(default_factory=list)
    screenshot: str | None = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class PageFetcher(Protocol):
    def fetch_page(self, url: str) -> RawPage:
        """Render ``url`` and return its capture, raising :class:`UpstreamError` on failure."""


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


class FirecrawlClient:
    """:class:`PageFetcher` backed by a Firecrawl-compatible ``/scrape`` endpoint."""

    def __init__(self, config: ServiceConfig, session: requests.Session | None = None) -> None:
        self._config = config
        self._session = session or requests.Session()

    def fetch_page(self, url: str) -> RawPage:
        if not self._config.crawl_api_key:
            raise ConfigurationError("Crawl service API key not configured")

        payload = {
            "url": url,
            "formats": list(SCRAPE_FORMATS),
            "onlyMainContent": False,
            "waitFor": self._config.crawl_wait_ms,
        }
        headers = {
            "Authorization": f"Bearer {self._config.crawl_api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self._session.post(
                self._config.crawl_api_url,
                json=payload,
                headers=headers,
                timeout=self._config.crawl_timeout,
            )
        except requests.Timeout as exc:
            logger.warning("Crawl service timed out for %s", url)
            raise UpstreamError("Crawl service timed out", status_code=504) from exc
        except requests.RequestException as exc:
            logger.warning("Crawl service request failed for %s: %s", url, exc)
            raise UpstreamError(f"Crawl service request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = None
            if isinstance(body, dict) and isinstance(body.get("error"), str):
                message = body["error"]
            logger.error("Crawl service error %s for %s: %s", response.status_code, url, body)
            raise UpstreamError(
                message or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        if not isinstance(body, dict) or body.get("success") is False:
            error = body.get("error") if isinstance(body, dict) else None
            raise UpstreamError(error if isinstance(error, str) else "Crawl service returned an invalid response")

        data = body.get("data")
        if not isinstance(data, dict):
            data = {}

        links = data.get("links")
        metadata = data.get("metadata")
        screenshot = data.get("screenshot")
        return RawPage(
            html=_as_str(data.get("html")),
            markdown=_as_str(data.get("markdown")),
            links=[link for link in links if isinstance(link, str)] if isinstance(links, list) else [],
            screenshot=screenshot if isinstance(screenshot, str) and screenshot else None,
            metadata=metadata if isinstance(metadata, dict) else {},
        )
