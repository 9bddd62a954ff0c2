"""Service layer entry points for Site Replica."""

from __future__ import annotations

from .crawl_client import FirecrawlClient, PageFetcher, RawPage  # noqa: F401
from .crawler import PageCrawler  # noqa: F401
from .generator import GenerationOutcome, PageGenerator, PageOrigin  # noqa: F401
from .llm_client import ChatCompleter, OpenAIChatClient  # noqa: F401

__all__ = [
    "ChatCompleter",
    "FirecrawlClient",
    "GenerationOutcome",
    "OpenAIChatClient",
    "PageCrawler",
    "PageFetcher",
    "PageGenerator",
    "PageOrigin",
    "RawPage",
]
