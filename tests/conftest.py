from __future__ import annotations

from typing import Callable, List

import pytest

from sitereplica.config import ServiceConfig
from sitereplica.services.crawl_client import RawPage


class CountingFetcher:
    """PageFetcher fake that records every URL it is asked to fetch."""

    def __init__(self, page: RawPage | None = None, error: Exception | None = None) -> None:
        self.page = page or RawPage()
        self.error = error
        self.calls: List[str] = []

    def fetch_page(self, url: str) -> RawPage:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.page


class FakeCompleter:
    """ChatCompleter fake returning a canned reply or raising a canned error."""

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[tuple[str, str]] = []

    def complete_chat(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def config() -> ServiceConfig:
    return ServiceConfig(crawl_api_key="crawl-key", model_api_key="model-key")


@pytest.fixture
def make_fetcher() -> Callable[..., CountingFetcher]:
    return CountingFetcher


@pytest.fixture
def make_completer() -> Callable[..., FakeCompleter]:
    return FakeCompleter
