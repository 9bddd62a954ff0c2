"""Convenience script for crawling a URL and generating a page locally."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure the src directory is on the Python path so the sitereplica package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from sitereplica.config import load_config  # noqa: E402  (import after path setup)
from sitereplica.errors import ReplicaError  # noqa: E402
from sitereplica.services import (  # noqa: E402
    FirecrawlClient,
    OpenAIChatClient,
    PageCrawler,
    PageGenerator,
)
from sitereplica.services.input_validation import validate  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    """Crawl the given URL, then generate and print the resulting page as JSON."""

    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("url", help="Page to use as design inspiration")
    parser.add_argument("--dark-mode", action="store_true")
    parser.add_argument("--multi-page", action="store_true")
    parser.add_argument("--crawl-only", action="store_true", help="Print the crawl result and stop")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        config = load_config()
    except (FileNotFoundError, ValueError) as exc:
        logging.error("Could not load configuration: %s", exc)
        return 1

    crawl_result = PageCrawler(FirecrawlClient(config)).crawl(args.url)
    if not crawl_result.success or crawl_result.page is None:
        logging.error("Failed to crawl %s: %s", args.url, crawl_result.error)
        return 1

    if args.crawl_only:
        print(json.dumps(crawl_result.to_wire(), indent=2))
        return 0

    generator = PageGenerator(OpenAIChatClient(config))
    options = {"darkMode": args.dark_mode, "multiPage": args.multi_page}
    try:
        crawl_data, resolved = validate(crawl_result.page.to_wire(), options)
        outcome = generator.generate(crawl_data, resolved)
    except ReplicaError as exc:
        logging.error("Generation failed: %s", exc.message)
        return 1

    logging.info("Page generated (origin=%s)", outcome.origin.value)
    print(json.dumps(outcome.content.to_wire(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
