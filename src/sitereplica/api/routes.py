"""API routes exposing the crawl and generation pipelines."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from sitereplica.api.auth import require_caller
from sitereplica.errors import InvalidInputError, ReplicaError
from sitereplica.models import CrawlResult, GenerationResult
from sitereplica.services.crawler import PageCrawler
from sitereplica.services.generator import PageGenerator

logger = logging.getLogger(__name__)

router = APIRouter()


def get_crawler(request: Request) -> PageCrawler:
    return request.app.state.crawler


def get_generator(request: Request) -> PageGenerator:
    return request.app.state.generator


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


def _respond(result: CrawlResult | GenerationResult) -> JSONResponse:
    return JSONResponse(result.to_wire(), status_code=result.status_code)


async def _read_json_object(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidInputError("Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return body


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/crawl")
async def crawl_website(
    request: Request,
    crawler: PageCrawler = Depends(get_crawler),
    _caller: str = Depends(require_caller),
) -> JSONResponse:
    """Crawl a URL and return its content and design fingerprint."""

    try:
        body = await _read_json_object(request)
        url = body.get("url")
        if not isinstance(url, str) or not url.strip():
            raise InvalidInputError("URL is required")
        result = await run_in_threadpool(crawler.crawl, url)
    except ReplicaError as exc:
        return error_response(exc.message, exc.status_code)
    except Exception as exc:  # noqa: BLE001 - boundary normalises every failure
        logger.exception("Error crawling website")
        return error_response(str(exc) or "Failed to crawl website", 500)

    return _respond(result)


@router.post("/generate")
async def generate_website(
    request: Request,
    generator: PageGenerator = Depends(get_generator),
    _caller: str = Depends(require_caller),
) -> JSONResponse:
    """Generate an original page from a crawl record and options."""

    try:
        body = await _read_json_object(request)
        result = await run_in_threadpool(generator.run, body.get("crawlData"), body.get("options"))
    except ReplicaError as exc:
        return error_response(exc.message, exc.status_code)
    except Exception as exc:  # noqa: BLE001 - boundary normalises every failure
        logger.exception("Error generating website")
        return error_response(str(exc) or "Failed to generate website", 500)

    return _respond(result)
