"""FastAPI application entrypoint."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sitereplica.api.routes import error_response, router
from sitereplica.config import ServiceConfig, load_config
from sitereplica.services.crawl_client import FirecrawlClient, PageFetcher
from sitereplica.services.crawler import PageCrawler
from sitereplica.services.generator import PageGenerator
from sitereplica.services.llm_client import ChatCompleter, OpenAIChatClient


def create_app(
    config: ServiceConfig | None = None,
    *,
    fetcher: PageFetcher | None = None,
    completer: ChatCompleter | None = None,
) -> FastAPI:
    config = config or load_config()

    app = FastAPI(title="Site Replica", description="Design-inspired page generation API")
    app.state.config = config
    app.state.crawler = PageCrawler(fetcher or FirecrawlClient(config))
    app.state.generator = PageGenerator(completer or OpenAIChatClient(config))
    app.include_router(router, prefix="/api")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return error_response("Invalid request", 400)

    return app


app = create_app()
