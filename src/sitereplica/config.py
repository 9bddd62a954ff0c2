"""Configuration models and helpers for the crawl and model services."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Mapping

from pydantic import BaseModel, Field, ValidationError

__all__ = [
    "ServiceConfig",
    "load_config",
    "DEFAULT_CRAWL_API_URL",
    "DEFAULT_MODEL_NAME",
]

DEFAULT_CRAWL_API_URL = "https://api.firecrawl.dev/v1/scrape"
DEFAULT_MODEL_NAME = "gpt-4o-mini"

# Environment variable -> field name.  ``MODEL_API_KEY`` wins over ``OPENAI_API_KEY``.
_ENV_FIELDS = {
    "FIRECRAWL_API_URL": "crawl_api_url",
    "FIRECRAWL_API_KEY": "crawl_api_key",
    "CRAWL_WAIT_MS": "crawl_wait_ms",
    "CRAWL_CONNECT_TIMEOUT_SECONDS": "crawl_connect_timeout",
    "CRAWL_TIMEOUT_SECONDS": "crawl_read_timeout",
    "OPENAI_API_KEY": "model_api_key",
    "MODEL_API_KEY": "model_api_key",
    "MODEL_BASE_URL": "model_base_url",
    "MODEL_NAME": "model_name",
    "MODEL_MAX_TOKENS": "model_max_tokens",
    "MODEL_TIMEOUT_SECONDS": "model_timeout",
}


class ServiceConfig(BaseModel):
    """Settings for the external crawl and model services and the HTTP API."""

    crawl_api_url: str = Field(default=DEFAULT_CRAWL_API_URL, description="Scrape endpoint of the crawl service")
    crawl_api_key: str | None = Field(default=None, description="Bearer token for the crawl service")
    crawl_wait_ms: int = Field(
        default=3000,
        ge=0,
        description="How long the crawl service waits for dynamic rendering before capturing",
    )
    crawl_connect_timeout: float = Field(default=10, gt=0)
    crawl_read_timeout: float = Field(
        default=90,
        gt=0,
        description="Overall read timeout for one crawl request; expiry is a transport failure",
    )
    model_api_key: str | None = Field(default=None, description="API key for the chat-completion service")
    model_base_url: str | None = Field(
        default=None,
        description="Optional base URL of an OpenAI-compatible gateway. Vendor default when omitted.",
    )
    model_name: str = Field(default=DEFAULT_MODEL_NAME)
    model_max_tokens: int = Field(default=8000, gt=0)
    model_timeout: float = Field(default=120, gt=0)
    api_tokens: List[str] = Field(
        default_factory=list,
        description=(
            "Bearer tokens accepted by the HTTP API. When empty, any non-empty "
            "Authorization header is accepted and identity is delegated upstream."
        ),
    )

    @property
    def crawl_timeout(self) -> tuple[float, float]:
        """Return the ``(connect, read)`` timeout tuple used for crawl requests."""

        return (self.crawl_connect_timeout, self.crawl_read_timeout)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServiceConfig":
        """Build a configuration from environment variables."""

        env = os.environ if environ is None else environ
        data: dict[str, object] = {}
        for env_name, field_name in _ENV_FIELDS.items():
            value = env.get(env_name)
            if value is not None and value.strip():
                data[field_name] = value.strip()

        tokens = env.get("REPLICA_API_TOKENS", "")
        data["api_tokens"] = [token.strip() for token in tokens.split(",") if token.strip()]

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Environment configuration is invalid\n{exc}") from exc

    @classmethod
    def from_file(cls, path: Path | str) -> "ServiceConfig":
        """Load configuration data from a JSON file."""

        config_path = Path(path)
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file: {config_path}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Configuration file is invalid: {config_path}\n{exc}") from exc

    def dump(self, path: Path | str) -> None:
        """Persist the configuration to disk as JSON."""

        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(self.model_dump_json(indent=2), encoding="utf-8")


def load_config() -> ServiceConfig:
    """Return the active configuration.

    ``REPLICA_CONFIG`` may point at a JSON file; otherwise the environment is used.
    """

    config_path = os.environ.get("REPLICA_CONFIG")
    if config_path:
        return ServiceConfig.from_file(config_path)
    return ServiceConfig.from_env()
