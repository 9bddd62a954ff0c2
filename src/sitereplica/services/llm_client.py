"""Chat-completion client used for page generation."""

from __future__ import annotations

import logging
from typing import Protocol

import openai
from openai import OpenAI

from sitereplica.config import ServiceConfig
from sitereplica.errors import (
    ConfigurationError,
    GenerationFailedError,
    QuotaExceededError,
    RateLimitedError,
)

__all__ = [
    "ChatCompleter",
    "OpenAIChatClient",
    "RATE_LIMIT_MESSAGE",
    "QUOTA_MESSAGE",
    "GENERATION_FAILED_MESSAGE",
]

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
QUOTA_MESSAGE = "AI credits exhausted. Please add credits to continue."
GENERATION_FAILED_MESSAGE = "AI generation failed"


class ChatCompleter(Protocol):
    def complete_chat(self, system_prompt: str, user_prompt: str) -> str:
        """Return the raw text of the model's reply.

        Raises :class:`RateLimitedError`, :class:`QuotaExceededError` or
        :class:`GenerationFailedError` when the call itself fails.
        """


class OpenAIChatClient:
    """:class:`ChatCompleter` for OpenAI or any OpenAI-compatible gateway.

    The call is made exactly once; client-side retries are disabled so quota
    signals reach the caller unchanged.
    """

    def __init__(self, config: ServiceConfig, client: OpenAI | None = None) -> None:
        self._config = config
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self._config.model_api_key:
                raise ConfigurationError("AI API key not configured")
            self._client = OpenAI(
                api_key=self._config.model_api_key,
                base_url=self._config.model_base_url,
                timeout=self._config.model_timeout,
                max_retries=0,
            )
        return self._client

    def complete_chat(self, system_prompt: str, user_prompt: str) -> str:
        client = self._get_client()
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        try:
            response = client.chat.completions.create(
                model=self._config.model_name,
                messages=messages,
                max_tokens=self._config.model_max_tokens,
            )
        except openai.RateLimitError as exc:
            if exc.code == "insufficient_quota":
                logger.error("Model quota exhausted")
                raise QuotaExceededError(QUOTA_MESSAGE) from exc
            logger.error("Rate limit exceeded")
            raise RateLimitedError(RATE_LIMIT_MESSAGE) from exc
        except openai.APIStatusError as exc:
            if exc.status_code == 402:
                logger.error("Payment required")
                raise QuotaExceededError(QUOTA_MESSAGE) from exc
            logger.error("AI gateway error: %s %s", exc.status_code, exc.message)
            raise GenerationFailedError(GENERATION_FAILED_MESSAGE) from exc
        except openai.APIError as exc:
            # Connection failures and timeouts.
            logger.error("AI gateway request failed: %s", exc)
            raise GenerationFailedError(GENERATION_FAILED_MESSAGE) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
