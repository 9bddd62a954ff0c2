"""Error taxonomy shared by the crawl and generation pipelines."""

from __future__ import annotations

__all__ = [
    "ReplicaError",
    "InvalidInputError",
    "SecurityRejectionError",
    "UpstreamError",
    "RateLimitedError",
    "QuotaExceededError",
    "GenerationFailedError",
    "ConfigurationError",
]


class ReplicaError(Exception):
    """Base class for failures reported to callers as ``{success: false, error}``."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidInputError(ReplicaError):
    status_code = 400


class SecurityRejectionError(ReplicaError):
    """The target URL points at address space the service must not reach."""

    status_code = 400


class UpstreamError(ReplicaError):
    """The crawl or model service failed, timed out, or answered non-2xx."""

    status_code = 502


class RateLimitedError(ReplicaError):
    status_code = 429


class QuotaExceededError(ReplicaError):
    status_code = 402


class GenerationFailedError(ReplicaError):
    status_code = 500


class ConfigurationError(ReplicaError):
    status_code = 500
