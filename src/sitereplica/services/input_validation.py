"""Validate and bound crawl records and options arriving from an untrusted caller.

A generate request may come straight from the network, so nothing produced by
the crawl step is trusted here: shapes are re-checked, arrays filtered to
strings and capped, and text fields clamped before any prompt is built.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping

from sitereplica.errors import InvalidInputError
from sitereplica.models import DesignFingerprint, GenerationInput, GenerationOptions

__all__ = ["validate", "validate_crawl_data", "validate_options", "LIMITS"]

logger = logging.getLogger(__name__)

LIMITS = {
    "colors": 20,
    "fonts": 10,
    "sections": 20,
    "title": 200,
    "description": 1000,
    "url": 2048,
    "markdown": 50_000,
    "screenshot": 500_000,
}

# Wire key -> GenerationOptions field.
_OPTION_KEYS = {
    "landingPageOnly": "landing_page_only",
    "multiPage": "multi_page",
    "mobileFirst": "mobile_first",
    "darkMode": "dark_mode",
}


def _string_items(value: Any, limit: int) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)][:limit]


def _clamp(value: Any, limit: int, default: str | None = "") -> str | None:
    if not isinstance(value, str):
        return default
    return value[:limit]


def _first_present(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def validate_crawl_data(raw: Any) -> GenerationInput:
    """Return a bounded :class:`GenerationInput` or raise :class:`InvalidInputError`."""

    if not isinstance(raw, Mapping):
        raise InvalidInputError("Crawl data must be an object")

    design = _first_present(raw, "fingerprint", "extractedDesign")
    if not isinstance(design, Mapping):
        raise InvalidInputError("Missing or invalid design fingerprint")

    fingerprint = DesignFingerprint(
        colors=_string_items(design.get("colors"), LIMITS["colors"]),
        fonts=_string_items(design.get("fonts"), LIMITS["fonts"]),
        sections=_string_items(design.get("sections"), LIMITS["sections"]),
    )

    return GenerationInput(
        url=_clamp(raw.get("url"), LIMITS["url"]),
        title=_clamp(raw.get("title"), LIMITS["title"], default="Untitled"),
        description=_clamp(raw.get("description"), LIMITS["description"]),
        markdown=_clamp(_first_present(raw, "markdownBody", "markdown"), LIMITS["markdown"]),
        screenshot=_clamp(raw.get("screenshot"), LIMITS["screenshot"], default=None),
        fingerprint=fingerprint,
    )


def validate_options(raw: Any) -> GenerationOptions:
    """Resolve options, replacing absent or non-boolean fields with their defaults."""

    if not isinstance(raw, Mapping):
        return GenerationOptions()

    resolved = {}
    for wire_key, field_name in _OPTION_KEYS.items():
        value = raw.get(wire_key)
        if isinstance(value, bool):
            resolved[field_name] = value
        elif wire_key in raw:
            logger.debug("Ignoring non-boolean option %s=%r", wire_key, value)
    return GenerationOptions(**resolved)


def validate(raw_crawl_data: Any, raw_options: Any) -> tuple[GenerationInput, GenerationOptions]:
    return validate_crawl_data(raw_crawl_data), validate_options(raw_options)
