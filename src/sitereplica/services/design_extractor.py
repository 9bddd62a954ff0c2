"""Heuristic extraction of design signals from raw page markup.

This is pattern matching over text, not an HTML or CSS parser: it accepts any
string and runs in time linear in its length.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

from sitereplica.models import DEFAULT_FONTS, DEFAULT_SECTIONS, DesignFingerprint

__all__ = [
    "extract",
    "extract_colors",
    "extract_fonts",
    "detect_sections",
    "COLOR_PATTERNS",
    "SECTION_PATTERNS",
    "MAX_COLORS",
    "MAX_FONTS",
    "MAX_FONT_NAME_LENGTH",
]

logger = logging.getLogger(__name__)

MAX_COLORS = 8
MAX_FONTS = 4
MAX_FONT_NAME_LENGTH = 50

# Scanned one pattern at a time, so all sextuplets are seen before triplets.
COLOR_PATTERNS = (
    re.compile(r"#[0-9a-f]{6}\b", re.IGNORECASE),
    re.compile(r"#[0-9a-f]{3}\b", re.IGNORECASE),
    re.compile(r"rgb\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*\)", re.IGNORECASE),
    re.compile(r"rgba\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*,\s*[\d.]+\s*\)", re.IGNORECASE),
)

FONT_FAMILY_PATTERN = re.compile(r"font-family\s*:\s*[\"']?([^;\"'}<>]+)", re.IGNORECASE)

# Table order decides output order; each label appears at most once.
SECTION_PATTERNS = (
    (re.compile(r"<nav|<header", re.IGNORECASE), "Navigation"),
    (re.compile(r"hero|banner|jumbotron", re.IGNORECASE), "Hero"),
    (re.compile(r"feature|benefit", re.IGNORECASE), "Features"),
    (re.compile(r"testimonial|review|quote", re.IGNORECASE), "Testimonials"),
    (re.compile(r"pricing|plan", re.IGNORECASE), "Pricing"),
    (re.compile(r"faq|question", re.IGNORECASE), "FAQ"),
    (re.compile(r"cta|call-to-action|signup", re.IGNORECASE), "CTA"),
    (re.compile(r"<footer", re.IGNORECASE), "Footer"),
    (re.compile(r"about|team", re.IGNORECASE), "About"),
    (re.compile(r"contact", re.IGNORECASE), "Contact"),
    (re.compile(r"gallery|portfolio", re.IGNORECASE), "Gallery"),
)


def _unique(values: Iterable[str], limit: int) -> List[str]:
    return list(dict.fromkeys(values))[:limit]


def extract_colors(html: str) -> List[str]:
    """Return up to :data:`MAX_COLORS` lower-cased color literals."""

    found = (
        match.group(0).lower()
        for pattern in COLOR_PATTERNS
        for match in pattern.finditer(html)
    )
    return _unique(found, MAX_COLORS)


def extract_fonts(html: str) -> List[str]:
    """Return the primary family of each ``font-family`` declaration."""

    fonts: List[str] = []
    for match in FONT_FAMILY_PATTERN.finditer(html):
        family = match.group(1).split(",", 1)[0].strip().replace('"', "").replace("'", "")
        if family and len(family) < MAX_FONT_NAME_LENGTH:
            fonts.append(family)
    return _unique(fonts, MAX_FONTS)


def detect_sections(html: str) -> List[str]:
    return [label for pattern, label in SECTION_PATTERNS if pattern.search(html)]


def extract(html: str) -> DesignFingerprint:
    """Build a :class:`DesignFingerprint` from ``html``, substituting defaults when empty."""

    html = html or ""
    fingerprint = DesignFingerprint(
        colors=extract_colors(html),
        fonts=extract_fonts(html) or list(DEFAULT_FONTS),
        sections=detect_sections(html) or list(DEFAULT_SECTIONS),
    )
    logger.debug("Extracted design fingerprint: %s", fingerprint.to_wire())
    return fingerprint
