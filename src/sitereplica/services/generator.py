"""Generate an original page from a design fingerprint.

The model is asked once for a JSON object.  When its reply cannot be parsed
into the expected shape, the page is built by :mod:`sitereplica.services.fallback`
from the same validated inputs, so a successful model call always yields a
well-formed page.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import ValidationError

from sitereplica.errors import ReplicaError
from sitereplica.models import (
    GeneratedContent,
    GeneratedPage,
    GenerationInput,
    GenerationOptions,
    GenerationResult,
)
from sitereplica.services import input_validation
from sitereplica.services.fallback import generate_fallback
from sitereplica.services.llm_client import ChatCompleter

__all__ = [
    "PageOrigin",
    "GenerationOutcome",
    "PageGenerator",
    "SYSTEM_PROMPT",
    "build_user_prompt",
    "extract_json_object",
    "parse_model_output",
]

logger = logging.getLogger(__name__)

MARKDOWN_WINDOW_CHARS = 8000
MARKDOWN_EXCERPT_CHARS = 4000

SYSTEM_PROMPT = """You are an elite frontend architect who generates production-ready React code. \
You create beautiful, responsive websites inspired by analyzed designs but with ORIGINAL content.

CRITICAL RULES:
1. NEVER copy text verbatim - create semantically similar but original content
2. Use the provided color palette and typography
3. Generate clean, well-structured React/TypeScript code
4. Use Tailwind CSS for styling
5. Make it fully responsive
6. Include smooth animations and transitions
7. Follow accessibility best practices

OUTPUT FORMAT:
Return a valid JSON object with this exact structure:
{
  "sourceCode": "// Full React component code here",
  "designTokens": {
    "colors": { "primary": "#...", "secondary": "#...", ... },
    "fonts": { "heading": "...", "body": "..." }
  },
  "sections": ["Hero", "Features", ...]
}"""


class PageOrigin(str, Enum):
    MODEL = "model"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class GenerationOutcome:
    """Page content tagged with where it came from; both variants share one shape."""

    origin: PageOrigin
    content: GeneratedContent


def build_user_prompt(crawl_data: GenerationInput, options: GenerationOptions) -> str:
    fingerprint = crawl_data.fingerprint
    markdown = crawl_data.markdown[:MARKDOWN_WINDOW_CHARS]
    return f"""Analyze this website content and generate a SIMILAR but ORIGINAL website:

**Original Website Info:**
- Title: {crawl_data.title}
- Description: {crawl_data.description}
- Detected Sections: {", ".join(fingerprint.sections)}
- Color Palette: {", ".join(fingerprint.colors)}
- Typography: {", ".join(fingerprint.fonts)}

**Content Structure (for inspiration only - DO NOT COPY):**
{markdown[:MARKDOWN_EXCERPT_CHARS]}

**Generation Options:**
- Landing Page Only: {str(options.landing_page_only).lower()}
- Multi Page: {str(options.multi_page).lower()}
- Mobile First: {str(options.mobile_first).lower()}
- Dark Mode: {str(options.dark_mode).lower()}

Generate a complete, production-ready React component that is INSPIRED by this design but with:
1. Original headline and copy (similar tone but different words)
2. The same general layout structure
3. The detected color palette (or similar complementary colors)
4. Modern animations using CSS/Tailwind
5. Semantic HTML structure
6. Responsive design

Return ONLY valid JSON with the sourceCode, designTokens, and sections fields."""


def extract_json_object(text: str) -> Any | None:
    """Return the first balanced ``{...}`` substring of ``text`` decoded as JSON.

    Braces inside JSON strings are ignored while matching.  Returns ``None``
    when there is no balanced object or it does not decode.
    """

    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape = False
    for index in range(start, len(text)):
        char = text[index]
        if escape:
            escape = False
            continue
        if char == "\\":
            escape = in_string
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                try:
                    return json.loads(text[start : index + 1])
                except json.JSONDecodeError:
                    return None
    return None


def parse_model_output(text: str) -> GeneratedContent | None:
    """Parse the model's reply, or return ``None`` when it is unusable."""

    payload = extract_json_object(text or "")
    if not isinstance(payload, dict):
        return None
    try:
        content = GeneratedContent.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Model output did not match the expected structure: %s", exc.error_count())
        return None
    if not content.source_code.strip():
        return None
    if not content.design_tokens.colors:
        logger.warning("Model output carried no design colors")
        return None
    return content


class PageGenerator:
    """Generation orchestrator over a substitutable :class:`ChatCompleter`."""

    def __init__(self, completer: ChatCompleter) -> None:
        self._completer = completer

    def generate(self, crawl_data: GenerationInput, options: GenerationOptions) -> GenerationOutcome:
        """Call the model once; fall back to the template when its reply is unusable.

        Call, quota and rate-limit failures propagate as :class:`ReplicaError`.
        """

        logger.info("Generating website from validated crawl data for %s", crawl_data.url or "(no url)")
        logger.debug("Validated options: %s", options.to_wire())

        reply = self._completer.complete_chat(SYSTEM_PROMPT, build_user_prompt(crawl_data, options))
        logger.info("AI response received, parsing...")

        content = parse_model_output(reply)
        if content is None:
            logger.warning("Failed to parse AI response; using fallback page")
            return GenerationOutcome(PageOrigin.FALLBACK, generate_fallback(crawl_data.fingerprint, options))
        return GenerationOutcome(PageOrigin.MODEL, content)

    def generate_page(self, crawl_data: GenerationInput, options: GenerationOptions) -> GeneratedPage:
        outcome = self.generate(crawl_data, options)
        logger.info("Website generated successfully (origin=%s)", outcome.origin.value)
        return _attach_source(outcome.content, crawl_data)

    def run(self, raw_crawl_data: Any, raw_options: Any) -> GenerationResult:
        """Validate untrusted request data and generate; failures become result values."""

        try:
            crawl_data, options = input_validation.validate(raw_crawl_data, raw_options)
            page = self.generate_page(crawl_data, options)
        except ReplicaError as exc:
            logger.error("Generation failed: %s", exc.message)
            return GenerationResult.failure(exc.message, exc.status_code)
        return GenerationResult.ok(page)


def _attach_source(content: GeneratedContent, crawl_data: GenerationInput) -> GeneratedPage:
    return GeneratedPage(
        source_code=content.source_code,
        design_tokens=content.design_tokens,
        sections=list(content.sections),
        original_url=crawl_data.url,
        original_title=crawl_data.title,
        screenshot=crawl_data.screenshot,
    )
