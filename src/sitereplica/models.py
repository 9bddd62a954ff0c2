"""Domain models used across the application.

All wire models serialise with camelCase keys (``model_dump(by_alias=True)``)
and accept either camelCase or snake_case on input.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "DEFAULT_FONTS",
    "DEFAULT_SECTIONS",
    "DesignFingerprint",
    "CrawledPage",
    "CrawlResult",
    "GenerationOptions",
    "GenerationInput",
    "DesignTokens",
    "GeneratedContent",
    "GeneratedPage",
    "GenerationResult",
]

DEFAULT_FONTS = ("Inter", "System UI")
DEFAULT_SECTIONS = ("Hero", "Features", "CTA", "Footer")


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready payload with camelCase keys and unset optionals dropped."""

        return self.model_dump(by_alias=True, exclude_none=True)


class DesignFingerprint(_WireModel):
    """Compact summary of a page's colors, fonts and structural sections."""

    colors: List[str] = Field(default_factory=list)
    fonts: List[str] = Field(default_factory=lambda: list(DEFAULT_FONTS))
    sections: List[str] = Field(default_factory=lambda: list(DEFAULT_SECTIONS))


class CrawledPage(_WireModel):
    url: str
    title: str = "Untitled"
    description: str = ""
    markdown_body: str = ""
    raw_html: str = ""
    screenshot: Optional[str] = None
    links: List[str] = Field(default_factory=list)
    fingerprint: DesignFingerprint = Field(default_factory=DesignFingerprint)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class CrawlResult(_WireModel):
    """Outcome of one crawl request."""

    success: bool
    error: Optional[str] = None
    page: Optional[CrawledPage] = None
    status_code: int = Field(default=200, exclude=True)

    @classmethod
    def ok(cls, page: CrawledPage) -> "CrawlResult":
        return cls(success=True, page=page)

    @classmethod
    def failure(cls, error: str, status_code: int) -> "CrawlResult":
        return cls(success=False, error=error, status_code=status_code)


class GenerationOptions(_WireModel):
    landing_page_only: bool = True
    multi_page: bool = False
    mobile_first: bool = True
    dark_mode: bool = False


class GenerationInput(_WireModel):
    """Bounded, type-checked crawl record ready to be turned into a prompt."""

    url: str = ""
    title: str = "Untitled"
    description: str = ""
    markdown: str = ""
    screenshot: Optional[str] = None
    fingerprint: DesignFingerprint = Field(
        default_factory=lambda: DesignFingerprint(colors=[], fonts=[], sections=[])
    )


class DesignTokens(_WireModel):
    colors: Dict[str, str] = Field(...)
    fonts: Dict[str, str] = Field(...)


class GeneratedContent(_WireModel):
    """Core page content, produced either by the model or by the fallback generator."""

    source_code: str = Field(validation_alias=AliasChoices("sourceCode", "source_code", "pageCode"))
    design_tokens: DesignTokens
    sections: List[str]


class GeneratedPage(_WireModel):
    source_code: str
    design_tokens: DesignTokens
    sections: List[str]
    original_url: str = ""
    original_title: str = ""
    screenshot: Optional[str] = None


class GenerationResult(_WireModel):
    """Outcome of one generation request."""

    success: bool
    error: Optional[str] = None
    page: Optional[GeneratedPage] = None
    status_code: int = Field(default=200, exclude=True)

    @classmethod
    def ok(cls, page: GeneratedPage) -> "GenerationResult":
        return cls(success=True, page=page)

    @classmethod
    def failure(cls, error: str, status_code: int) -> "GenerationResult":
        return cls(success=False, error=error, status_code=status_code)
