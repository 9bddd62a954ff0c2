"""Deterministic page synthesis used when model output cannot be used.

Output depends only on the fingerprint tokens, ``dark_mode`` and the section
list; identical inputs give byte-identical results.
"""

from __future__ import annotations

from string import Template
from typing import Sequence

from sitereplica.models import DesignFingerprint, DesignTokens, GeneratedContent, GenerationOptions

__all__ = ["build_design_tokens", "render_source", "generate_fallback"]

DEFAULT_PRIMARY = "#06B6D4"
DEFAULT_SECONDARY = "#8B5CF6"
DEFAULT_BACKGROUND = "#0F172A"
DEFAULT_FOREGROUND = "#F8FAFC"
DEFAULT_FONT = "Inter"

DEFAULT_NAV_LINKS = ("Features", "Pricing", "About")
# Rendered as their own blocks rather than as navigation links.
_STRUCTURAL_SECTIONS = frozenset({"Navigation", "Hero", "CTA", "Footer"})

_PAGE_TEMPLATE = Template(
    """import React from 'react';

const GeneratedPage = () => {
  return (
    <div style={{
      minHeight: '100vh',
      backgroundColor: '$background',
      color: '$text',
      fontFamily: '$heading_font, sans-serif'
    }}>
      {/* Navigation */}
      <nav className="flex items-center justify-between px-6 py-4 border-b border-opacity-10">
        <div className="text-2xl font-bold" style={{ color: '$primary' }}>Brand</div>
        <div className="flex gap-6">
$nav_links
          <button
            className="px-4 py-2 rounded-lg font-medium"
            style={{ backgroundColor: '$primary', color: '$on_primary' }}
          >
            Get Started
          </button>
        </div>
      </nav>

      {/* Hero Section */}
      <section className="py-20 px-6 text-center">
        <h1 className="text-5xl md:text-7xl font-bold mb-6">
          Build Something
          <span style={{
            background: 'linear-gradient(135deg, $primary, $secondary)',
            WebkitBackgroundClip: 'text',
            WebkitTextFillColor: 'transparent'
          }}> Amazing</span>
        </h1>
        <p className="text-xl opacity-70 max-w-2xl mx-auto mb-8">
          Create beautiful, modern websites with our intuitive platform.
          No coding required, just pure creativity.
        </p>
        <div className="flex gap-4 justify-center">
          <button
            className="px-8 py-4 rounded-xl text-lg font-semibold shadow-lg hover:shadow-xl transition-all"
            style={{
              background: 'linear-gradient(135deg, $primary, $secondary)',
              color: '$on_primary'
            }}
          >
            Start Free Trial
          </button>
          <button
            className="px-8 py-4 rounded-xl text-lg font-semibold border-2 hover:bg-opacity-10 transition-all"
            style={{ borderColor: '$primary', color: '$primary' }}
          >
            Learn More
          </button>
        </div>
      </section>

      {/* Features Section */}
      <section className="py-20 px-6">
        <div className="max-w-6xl mx-auto">
          <h2 className="text-4xl font-bold text-center mb-16">Powerful Features</h2>
          <div className="grid md:grid-cols-3 gap-8">
            {[
              { title: 'Lightning Fast', desc: 'Optimized for speed and performance' },
              { title: 'Fully Responsive', desc: 'Looks great on any device' },
              { title: 'Easy to Use', desc: 'Intuitive drag and drop interface' },
            ].map((feature, i) => (
              <div
                key={i}
                className="p-8 rounded-2xl border border-opacity-20 hover:border-opacity-40 transition-all"
                style={{ borderColor: '$primary' }}
              >
                <div
                  className="w-12 h-12 rounded-xl mb-4 flex items-center justify-center"
                  style={{ backgroundColor: '$primary' + '20' }}
                >
                  <span style={{ color: '$primary' }}>✦</span>
                </div>
                <h3 className="text-xl font-semibold mb-2">{feature.title}</h3>
                <p className="opacity-70">{feature.desc}</p>
              </div>
            ))}
          </div>
        </div>
      </section>

      {/* CTA Section */}
      <section className="py-20 px-6">
        <div
          className="max-w-4xl mx-auto rounded-3xl p-12 text-center"
          style={{
            background: 'linear-gradient(135deg, $primary' + '20, $secondary' + '20)',
            border: '1px solid $primary' + '30'
          }}
        >
          <h2 className="text-4xl font-bold mb-4">Ready to Get Started?</h2>
          <p className="text-xl opacity-70 mb-8">Join thousands of creators building amazing websites.</p>
          <button
            className="px-8 py-4 rounded-xl text-lg font-semibold shadow-lg"
            style={{
              background: 'linear-gradient(135deg, $primary, $secondary)',
              color: '$on_primary'
            }}
          >
            Get Started Free →
          </button>
        </div>
      </section>

      {/* Footer */}
      <footer className="py-12 px-6 border-t border-opacity-10">
        <div className="max-w-6xl mx-auto flex justify-between items-center">
          <div className="text-xl font-bold" style={{ color: '$primary' }}>Brand</div>
          <p className="opacity-50">© Brand. All rights reserved.</p>
        </div>
      </footer>
    </div>
  );
};

export default GeneratedPage;
"""
)


def _js_string(value: str) -> str:
    """Escape ``value`` for interpolation inside a single-quoted JS string."""

    return (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", " ")
        .replace("\r", " ")
        .replace("<", "\\u003c")
    )


def _jsx_text(value: str) -> str:
    return "".join(ch for ch in value if ch not in '{}<>"\r\n')


def _pick(values: Sequence[str], index: int) -> str:
    return values[index] if len(values) > index else ""


def build_design_tokens(fingerprint: DesignFingerprint) -> DesignTokens:
    colors = fingerprint.colors
    fonts = fingerprint.fonts
    return DesignTokens(
        colors={
            "primary": _pick(colors, 0) or DEFAULT_PRIMARY,
            "secondary": _pick(colors, 1) or DEFAULT_SECONDARY,
            "background": _pick(colors, 2) or DEFAULT_BACKGROUND,
            "foreground": DEFAULT_FOREGROUND,
        },
        fonts={
            "heading": _pick(fonts, 0) or DEFAULT_FONT,
            "body": _pick(fonts, 1) or _pick(fonts, 0) or DEFAULT_FONT,
        },
    )


def _nav_links(sections: Sequence[str]) -> str:
    labels = [
        label for label in sections if _jsx_text(label).strip() and label not in _STRUCTURAL_SECTIONS
    ][:3]
    if not labels:
        labels = list(DEFAULT_NAV_LINKS)
    return "\n".join(
        f'          <a href="#{_jsx_text(label).lower().replace(" ", "-")}" className="hover:opacity-80">'
        f"{_jsx_text(label)}</a>"
        for label in labels
    )


def render_source(tokens: DesignTokens, sections: Sequence[str], *, dark_mode: bool) -> str:
    """Render the fixed-shape React page for ``tokens``."""

    page_dark = "#0F172A"
    page_light = "#FFFFFF"
    return _PAGE_TEMPLATE.substitute(
        background=page_dark if dark_mode else page_light,
        text=DEFAULT_FOREGROUND if dark_mode else page_dark,
        on_primary=page_dark if dark_mode else page_light,
        primary=_js_string(tokens.colors["primary"]),
        secondary=_js_string(tokens.colors["secondary"]),
        heading_font=_js_string(tokens.fonts["heading"]),
        nav_links=_nav_links(sections),
    )


def generate_fallback(fingerprint: DesignFingerprint, options: GenerationOptions) -> GeneratedContent:
    tokens = build_design_tokens(fingerprint)
    return GeneratedContent(
        source_code=render_source(tokens, fingerprint.sections, dark_mode=options.dark_mode),
        design_tokens=tokens,
        sections=list(fingerprint.sections),
    )
