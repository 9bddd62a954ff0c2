from __future__ import annotations

import json

import pytest

from sitereplica.errors import QuotaExceededError, RateLimitedError
from sitereplica.models import DesignFingerprint, GenerationInput, GenerationOptions
from sitereplica.services.fallback import build_design_tokens, generate_fallback
from sitereplica.services.generator import (
    PageGenerator,
    PageOrigin,
    build_user_prompt,
    extract_json_object,
    parse_model_output,
)

MODEL_PAGE = {
    "sourceCode": "export default function Page() { return <main>{'}'}</main>; }",
    "designTokens": {"colors": {"primary": "#111111"}, "fonts": {"heading": "Lora"}},
    "sections": ["Hero", "Footer"],
}


def _crawl_data(**overrides) -> GenerationInput:
    values = {
        "url": "https://example.com",
        "title": "Example",
        "description": "An example site",
        "markdown": "# Welcome\n" + "word " * 3000,
        "screenshot": "data:image/png;base64,AAAA",
        "fingerprint": DesignFingerprint(
            colors=["#ff0000", "#00ff00"], fonts=["Lora"], sections=["Hero", "Pricing", "Footer"]
        ),
    }
    values.update(overrides)
    return GenerationInput(**values)


def test_extract_json_object_finds_first_balanced_object() -> None:
    text = "Sure! Here you go:\n```json\n" + json.dumps(MODEL_PAGE) + "\n```\nAnything else? {\"x\": 1}"

    assert extract_json_object(text) == MODEL_PAGE


def test_extract_json_object_ignores_braces_inside_strings() -> None:
    assert extract_json_object('prefix {"a": "{not a brace}", "b": "\\"}"} suffix') == {
        "a": "{not a brace}",
        "b": '"}',
    }


@pytest.mark.parametrize("text", ["", "no json here", "{unbalanced", "{'single': 'quotes'}"])
def test_extract_json_object_returns_none_for_unusable_text(text: str) -> None:
    assert extract_json_object(text) is None


def test_parse_model_output_accepts_original_field_name() -> None:
    payload = dict(MODEL_PAGE)
    payload["pageCode"] = payload.pop("sourceCode")

    content = parse_model_output(json.dumps(payload))

    assert content is not None
    assert content.source_code == MODEL_PAGE["sourceCode"]


@pytest.mark.parametrize(
    "payload",
    [
        {"designTokens": {}, "sections": []},
        {"sourceCode": "code", "designTokens": {"colors": {"primary": 1}}, "sections": []},
        {"sourceCode": "code", "designTokens": {}, "sections": "Hero"},
        {"sourceCode": "   ", "designTokens": {}, "sections": []},
        {"sourceCode": "code", "designTokens": {}, "sections": []},
        {"sourceCode": "code", "designTokens": {"colors": {}}, "sections": []},
        {"sourceCode": "code", "designTokens": {"colors": {}, "fonts": {}}, "sections": []},
        {"sourceCode": "code", "designTokens": {"colors": {"primary": "#111111"}}, "sections": []},
    ],
)
def test_parse_model_output_rejects_structural_mismatch(payload) -> None:
    assert parse_model_output(json.dumps(payload)) is None


def test_prompt_embeds_fingerprint_options_and_bounded_excerpt() -> None:
    prompt = build_user_prompt(_crawl_data(), GenerationOptions(dark_mode=True))

    assert "Title: Example" in prompt
    assert "Color Palette: #ff0000, #00ff00" in prompt
    assert "Detected Sections: Hero, Pricing, Footer" in prompt
    assert "Dark Mode: true" in prompt
    assert "Multi Page: false" in prompt
    assert ("word " * 3000)[:4000] not in prompt
    assert "word " * 700 in prompt


def test_model_output_is_used_when_parsable(make_completer) -> None:
    completer = make_completer(reply="Here it is: " + json.dumps(MODEL_PAGE))

    outcome = PageGenerator(completer).generate(_crawl_data(), GenerationOptions())

    assert outcome.origin is PageOrigin.MODEL
    assert outcome.content.design_tokens.colors == {"primary": "#111111"}
    assert len(completer.calls) == 1


def test_unparsable_model_output_uses_fallback(make_completer) -> None:
    completer = make_completer(reply="I'm sorry, I can't produce JSON today.")

    result = PageGenerator(completer).run(
        {"url": "https://example.com", "title": "Example", "fingerprint": {"colors": ["#ff0000"]}},
        {"darkMode": True},
    )

    assert result.success is True
    assert result.page is not None
    assert result.page.design_tokens.colors["primary"] == "#ff0000"
    assert result.page.original_url == "https://example.com"
    assert result.page.original_title == "Example"
    assert "#0F172A" in result.page.source_code
    assert len(completer.calls) == 1


def test_model_page_without_design_tokens_uses_fallback(make_completer) -> None:
    reply = json.dumps({"sourceCode": "x", "designTokens": {}, "sections": []})

    result = PageGenerator(make_completer(reply=reply)).run({"fingerprint": {"colors": ["#ff0000"]}}, {})

    assert result.success is True
    assert result.page is not None
    assert result.page.design_tokens.colors["primary"] == "#ff0000"
    assert result.page.source_code != "x"


def test_fallback_uses_documented_defaults_without_colors(make_completer) -> None:
    result = PageGenerator(make_completer(reply="nope")).run({"fingerprint": {}}, None)

    assert result.success is True
    assert result.page is not None
    assert result.page.design_tokens.colors == {
        "primary": "#06B6D4",
        "secondary": "#8B5CF6",
        "background": "#0F172A",
        "foreground": "#F8FAFC",
    }
    assert result.page.design_tokens.fonts == {"heading": "Inter", "body": "Inter"}


def test_source_fields_are_attached_to_model_pages(make_completer) -> None:
    completer = make_completer(reply=json.dumps(MODEL_PAGE))

    page = PageGenerator(completer).generate_page(_crawl_data(), GenerationOptions())

    assert page.original_url == "https://example.com"
    assert page.original_title == "Example"
    assert page.screenshot == "data:image/png;base64,AAAA"


@pytest.mark.parametrize("error", [RateLimitedError("slow down"), QuotaExceededError("pay up")])
def test_call_failures_are_reported_without_retry(make_completer, error) -> None:
    completer = make_completer(error=error)

    result = PageGenerator(completer).run({"fingerprint": {}}, {})

    assert result.success is False
    assert result.error == error.message
    assert result.status_code == error.status_code
    assert len(completer.calls) == 1


def test_invalid_crawl_data_never_reaches_the_model(make_completer) -> None:
    completer = make_completer(reply=json.dumps(MODEL_PAGE))

    result = PageGenerator(completer).run({"title": "No fingerprint"}, {})

    assert result.success is False
    assert result.status_code == 400
    assert completer.calls == []


def test_fallback_is_pure() -> None:
    fingerprint = DesignFingerprint(colors=["#abcdef"], fonts=["Lora", "Inter"], sections=["Hero", "Gallery"])
    options = GenerationOptions(dark_mode=True)

    first = generate_fallback(fingerprint, options)
    second = generate_fallback(fingerprint, options)

    assert first.model_dump_json() == second.model_dump_json()
    assert first.sections == ["Hero", "Gallery"]
    assert ">Gallery</a>" in first.source_code


def test_fallback_tokens_follow_fingerprint_order() -> None:
    tokens = build_design_tokens(DesignFingerprint(colors=["#1", "#2", "#3", "#4"], fonts=["A", "B"], sections=[]))

    assert tokens.colors == {"primary": "#1", "secondary": "#2", "background": "#3", "foreground": "#F8FAFC"}
    assert tokens.fonts == {"heading": "A", "body": "B"}


def test_fallback_escapes_hostile_tokens() -> None:
    fingerprint = DesignFingerprint(colors=["red'; alert(1); '"], fonts=["</script>"], sections=["<b>{x}</b>"])

    source = generate_fallback(fingerprint, GenerationOptions()).source_code

    assert "red\\'; alert(1); \\'" in source
    assert "</script>" not in source
    assert "<b>" not in source
