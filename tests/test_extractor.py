"""Tests for sitejob.services.extractor.extract."""

import json

import pytest

from sitejob.services.extractor import ExtractionError, extract


def _wrapped(html: str, title: str = "Website") -> str:
    return json.dumps(
        {"artifact_type": "web_page", "content": {"title": title, "html": html}}
    )


def _five_pages() -> dict:
    return {
        "brand": "llif",
        "content_format": "html",
        "pages": [
            {"slug": f"page-{i}", "title": f"Page {i}", "body_html": f"<h1>{i}</h1>"}
            for i in range(1, 6)
        ],
    }


# ---------------------------------------------------------------------------
# Wrapped envelopes
# ---------------------------------------------------------------------------

class TestExtractWrapped:
    def test_embedded_json_prefixed_page_list(self):
        raw = _wrapped("json\n" + json.dumps(_five_pages()))
        result = extract(raw)

        assert result.source_kind == "wrapped"
        assert result.embedded_detected is True
        assert [p.slug for p in result.pages] == [f"page-{i}" for i in range(1, 6)]
        assert result.brand == "llif"

    def test_embedded_code_fenced_page_list(self):
        raw = _wrapped("```json\n" + json.dumps(_five_pages()) + "\n```")
        result = extract(raw)
        assert result.embedded_detected is True
        assert len(result.pages) == 5

    def test_plain_html_is_single_page(self):
        raw = _wrapped("<h1>About</h1><p>Us</p>", title="About Us")
        result = extract(raw)

        assert result.source_kind == "wrapped"
        assert result.embedded_detected is False
        assert len(result.pages) == 1
        assert result.pages[0].slug == "about-us"
        assert result.pages[0].title == "About Us"
        assert result.pages[0].body_html == "<h1>About</h1><p>Us</p>"

    def test_embedded_object_without_pages_is_single_page(self):
        raw = _wrapped(json.dumps({"html": "<p>x</p>"}), title="Solo")
        result = extract(raw)
        assert result.embedded_detected is False
        assert result.pages[0].slug == "solo"

    def test_missing_html_raises(self):
        raw = json.dumps({"artifact_type": "web_page", "content": {"title": "T"}})
        with pytest.raises(ExtractionError, match="content.html"):
            extract(raw)

    def test_empty_html_raises(self):
        with pytest.raises(ExtractionError):
            extract(_wrapped(""))

    def test_nested_envelope_is_not_followed(self):
        inner = _wrapped("json\n" + json.dumps(_five_pages()))
        raw = _wrapped(inner, title="Outer")
        result = extract(raw)
        # Only one level is unwrapped: the inner envelope becomes a page body
        assert result.embedded_detected is False
        assert len(result.pages) == 1
        assert result.pages[0].slug == "outer"


# ---------------------------------------------------------------------------
# Direct shapes
# ---------------------------------------------------------------------------

class TestExtractDirect:
    def test_page_list(self):
        raw = json.dumps(
            {
                "pages": [
                    {"slug": "home", "title": "Home", "body_html": "<h1>Home</h1>"},
                    {"slug": "about", "title": "About", "body_html": "<h1>About</h1>"},
                ]
            }
        )
        result = extract(raw)

        assert result.source_kind == "direct"
        assert result.embedded_detected is False
        assert [p.slug for p in result.pages] == ["home", "about"]
        assert result.brand == "unknown"
        assert result.content_format == "html"

    def test_slug_generated_from_title(self):
        raw = json.dumps({"pages": [{"title": "Contact Us", "body_html": "<p/>"}]})
        assert extract(raw).pages[0].slug == "contact-us"

    def test_untitled_entry_takes_slug_as_title(self):
        raw = json.dumps({"pages": [{"slug": "about", "body_html": "<p/>"}]})
        page = extract(raw).pages[0]
        assert page.title == "about"
        assert page.slug == "about"

    def test_title_falls_back_to_slug_then_number(self):
        raw = json.dumps({"pages": [{"slug": "a"}, {"body_html": "<p>second</p>"}]})
        pages = extract(raw).pages
        assert pages[0].title == "a"
        assert pages[1].title == "Page 2"
        assert pages[1].slug == "page-2"

    def test_blank_title_falls_back_to_slug(self):
        raw = json.dumps({"pages": [{"slug": "pricing", "title": "  "}]})
        assert extract(raw).pages[0].title == "pricing"

    def test_non_object_entry_does_not_crash(self):
        raw = json.dumps({"pages": ["oops", {"slug": "ok"}]})
        pages = extract(raw).pages
        assert [p.slug for p in pages] == ["page-1", "ok"]

    def test_markdown_body_and_meta_fields(self):
        raw = json.dumps(
            {
                "pages": [
                    {
                        "slug": "home",
                        "title": "Home",
                        "body_markdown": "# Home\\n\\nText",
                        "meta_title": "Home | Brand",
                        "meta_description": "Welcome",
                    }
                ]
            }
        )
        page = extract(raw).pages[0]
        assert page.body_html is None
        assert page.body_markdown == "# Home\n\nText"
        assert page.meta_title == "Home | Brand"
        assert page.meta_description == "Welcome"

    def test_literal_escapes_in_body_are_normalised(self):
        raw = json.dumps({"pages": [{"slug": "h", "body_html": "<h1>T</h1>\\n<p>B</p>"}]})
        body = extract(raw).pages[0].body_html
        assert "\n" in body
        assert "\\n" not in body

    def test_single_html_field(self):
        result = extract(json.dumps({"html": "<h1>Single</h1>"}))
        assert result.source_kind == "direct"
        assert result.pages[0].slug == "page"
        assert result.pages[0].body_html == "<h1>Single</h1>"

    def test_single_body_field(self):
        result = extract(json.dumps({"body": "<p>Body</p>"}))
        assert result.pages[0].body_html == "<p>Body</p>"

    def test_nested_content_without_envelope(self):
        raw = json.dumps({"content": {"title": "My Page", "html": "<h1>My Page</h1>"}})
        result = extract(raw)
        assert result.source_kind == "direct"
        assert result.pages[0].slug == "my-page"
        assert result.pages[0].title == "My Page"


# ---------------------------------------------------------------------------
# Raw fallback and errors
# ---------------------------------------------------------------------------

class TestExtractFallbackAndErrors:
    def test_raw_html_is_one_page(self):
        result = extract("  <h1>Raw HTML</h1><p>Body</p>  ")
        assert result.source_kind == "raw_string"
        assert result.pages[0].slug == "page"
        assert result.pages[0].body_html == "<h1>Raw HTML</h1><p>Body</p>"

    def test_raw_markdown_is_one_page(self):
        result = extract("# Title\n\nSome *markdown*.")
        assert result.source_kind == "raw_string"
        assert "# Title" in result.pages[0].body_html

    def test_broken_json_is_raw_page(self):
        result = extract('{"pages": [')
        assert result.source_kind == "raw_string"
        assert result.pages[0].body_html == '{"pages": ['

    def test_deeply_nested_json_is_raw_page(self):
        for raw in ["[" * 100000, '{"a":' * 50000]:
            result = extract(raw)
            assert result.source_kind == "raw_string"
            assert [p.slug for p in result.pages] == ["page"]
            assert result.pages[0].body_html == raw

    def test_empty_input_raises(self):
        with pytest.raises(ExtractionError):
            extract("   \n ")

    def test_unknown_object_raises_with_accepted_shapes(self):
        with pytest.raises(ExtractionError, match="Expected one of"):
            extract(json.dumps({"foo": "bar"}))

    def test_top_level_array_raises(self):
        with pytest.raises(ExtractionError):
            extract(json.dumps([{"slug": "a"}]))

    def test_fenced_direct_output(self):
        raw = "```json\n" + json.dumps({"pages": [{"slug": "x", "title": "X"}]}) + "\n```"
        assert extract(raw).pages[0].slug == "x"

    def test_bom_and_json_prefix(self):
        raw = "\ufeffjson\n" + json.dumps({"pages": [{"slug": "x"}]})
        assert extract(raw).source_kind == "direct"
