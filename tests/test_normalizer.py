"""Tests for sitejob.services.normalizer (escape sequences and slugs)."""

from sitejob.services.normalizer import SLUG_MAX_LENGTH, normalize_escapes, slugify


class TestNormalizeEscapes:
    def test_converts_literal_newline(self):
        assert normalize_escapes("<h1>A</h1>\\n<p>B</p>") == "<h1>A</h1>\n<p>B</p>"

    def test_converts_literal_tab(self):
        assert normalize_escapes("a\\tb") == "a\tb"

    def test_converts_escaped_double_quote(self):
        assert normalize_escapes('<a href=\\"/x\\">x</a>') == '<a href="/x">x</a>'

    def test_converts_escaped_single_quote(self):
        assert normalize_escapes("it\\'s") == "it's"

    def test_collapses_crlf_to_single_newline(self):
        result = normalize_escapes("line one\\r\\nline two")
        assert result == "line one\nline two"
        assert "\r" not in result
        assert "\\r" not in result

    def test_clean_text_is_returned_unchanged(self):
        text = "<p>Nothing to see here.</p>\n"
        assert normalize_escapes(text) is text

    def test_lone_backslash_r_is_left_alone(self):
        text = "C:\\reports"
        assert normalize_escapes(text) is text

    def test_multiple_sequences_in_one_string(self):
        assert normalize_escapes('\\"a\\"\\n\\tb') == '"a"\n\tb'

    def test_real_newlines_are_preserved(self):
        assert normalize_escapes("a\nb\\nc") == "a\nb\nc"

    def test_idempotent_on_mixed_input(self):
        samples = [
            "",
            "plain",
            "a\\nb",
            '\\\\"',
            "\\\\n",
            "\\r\\n\\r\\n",
            "x\\\\\\'y",
            '<p class=\\"a\\">\\n</p>',
        ]
        for sample in samples:
            once = normalize_escapes(sample)
            assert normalize_escapes(once) == once, sample

    def test_double_backslash_quote_is_fully_folded(self):
        # \\" -> \" -> "
        assert normalize_escapes('\\\\"') == '"'


class TestSlugify:
    def test_lowercases_and_hyphenates(self):
        assert slugify("Home Page") == "home-page"

    def test_strips_leading_and_trailing_hyphens(self):
        assert slugify("  About Us  ") == "about-us"

    def test_collapses_runs_of_symbols(self):
        assert slugify("About & Contact!") == "about-contact"

    def test_empty_input_returns_page(self):
        assert slugify("") == "page"

    def test_symbols_only_returns_page(self):
        assert slugify("!!! ---") == "page"

    def test_non_ascii_letters_become_separators(self):
        assert slugify("Café Menü") == "caf-men"

    def test_truncates_to_max_length(self):
        assert len(slugify("a" * 100)) == SLUG_MAX_LENGTH == 80

    def test_length_bound_holds_for_long_titles(self):
        title = "The Quick Brown Fox Jumps Over The Lazy Dog " * 5
        assert len(slugify(title)) <= 80
