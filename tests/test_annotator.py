"""Tests for citation markup splicing."""

import dataclasses

from citetrace.annotate.annotator import Template, annotate, snap_to_safe_boundary
from citetrace.citations import Span
from citetrace.cleaner.text_cleaner import clean_text
from citetrace.extractor.pipeline import extract_citations

BRACKETS = Template(before="[", after="]")


class TestTemplateMode:

    def test_wraps_citation(self):
        text = "See 500 F.2d 123 here."
        result = annotate(text, extract_citations(text), Template("<cite>", "</cite>"))
        assert result.text == "See <cite>500 F.2d 123</cite> here."
        assert result.skipped == []

    def test_back_to_front_keeps_offsets(self):
        text = "500 F.2d 123 and 42 U.S.C. § 1983"
        result = annotate(text, extract_citations(text), BRACKETS)
        assert result.text == "[500 F.2d 123] and [42 U.S.C. § 1983]"
        assert result.position_map == {0: 0, 17: 19}

    def test_escapes_by_default(self):
        text = "700 F. App'x 12."
        citations = extract_citations(text)
        assert "App&#x27;x" in annotate(text, citations, BRACKETS).text
        assert "[700 F. App'x 12]" in annotate(text, citations, BRACKETS, auto_escape=False).text

    def test_full_span(self):
        text = "Smith v. Jones, 500 F.2d 123 (2020)."
        result = annotate(text, extract_citations(text), BRACKETS, use_full_span=True)
        assert result.text == "[Smith v. Jones, 500 F.2d 123 (2020)]."

    def test_clean_text_offsets(self):
        original = "<b>x</b>  500 F.2d 123"
        citations = extract_citations(original)
        cleaned = clean_text(original).cleaned
        result = annotate(cleaned, citations, BRACKETS, use_clean_text=True)
        assert result.text == "x [500 F.2d 123]"

    def test_original_offsets_inside_html(self):
        original = "<p>See <i>500 F.2d 123</i>.</p>"
        result = annotate(original, extract_citations(original), BRACKETS)
        assert result.text == "<p>See <i>[500 F.2d 123]</i>.</p>"

    def test_nothing_to_do(self):
        text = "See 500 F.2d 123."
        assert annotate(text, extract_citations(text)).text == text


class TestCallbackMode:

    def test_callback_replaces_citation(self):
        text = "See 500 F.2d 123 here."
        seen = []

        def link(citation, surrounding):
            seen.append(surrounding)
            return f'<a href="#{citation.page}">{citation.text}</a>'

        result = annotate(text, extract_citations(text), callback=link)
        assert result.text == 'See <a href="#123">500 F.2d 123</a> here.'
        assert seen == [text]


class TestSkipping:

    def test_overlapping_citation_skipped(self):
        text = "See 500 F.2d 123."
        citation = extract_citations(text)[0]
        result = annotate(text, [citation, citation], BRACKETS)
        assert result.text == "See [500 F.2d 123]."
        assert result.skipped == [citation]

    def test_span_inside_tag_skipped(self):
        text = '<i title="500 F.2d 123">z</i>'
        start = text.index("500")
        citation = extract_citations("500 F.2d 123")[0]
        moved = dataclasses.replace(citation, span=Span(start, start + 12, start, start + 12))
        result = annotate(text, [moved], BRACKETS)
        assert result.text == text
        assert result.skipped == [moved]


class TestSnapToSafeBoundary:

    def test_edges_inside_tags_move_out(self):
        text = "ab<i x>cd</i>ef"
        assert snap_to_safe_boundary(text, 4, 11) == (7, 9)

    def test_edges_outside_tags_unchanged(self):
        text = "ab<i x>cd</i>ef"
        assert snap_to_safe_boundary(text, 0, 2) == (0, 2)
        assert snap_to_safe_boundary(text, 7, 9) == (7, 9)
