"""End-to-end extraction tests."""

import logging
import time
from datetime import date
from unittest.mock import patch

import pytest

from citetrace.citations import CitationType, ParallelCitation, is_full_citation, is_short_form_citation
from citetrace.cleaner.text_cleaner import clean_text
from citetrace.errors import MalformedTokenError
from citetrace.extractor.pipeline import ExtractOptions, extract_citations
from citetrace.resolver.levenshtein import normalized_levenshtein_similarity

RESOLVE = ExtractOptions(resolve=True, today=date(2024, 1, 1))

MIXED_DOCUMENT = (
    "<p>Smith v. <em>Jones</em>, 500 F.2d 123, 125 (9th Cir. 2020).</p>\n\n"
    "<p>See 42 U.S.C. &sect; 1983; 120 Harv. L. Rev. 500 (2007); Id. at 125.</p>\n\n"
    "<p>Roe v. Wade, 410 U.S. 113, 93 S. Ct. 705 (1973); 2021 WL 123456; "
    "Pub. L. No. 117-58; 86 Fed. Reg. 12,345; 124 Stat. 119.</p>"
)


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestScenarios:

    def test_case_then_id(self):
        citations = extract_citations("Smith v. Jones, 500 F.2d 123 (9th Cir. 2020). Id. at 125.", RESOLVE)
        assert len(citations) == 2
        case, short = citations
        assert case.type is CitationType.CASE
        assert case.court == "9th Cir."
        assert case.case_name == "Smith v. Jones"
        assert short.type is CitationType.ID
        assert short.pincite == 125
        assert short.resolution.resolved_to == 0
        assert short.resolution.confidence == 1.0

    def test_blank_page(self):
        citations = extract_citations("500 F.2d ___", RESOLVE)
        assert len(citations) == 1
        assert citations[0].has_blank_page is True
        assert citations[0].page is None
        assert citations[0].confidence == 0.8

    def test_fuzzy_supra(self):
        citations = extract_citations("Smith v. Jones, 500 F.2d 123. Smyth, supra, at 130.", RESOLVE)
        resolution = citations[1].resolution
        assert resolution.resolved_to == 0
        assert resolution.confidence == pytest.approx(normalized_levenshtein_similarity("smith", "smyth"))
        assert any("Fuzzy match" in w for w in resolution.warnings)

    def test_parallel_group(self):
        citations = extract_citations("410 U.S. 113, 93 S. Ct. 705 (1973).", RESOLVE)
        assert len(citations) == 2
        assert citations[0].group_id == citations[1].group_id is not None
        assert citations[0].parallel_citations == (ParallelCitation(93, "S. Ct.", 705),)
        assert citations[1].parallel_citations == ()

    def test_deep_nesting(self):
        start = time.perf_counter()
        citations = extract_citations("(" * 500, RESOLVE)
        assert time.perf_counter() - start < 0.1
        assert citations == []


# ---------------------------------------------------------------------------
# Properties over a mixed document
# ---------------------------------------------------------------------------

class TestMixedDocument:

    @pytest.fixture(scope="class")
    def citations(self):
        return extract_citations(MIXED_DOCUMENT, RESOLVE)

    def test_types_in_document_order(self, citations):
        assert [c.type for c in citations] == [
            CitationType.CASE,
            CitationType.STATUTE,
            CitationType.JOURNAL,
            CitationType.ID,
            CitationType.CASE,
            CitationType.CASE,
            CitationType.NEUTRAL,
            CitationType.PUBLIC_LAW,
            CitationType.FEDERAL_REGISTER,
            CitationType.STATUTES_AT_LARGE,
        ]

    def test_original_span_matches_text(self, citations):
        for citation in citations:
            span = citation.span
            original = MIXED_DOCUMENT[span.original_start:span.original_end]
            assert clean_text(original).cleaned == citation.text

    def test_spans_and_confidence_bounded(self, citations):
        for citation in citations:
            assert citation.span.clean_end > citation.span.clean_start
            assert citation.span.original_end > citation.span.original_start
            assert 0.0 <= citation.confidence <= 1.0

    def test_spans_sorted(self, citations):
        starts = [c.span.clean_start for c in citations]
        assert starts == sorted(starts)

    def test_id_crosses_paragraph(self, citations):
        short = citations[3]
        assert is_short_form_citation(short)
        assert short.resolution.failure_reason == "Antecedent citation outside scope boundary"

    def test_full_citations_have_no_resolution(self, citations):
        assert all(not hasattr(c, "resolution") for c in citations if is_full_citation(c))

    def test_deterministic(self, citations):
        assert extract_citations(MIXED_DOCUMENT, RESOLVE) == citations


# ---------------------------------------------------------------------------
# Options and failure handling
# ---------------------------------------------------------------------------

class TestPipelineOptions:

    def test_resolve_off_by_default(self):
        citations = extract_citations("500 F.2d 123. Id.")
        assert citations[1].resolution is None

    def test_malformed_token_skipped(self, caplog):
        with patch(
            "citetrace.extractor.pipeline.extract_statute",
            side_effect=MalformedTokenError("statute", "42 U.S.C. § 1983"),
        ):
            with caplog.at_level(logging.ERROR, logger="citetrace.extractor.pipeline"):
                citations = extract_citations("42 U.S.C. § 1983; 500 F.2d 123")
        assert [c.type for c in citations] == [CitationType.CASE]
        assert "Failed to parse statute citation" in caplog.text

    def test_cleaning_warning_attached(self):
        original = '<a href="https://example.com/a/very/long/path">Smith</a> v. Jones, 500 F.2d 123.'
        citations = extract_citations(original)
        assert citations
        assert any("approximate" in w.message for w in citations[0].warnings)

    def test_custom_cleaners(self):
        text = "<b>See</b> 500 F.2d 123"
        raw = extract_citations(text, ExtractOptions(cleaners=[]))[0]
        assert raw.span.clean_start == raw.span.original_start == text.index("500")

        cleaned = extract_citations(text)[0]
        assert cleaned.span.clean_start == len("See ")
        assert cleaned.span.original_start == text.index("500")

    def test_custom_patterns(self):
        from citetrace.tokenizer.patterns import STATUTE_PATTERNS

        citations = extract_citations("42 U.S.C. § 1983; 500 F.2d 123", ExtractOptions(patterns=STATUTE_PATTERNS))
        assert [c.type for c in citations] == [CitationType.STATUTE]


# ---------------------------------------------------------------------------
# Paragraph breaks
# ---------------------------------------------------------------------------

class TestParagraphBreaks:

    def test_id_after_break_keeps_original_span(self):
        text = "Smith v. Jones, 500 F.2d 123 (2d Cir. 2020)\n\nId. at 5."
        short = extract_citations(text)[1]
        span = short.span
        assert text[span.original_start:span.original_end] == "Id. at 5"

    def test_full_span_after_break(self):
        text = "Foo.\n\nBar v. Baz, 500 F.2d 123."
        case = extract_citations(text)[0]
        full = case.full_span
        assert text[full.original_start:full.original_end] == "Bar v. Baz, 500 F.2d 123"
        assert text[case.span.original_start:case.span.original_end] == "500 F.2d 123"
