"""End-to-end extraction: clean, tokenize, extract, link, validate, resolve."""

import dataclasses
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from citetrace.citations import Citation, CitationType, assert_unreachable
from citetrace.cleaner.position_map import DEFAULT_LOOKAHEAD, TransformationMap
from citetrace.cleaner.text_cleaner import Cleaner, clean_text
from citetrace.errors import MalformedTokenError
from citetrace.extractor.case import CASE_NAME_WINDOW, PARENTHETICAL_LOOKAHEAD, extract_case
from citetrace.extractor.journal import extract_journal
from citetrace.extractor.neutral import extract_neutral, extract_public_law
from citetrace.extractor.parallel import link_parallel_citations
from citetrace.extractor.register import extract_federal_register, extract_statutes_at_large
from citetrace.extractor.short_forms import extract_id, extract_short_form_case, extract_supra
from citetrace.extractor.statute import extract_statute
from citetrace.extractor.validation import ConfidenceScoring, ReporterRepository, validate_citations
from citetrace.resolver.document_resolver import ResolutionOptions, resolve_citations
from citetrace.tokenizer.patterns import DEFAULT_PATTERNS, Pattern
from citetrace.tokenizer.tokenizer import Token, tokenize

logger = logging.getLogger(__name__)


@dataclass
class ExtractOptions:
    cleaners: Sequence[Cleaner] | None = None
    patterns: Sequence[Pattern] = DEFAULT_PATTERNS
    resolve: bool = False
    resolution: ResolutionOptions = field(default_factory=ResolutionOptions)
    validate: bool = False
    reporters: ReporterRepository | None = None
    scoring: ConfidenceScoring = field(default_factory=ConfidenceScoring)
    case_name_window: int = CASE_NAME_WINDOW
    parenthetical_lookahead: int = PARENTHETICAL_LOOKAHEAD
    cleaner_lookahead: int = DEFAULT_LOOKAHEAD
    today: date | None = None


def extract_citations(text: str, options: ExtractOptions | None = None) -> list[Citation]:
    """Extract every citation in ``text``, in document order.

    A token its extractor cannot parse is logged and dropped; the rest of
    the document still comes back.
    """
    options = options or ExtractOptions()

    cleaned = clean_text(text, options.cleaners, options.cleaner_lookahead)
    tokens = tokenize(cleaned.cleaned, options.patterns)
    logger.debug("%d candidate tokens", len(tokens))

    citations: list[Citation] = []
    for token in tokens:
        try:
            citation = extract_token(token, cleaned.transformation_map, cleaned.cleaned, options)
        except MalformedTokenError as e:
            logger.error("Skipping token from pattern %s: %s", token.pattern_id, e)
            continue
        if cleaned.warnings:
            citation = dataclasses.replace(citation, warnings=citation.warnings + tuple(cleaned.warnings))
        citations.append(citation)

    citations = link_parallel_citations(
        citations,
        cleaned.cleaned,
        lookahead=options.parenthetical_lookahead,
        today=options.today,
    )

    if options.validate:
        citations = validate_citations(citations, options.reporters, options.scoring)

    if options.resolve:
        citations = resolve_citations(citations, text, options.resolution)
    return citations


def extract_token(
    token: Token,
    transformation_map: TransformationMap,
    cleaned_text: str,
    options: ExtractOptions,
) -> Citation:
    """Dispatch one token to the extractor for its citation type."""
    kind = token.type
    if kind is CitationType.CASE:
        return extract_case(
            token,
            transformation_map,
            cleaned_text,
            case_name_window=options.case_name_window,
            parenthetical_lookahead=options.parenthetical_lookahead,
            today=options.today,
        )
    if kind is CitationType.STATUTE:
        return extract_statute(token, transformation_map)
    if kind is CitationType.JOURNAL:
        return extract_journal(token, transformation_map, cleaned_text)
    if kind is CitationType.NEUTRAL:
        return extract_neutral(token, transformation_map)
    if kind is CitationType.PUBLIC_LAW:
        return extract_public_law(token, transformation_map)
    if kind is CitationType.FEDERAL_REGISTER:
        return extract_federal_register(token, transformation_map, cleaned_text)
    if kind is CitationType.STATUTES_AT_LARGE:
        return extract_statutes_at_large(token, transformation_map, cleaned_text)
    if kind is CitationType.ID:
        return extract_id(token, transformation_map)
    if kind is CitationType.SUPRA:
        return extract_supra(token, transformation_map)
    if kind is CitationType.SHORT_FORM_CASE:
        return extract_short_form_case(token, transformation_map)
    assert_unreachable(kind)
