"""Link short-form citations (Id., supra, short-form case) to their antecedents.

One DocumentResolver handles one document: it walks the citations once in
document order, remembering the full case citations it has seen, and
returns new citation records with a ResolutionResult attached to every
short form.
"""

import dataclasses
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from citetrace.citations import (
    CaseCitation,
    Citation,
    CitationType,
    IdCitation,
    ResolutionResult,
    ShortFormCaseCitation,
    SupraCitation,
    assert_unreachable,
    is_full_citation,
)
from citetrace.extractor.parties import normalize_party_name
from citetrace.resolver.levenshtein import normalized_levenshtein_similarity
from citetrace.resolver.scope import (
    DEFAULT_PARAGRAPH_BOUNDARY,
    ScopeStrategy,
    detect_paragraph_boundaries,
    is_within_scope,
)

logger = logging.getLogger(__name__)

PARTY_LOOKBACK_WINDOW = 100

_LOOKBACK_ADVERSARIAL_RE = re.compile(
    r"([A-Z][a-zA-Z]*(?:\s+[A-Z][a-zA-Z]*){0,5})\s+v\.?\s+[A-Z][a-zA-Z]*(?:\s+[A-Z][a-zA-Z]*){0,5},\s*$"
)
_LOOKBACK_NAME_RE = re.compile(r"([A-Z][a-zA-Z]*(?:\s+[A-Z][a-zA-Z]*){0,5}),\s*$")


@dataclass(frozen=True)
class ResolutionOptions:
    scope_strategy: ScopeStrategy = ScopeStrategy.PARAGRAPH
    paragraph_boundary_pattern: str = DEFAULT_PARAGRAPH_BOUNDARY
    fuzzy_party_matching: bool = True
    party_match_threshold: float = 0.8
    report_unresolved: bool = True
    party_lookback_window: int = PARTY_LOOKBACK_WINDOW


class DocumentResolver:
    def __init__(
        self,
        citations: Sequence[Citation],
        text: str,
        options: ResolutionOptions | None = None,
    ):
        self.citations = list(citations)
        self.text = text
        self.options = options or ResolutionOptions()
        self.last_full_case: int | None = None
        # normalized party name -> citation index; insertion order matters
        # for tie-breaking between equally similar names
        self.party_history: dict[str, int] = {}
        self.paragraph_map = detect_paragraph_boundaries(
            text, self.citations, self.options.paragraph_boundary_pattern
        )
        self._resolved = False

    def resolve(self) -> list[Citation]:
        if self._resolved:
            raise RuntimeError("DocumentResolver instances are single-use; create one per document")
        self._resolved = True

        resolved: list[Citation] = []
        for index, citation in enumerate(self.citations):
            if citation.type is CitationType.ID:
                resolution = self._resolve_id(index)
            elif citation.type is CitationType.SUPRA:
                resolution = self._resolve_supra(citation, index)
            elif citation.type is CitationType.SHORT_FORM_CASE:
                resolution = self._resolve_short_form_case(citation, index)
            elif is_full_citation(citation):
                if citation.type is CitationType.CASE:
                    self.last_full_case = index
                    self._track_parties(citation, index)
                resolved.append(citation)
                continue
            else:
                assert_unreachable(citation)

            if resolution is not None and resolution.resolved_to is None:
                logger.debug("Unresolved %s at %d: %s", citation.type.value, index, resolution.failure_reason)
            resolved.append(dataclasses.replace(citation, resolution=resolution))
        return resolved

    def _resolve_id(self, index: int) -> ResolutionResult | None:
        # Id. refers back to a case, never to a statute or article
        antecedent = self.last_full_case
        if antecedent is None:
            return self._failure("No preceding full case citation found")
        if not self._in_scope(antecedent, index):
            return self._failure("Antecedent citation outside scope boundary")
        return ResolutionResult(resolved_to=antecedent, confidence=1.0)

    def _resolve_supra(self, citation: SupraCitation, index: int) -> ResolutionResult | None:
        target = normalize_party_name(citation.party_name)

        best_index, best_similarity = None, -1.0
        for party, candidate in self.party_history.items():
            if not self._in_scope(candidate, index):
                continue
            similarity = self._similarity(target, party)
            # strict > keeps the earliest entry on ties
            if similarity > best_similarity:
                best_index, best_similarity = candidate, similarity

        if best_index is None:
            return self._failure("No full citation found in scope")
        threshold = self.options.party_match_threshold
        if best_similarity < threshold:
            return self._failure(
                f"Party name similarity {best_similarity:.2f} below threshold {threshold}"
            )

        warnings = ()
        if best_similarity < 1.0:
            warnings = (f"Fuzzy match: similarity {best_similarity:.2f}",)
        return ResolutionResult(resolved_to=best_index, confidence=best_similarity, warnings=warnings)

    def _resolve_short_form_case(self, citation: ShortFormCaseCitation, index: int) -> ResolutionResult | None:
        reporter = normalize_reporter(citation.reporter)
        for i in range(index - 1, -1, -1):
            candidate = self.citations[i]
            if candidate.type is not CitationType.CASE:
                continue
            if str(candidate.volume) == str(citation.volume) and normalize_reporter(candidate.reporter) == reporter:
                if not self._in_scope(i, index):
                    return self._failure("Matching citation outside scope boundary")
                return ResolutionResult(resolved_to=i, confidence=0.95)
        return self._failure("No matching full case citation found")

    def _track_parties(self, citation: CaseCitation, index: int) -> None:
        names = [n for n in (citation.defendant_normalized, citation.plaintiff_normalized) if n]
        if not names:
            fallback = self._lookback_party_name(citation)
            if fallback:
                names = [normalize_party_name(fallback)]
        for name in names:
            self.party_history[name] = index

    def _lookback_party_name(self, citation: CaseCitation) -> str | None:
        """Scrape a party name from the text just before the citation."""
        start = citation.span.original_start
        before = self.text[max(0, start - self.options.party_lookback_window):start]
        match = _LOOKBACK_ADVERSARIAL_RE.search(before) or _LOOKBACK_NAME_RE.search(before)
        return match.group(1).strip() if match else None

    def _similarity(self, a: str, b: str) -> float:
        if self.options.fuzzy_party_matching:
            return normalized_levenshtein_similarity(a, b)
        return 1.0 if a == b else 0.0

    def _in_scope(self, antecedent: int, current: int) -> bool:
        return is_within_scope(antecedent, current, self.paragraph_map, self.options.scope_strategy)

    def _failure(self, reason: str) -> ResolutionResult | None:
        if not self.options.report_unresolved:
            return None
        return ResolutionResult(resolved_to=None, confidence=0.0, failure_reason=reason)


def normalize_reporter(reporter: str) -> str:
    return re.sub(r"[\s.]+", "", reporter).lower()


def resolve_citations(
    citations: Sequence[Citation],
    text: str,
    options: ResolutionOptions | None = None,
) -> list[Citation]:
    """Resolve one document's citations with a fresh resolver."""
    return DocumentResolver(citations, text, options).resolve()
