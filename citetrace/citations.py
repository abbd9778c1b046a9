"""Citation records produced by the extractors and consumed by the resolver."""

from dataclasses import dataclass, field
from enum import Enum
from typing import NoReturn, Union


class CitationType(str, Enum):
    CASE = "case"
    STATUTE = "statute"
    JOURNAL = "journal"
    NEUTRAL = "neutral"
    PUBLIC_LAW = "publicLaw"
    FEDERAL_REGISTER = "federalRegister"
    STATUTES_AT_LARGE = "statutesAtLarge"
    ID = "id"
    SUPRA = "supra"
    SHORT_FORM_CASE = "shortFormCase"


SHORT_FORM_TYPES = frozenset({CitationType.ID, CitationType.SUPRA, CitationType.SHORT_FORM_CASE})


@dataclass(frozen=True)
class Span:
    """Location of a citation in both the cleaned and the original text."""

    clean_start: int
    clean_end: int
    original_start: int
    original_end: int


@dataclass(frozen=True)
class CitationWarning:
    level: str  # 'error', 'warning', 'info'
    message: str
    start: int | None = None
    end: int | None = None
    context: str = ""


@dataclass(frozen=True)
class StructuredDate:
    iso: str
    year: int
    month: int | None = None
    day: int | None = None


@dataclass(frozen=True)
class ParallelCitation:
    volume: int | str
    reporter: str
    page: int | None


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of linking a short-form citation to its antecedent.

    ``resolved_to`` is an index into the document's citation list, or None
    when resolution failed; ``failure_reason`` then says why.
    """

    resolved_to: int | None
    confidence: float
    failure_reason: str | None = None
    warnings: tuple[str, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.resolved_to is not None


@dataclass(frozen=True, kw_only=True)
class CitationBase:
    text: str
    span: Span
    matched_text: str
    confidence: float
    warnings: tuple[CitationWarning, ...] = ()


@dataclass(frozen=True, kw_only=True)
class CaseCitation(CitationBase):
    type: CitationType = field(default=CitationType.CASE, init=False)
    volume: int | str
    reporter: str
    page: int | None = None
    pincite: int | None = None
    court: str | None = None
    year: int | None = None
    date: StructuredDate | None = None
    disposition: str | None = None
    parenthetical: str | None = None
    case_name: str | None = None
    plaintiff: str | None = None
    defendant: str | None = None
    plaintiff_normalized: str | None = None
    defendant_normalized: str | None = None
    procedural_prefix: str | None = None
    subsequent_history: str | None = None
    has_blank_page: bool = False
    full_span: Span | None = None
    group_id: str | None = None
    parallel_citations: tuple[ParallelCitation, ...] = ()
    normalized_reporter: str | None = None


@dataclass(frozen=True, kw_only=True)
class StatuteCitation(CitationBase):
    type: CitationType = field(default=CitationType.STATUTE, init=False)
    title: int | None = None
    code: str
    section: str


@dataclass(frozen=True, kw_only=True)
class JournalCitation(CitationBase):
    type: CitationType = field(default=CitationType.JOURNAL, init=False)
    volume: int | str
    journal: str
    abbreviation: str
    page: int | None = None
    pincite: int | None = None
    year: int | None = None


@dataclass(frozen=True, kw_only=True)
class NeutralCitation(CitationBase):
    type: CitationType = field(default=CitationType.NEUTRAL, init=False)
    year: int
    court: str
    document_number: str


@dataclass(frozen=True, kw_only=True)
class PublicLawCitation(CitationBase):
    type: CitationType = field(default=CitationType.PUBLIC_LAW, init=False)
    congress: int
    law_number: int


@dataclass(frozen=True, kw_only=True)
class FederalRegisterCitation(CitationBase):
    type: CitationType = field(default=CitationType.FEDERAL_REGISTER, init=False)
    volume: int | str
    page: int
    year: int | None = None


@dataclass(frozen=True, kw_only=True)
class StatutesAtLargeCitation(CitationBase):
    type: CitationType = field(default=CitationType.STATUTES_AT_LARGE, init=False)
    volume: int | str
    page: int
    year: int | None = None


@dataclass(frozen=True, kw_only=True)
class IdCitation(CitationBase):
    type: CitationType = field(default=CitationType.ID, init=False)
    pincite: int | None = None
    resolution: ResolutionResult | None = None


@dataclass(frozen=True, kw_only=True)
class SupraCitation(CitationBase):
    type: CitationType = field(default=CitationType.SUPRA, init=False)
    party_name: str
    pincite: int | None = None
    resolution: ResolutionResult | None = None


@dataclass(frozen=True, kw_only=True)
class ShortFormCaseCitation(CitationBase):
    type: CitationType = field(default=CitationType.SHORT_FORM_CASE, init=False)
    volume: int | str
    reporter: str
    page: int | None = None
    pincite: int | None = None
    resolution: ResolutionResult | None = None


FullCitation = Union[
    CaseCitation,
    StatuteCitation,
    JournalCitation,
    NeutralCitation,
    PublicLawCitation,
    FederalRegisterCitation,
    StatutesAtLargeCitation,
]
ShortFormCitation = Union[IdCitation, SupraCitation, ShortFormCaseCitation]
Citation = Union[FullCitation, ShortFormCitation]


def is_full_citation(citation: Citation) -> bool:
    return citation.type not in SHORT_FORM_TYPES


def is_short_form_citation(citation: Citation) -> bool:
    return citation.type in SHORT_FORM_TYPES


def is_case_citation(citation: Citation) -> bool:
    return citation.type is CitationType.CASE


def assert_unreachable(value: object) -> NoReturn:
    """Fail loudly when a dispatch over citation types misses a variant."""
    raise AssertionError(f"Unhandled citation variant: {value!r}")


def parse_volume(raw: str) -> int | str:
    """Volumes are ints unless hyphenated ("2014-1")."""
    return int(raw) if raw.isdigit() else raw
