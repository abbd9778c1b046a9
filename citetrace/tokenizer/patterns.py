"""Citation regex library.

Patterns are intentionally broad; the extractors decide what a match means.
None of them nests unbounded quantifiers: every repeated group is either a
single character class or has a fixed upper bound, so matching time stays
linear on hostile input (see tests/test_patterns.py).
"""

import re
from dataclasses import dataclass

from citetrace.citations import CitationType

# Page may be a blank placeholder for slip opinions ("___" or "---").
_PAGE = r"(\d+|_{3,}|-{3,})"
_PAGE_END = r"(?=\s|$|\(|,|;|\.)"


@dataclass(frozen=True)
class Pattern:
    id: str
    regex: re.Pattern
    description: str
    type: CitationType


CASE_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="federal-reporter",
        regex=re.compile(
            r"\b(\d+(?:-\d+)?)\s+"
            r"(F\.\s?Supp\.\s?(?:2d|3d|4th)|F\.\s?Supp\.|F\.\s?App'x|F\.(?:\s?(?:2d|3d|4th))?)"
            r"\s+" + _PAGE + _PAGE_END
        ),
        description="Federal Reporter (F., F.2d, F.3d, F.4th, F. Supp., F. App'x)",
        type=CitationType.CASE,
    ),
    Pattern(
        id="supreme-court",
        regex=re.compile(
            r"\b(\d+(?:-\d+)?)\s+(U\.\s?S\.|S\.\s?Ct\.|L\.\s?Ed\.(?:\s?2d)?)\s+" + _PAGE + _PAGE_END
        ),
        description="U.S. Supreme Court reporters",
        type=CitationType.CASE,
    ),
    Pattern(
        id="state-reporter",
        regex=re.compile(
            r"\b(\d+(?:-\d+)?)\s+([A-Z][A-Za-z.]+(?:\s?(?:2d|3d|4th|5th))?)\s+" + _PAGE + _PAGE_END
        ),
        description="State and regional reporters (single-word abbreviation plus series)",
        type=CitationType.CASE,
    ),
)

STATUTE_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="usc",
        regex=re.compile(r"\b(\d+)\s+U\.S\.C\.?\s+§{1,2}\s*(\d+[A-Za-z0-9-]*)"),
        description="U.S. Code (42 U.S.C. § 1983)",
        type=CitationType.STATUTE,
    ),
    Pattern(
        id="cfr",
        regex=re.compile(r"\b(\d+)\s+C\.F\.R\.\s+§{1,2}\s*(\d+(?:\.\d+)?[A-Za-z0-9-]*)"),
        description="Code of Federal Regulations (40 C.F.R. § 52.21)",
        type=CitationType.STATUTE,
    ),
    Pattern(
        id="state-code",
        regex=re.compile(r"\b([A-Z][a-z]+\.?\s+[A-Za-z.]+\s+Code)\s+§\s*(\d+[A-Za-z0-9.-]*)"),
        description="State codes (Cal. Penal Code § 187)",
        type=CitationType.STATUTE,
    ),
)

JOURNAL_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="law-review",
        regex=re.compile(
            r"\b(\d+)\s+([A-Z][A-Za-z.]*(?:\s[A-Za-z.&']+){0,8})\s+(\d+)\b(?!,\d)"
        ),
        description="Law reviews and journals (120 Harv. L. Rev. 500)",
        type=CitationType.JOURNAL,
    ),
)

NEUTRAL_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="westlaw",
        regex=re.compile(r"\b(\d{4})\s+WL\s+(\d+)\b"),
        description="Westlaw (2021 WL 123456)",
        type=CitationType.NEUTRAL,
    ),
    Pattern(
        id="lexis",
        regex=re.compile(r"\b(\d{4})\s+(U\.S\.(?:\s?App\.)?|[A-Z][A-Za-z.]*)\s+LEXIS\s+(\d+)\b"),
        description="Lexis (2021 U.S. LEXIS 5000)",
        type=CitationType.NEUTRAL,
    ),
    Pattern(
        id="public-law",
        regex=re.compile(r"\bPub\.\s?L\.(?:\s?No\.)?\s?(\d+)-(\d+)\b"),
        description="Public laws (Pub. L. No. 117-58)",
        type=CitationType.PUBLIC_LAW,
    ),
    Pattern(
        id="federal-register",
        regex=re.compile(r"\b(\d+)\s+Fed\.\s?Reg\.\s+(\d+(?:,\d{3})*)\b"),
        description="Federal Register (86 Fed. Reg. 12345)",
        type=CitationType.FEDERAL_REGISTER,
    ),
    Pattern(
        id="statutes-at-large",
        regex=re.compile(r"\b(\d+)\s+Stat\.\s+(\d+)\b"),
        description="Statutes at Large (124 Stat. 119)",
        type=CitationType.STATUTES_AT_LARGE,
    ),
)

SHORT_FORM_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="id",
        regex=re.compile(r"\b[Ii]d\.(?:,?\s+at\s+(\d+))?"),
        description="Id. (Id. at 253)",
        type=CitationType.ID,
    ),
    Pattern(
        id="ibid",
        regex=re.compile(r"\b[Ii]bid\.(?:,?\s+at\s+(\d+))?"),
        description="Ibid. (Ibid. at 125)",
        type=CitationType.ID,
    ),
    Pattern(
        id="supra",
        regex=re.compile(
            r"\b([A-Z][A-Za-z'-]+(?:(?:\s+v\.?\s+|\s+)[A-Z][A-Za-z'-]+){0,5}),?\s+supra\b"
            r"(?:,?\s+at\s+(\d+))?"
        ),
        description="Supra (Smith, supra, at 460)",
        type=CitationType.SUPRA,
    ),
    Pattern(
        id="short-form-case",
        regex=re.compile(
            r"\b(\d+(?:-\d+)?)\s+([A-Z][A-Za-z.']*(?:\s[A-Z][A-Za-z.']*){0,3}(?:\s?\d(?:d|th))?)"
            r"\s+at\s+(\d+)\b"
        ),
        description="Short-form case (500 F.2d at 125)",
        type=CitationType.SHORT_FORM_CASE,
    ),
)

# Evaluation order doubles as specificity priority: when two patterns match
# the exact same span the tokenizer keeps the one listed first.
DEFAULT_PATTERNS: tuple[Pattern, ...] = (
    NEUTRAL_PATTERNS
    + SHORT_FORM_PATTERNS
    + CASE_PATTERNS
    + STATUTE_PATTERNS
    + JOURNAL_PATTERNS
)
