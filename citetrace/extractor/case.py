"""Full case citation extraction.

The tokenizer only captures ``volume reporter page``. Everything else (case
name, pincite, court and date parenthetical, subsequent history) is read from
a bounded window of the cleaned text around the token.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date

from citetrace.citations import CaseCitation, CitationWarning, Span, StructuredDate, parse_volume
from citetrace.cleaner.position_map import TransformationMap
from citetrace.errors import MalformedTokenError
from citetrace.extractor.common import token_span
from citetrace.extractor.dates import parse_date, strip_date
from citetrace.extractor.parties import extract_parties
from citetrace.tokenizer.tokenizer import Token

logger = logging.getLogger(__name__)

CASE_NAME_WINDOW = 150
PARENTHETICAL_LOOKAHEAD = 200

CASE_CORE_RE = re.compile(r"(\d+(?:-\d+)?)\s+([A-Za-z0-9.'\s]+?)\s+(\d+|_{3,}|-{3,})(?=\s|$|[(,;.])")
BLANK_PAGE_RE = re.compile(r"_{3,}|-{3,}")

# ", 125" or ", 125-27" but not ", 93 S. Ct." (the next parallel citation)
PINCITE_RE = re.compile(r",\s*(\d+)(?:[-–]\d+)?(?:\s*n\.\s*\d+)?(?=\s*(?:[,;.()]|$)|\s+[a-z])")
PARENTHETICAL_START_RE = re.compile(
    r"(?:,\s*\d+(?:[-–]\d+)?(?:\s*n\.\s*\d+)?)*\s*\("
)
CHAINED_PAREN_RE = re.compile(r"\s*\(")
DISPOSITION_RE = re.compile(r"\b(en banc|per curiam)\b", re.IGNORECASE)

SUBSEQUENT_HISTORY_RE = re.compile(
    r",?\s*("
    r"(?:aff'd|rev'd|vacated|modified|remanded|overruled|abrogated|superseded)"
    r"(?:\s+in\s+part)?"
    r"(?:\s+(?:and|&)\s+(?:aff'd|rev'd|vacated|remanded)(?:\s+in\s+part)?)?"
    r"(?:\s+on\s+other\s+grounds)?(?:\s+by)?"
    r"|cert\.\s+(?:denied|granted|dismissed)"
    r"|reh'g\s+(?:denied|granted)"
    r"|appeal\s+dismissed"
    r")",
    re.IGNORECASE,
)

SUPREME_COURT_REPORTER_RE = re.compile(r"^(?:U\.?\s?S\.|S\.?\s?Ct\.|L\.?\s?Ed\.)")

# Compared with whitespace removed, so "S. Ct." and "S.Ct." are the same.
COMMON_REPORTERS = frozenset(
    r.replace(" ", "")
    for r in (
        "F.", "F.2d", "F.3d", "F.4th",
        "F. Supp.", "F. Supp. 2d", "F. Supp. 3d", "F. App'x",
        "U.S.", "S. Ct.", "L. Ed.", "L. Ed. 2d",
        "P.", "P.2d", "P.3d",
        "A.", "A.2d", "A.3d",
        "N.E.", "N.E.2d", "N.E.3d",
        "N.W.", "N.W.2d",
        "S.E.", "S.E.2d",
        "S.W.", "S.W.2d", "S.W.3d",
        "So.", "So. 2d", "So. 3d",
    )
)

# Case-name words: capitalized tokens plus the lowercase connectors that
# appear inside party names. Words never start with a digit, so a name
# cannot reach back across an earlier citation.
_CONNECTOR = (
    r"(?:of|the|and|for|on|in|to|by|de|del|della|der|da|du|la|le|van|von|ex|rel|et|al"
    r"|d/b/a|aka|a/k/a)(?!\w)\.?"
)
_NAME_WORD = rf"(?:[A-Z][\w.'&/-]*|&|{_CONNECTOR})"
_CORPORATE_SUFFIX = r"(?:Inc|Corp|Co|Ltd|LLC|L\.L\.C|LLP|L\.P|N\.A|P\.C)\.?"
_NAME_STEP = rf"(?:\s+{_NAME_WORD}|,\s+{_CORPORATE_SUFFIX})"

ADVERSARIAL_NAME_RE = re.compile(
    rf"([A-Z][\w.'&/-]*{_NAME_STEP}{{0,9}}\s+vs?\.\s+{_NAME_WORD}{_NAME_STEP}{{0,9}}),\s*$"
)
PROCEDURAL_NAME_RE = re.compile(
    rf"((?:[Ii]n re|Ex parte|In the Matter of|Matter of)\s+{_NAME_WORD}{_NAME_STEP}{{0,9}}),\s*$"
)
SIGNAL_RE = re.compile(
    r"^(?:See also|See generally|See, e\.g\.,|See|But see|But cf\.|Cf\.|Accord|Compare|Contra"
    r"|E\.g\.,|In|Also)\s+"
)
# "...decided by Judge Hand. Smith v. Doe": a word ending in two lowercase
# letters and a period, followed by a capital, ends the previous sentence.
SENTENCE_BREAK_RE = re.compile(r"(?<=[a-z]{2}\.)\s+(?=[A-Z])")


@dataclass
class Parenthetical:
    content: str
    start: int
    end: int  # position after the closing paren
    date: StructuredDate | None = None
    court: str | None = None
    disposition: str | None = None


@dataclass
class FullSpanScan:
    end: int
    history: list[str] = field(default_factory=list)


def extract_case(
    token: Token,
    transformation_map: TransformationMap,
    cleaned_text: str | None = None,
    *,
    case_name_window: int = CASE_NAME_WINDOW,
    parenthetical_lookahead: int = PARENTHETICAL_LOOKAHEAD,
    today: date | None = None,
) -> CaseCitation:
    """Build a CaseCitation from a case token and its surrounding text."""
    match = CASE_CORE_RE.match(token.text)
    if not match:
        raise MalformedTokenError("case", token.text)

    # Work in one coordinate system: offsets into `context` plus `base`.
    if cleaned_text is None:
        context, base = token.text, token.clean_start
    else:
        context, base = cleaned_text, 0
    core_start = token.clean_start - base
    core_end = token.clean_start + match.end() - base
    limit = min(len(context), core_end + parenthetical_lookahead)

    volume = parse_volume(match.group(1))
    reporter = re.sub(r"\s+", " ", match.group(2).strip())
    raw_page = match.group(3)
    has_blank_page = bool(BLANK_PAGE_RE.fullmatch(raw_page))
    page = None if has_blank_page else int(raw_page)
    if has_blank_page:
        logger.debug("Blank page placeholder in %r", token.text)

    pincite = None
    pincite_match = PINCITE_RE.match(context, core_end)
    if pincite_match:
        pincite = int(pincite_match.group(1))

    warnings: list[CitationWarning] = []
    court = year = structured_date = disposition = explanatory = None

    paren = _find_parenthetical(context, core_end, limit)
    if paren:
        structured_date = paren.date
        year = structured_date.year if structured_date else None
        court = paren.court
        disposition = paren.disposition
        if not (structured_date or court or disposition):
            explanatory = paren.content

        chained = _chained_parenthetical(context, paren.end, limit)
        if chained:
            if disposition is None and chained.disposition:
                disposition = chained.disposition
            elif not chained.disposition:
                explanatory = explanatory or chained.content

    if court is None and SUPREME_COURT_REPORTER_RE.match(reporter):
        court = "scotus"

    current_year = (today or date.today()).year
    if year is not None and year > current_year:
        warnings.append(CitationWarning(
            level="warning",
            message=f"Year {year} is in the future",
            start=transformation_map.to_original(token.clean_start),
            end=transformation_map.to_original(token.clean_end),
        ))

    name_start, case_name = _find_case_name(context, core_start, case_name_window)
    parties = extract_parties(case_name) if case_name else None

    scan = _scan_full_span(context, core_end, limit)
    full_start = (name_start if name_start is not None else core_start) + base
    full_end = max(scan.end, core_end) + base

    full_original_start, full_original_end = transformation_map.to_original_span(full_start, full_end)

    return CaseCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=score_case_confidence(reporter, year, has_blank_page, current_year),
        warnings=tuple(warnings),
        volume=volume,
        reporter=reporter,
        page=page,
        pincite=pincite,
        court=court,
        year=year,
        date=structured_date,
        disposition=disposition,
        parenthetical=explanatory,
        case_name=case_name,
        plaintiff=parties.plaintiff if parties else None,
        defendant=parties.defendant if parties else None,
        plaintiff_normalized=parties.plaintiff_normalized if parties else None,
        defendant_normalized=parties.defendant_normalized if parties else None,
        procedural_prefix=parties.procedural_prefix if parties else None,
        subsequent_history=", ".join(scan.history) or None,
        has_blank_page=has_blank_page,
        full_span=Span(
            clean_start=full_start,
            clean_end=full_end,
            original_start=full_original_start,
            original_end=full_original_end,
        ),
    )


def score_case_confidence(
    reporter: str, year: int | None, has_blank_page: bool, current_year: int
) -> float:
    """0.5 base, +0.3 for a common reporter, +0.2 for a plausible year.

    A blank page placeholder pins the score at 0.8 regardless.
    """
    if has_blank_page:
        return 0.8
    confidence = 0.5
    if re.sub(r"\s+", "", reporter) in COMMON_REPORTERS:
        confidence += 0.3
    if year is not None and year <= current_year:
        confidence += 0.2
    return min(confidence, 1.0)


def _find_parenthetical(text: str, pos: int, limit: int) -> Parenthetical | None:
    """Court/date parenthetical right after the citation, skipping pincites."""
    start_match = PARENTHETICAL_START_RE.match(text, pos, limit)
    if not start_match:
        return None
    return _parse_parenthetical(text, start_match.end() - 1, limit)


def _chained_parenthetical(text: str, pos: int, limit: int) -> Parenthetical | None:
    start_match = CHAINED_PAREN_RE.match(text, pos, limit)
    if not start_match:
        return None
    return _parse_parenthetical(text, start_match.end() - 1, limit)


def _parse_parenthetical(text: str, open_pos: int, limit: int) -> Parenthetical | None:
    close_pos = matching_paren(text, open_pos, limit)
    if close_pos is None:
        return None

    content = text[open_pos + 1:close_pos].strip()
    paren = Parenthetical(content=content, start=open_pos, end=close_pos + 1)

    disposition = DISPOSITION_RE.search(content)
    if disposition:
        paren.disposition = disposition.group(1).lower()

    paren.date = parse_date(content)
    if paren.date or len(content) <= 40:
        court = strip_date(DISPOSITION_RE.sub(" ", content)).strip(" ,;")
        # Explanatory parentheticals ("holding that ...") start lowercase.
        if court and not court[0].islower():
            paren.court = court
    return paren


def matching_paren(text: str, open_pos: int, limit: int) -> int | None:
    """Index of the ``)`` closing the ``(`` at ``open_pos``, or None before ``limit``."""
    depth = 0
    for i in range(open_pos, min(limit, len(text))):
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return None


def _find_case_name(text: str, core_start: int, window: int) -> tuple[int | None, str | None]:
    """Search backward from the citation for a case name ending in a comma.

    The window stops at the nearest semicolon, which separates citations in
    a string cite.
    """
    window_start = max(0, core_start - window)
    before = text[window_start:core_start]
    semicolon = before.rfind(";")
    if semicolon != -1:
        window_start += semicolon + 1
        before = before[semicolon + 1:]

    match = PROCEDURAL_NAME_RE.search(before)
    if match:
        return window_start + match.start(1), match.group(1).strip()

    match = ADVERSARIAL_NAME_RE.search(before)
    if not match:
        return None, None

    name = match.group(1)
    offset = match.start(1)

    plaintiff_part = re.split(r"\s+vs?\.\s+", name, maxsplit=1)[0]
    breaks = list(SENTENCE_BREAK_RE.finditer(plaintiff_part))
    if breaks:
        cut = breaks[-1].end()
        name, offset = name[cut:], offset + cut

    while True:
        signal = SIGNAL_RE.match(name)
        if not signal or not re.search(r"\s+vs?\.\s+", name[signal.end():]):
            break
        name, offset = name[signal.end():], offset + signal.end()

    return window_start + offset, name.strip()


def _scan_full_span(text: str, pos: int, limit: int) -> FullSpanScan:
    """Walk forward over pincites, parentheticals and subsequent history."""
    scan = FullSpanScan(end=pos)
    i = pos
    while i < limit:
        pincite = PINCITE_RE.match(text, i, limit)
        if pincite:
            i = scan.end = pincite.end()
            continue

        paren = CHAINED_PAREN_RE.match(text, i, limit)
        if paren:
            close_pos = matching_paren(text, paren.end() - 1, limit)
            if close_pos is None:
                break
            i = scan.end = close_pos + 1
            continue

        history = SUBSEQUENT_HISTORY_RE.match(text, i, limit)
        if history:
            # The history marker is followed by its own citation and parenthetical.
            open_pos = text.find("(", history.end(), limit)
            if open_pos == -1:
                break
            close_pos = matching_paren(text, open_pos, limit)
            if close_pos is None:
                break
            scan.history.append(history.group(1))
            i = scan.end = close_pos + 1
            continue
        break
    return scan
