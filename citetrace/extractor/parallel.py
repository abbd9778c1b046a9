"""Parallel citation detection.

``Roe v. Wade, 410 U.S. 113, 93 S. Ct. 705 (1973)`` cites one case in two
reporters. Adjacent case citations separated only by a comma and sharing
the same closing parenthetical are linked into a group.
"""

import dataclasses
from collections.abc import Sequence
from datetime import date

from citetrace.citations import CaseCitation, Citation, ParallelCitation, is_case_citation
from citetrace.extractor.case import PARENTHETICAL_LOOKAHEAD, matching_paren, score_case_confidence

MAX_PROXIMITY = 5

# Stands in for the page of a "500 F.2d ___" primary in group ids
BLANK_PAGE_ID = "___"


def detect_parallel_groups(
    citations: Sequence[Citation],
    cleaned_text: str,
    max_proximity: int = MAX_PROXIMITY,
    lookahead: int = PARENTHETICAL_LOOKAHEAD,
) -> dict[int, list[int]]:
    """Map each group's first citation index to the indices of its secondaries."""
    groups: dict[int, list[int]] = {}
    if not citations or not cleaned_text:
        return groups

    used_as_secondary: set[int] = set()
    for i, primary in enumerate(citations):
        if not is_case_citation(primary) or i in used_as_secondary:
            continue

        secondaries = []
        previous = primary
        for j in range(i + 1, len(citations)):
            secondary = citations[j]
            if not is_case_citation(secondary):
                break

            gap = cleaned_text[previous.span.clean_end:secondary.span.clean_start]
            comma = gap.rfind(",")
            if comma == -1 or len(gap) - comma - 1 > max_proximity:
                break
            # A ")" in between means each citation has its own parenthetical.
            if ")" in cleaned_text[primary.span.clean_end:secondary.span.clean_end]:
                break
            if not has_shared_parenthetical(cleaned_text, secondary.span.clean_end, lookahead):
                break

            secondaries.append(j)
            used_as_secondary.add(j)
            previous = secondary

        if secondaries:
            groups[i] = secondaries
    return groups


def has_shared_parenthetical(cleaned_text: str, pos: int, lookahead: int = PARENTHETICAL_LOOKAHEAD) -> bool:
    limit = min(len(cleaned_text), pos + lookahead)
    open_pos = cleaned_text.find("(", pos, limit)
    if open_pos == -1:
        return False
    return matching_paren(cleaned_text, open_pos, limit) is not None


def link_parallel_citations(
    citations: Sequence[Citation],
    cleaned_text: str,
    max_proximity: int = MAX_PROXIMITY,
    lookahead: int = PARENTHETICAL_LOOKAHEAD,
    today: date | None = None,
) -> list[Citation]:
    """Return a new list with group ids and parallel references filled in.

    Only the first citation of a group lists the others; every member gets
    the same ``group_id``. Year, date and court parsed from the shared
    parenthetical are copied to members that did not see it themselves.
    """
    linked = list(citations)
    groups = detect_parallel_groups(citations, cleaned_text, max_proximity, lookahead)
    current_year = (today or date.today()).year

    for first, rest in groups.items():
        primary = linked[first]
        members = [first] + rest
        page = primary.page if primary.page is not None else BLANK_PAGE_ID
        group_id = f"{primary.volume}-{primary.reporter}-{page}"
        shared = linked[members[-1]]

        for index in members:
            citation = linked[index]
            changes = {"group_id": group_id}
            if citation.year is None and shared.year is not None:
                changes["year"] = shared.year
                changes["date"] = shared.date
                changes["confidence"] = score_case_confidence(
                    citation.reporter, shared.year, citation.has_blank_page, current_year
                )
            if citation.court is None and shared.court is not None:
                changes["court"] = shared.court
            if index == first:
                changes["parallel_citations"] = tuple(
                    _reference(linked[j]) for j in rest
                )
            linked[index] = dataclasses.replace(citation, **changes)
    return linked


def _reference(citation: CaseCitation) -> ParallelCitation:
    return ParallelCitation(volume=citation.volume, reporter=citation.reporter, page=citation.page)
