"""Helpers shared by the per-type extractors."""

import re

from citetrace.citations import Span
from citetrace.cleaner.position_map import TransformationMap
from citetrace.tokenizer.tokenizer import Token

# "(2021)", "(Jan. 5, 2021)" or "(D.C. Cir. 2021)", optionally after a pincite
TRAILING_YEAR_RE = re.compile(r"(?:,\s*\d+(?:[-–]\d+)?)?\s*\((?:[^()]{0,80}?\s)?(\d{4})\)")
TRAILING_PINCITE_RE = re.compile(r",\s*(\d+)(?:[-–]\d+)?(?=\s*(?:[,;.()]|$)|\s+[a-z])")


def token_span(token: Token, transformation_map: TransformationMap) -> Span:
    original_start, original_end = transformation_map.to_original_span(token.clean_start, token.clean_end)
    return Span(
        clean_start=token.clean_start,
        clean_end=token.clean_end,
        original_start=original_start,
        original_end=original_end,
    )


def trailing_year(cleaned_text: str | None, pos: int) -> int | None:
    """Year from a parenthetical immediately following ``pos``."""
    if not cleaned_text:
        return None
    match = TRAILING_YEAR_RE.match(cleaned_text, pos)
    return int(match.group(1)) if match else None


def trailing_pincite(cleaned_text: str | None, pos: int) -> int | None:
    if not cleaned_text:
        return None
    match = TRAILING_PINCITE_RE.match(cleaned_text, pos)
    return int(match.group(1)) if match else None
