"""Federal Register and Statutes at Large citations."""

import re

from citetrace.citations import FederalRegisterCitation, StatutesAtLargeCitation, parse_volume
from citetrace.cleaner.position_map import TransformationMap
from citetrace.errors import MalformedTokenError
from citetrace.extractor.common import token_span, trailing_year
from citetrace.tokenizer.tokenizer import Token

FEDERAL_REGISTER_RE = re.compile(r"(\d+(?:-\d+)?)\s+Fed\.\s?Reg\.\s+(\d+(?:,\d{3})*)")
STATUTES_AT_LARGE_RE = re.compile(r"(\d+(?:-\d+)?)\s+Stat\.\s+(\d+)")


def extract_federal_register(
    token: Token,
    transformation_map: TransformationMap,
    cleaned_text: str | None = None,
) -> FederalRegisterCitation:
    match = FEDERAL_REGISTER_RE.match(token.text)
    if not match:
        raise MalformedTokenError("Federal Register", token.text)

    return FederalRegisterCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=0.9,
        volume=parse_volume(match.group(1)),
        page=int(match.group(2).replace(",", "")),
        year=trailing_year(cleaned_text, token.clean_end),
    )


def extract_statutes_at_large(
    token: Token,
    transformation_map: TransformationMap,
    cleaned_text: str | None = None,
) -> StatutesAtLargeCitation:
    match = STATUTES_AT_LARGE_RE.match(token.text)
    if not match:
        raise MalformedTokenError("Statutes at Large", token.text)

    return StatutesAtLargeCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=0.9,
        volume=parse_volume(match.group(1)),
        page=int(match.group(2)),
        year=trailing_year(cleaned_text, token.clean_end),
    )
