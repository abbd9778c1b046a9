"""Vendor-neutral database citations (Westlaw, Lexis) and public laws."""

import re

from citetrace.citations import NeutralCitation, PublicLawCitation
from citetrace.cleaner.position_map import TransformationMap
from citetrace.errors import MalformedTokenError
from citetrace.extractor.common import token_span
from citetrace.tokenizer.tokenizer import Token

NEUTRAL_RE = re.compile(r"(\d{4})\s+(.+?)\s+(\d+)$")
PUBLIC_LAW_RE = re.compile(r"Pub\.\s?L\.(?:\s?No\.)?\s?(\d+)-(\d+)")


def extract_neutral(token: Token, transformation_map: TransformationMap) -> NeutralCitation:
    """``2021 WL 123456`` -> year 2021, court "WL", document "123456"."""
    match = NEUTRAL_RE.match(token.text)
    if not match:
        raise MalformedTokenError("neutral", token.text)

    return NeutralCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=1.0,
        year=int(match.group(1)),
        court=re.sub(r"\s+", " ", match.group(2)),
        document_number=match.group(3),
    )


def extract_public_law(token: Token, transformation_map: TransformationMap) -> PublicLawCitation:
    match = PUBLIC_LAW_RE.search(token.text)
    if not match:
        raise MalformedTokenError("public law", token.text)

    return PublicLawCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=0.9,
        congress=int(match.group(1)),
        law_number=int(match.group(2)),
    )
