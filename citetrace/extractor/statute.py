"""Statute and regulation citations (U.S.C., C.F.R., state codes)."""

import re

from citetrace.citations import StatuteCitation
from citetrace.cleaner.position_map import TransformationMap
from citetrace.errors import MalformedTokenError
from citetrace.extractor.common import token_span
from citetrace.tokenizer.tokenizer import Token

STATUTE_RE = re.compile(r"(?:(\d+)\s+)?([A-Za-z.\s&]+?)\s*§+\s*(\d+[A-Za-z0-9.-]*)")

KNOWN_CODES = (
    "U.S.C",
    "C.F.R",
    "Cal. Civ. Code",
    "Cal. Penal Code",
    "N.Y. Civ. Prac. L. & R.",
    "Tex. Civ. Prac. & Rem. Code",
)


def extract_statute(token: Token, transformation_map: TransformationMap) -> StatuteCitation:
    match = STATUTE_RE.match(token.text)
    if not match:
        raise MalformedTokenError("statute", token.text)

    code = re.sub(r"\s+", " ", match.group(2).strip())
    confidence = 0.5
    if any(known in code for known in KNOWN_CODES):
        confidence += 0.3

    return StatuteCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=min(confidence, 1.0),
        title=int(match.group(1)) if match.group(1) else None,
        code=code,
        section=match.group(3).rstrip("."),
    )
