"""Law review and journal citations."""

import re

from citetrace.citations import JournalCitation, parse_volume
from citetrace.cleaner.position_map import TransformationMap
from citetrace.errors import MalformedTokenError
from citetrace.extractor.common import token_span, trailing_pincite, trailing_year
from citetrace.tokenizer.tokenizer import Token

JOURNAL_RE = re.compile(r"(\d+(?:-\d+)?)\s+([A-Za-z.\s&']+?)\s+(\d+)")


def extract_journal(
    token: Token,
    transformation_map: TransformationMap,
    cleaned_text: str | None = None,
) -> JournalCitation:
    match = JOURNAL_RE.match(token.text)
    if not match:
        raise MalformedTokenError("journal", token.text)

    journal = re.sub(r"\s+", " ", match.group(2).strip())
    return JournalCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=0.6,
        volume=parse_volume(match.group(1)),
        journal=journal,
        abbreviation=journal,
        page=int(match.group(3)),
        pincite=trailing_pincite(cleaned_text, token.clean_end),
        year=trailing_year(cleaned_text, token.clean_end),
    )
