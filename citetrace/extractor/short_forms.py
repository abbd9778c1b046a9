"""Short-form citations: Id., supra and bare volume/reporter references.

These depend on an earlier full citation for meaning; the resolver links
them afterwards.
"""

import re

from citetrace.citations import IdCitation, ShortFormCaseCitation, SupraCitation, parse_volume
from citetrace.cleaner.position_map import TransformationMap
from citetrace.errors import MalformedTokenError
from citetrace.extractor.common import token_span
from citetrace.tokenizer.tokenizer import Token

ID_RE = re.compile(r"[Ii](?:d|bid)\.(?:,?\s+at\s+(\d+))?")
SUPRA_RE = re.compile(r"(.+?),?\s+supra\b(?:,?\s+at\s+(\d+))?")
SHORT_FORM_CASE_RE = re.compile(r"(\d+(?:-\d+)?)\s+(.+?)\s+at\s+(\d+)")

# Leading words the supra pattern picks up along with the party name.
SUPRA_LEAD_RE = re.compile(r"^(?:See also|See|Cf\.|But see|Accord|Compare|Contra|In|Also|And|But)\s+")


def extract_id(token: Token, transformation_map: TransformationMap) -> IdCitation:
    match = ID_RE.match(token.text)
    if not match:
        raise MalformedTokenError("Id.", token.text)

    return IdCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=1.0,
        pincite=int(match.group(1)) if match.group(1) else None,
    )


def extract_supra(token: Token, transformation_map: TransformationMap) -> SupraCitation:
    match = SUPRA_RE.match(token.text)
    if not match:
        raise MalformedTokenError("supra", token.text)

    party_name = match.group(1).strip()
    while True:
        lead = SUPRA_LEAD_RE.match(party_name)
        if not lead or lead.end() == len(party_name):
            break
        party_name = party_name[lead.end():]

    return SupraCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=0.9,
        party_name=party_name,
        pincite=int(match.group(2)) if match.group(2) else None,
    )


def extract_short_form_case(token: Token, transformation_map: TransformationMap) -> ShortFormCaseCitation:
    match = SHORT_FORM_CASE_RE.match(token.text)
    if not match:
        raise MalformedTokenError("short-form case", token.text)

    return ShortFormCaseCitation(
        text=token.text,
        span=token_span(token, transformation_map),
        matched_text=token.text,
        confidence=0.7,
        volume=parse_volume(match.group(1)),
        reporter=re.sub(r"\s+", " ", match.group(2).strip()),
        pincite=int(match.group(3)),
    )
