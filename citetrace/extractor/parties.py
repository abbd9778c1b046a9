"""Party-name extraction and normalization for case names."""

import re
from dataclasses import dataclass

PROCEDURAL_PREFIX_RE = re.compile(
    r"^(In re|Ex parte|In the Matter of|Matter of|Application of|Estate of)\s+",
    re.IGNORECASE,
)

ADVERSARIAL_SPLIT_RE = re.compile(r"\s+vs?\.\s+", re.IGNORECASE)

# Names that appear alone as the sole named party (criminal and
# government-initiated matters: "United States, 500 F.2d 1", "People v. ...").
GOVERNMENT_ENTITY_RE = re.compile(
    r"^(?:The\s+)?(?:United States(?: of America)?|State(?: of [A-Z][A-Za-z. ]+)?|"
    r"People(?: of the State of [A-Z][A-Za-z. ]+)?|Commonwealth(?: of [A-Z][A-Za-z. ]+)?|"
    r"Government of [A-Z][A-Za-z. ]+|United States ex rel\. .+)$",
)

_ET_AL_RE = re.compile(r",?\s+et\s+al\.?", re.IGNORECASE)
_DBA_RE = re.compile(r"\s+(?:d/b/a|a/k/a|aka|dba)\b.*$", re.IGNORECASE)
_CORPORATE_SUFFIX_RE = re.compile(
    r",?\s+(?:Inc|Corp|Co|Ltd|LLC|L\.L\.C|LLP|L\.P|LP|N\.A|P\.C|PLC|Company|Corporation|Incorporated|Limited)\.?$",
    re.IGNORECASE,
)
_TRAILING_CONNECTOR_RE = re.compile(r",?\s+(?:&|and)$", re.IGNORECASE)
_LEADING_ARTICLE_RE = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)


@dataclass
class Parties:
    plaintiff: str | None = None
    defendant: str | None = None
    plaintiff_normalized: str | None = None
    defendant_normalized: str | None = None
    procedural_prefix: str | None = None


def extract_parties(case_name: str) -> Parties:
    """Split a case name into plaintiff and defendant.

    Procedural captions ("In re Smith") and a lone government party yield a
    plaintiff only. Otherwise the name splits on the first "v."/"vs.".
    """
    name = case_name.strip()

    prefix_match = PROCEDURAL_PREFIX_RE.match(name)
    if prefix_match:
        subject = name[prefix_match.end():].strip()
        return Parties(
            plaintiff=subject,
            plaintiff_normalized=normalize_party_name(subject),
            procedural_prefix=prefix_match.group(1),
        )

    parts = ADVERSARIAL_SPLIT_RE.split(name, maxsplit=1)
    if len(parts) == 2:
        plaintiff, defendant = parts[0].strip(), parts[1].strip()
        return Parties(
            plaintiff=plaintiff,
            defendant=defendant,
            plaintiff_normalized=normalize_party_name(plaintiff),
            defendant_normalized=normalize_party_name(defendant),
        )

    if GOVERNMENT_ENTITY_RE.match(name):
        return Parties(plaintiff=name, plaintiff_normalized=normalize_party_name(name))

    return Parties()


def normalize_party_name(name: str) -> str:
    """Comparable form of a party name: lowercase, no et al., suffixes or articles."""
    name = _ET_AL_RE.sub("", name)
    name = _DBA_RE.sub("", name)
    previous = None
    while previous != name:
        previous = name
        name = _CORPORATE_SUFFIX_RE.sub("", name).strip()
        # "Smith & Co." leaves "Smith &"
        name = _TRAILING_CONNECTOR_RE.sub("", name).strip()
    name = _LEADING_ARTICLE_RE.sub("", name)
    return re.sub(r"\s+", " ", name).strip(" ,").lower()
