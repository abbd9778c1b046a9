"""Text cleaning with position tracking back to the original document."""

import html
import logging
import re
import unicodedata
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from citetrace.citations import CitationWarning
from citetrace.cleaner.position_map import (
    DEFAULT_LOOKAHEAD,
    TransformationMap,
    rebuild_position_map,
)

logger = logging.getLogger(__name__)

Cleaner = Callable[[str], str]

_TAG_RE = re.compile(r"<[^<>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_SMART_QUOTES = str.maketrans({
    "‘": "'",
    "’": "'",
    "‚": "'",
    "‛": "'",
    "“": '"',
    "”": '"',
    "„": '"',
    "‟": '"',
})


def strip_html_tags(text: str) -> str:
    return _TAG_RE.sub("", text)


def decode_html_entities(text: str) -> str:
    return html.unescape(text)


def normalize_unicode(text: str) -> str:
    return unicodedata.normalize("NFKC", text)


def normalize_whitespace(text: str) -> str:
    """Collapse every run of whitespace (newlines included) to one space."""
    return _WHITESPACE_RE.sub(" ", text)


def fix_smart_quotes(text: str) -> str:
    return text.translate(_SMART_QUOTES)


DEFAULT_CLEANERS: tuple[Cleaner, ...] = (
    strip_html_tags,
    decode_html_entities,
    normalize_unicode,
    normalize_whitespace,
    fix_smart_quotes,
)


@dataclass
class CleanTextResult:
    cleaned: str
    transformation_map: TransformationMap
    warnings: list[CitationWarning] = field(default_factory=list)


def clean_text(
    original: str,
    cleaners: Sequence[Cleaner] | None = None,
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> CleanTextResult:
    """Apply ``cleaners`` in order, rebuilding the position map after each change.

    Clean input comes back unchanged with an identity map.
    """
    if cleaners is None:
        cleaners = DEFAULT_CLEANERS

    current = original
    transformation_map = TransformationMap.identity(len(original))
    warnings: list[CitationWarning] = []

    for cleaner in cleaners:
        updated = cleaner(current)
        if updated == current:
            continue

        transformation_map, alignment = rebuild_position_map(
            current, updated, transformation_map, lookahead
        )
        name = getattr(cleaner, "__name__", repr(cleaner))
        if alignment.substitutions and len(updated) != len(current):
            # Length changed but part of it could only be paired 1:1, so
            # offsets near those characters are approximate.
            logger.debug(
                "%s: %d positions mapped by substitution fallback", name, alignment.substitutions
            )
            warnings.append(CitationWarning(
                level="info",
                message=f"Position mapping approximate after {name} "
                        f"({alignment.substitutions} unaligned characters)",
            ))
        current = updated

    return CleanTextResult(cleaned=current, transformation_map=transformation_map, warnings=warnings)
