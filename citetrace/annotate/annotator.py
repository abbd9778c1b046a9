"""Splice markup around citations in a document.

Insertions are applied from the end of the document toward the start so
offsets not yet used stay valid. A span whose edge falls inside an HTML tag
is moved to the nearest position outside the tag; if that empties the span,
or it overlaps a citation already annotated, the citation is skipped.
"""

import html
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from citetrace.citations import Citation

logger = logging.getLogger(__name__)

CONTEXT_CHARS = 30


@dataclass(frozen=True)
class Template:
    before: str
    after: str


@dataclass
class AnnotationResult:
    text: str
    # annotated span start -> start of its markup in the output text
    position_map: dict[int, int] = field(default_factory=dict)
    skipped: list[Citation] = field(default_factory=list)


def annotate(
    text: str,
    citations: Sequence[Citation],
    template: Template | None = None,
    callback: Callable[[Citation, str], str] | None = None,
    use_clean_text: bool = False,
    use_full_span: bool = False,
    auto_escape: bool = True,
) -> AnnotationResult:
    """Wrap each citation in ``text`` using a template or a callback.

    Template mode wraps the (escaped) citation text in ``before``/``after``.
    Callback mode replaces the citation with whatever the callback returns
    for ``(citation, surrounding_text)``.
    """
    if template is None and callback is None:
        return AnnotationResult(text=text)

    placed = []
    for citation in citations:
        start, end = _bounds(citation, use_clean_text, use_full_span)
        placed.append((start, end, citation))
    placed.sort(key=lambda item: item[0], reverse=True)

    result = text
    growth: dict[int, int] = {}
    skipped: list[Citation] = []
    occupied_from = len(text)  # start of the leftmost span annotated so far

    for start, end, citation in placed:
        start, end = snap_to_safe_boundary(text, start, end)
        if end <= start or end > occupied_from:
            logger.debug("Skipping annotation for %r at %d-%d", citation.text, start, end)
            skipped.append(citation)
            continue

        if callback is not None:
            surrounding = text[max(0, start - CONTEXT_CHARS):min(len(text), end + CONTEXT_CHARS)]
            markup = callback(citation, surrounding)
        else:
            inner = text[start:end]
            if auto_escape:
                inner = html.escape(inner, quote=True)
            markup = template.before + inner + template.after

        result = result[:start] + markup + result[end:]
        growth[start] = len(markup) - (end - start)
        occupied_from = start

    # Each markup start moves by the growth of every annotation to its left.
    position_map: dict[int, int] = {}
    shift = 0
    for start in sorted(growth):
        position_map[start] = start + shift
        shift += growth[start]
    return AnnotationResult(text=result, position_map=position_map, skipped=skipped)


def _bounds(citation: Citation, use_clean_text: bool, use_full_span: bool) -> tuple[int, int]:
    span = citation.span
    if use_full_span and getattr(citation, "full_span", None) is not None:
        span = citation.full_span
    if use_clean_text:
        return span.clean_start, span.clean_end
    return span.original_start, span.original_end


def snap_to_safe_boundary(text: str, start: int, end: int) -> tuple[int, int]:
    """Move span edges that fall inside an HTML tag to just outside it.

    The start moves forward past the tag's ``>``; the end moves back to the
    tag's ``<``.
    """
    tag_start = _enclosing_tag_start(text, start)
    if tag_start is not None:
        close = text.find(">", start)
        start = close + 1 if close != -1 else len(text)

    tag_start = _enclosing_tag_start(text, end)
    if tag_start is not None:
        end = tag_start
    return start, end


def _enclosing_tag_start(text: str, pos: int) -> int | None:
    """Index of the ``<`` of a tag that strictly contains ``pos``, else None."""
    if pos <= 0 or pos >= len(text):
        return None
    open_pos = text.rfind("<", 0, pos)
    if open_pos == -1:
        return None
    close_pos = text.rfind(">", 0, pos)
    if close_pos > open_pos:
        return None
    if text.find(">", pos) == -1:
        return None
    return open_pos
