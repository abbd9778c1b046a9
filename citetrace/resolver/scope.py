"""Scope boundaries limiting how far back a short form may resolve."""

import bisect
import re
from collections.abc import Sequence
from enum import Enum

from citetrace.citations import Citation

DEFAULT_PARAGRAPH_BOUNDARY = r"\n{2,}"


class ScopeStrategy(str, Enum):
    PARAGRAPH = "paragraph"
    # Section and footnote detection are not implemented; both use
    # paragraph boundaries.
    SECTION = "section"
    FOOTNOTE = "footnote"
    NONE = "none"


def detect_paragraph_boundaries(
    text: str,
    citations: Sequence[Citation],
    boundary_pattern: str | re.Pattern = DEFAULT_PARAGRAPH_BOUNDARY,
) -> dict[int, int]:
    """Map citation index -> paragraph number, by each citation's original start."""
    pattern = re.compile(boundary_pattern) if isinstance(boundary_pattern, str) else boundary_pattern
    # Paragraph n starts at starts[n]
    starts = [0] + [m.end() for m in pattern.finditer(text) if m.end() > 0]
    return {
        i: bisect.bisect_right(starts, citation.span.original_start) - 1
        for i, citation in enumerate(citations)
    }


def is_within_scope(
    antecedent_index: int,
    current_index: int,
    paragraph_map: dict[int, int],
    strategy: ScopeStrategy | str,
) -> bool:
    if ScopeStrategy(strategy) is ScopeStrategy.NONE:
        return True

    antecedent = paragraph_map.get(antecedent_index)
    current = paragraph_map.get(current_index)
    if antecedent is None or current is None:
        return True
    return antecedent == current
