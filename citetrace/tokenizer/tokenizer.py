"""Turn cleaned text into candidate citation tokens."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from citetrace.citations import CitationType
from citetrace.tokenizer.patterns import DEFAULT_PATTERNS, Pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    text: str
    clean_start: int
    clean_end: int
    type: CitationType
    pattern_id: str


def tokenize(cleaned_text: str, patterns: Sequence[Pattern] = DEFAULT_PATTERNS) -> list[Token]:
    """Run every pattern over ``cleaned_text`` and return tokens in document order.

    A pattern that raises is logged and skipped so the others still
    contribute. When several patterns match the exact same span, only the
    token from the earliest pattern survives.
    """
    tokens: list[Token] = []

    for pattern in patterns:
        try:
            found = [
                Token(
                    text=match.group(0),
                    clean_start=match.start(),
                    clean_end=match.end(),
                    type=pattern.type,
                    pattern_id=pattern.id,
                )
                for match in pattern.regex.finditer(cleaned_text)
                if match.end() > match.start()
            ]
        except Exception as e:
            logger.warning("Pattern %s raised %s, skipping: %s", pattern.id, type(e).__name__, e)
            continue
        tokens.extend(found)

    # sort() is stable, so pattern order is preserved among equal starts
    tokens.sort(key=lambda t: t.clean_start)
    return dedupe_tokens(tokens)


def dedupe_tokens(tokens: Sequence[Token]) -> list[Token]:
    """Keep the first token seen for each exact (start, end) pair."""
    seen: set[tuple[int, int]] = set()
    unique = []
    for token in tokens:
        key = (token.clean_start, token.clean_end)
        if key not in seen:
            seen.add(key)
            unique.append(token)
    return unique
