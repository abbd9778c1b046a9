"""Bidirectional position mapping between original and cleaned text.

Every cleaner that changes the text gets its before/after strings aligned by
a greedy walk with a bounded lookahead. A mismatch is classified as a
deletion (characters dropped from the old text), an insertion (characters
added to the new text), a replacement of one character by a longer or
shorter run or, when nothing resolves inside the window, a 1:1
substitution. The walk never fails: a transform larger than the window
only makes the mapping less precise around that spot.
"""

from dataclasses import dataclass, field

DEFAULT_LOOKAHEAD = 20

# Characters compared after a candidate edit when ranking candidates
AGREEMENT_CAP = 8

# Skips that re-synchronize on fewer characters are treated as unresolved
MIN_SKIP_AGREEMENT = 2


@dataclass
class TransformationMap:
    clean_to_original: dict[int, int] = field(default_factory=dict)
    original_to_clean: dict[int, int] = field(default_factory=dict)

    @classmethod
    def identity(cls, length: int) -> "TransformationMap":
        positions = {i: i for i in range(length + 1)}
        return cls(clean_to_original=positions, original_to_clean=dict(positions))

    def to_original(self, clean_pos: int) -> int:
        return self.clean_to_original.get(clean_pos, clean_pos)

    def to_clean(self, original_pos: int) -> int:
        return self.original_to_clean.get(original_pos, original_pos)

    def to_original_span(self, clean_start: int, clean_end: int) -> tuple[int, int]:
        """Translate a half-open cleaned range into the original text.

        The end is mapped through the last character of the range rather than
        the position after it, so characters a cleaner removed right after
        the range (a closing tag, collapsed whitespace) stay outside.
        """
        start = self.to_original(clean_start)
        if clean_end <= clean_start:
            return start, start
        end = self.to_original(clean_end - 1) + 1
        return start, max(end, start + 1)


@dataclass
class Alignment:
    """Character alignment between one cleaner's input and output."""

    before_to_after: dict[int, int]
    after_to_before: dict[int, int]
    substitutions: int = 0


def align(before: str, after: str, lookahead: int = DEFAULT_LOOKAHEAD) -> Alignment:
    before_to_after: dict[int, int] = {}
    after_to_before: dict[int, int] = {}
    substitutions = 0
    b, a = 0, 0
    b_len, a_len = len(before), len(after)

    while b < b_len or a < a_len:
        if b >= b_len:
            # Trailing insertion
            after_to_before[a] = b
            a += 1
            continue
        if a >= a_len:
            # Trailing deletion
            before_to_after[b] = a
            b += 1
            continue
        if before[b] == after[a]:
            before_to_after[b] = a
            after_to_before[a] = b
            b += 1
            a += 1
            continue

        kind, distance = _classify(before, b, after, a, lookahead)
        if kind == "delete":
            for i in range(distance):
                before_to_after[b + i] = a
            b += distance
            continue
        if kind == "insert":
            for i in range(distance):
                after_to_before[a + i] = b
            a += distance
            continue

        before_to_after[b] = a
        after_to_before[a] = b
        if kind == "replace_delete":
            for i in range(1, distance + 1):
                before_to_after[b + i] = a + 1
            b += distance
        elif kind == "replace_insert":
            # The extra characters belong to the one they replaced
            for i in range(1, distance + 1):
                after_to_before[a + i] = b
            a += distance
        else:
            substitutions += 1
        b += 1
        a += 1

    before_to_after[b_len] = a_len
    after_to_before[a_len] = b_len
    return Alignment(before_to_after, after_to_before, substitutions)


def _agreement(x: str, i: int, y: str, j: int) -> int:
    """Count matching characters from ``x[i]`` and ``y[j]``, capped."""
    n = 0
    while n < AGREEMENT_CAP and i + n < len(x) and j + n < len(y):
        if x[i + n] != y[j + n]:
            return n
        n += 1
    if i + n == len(x) and j + n == len(y):
        # Both texts end together: a perfect alignment
        return AGREEMENT_CAP
    return n


def _classify(before: str, b: int, after: str, a: int, lookahead: int) -> tuple[str, int]:
    """Pick the edit at a mismatch that re-synchronizes the texts best.

    Deletions skip ahead in ``before``, insertions skip ahead in ``after``.
    A replacement pairs the current characters 1:1 and then skips, which
    covers a run collapsing to one character ("\\n\\n" -> " ", "&amp;" ->
    "&"). The candidate followed by the longest agreeing run wins; equal
    runs go to the cheaper edit, then to the earlier kind in the order
    substitute, delete, insert, replace-delete, replace-insert.
    """
    candidates = [("substitute", 1, 1, _agreement(before, b + 1, after, a + 1))]
    for distance in range(1, lookahead + 1):
        if b + distance < len(before):
            candidates.append(("delete", distance, distance, _agreement(before, b + distance, after, a)))
    for distance in range(1, lookahead + 1):
        if a + distance < len(after):
            candidates.append(("insert", distance, distance, _agreement(before, b, after, a + distance)))
    for distance in range(1, lookahead + 1):
        if b + 1 + distance <= len(before):
            candidates.append(
                ("replace_delete", distance, distance + 1, _agreement(before, b + 1 + distance, after, a + 1))
            )
    for distance in range(1, lookahead + 1):
        if a + 1 + distance <= len(after):
            candidates.append(
                ("replace_insert", distance, distance + 1, _agreement(before, b + 1, after, a + 1 + distance))
            )

    best_kind, best_distance, best_cost, best_run = candidates[0]
    for kind, distance, cost, run in candidates[1:]:
        if run < MIN_SKIP_AGREEMENT:
            continue
        if run > best_run or (run == best_run and cost < best_cost):
            best_kind, best_distance, best_cost, best_run = kind, distance, cost, run
    return best_kind, best_distance


def rebuild_position_map(
    before: str,
    after: str,
    previous: TransformationMap,
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> tuple[TransformationMap, Alignment]:
    """Compose ``previous`` with the alignment of one more transform."""
    alignment = align(before, after, lookahead)

    clean_to_original = {
        a: previous.to_original(b) for a, b in alignment.after_to_before.items()
    }
    # Compose through the previous map so original positions removed by an
    # earlier cleaner keep following the text they were attached to.
    original_to_clean = {
        o: alignment.before_to_after.get(c, c) for o, c in previous.original_to_clean.items()
    }
    return TransformationMap(clean_to_original, original_to_clean), alignment
