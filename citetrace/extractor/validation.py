"""Reporter lookup used to adjust case citation confidence.

The repository is an explicit dependency handed to the pipeline. Without
one the pipeline still runs ("degraded mode") and only notes that the
check was skipped.
"""

import dataclasses
import json
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from citetrace.bundle_paths import get_reporters_path
from citetrace.citations import Citation, CitationWarning, is_case_citation
from citetrace.errors import ReporterDataError

logger = logging.getLogger(__name__)

DEGRADED_MODE_MESSAGE = "Reporter database not loaded; validation skipped"


def normalize_abbreviation(abbreviation: str) -> str:
    """Lowercase, whitespace-free lookup key ("S. Ct." and "S.Ct." collide)."""
    return re.sub(r"\s+", "", abbreviation).lower()


@dataclass(frozen=True)
class ReporterEntry:
    name: str
    cite_type: str
    editions: dict[str, dict] = field(default_factory=dict)
    variations: dict[str, str] = field(default_factory=dict)
    mlz_jurisdiction: tuple[str, ...] = ()

    def canonical_abbreviation(self, reporter: str) -> str:
        """Edition abbreviation that ``reporter`` refers to in this entry."""
        key = normalize_abbreviation(reporter)
        for edition in self.editions:
            if normalize_abbreviation(edition) == key:
                return edition
        for variant, canonical in self.variations.items():
            if normalize_abbreviation(variant) == key:
                return canonical
        return reporter


@dataclass
class ReporterRepository:
    by_normalized_abbreviation: dict[str, list[ReporterEntry]] = field(default_factory=dict)

    def lookup(self, reporter: str) -> list[ReporterEntry]:
        return self.by_normalized_abbreviation.get(normalize_abbreviation(reporter), [])

    @classmethod
    def from_dict(cls, data: dict) -> "ReporterRepository":
        """Index reporters-db shaped data: ``{abbreviation: [entry, ...]}``."""
        if not isinstance(data, dict):
            raise ReporterDataError("Reporter data must be a JSON object keyed by abbreviation")

        index: dict[str, list[ReporterEntry]] = {}
        for abbreviation, raw_entries in data.items():
            if not isinstance(raw_entries, list):
                raise ReporterDataError(f"Entries for {abbreviation!r} must be a list")
            for raw in raw_entries:
                try:
                    entry = ReporterEntry(
                        name=raw["name"],
                        cite_type=raw.get("cite_type", ""),
                        editions=dict(raw.get("editions") or {}),
                        variations=dict(raw.get("variations") or {}),
                        mlz_jurisdiction=tuple(raw.get("mlz_jurisdiction") or ()),
                    )
                except (KeyError, TypeError, AttributeError) as e:
                    raise ReporterDataError(f"Malformed entry under {abbreviation!r}: {e}") from e

                for key in list(entry.editions) + list(entry.variations):
                    bucket = index.setdefault(normalize_abbreviation(key), [])
                    if entry not in bucket:
                        bucket.append(entry)
        return cls(by_normalized_abbreviation=index)

    @classmethod
    def from_json(cls, path: Path) -> "ReporterRepository":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ReporterDataError(f"Could not read reporter data from {path}: {e}") from e
        repository = cls.from_dict(data)
        logger.debug("Loaded %d reporter abbreviations from %s", len(repository.by_normalized_abbreviation), path)
        return repository

    @classmethod
    def load_default(cls) -> "ReporterRepository":
        return cls.from_json(get_reporters_path())


@dataclass(frozen=True)
class ConfidenceScoring:
    reporter_match_boost: float = 0.2
    reporter_miss_penalty: float = -0.3
    ambiguity_penalty: float = -0.1


def validate_and_score(
    citation: Citation,
    repository: ReporterRepository,
    scoring: ConfidenceScoring = ConfidenceScoring(),
) -> Citation:
    """Adjust a case citation's confidence by how its reporter looks up.

    Other citation types pass through untouched.
    """
    if not is_case_citation(citation) or not citation.reporter:
        return citation

    matches = repository.lookup(citation.reporter)
    if not matches:
        return dataclasses.replace(
            citation,
            confidence=_clamp(citation.confidence + scoring.reporter_miss_penalty),
            warnings=citation.warnings + (
                _warning(citation, "warning", f'Reporter "{citation.reporter}" not found in database'),
            ),
        )

    if len(matches) == 1:
        return dataclasses.replace(
            citation,
            confidence=_clamp(citation.confidence + scoring.reporter_match_boost),
            normalized_reporter=matches[0].canonical_abbreviation(citation.reporter),
        )

    penalty = scoring.ambiguity_penalty * (len(matches) - 1)
    names = ", ".join(m.name for m in matches)
    return dataclasses.replace(
        citation,
        confidence=_clamp(citation.confidence + penalty),
        warnings=citation.warnings + (_warning(citation, "warning", f"Ambiguous reporter: {names}"),),
    )


def validate_citations(
    citations: Sequence[Citation],
    repository: ReporterRepository | None,
    scoring: ConfidenceScoring = ConfidenceScoring(),
) -> list[Citation]:
    if repository is None:
        logger.info(DEGRADED_MODE_MESSAGE)
        return [
            dataclasses.replace(c, warnings=c.warnings + (_warning(c, "info", DEGRADED_MODE_MESSAGE),))
            for c in citations
        ]
    return [validate_and_score(c, repository, scoring) for c in citations]


def _warning(citation: Citation, level: str, message: str) -> CitationWarning:
    return CitationWarning(
        level=level,
        message=message,
        start=citation.span.original_start,
        end=citation.span.original_end,
    )


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))
