from pathlib import Path

from pydantic_settings import BaseSettings

from citetrace.cleaner.position_map import DEFAULT_LOOKAHEAD
from citetrace.extractor.case import CASE_NAME_WINDOW, PARENTHETICAL_LOOKAHEAD
from citetrace.extractor.pipeline import ExtractOptions
from citetrace.extractor.validation import ReporterRepository
from citetrace.resolver.document_resolver import PARTY_LOOKBACK_WINDOW, ResolutionOptions
from citetrace.resolver.scope import DEFAULT_PARAGRAPH_BOUNDARY, ScopeStrategy


class Settings(BaseSettings):
    # Resolution
    scope_strategy: ScopeStrategy = ScopeStrategy.PARAGRAPH
    paragraph_boundary_pattern: str = DEFAULT_PARAGRAPH_BOUNDARY
    fuzzy_party_matching: bool = True
    party_match_threshold: float = 0.8
    report_unresolved: bool = True

    # Search windows (characters)
    case_name_window: int = CASE_NAME_WINDOW
    party_lookback_window: int = PARTY_LOOKBACK_WINDOW
    parenthetical_lookahead: int = PARENTHETICAL_LOOKAHEAD
    cleaner_lookahead: int = DEFAULT_LOOKAHEAD

    # Reporter validation
    validate_reporters: bool = False
    reporters_path: str = ""  # empty means the bundled config/reporters.json

    # Logging
    log_dir: Path | None = None  # defaults to ~/.citetrace/logs

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "CITETRACE_"}

    def resolution_options(self) -> ResolutionOptions:
        return ResolutionOptions(
            scope_strategy=self.scope_strategy,
            paragraph_boundary_pattern=self.paragraph_boundary_pattern,
            fuzzy_party_matching=self.fuzzy_party_matching,
            party_match_threshold=self.party_match_threshold,
            report_unresolved=self.report_unresolved,
            party_lookback_window=self.party_lookback_window,
        )

    def load_reporters(self) -> ReporterRepository:
        if self.reporters_path:
            return ReporterRepository.from_json(self.reporters_path)
        return ReporterRepository.load_default()

    def extract_options(self, resolve: bool = False) -> ExtractOptions:
        return ExtractOptions(
            resolve=resolve,
            resolution=self.resolution_options(),
            validate=self.validate_reporters,
            reporters=self.load_reporters() if self.validate_reporters else None,
            case_name_window=self.case_name_window,
            parenthetical_lookahead=self.parenthetical_lookahead,
            cleaner_lookahead=self.cleaner_lookahead,
        )
