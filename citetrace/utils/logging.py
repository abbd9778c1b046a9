"""Logging for the citetrace CLI.

Records go to ~/.citetrace/logs/citetrace.log and to stderr, so JSON written
to stdout stays parseable.
"""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, log_dir: Path | None = None):
    log_dir = log_dir or Path.home() / ".citetrace" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_dir / "citetrace.log", encoding="utf-8"),
            logging.StreamHandler(sys.stderr),
        ],
    )
    # Third-party loggers (pdfminer) stay at WARNING
    level = logging.DEBUG if verbose else logging.WARNING
    for name in ("citetrace", "config"):
        logging.getLogger(name).setLevel(level)
