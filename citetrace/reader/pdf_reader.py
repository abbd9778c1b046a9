"""Read document text from PDF, HTML or plain-text files."""

import logging
from pathlib import Path

from pdfminer.high_level import extract_text
from pdfminer.layout import LAParams

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".text", ".md", ".html", ".htm"}


def read_pdf(pdf_path: Path) -> str:
    """Extract all text from a PDF using pdfminer.six."""
    laparams = LAParams(
        line_margin=0.3,  # Tighter for court opinions and briefs
        word_margin=0.1,
        char_margin=2.0,
        boxes_flow=0.5,
    )
    text = extract_text(str(pdf_path), laparams=laparams)
    if len(text.strip()) < 100:
        logger.warning("Low text extraction from %s; may be a scanned PDF", pdf_path.name)
    return text


def read_document(path: Path) -> str:
    """Return the text of ``path``; PDFs go through pdfminer, anything else is read as UTF-8."""
    path = Path(path)
    if path.suffix.lower() == ".pdf":
        return read_pdf(path)
    if path.suffix.lower() not in TEXT_SUFFIXES:
        logger.debug("Reading %s as plain text", path.name)
    return path.read_text(encoding="utf-8", errors="replace")
