"""Exceptions raised by the extraction pipeline."""


class CitetraceError(Exception):
    """Base class for errors raised by citetrace."""


class MalformedTokenError(CitetraceError, ValueError):
    """A token's text does not fit the structural regex of its extractor.

    This is a tokenizer/extractor contract violation, not bad input text.
    The pipeline drops the offending token and keeps the rest of the batch.
    """

    def __init__(self, kind: str, token_text: str):
        self.kind = kind
        self.token_text = token_text
        super().__init__(f"Failed to parse {kind} citation: {token_text!r}")


class ReporterDataError(CitetraceError):
    """Reporter reference data could not be read or has the wrong shape."""
