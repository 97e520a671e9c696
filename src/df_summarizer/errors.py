from __future__ import annotations
from pathlib import Path
from typing import Optional

# Constructor arguments go to Exception.__init__ so the errors survive
# pickling out of process-pool workers.


class SummarizerError(Exception):
    """Base class for every fatal error raised by df-summarizer."""


class AnnotationError(SummarizerError):
    pass


class MalformedCorpusError(SummarizerError):
    def __init__(self, message: str, doc_index: Optional[int] = None):
        super().__init__(message, doc_index)
        self.message = message
        self.doc_index = doc_index

    def __str__(self) -> str:
        if self.doc_index is None:
            return self.message
        return f"document #{self.doc_index}: {self.message}"


class CorpusFileError(SummarizerError):
    """A corpus file could not be counted; aborts the whole build."""

    def __init__(self, path: Path, doc_index: Optional[int], cause: BaseException):
        super().__init__(path, doc_index, cause)
        self.path = Path(path)
        self.doc_index = doc_index
        self.cause = cause

    def __str__(self) -> str:
        where = str(self.path) if self.doc_index is None else f"{self.path} (document #{self.doc_index})"
        return f"{where}: {self.cause}"


class CorpusMapError(SummarizerError):
    """The persisted frequency map is missing or unreadable."""
