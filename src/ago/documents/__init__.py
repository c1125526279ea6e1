"""Document registration and removal."""

from .analysis import PlaceholderWordAnalyzer, WordAnalyzer
from .errors import DocumentError, DocumentIOError, NoSuchDocumentError, SourceMissingError
from .repository import DocumentRepository, document_dirname, format_record

__all__ = [
    "DocumentRepository",
    "document_dirname",
    "format_record",
    "WordAnalyzer",
    "PlaceholderWordAnalyzer",
    "DocumentError",
    "DocumentIOError",
    "NoSuchDocumentError",
    "SourceMissingError",
]
