"""Document repository errors."""


class DocumentError(Exception):
    """Base exception for document repository operations."""


class SourceMissingError(DocumentError):
    """Raised when the file to add does not exist."""


class NoSuchDocumentError(DocumentError):
    """Raised when no registered document carries the requested id."""


class DocumentIOError(DocumentError):
    """Raised when reading, copying or deleting document files fails."""
