"""Metadata store errors."""


class StateError(Exception):
    """Base exception for metadata store operations."""


class MissingStateError(StateError):
    """Raised when the document-info file does not exist."""
