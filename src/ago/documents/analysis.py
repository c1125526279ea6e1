"""Word analysis capability.

Vocabulary analysis (per-document word frequencies, user scores and word
meanings kept in the ``words`` file) is not implemented yet. The repository
talks to an analyzer through :class:`WordAnalyzer` so a real engine can be
dropped in later; until then :class:`PlaceholderWordAnalyzer` only echoes the
content it receives.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol


class WordAnalyzer(Protocol):
    """Interface the document repository uses to feed the word store."""

    def analyze(self, name: str, content: bytes) -> None:
        """Record the words found in a document being added."""

    def forget(self, doc_id: int) -> None:
        """Drop word data contributed by a removed document."""


class PlaceholderWordAnalyzer:
    """Unimplemented analyzer that echoes document content and stores nothing."""

    def __init__(self, emit: Optional[Callable[[str], None]] = None) -> None:
        """Initialize the placeholder.

        Args:
            emit: Callback receiving the echoed text; ``None`` disables echoing.
        """
        self._emit = emit

    def analyze(self, name: str, content: bytes) -> None:
        """Echo the content; no word data is recorded."""
        if self._emit is None:
            return
        self._emit("analyze...\n" + content.decode("utf-8", errors="replace"))

    def forget(self, doc_id: int) -> None:
        """Do nothing; there is no word data to drop."""
        return None


__all__ = ["WordAnalyzer", "PlaceholderWordAnalyzer"]
