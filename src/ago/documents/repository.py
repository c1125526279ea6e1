"""Filesystem layer keeping document copies in sync with the collection."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ago.state import FILE_MODE, DocumentRecord, DocumentsInfo

from .analysis import WordAnalyzer
from .errors import DocumentIOError, NoSuchDocumentError, SourceMissingError

LOGGER = logging.getLogger(__name__)

DOCDIR_PREFIX = "doc"
DIR_MODE = 0o700


def document_dirname(doc_id: int) -> str:
    """Return the directory name holding the copy of document ``doc_id``."""
    return f"{DOCDIR_PREFIX}{doc_id}"


def format_record(record: DocumentRecord) -> str:
    """Render a record the way ``ls-docs`` prints it."""
    return f"{record.id}: {record.name}"


class DocumentRepository:
    """Manage per-document directories under the documents root.

    Mutations only touch the in-memory :class:`DocumentsInfo`; persisting it is
    left to the caller so a command can flush once after processing all of its
    arguments.
    """

    def __init__(self, docs_dir: Path, state: DocumentsInfo, analyzer: WordAnalyzer) -> None:
        """Initialize the repository.

        Args:
            docs_dir: Directory containing ``doc<id>`` subdirectories.
            state: Collection state mutated by add and remove.
            analyzer: Word analyzer notified about added and removed documents.
        """
        self.docs_dir = docs_dir
        self.state = state
        self.analyzer = analyzer

    @property
    def records(self) -> list[DocumentRecord]:
        """Return a copy of the registered records in insertion order."""
        return list(self.state.docs)

    def document_dir(self, doc_id: int) -> Path:
        """Return the directory holding the copy of document ``doc_id``."""
        return self.docs_dir / document_dirname(doc_id)

    def get(self, doc_id: int) -> DocumentRecord | None:
        """Return the record with ``doc_id`` if one is registered."""
        for doc in self.state.docs:
            if doc.id == doc_id:
                return doc
        return None

    def add(self, source: Path) -> DocumentRecord:
        """Copy ``source`` into a fresh document directory and register it.

        The id counter only advances once the copy has been written, so a
        failed add does not consume an id.

        Args:
            source: File to register.

        Returns:
            DocumentRecord: The newly registered record.

        Raises:
            SourceMissingError: If ``source`` does not exist.
            DocumentIOError: If reading the source, creating the directory or
                writing the copy fails.
        """
        if not source.exists():
            raise SourceMissingError("file not exists")

        try:
            content = source.read_bytes()
        except OSError as exc:
            raise DocumentIOError(f"failed to read file: {exc}") from exc

        name = source.name
        self.analyzer.analyze(name, content)

        doc_id = self.state.next_id
        directory = self.document_dir(doc_id)
        try:
            directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise DocumentIOError(f"failed to create dir: {exc}") from exc

        target = directory / name
        try:
            target.write_bytes(content)
            target.chmod(FILE_MODE)
        except OSError as exc:
            raise DocumentIOError(f"failed to write file: {exc}") from exc

        record = DocumentRecord(name=name, id=doc_id)
        self.state.next_id += 1
        self.state.docs.append(record)
        LOGGER.debug("Registered %s as document %d", source, doc_id)
        return record

    def remove(self, doc_id: int) -> DocumentRecord:
        """Delete the directory of document ``doc_id`` and unregister it.

        Args:
            doc_id: Identifier of the document to remove.

        Returns:
            DocumentRecord: The removed record.

        Raises:
            NoSuchDocumentError: If no record carries ``doc_id``.
            DocumentIOError: If the directory cannot be deleted; the record is
                kept in that case.
        """
        for index, doc in enumerate(self.state.docs):
            if doc.id != doc_id:
                continue
            directory = self.document_dir(doc.id)
            try:
                shutil.rmtree(directory)
            except FileNotFoundError:
                LOGGER.debug("Directory %s already gone", directory)
            except OSError as exc:
                raise DocumentIOError(f"failed to remove dir: {exc}") from exc

            removed = self.state.docs.pop(index)
            self.analyzer.forget(removed.id)
            LOGGER.debug("Removed document %d (%s)", removed.id, removed.name)
            return removed
        raise NoSuchDocumentError("no such doc")

    def list_documents(self) -> list[str]:
        """Return ``"<id>: <name>"`` lines in insertion order."""
        return [format_record(doc) for doc in self.state.docs]


__all__ = [
    "DocumentRepository",
    "DOCDIR_PREFIX",
    "DIR_MODE",
    "document_dirname",
    "format_record",
]
