"""Metadata directory resolution and first-run initialization.

Layout of the metadata root::

    .ago/docs/info          document-info file (JSON)
    .ago/docs/doc<id>/...   private copy of each registered document
    .ago/words              reserved word-info file, created empty
    .ago/config.yaml        optional configuration
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ago.config import CONFIG_FILENAME
from ago.documents import DocumentRepository, WordAnalyzer
from ago.documents.repository import DIR_MODE
from ago.state import FILE_MODE, DocumentsInfo, MetadataStore

LOGGER = logging.getLogger(__name__)

METADATA_DIRNAME = ".ago"
DOCS_DIRNAME = "docs"
DOCINFO_FILENAME = "info"
WORDINFO_FILENAME = "words"
DEFAULT_BASE_DIR = Path("/tmp")
ANDROID_PLATFORM = "android"
ANDROID_BASE_DIR = Path("/data/local/tmp")


class BootstrapError(Exception):
    """Raised when the metadata directory cannot be created."""


@dataclass(frozen=True, slots=True)
class AgoPaths:
    """Filesystem locations derived from the metadata root.

    Attributes:
        root: Metadata root directory.
        docs_dir: Directory holding per-document subdirectories.
        doc_info: Document-info JSON file.
        word_info: Reserved word-info file.
        config: Configuration file.
    """

    root: Path
    docs_dir: Path
    doc_info: Path
    word_info: Path
    config: Path

    @classmethod
    def from_root(cls, root: Path) -> "AgoPaths":
        docs_dir = root / DOCS_DIRNAME
        return cls(
            root=root,
            docs_dir=docs_dir,
            doc_info=docs_dir / DOCINFO_FILENAME,
            word_info=root / WORDINFO_FILENAME,
            config=root / CONFIG_FILENAME,
        )


def resolve_metadata_root(
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> Path:
    """Return ``<base>/.ago`` for the current environment.

    The Android temp directory is picked first, but a non-empty ``HOME``
    always wins, so the Android branch only applies when ``HOME`` is unset.

    Args:
        env: Environment mapping; defaults to ``os.environ``.
        platform: Platform identifier; defaults to ``sys.platform``.

    Returns:
        Path: Metadata root directory.
    """
    env = os.environ if env is None else env
    platform = sys.platform if platform is None else platform

    base = DEFAULT_BASE_DIR
    if platform == ANDROID_PLATFORM:
        base = ANDROID_BASE_DIR
    home = env.get("HOME", "")
    if home:
        base = Path(home)
    return base / METADATA_DIRNAME


def initialize_metadata(paths: AgoPaths, store: MetadataStore) -> DocumentsInfo:
    """Load the collection, creating the metadata layout on first run.

    Args:
        paths: Locations derived from the metadata root.
        store: Store used to persist and load the document-info file.

    Returns:
        DocumentsInfo: The loaded collection state.

    Raises:
        BootstrapError: If directories or files cannot be created.
        StateError: If the document-info file cannot be read, parsed or written.
    """
    if paths.docs_dir.exists():
        return store.load(paths.doc_info)

    LOGGER.debug("docs dir %s does not exist. Creating it.", paths.docs_dir)
    try:
        paths.docs_dir.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise BootstrapError(f"docs dir {paths.docs_dir} creation failed: {exc}") from exc

    for path in (paths.doc_info, paths.word_info):
        try:
            path.touch()
            path.chmod(FILE_MODE)
        except OSError as exc:
            raise BootstrapError(f"file {path} creation failed: {exc}") from exc

    store.save(paths.doc_info, DocumentsInfo(next_id=0))
    return store.load(paths.doc_info)


@dataclass(slots=True)
class Workspace:
    """Everything a command needs: paths, the store, state and repository."""

    paths: AgoPaths
    store: MetadataStore
    state: DocumentsInfo
    repository: DocumentRepository

    def flush(self) -> None:
        """Persist the in-memory collection.

        Raises:
            StateError: If the document-info file cannot be written.
        """
        self.store.save(self.paths.doc_info, self.state)


def open_workspace(
    paths: AgoPaths,
    analyzer: WordAnalyzer,
    store: MetadataStore | None = None,
) -> Workspace:
    """Initialize or load metadata under ``paths`` and wire up a repository."""
    store = store or MetadataStore()
    state = initialize_metadata(paths, store)
    repository = DocumentRepository(paths.docs_dir, state, analyzer)
    return Workspace(paths=paths, store=store, state=state, repository=repository)


__all__ = [
    "AgoPaths",
    "BootstrapError",
    "Workspace",
    "initialize_metadata",
    "open_workspace",
    "resolve_metadata_root",
]
