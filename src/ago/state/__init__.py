"""Persistence helpers for the ago document-info file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .errors import MissingStateError, StateError
from .models import DocumentRecord, DocumentsInfo

LOGGER = logging.getLogger(__name__)

FILE_MODE = 0o600


class MetadataStore:
    """Load and save the document collection as a single JSON file.

    There is no locking and no atomic replace: concurrent invocations race on
    the read-modify-write cycle and a crash mid-write can leave a truncated file.
    """

    def load(self, path: Path) -> DocumentsInfo:
        """Read and parse the document-info file.

        Args:
            path: Location of the document-info file.

        Returns:
            DocumentsInfo: Deserialized collection state.

        Raises:
            MissingStateError: If the file does not exist.
            StateError: If the file cannot be read or parsed.
        """
        if not path.exists():
            raise MissingStateError(f"No document info found at {path}")

        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise StateError(f"failed to read doc info file: {exc}") from exc

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            LOGGER.debug("the json: %r", raw)
            raise StateError(f"error while parsing doc info: {exc}") from exc

        try:
            return DocumentsInfo.model_validate(data)
        except ValidationError as exc:
            raise StateError(f"invalid doc info structure: {exc}") from exc

    def save(self, path: Path, state: DocumentsInfo) -> None:
        """Overwrite the document-info file with the given state.

        Args:
            path: Location of the document-info file.
            state: Collection state to serialize.

        Raises:
            StateError: If the file cannot be written.
        """
        payload = state.model_dump(mode="json", by_alias=True)
        try:
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            path.chmod(FILE_MODE)
        except OSError as exc:
            raise StateError(f"failed to write doc info: {exc}") from exc
        LOGGER.debug("Saved %d document record(s) to %s", len(state.docs), path)


__all__ = [
    "MetadataStore",
    "FILE_MODE",
    "DocumentRecord",
    "DocumentsInfo",
    "StateError",
    "MissingStateError",
]
