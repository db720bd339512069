"""Read and write client documents as JSON files."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from .errors import InvalidPath, StorageIOError
from .models import ClientDocument
from .paths import PathResolver
from .schema import validate_client_document

logger = logging.getLogger(__name__)


class DocumentCodec:
    """JSON persistence for one document per client id."""

    def __init__(self, resolver: PathResolver):
        self.resolver = resolver

    def path_for(self, client_id: str) -> Path:
        path = self.resolver.client_path(client_id)
        if path is None:
            raise InvalidPath(client_id)
        return path

    def exists(self, client_id: str) -> bool:
        return self.path_for(client_id).is_file()

    def load_raw(self, client_id: str) -> Dict[str, Any] | None:
        """
        Return the parsed JSON object stored for `client_id`, or None.

        A missing file is the normal "absent" case. Unreadable files and
        malformed JSON are logged and also reported as absent so a single
        corrupt document cannot break its callers.
        """
        path = self.path_for(client_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.error("Error reading client data for %s at %s: %s", client_id, path, exc)
            return None
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring malformed JSON in %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top-level value is not an object", path)
            return None
        return data

    def read(self, client_id: str) -> ClientDocument | None:
        data = self.load_raw(client_id)
        if data is None:
            return None
        try:
            validate_client_document(data)
            return ClientDocument.model_validate(data)
        except (ValueError, ValidationError) as exc:
            logger.warning("Ignoring invalid client document %s: %s", client_id, exc)
            return None

    def write(self, client_id: str, document: ClientDocument) -> None:
        """
        Persist the full document, replacing any previous version atomically.

        The JSON is written to a temporary sibling first; the target is only
        replaced once that write has succeeded.
        """
        path = self.path_for(client_id)
        payload = json.dumps(document.to_json(), ensure_ascii=False, indent=2)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.stem}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
                handle.write("\n")
            os.replace(tmp_name, path)
        except OSError as exc:
            logger.error("Error writing client data for %s at %s: %s", client_id, path, exc)
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageIOError(f"Failed to write client data for {client_id}.", path) from exc

    def remove(self, client_id: str) -> None:
        path = self.path_for(client_id)
        try:
            path.unlink()
        except OSError as exc:
            logger.error("Error deleting client file %s: %s", path, exc)
            raise StorageIOError(f"Error deleting client file for {client_id}.", path) from exc
