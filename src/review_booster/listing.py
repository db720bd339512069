"""Enumerate the JSON files in the data directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .errors import StorageIOError
from .paths import DOCUMENT_SUFFIX

logger = logging.getLogger(__name__)


class DirectoryLister:
    def __init__(self, root: Path):
        self.root = Path(root)

    def list_data_files(self) -> List[str]:
        """Sorted names of the `.json` files directly under the root."""
        try:
            return sorted(
                entry.name
                for entry in self.root.iterdir()
                if entry.name.endswith(DOCUMENT_SUFFIX) and entry.is_file()
            )
        except OSError as exc:
            logger.error("Error reading data directory %s: %s", self.root, exc)
            raise StorageIOError("Error reading data directory.", self.root) from exc

    def document_ids(self) -> List[str]:
        return [name[: -len(DOCUMENT_SUFFIX)] for name in self.list_data_files()]
