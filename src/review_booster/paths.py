"""Containment-checked path resolution under the data root."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".json"


class PathResolver:
    """
    Map client ids and seed-file names to files inside a fixed root.

    Every result is normalized first; anything that lands outside the root
    comes back as None instead of a path, so callers can tell a traversal
    attempt apart from a file that simply does not exist.
    """

    def __init__(self, root: Path):
        self.root = Path(root).expanduser().resolve()

    def resolve(self, name: str) -> Path | None:
        try:
            candidate = (self.root / name).resolve()
        except (OSError, RuntimeError, ValueError):
            # ValueError covers embedded NUL bytes, RuntimeError symlink loops.
            logger.warning("Blocked unresolvable path %r under %s", name, self.root)
            return None
        if candidate == self.root or not candidate.is_relative_to(self.root):
            logger.warning("Blocked potential path traversal: %r", name)
            return None
        return candidate

    def client_path(self, client_id: str) -> Path | None:
        return self.resolve(f"{client_id}{DOCUMENT_SUFFIX}")
