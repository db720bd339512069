"""Initial review lists for newly created clients."""

from __future__ import annotations

import json
import logging
from typing import Callable, List, Optional, Sequence

from .config import DEFAULT_SEED_FILE
from .paths import PathResolver
from .schema import validate_seed_file

logger = logging.getLogger(__name__)

SECURITY_WARNING_REVIEWS = ["Security warning: Invalid file path."]
HARD_FALLBACK_REVIEWS = ["Excellent service!", "Very professional."]

# A strategy returns the reviews it found, or None to let the next one try.
SeedStrategy = Callable[[], Optional[List[str]]]


class SeedLoader:
    """
    Load the review list a new client starts with.

    Sources are tried in order: the requested seed file, the default seed
    file, then a hard-coded list, so `load` always returns something usable.
    """

    def __init__(
        self, resolver: PathResolver, default_seed_file: str = DEFAULT_SEED_FILE
    ):
        self.resolver = resolver
        self.default_seed_file = default_seed_file

    def load(self, seed_name: str | None = None) -> List[str]:
        name = seed_name or self.default_seed_file
        if self.resolver.resolve(name) is None:
            logger.warning("Refusing to read seed file outside the data root: %r", name)
            return list(SECURITY_WARNING_REVIEWS)

        for strategy in self._strategies(name):
            reviews = strategy()
            if reviews is not None:
                return reviews
        return self._hard_fallback()

    def _strategies(self, name: str) -> Sequence[SeedStrategy]:
        chain: list[SeedStrategy] = [lambda: self._read_seed(name)]
        if name != self.default_seed_file:
            chain.append(self._read_default)
        return chain

    def _read_default(self) -> Optional[List[str]]:
        logger.warning(
            "Falling back to default seed file %s", self.default_seed_file
        )
        return self._read_seed(self.default_seed_file)

    def _hard_fallback(self) -> List[str]:
        logger.error(
            "Could not read any seed file; using the built-in review list."
        )
        return list(HARD_FALLBACK_REVIEWS)

    def _read_seed(self, name: str) -> Optional[List[str]]:
        path = self.resolver.resolve(name)
        if path is None:
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            validate_seed_file(data)
        except FileNotFoundError:
            logger.info("Seed file %s does not exist", name)
            return None
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError too.
            logger.warning("Could not use seed file %s: %s", name, exc)
            return None
        reviews = list(data["reviews"])
        logger.info("Loaded %d reviews from %s.", len(reviews), name)
        return reviews
