"""Mutations and queries on a client's newest-first review list."""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .errors import NoReviews, ReviewNotFound
from .repository import ClientRepository

logger = logging.getLogger(__name__)


class ReviewListManager:
    """
    Operate on the `reviews` sequence of one client document at a time.

    Reviews have no identity of their own: a review is located by its exact
    text, and deleting removes only the first match.
    """

    def __init__(
        self, repository: ClientRepository, rng: Optional[random.Random] = None
    ):
        self.repository = repository
        self.rng = rng or random.Random()

    def list_reviews(self, client_id: str) -> List[str]:
        return list(self.repository.get(client_id).reviews)

    def random_review(self, client_id: str) -> str:
        reviews = self.repository.get(client_id).reviews
        if not reviews:
            raise NoReviews(client_id)
        return reviews[self.rng.randrange(len(reviews))]

    def add_review(self, client_id: str, text: str) -> str:
        repo = self.repository
        with repo.lock_for(client_id):
            document = repo.get(client_id)
            document.reviews = [text, *document.reviews]
            repo.codec.write(client_id, document)
        logger.info("Added review to %s (%d total)", client_id, len(document.reviews))
        return text

    def delete_review(self, client_id: str, text: str) -> None:
        repo = self.repository
        with repo.lock_for(client_id):
            document = repo.get(client_id)
            try:
                index = document.reviews.index(text)
            except ValueError:
                raise ReviewNotFound(client_id, text) from None
            del document.reviews[index]
            repo.codec.write(client_id, document)
        logger.info("Deleted review from %s (%d left)", client_id, len(document.reviews))
