"""CRUD over client documents."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .codec import DocumentCodec
from .errors import ClientConflict, ClientNotFound
from .file_lock import KeyedLocks
from .listing import DirectoryLister
from .models import ClientDetails, ClientDocument, ClientSummary
from .seeds import SeedLoader

logger = logging.getLogger(__name__)


class ClientRepository:
    """Create, read, update and delete client documents."""

    def __init__(
        self,
        codec: DocumentCodec,
        seeds: SeedLoader,
        lister: DirectoryLister,
        locks: KeyedLocks,
    ):
        self.codec = codec
        self.seeds = seeds
        self.lister = lister
        self.locks = locks

    def lock_for(self, client_id: str):
        """Hold the per-client lock; raises InvalidPath for unsafe ids."""
        return self.locks.hold(str(self.codec.path_for(client_id)))

    def create(
        self, client_id: str, details: ClientDetails, seed_name: str | None = None
    ) -> ClientDocument:
        with self.lock_for(client_id):
            # Any existing file counts, even one that no longer parses.
            if self.codec.exists(client_id):
                raise ClientConflict(client_id)
            reviews = self.seeds.load(seed_name)
            document = ClientDocument.model_validate(
                {**details.supplied_fields(), "client_id": client_id, "reviews": reviews}
            )
            self.codec.write(client_id, document)
        logger.info("Created client %s with %d seed reviews", client_id, len(reviews))
        return document

    def get(self, client_id: str) -> ClientDocument:
        document = self.codec.read(client_id)
        if document is None:
            raise ClientNotFound(client_id)
        return document

    def get_detail(self, client_id: str) -> Dict[str, Any]:
        return self.get(client_id).detail()

    def update(self, client_id: str, details: ClientDetails) -> ClientDocument:
        with self.lock_for(client_id):
            existing = self.get(client_id)
            updated = ClientDocument.model_validate(
                {
                    **existing.model_dump(),
                    **details.supplied_fields(),
                    "client_id": client_id,
                    "reviews": list(existing.reviews),
                }
            )
            self.codec.write(client_id, updated)
        logger.info("Updated client %s", client_id)
        return updated

    def delete(self, client_id: str) -> None:
        with self.lock_for(client_id):
            if not self.codec.exists(client_id):
                raise ClientNotFound(client_id)
            self.codec.remove(client_id)
        logger.info("Deleted client %s", client_id)

    def list_summaries(self) -> List[ClientSummary]:
        """Summaries of every readable client; broken files are skipped."""
        summaries = []
        for client_id in self.lister.document_ids():
            data = self.codec.load_raw(client_id)
            if data is None:
                continue
            stored_id = data.get("clientId")
            name = data.get("clientName")
            if not (isinstance(stored_id, str) and stored_id):
                continue
            if not (isinstance(name, str) and name):
                continue
            summaries.append(ClientSummary(client_id=stored_id, client_name=name))
        return summaries

    def export(self) -> Dict[str, Dict[str, Any]]:
        """Every valid client document keyed by client id."""
        bundle: Dict[str, Dict[str, Any]] = {}
        for client_id in self.lister.document_ids():
            document = self.codec.read(client_id)
            if document is not None:
                bundle[document.client_id] = document.to_json()
        return bundle
