"""The operations the routing layer and the CLI call into."""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

from .codec import DocumentCodec
from .config import StoreConfig
from .file_lock import KeyedLocks
from .listing import DirectoryLister
from .models import ClientDetails, ClientDocument, ClientSummary
from .paths import PathResolver
from .qr import QrImage, generate_qr
from .repository import ClientRepository
from .reviews import ReviewListManager
from .seeds import SeedLoader


class ReviewStore:
    """
    One directory of client documents, wired from an explicit StoreConfig.

    Share a single instance between concurrent callers: the per-client locks
    live here.
    """

    def __init__(
        self,
        config: StoreConfig,
        base_url: str = "http://localhost:5000",
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.base_url = base_url.rstrip("/")
        config.data_root.mkdir(parents=True, exist_ok=True)

        self.resolver = PathResolver(config.data_root)
        self.codec = DocumentCodec(self.resolver)
        self.lister = DirectoryLister(self.resolver.root)
        self.seeds = SeedLoader(self.resolver, config.default_seed_file)
        self.locks = KeyedLocks()
        self.clients = ClientRepository(self.codec, self.seeds, self.lister, self.locks)
        self.reviews = ReviewListManager(self.clients, rng=rng)

    def list_data_files(self) -> List[str]:
        return self.lister.list_data_files()

    def list_clients(self) -> List[ClientSummary]:
        return self.clients.list_summaries()

    def create_client(
        self, client_id: str, details: ClientDetails, seed_name: str | None = None
    ) -> ClientDocument:
        return self.clients.create(client_id, details, seed_name)

    def get_client_detail(self, client_id: str) -> Dict[str, Any]:
        return self.clients.get_detail(client_id)

    def get_client(self, client_id: str) -> ClientDocument:
        return self.clients.get(client_id)

    def update_client(self, client_id: str, details: ClientDetails) -> ClientDocument:
        return self.clients.update(client_id, details)

    def delete_client(self, client_id: str) -> None:
        self.clients.delete(client_id)

    def list_reviews(self, client_id: str) -> List[str]:
        return self.reviews.list_reviews(client_id)

    def random_review(self, client_id: str) -> str:
        return self.reviews.random_review(client_id)

    def add_review(self, client_id: str, text: str) -> str:
        return self.reviews.add_review(client_id, text)

    def delete_review(self, client_id: str, text: str) -> None:
        self.reviews.delete_review(client_id, text)

    def generate_qr(self, client_id: str) -> QrImage:
        return generate_qr(client_id, self.base_url)

    def export_clients(self) -> Dict[str, Dict[str, Any]]:
        return self.clients.export()
