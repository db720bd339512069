"""Exceptions raised by the document store."""

from __future__ import annotations

from pathlib import Path


class StoreError(Exception):
    """Base class for every recoverable store failure."""


class NotFound(StoreError):
    """The requested entity does not exist."""


class ClientNotFound(NotFound):
    def __init__(self, client_id: str):
        super().__init__("Client not found.")
        self.client_id = client_id


class ReviewNotFound(NotFound):
    def __init__(self, client_id: str, review: str):
        super().__init__("Review not found.")
        self.client_id = client_id
        self.review = review


class NoReviews(StoreError):
    """The client exists but has nothing to sample from."""

    def __init__(self, client_id: str):
        super().__init__("Client has no reviews.")
        self.client_id = client_id


class ClientConflict(StoreError):
    def __init__(self, client_id: str):
        super().__init__("Client ID already exists.")
        self.client_id = client_id


class InvalidPath(StoreError):
    """A client id or file name resolved outside the data root."""

    def __init__(self, name: str):
        super().__init__(f"Invalid path: {name!r}")
        self.name = name


class StorageIOError(StoreError):
    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class QrEncodeError(StoreError):
    """The QR encoder could not render the review URL."""
