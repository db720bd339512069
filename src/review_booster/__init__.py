"""Per-client review pages backed by a directory of JSON documents."""

__all__ = ["config", "models", "store"]
