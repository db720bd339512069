"""Configuration helpers for the review booster store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SEED_FILE = "sample-reviews.json"


def project_root() -> Path:
    # __file__ -> src/review_booster/config.py; repo root is three levels up
    return Path(__file__).resolve().parents[2]


def default_data_dir() -> Path:
    """Return the bundled data directory (client documents and seed files)."""
    return project_root() / "data"


@dataclass(frozen=True)
class StoreConfig:
    """Everything the store components need to locate their documents."""

    data_root: Path
    default_seed_file: str = DEFAULT_SEED_FILE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    data_dir: str | None = Field(
        None,
        alias="REVIEW_DATA_DIR",
        description="Optional override for the document store root; defaults to data/.",
    )
    app_base_url: str | None = Field(
        None,
        alias="APP_BASE_URL",
        description="Public origin encoded into QR codes; defaults to localhost:PORT.",
    )
    host: str = Field("0.0.0.0", alias="REVIEW_HOST")
    port: int = Field(5000, alias="PORT")
    default_seed_file: str = Field(
        DEFAULT_SEED_FILE,
        alias="DEFAULT_SEED_FILE",
        description="Seed file used when a client is created without choosing one.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    def data_root(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser().resolve()
        return default_data_dir()

    def base_url(self) -> str:
        return (self.app_base_url or f"http://localhost:{self.port}").rstrip("/")

    def store_config(self) -> StoreConfig:
        return StoreConfig(
            data_root=self.data_root(),
            default_seed_file=self.default_seed_file or DEFAULT_SEED_FILE,
        )


def get_settings() -> Settings:
    """Return a settings instance reflecting the current environment."""
    return Settings()
