"""FastAPI service exposing the client and review store."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional

from fastapi import Body, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from .config import Settings, StoreConfig, get_settings
from .errors import (
    ClientConflict,
    InvalidPath,
    NoReviews,
    NotFound,
    QrEncodeError,
    StorageIOError,
)
from .models import ClientCreate, ClientDetails, ReviewPayload
from .store import ReviewStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Review Booster")


def _add_cors(app: FastAPI) -> None:
    """Allow the admin and review pages to call the API from other origins."""
    allow_all = os.getenv("CORS_ALLOW_ALL", "true").lower() == "true"
    origins_env = os.getenv("CORS_ALLOW_ORIGINS", "")
    origins = [o.strip() for o in origins_env.split(",") if o.strip()]
    allow_credentials = (
        os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"
    )
    if allow_all or not origins:
        origins = ["*"]
    if origins == ["*"] and allow_credentials:
        # Starlette/FastAPI disallow wildcard origins when credentials are enabled.
        allow_credentials = False
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


_add_cors(app)


@app.middleware("http")
async def _log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


@lru_cache(maxsize=1)
def server_settings() -> Settings:
    """Settings read once per process; call `cache_clear()` to re-read the environment."""
    return get_settings()


@lru_cache(maxsize=8)
def _store_for(config: StoreConfig, base_url: str) -> ReviewStore:
    return ReviewStore(config, base_url=base_url)


def get_store() -> ReviewStore:
    """Store for the configured data root (override via REVIEW_DATA_DIR)."""
    settings = server_settings()
    return _store_for(settings.store_config(), settings.base_url())


@contextmanager
def _store_errors() -> Iterator[None]:
    """Translate store failures into HTTP responses."""
    try:
        yield
    except NotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except NoReviews as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found or has no reviews.",
        ) from exc
    except ClientConflict as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except InvalidPath as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid client id."
        ) from exc
    except (StorageIOError, QrEncodeError) as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc


def _parse(model, payload: Any):
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(piece) for piece in first["loc"]) or "<body>"
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{location}: {first['msg']}",
        ) from exc


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/api/data-files")
def list_data_files() -> List[str]:
    with _store_errors():
        return get_store().list_data_files()


@app.get("/api/clients")
def list_clients() -> List[Dict[str, str]]:
    with _store_errors():
        summaries = get_store().list_clients()
    return [summary.model_dump(by_alias=True) for summary in summaries]


@app.post("/api/client", status_code=status.HTTP_201_CREATED)
def create_client(payload: Dict[str, Any]) -> Dict[str, Any]:
    request = _parse(ClientCreate, payload)
    with _store_errors():
        document = get_store().create_client(
            request.client_id, request.details(), request.source_review_file or None
        )
    return document.to_json()


@app.get("/api/client/{client_id}")
def get_client(client_id: str) -> Dict[str, Any]:
    with _store_errors():
        return get_store().get_client_detail(client_id)


@app.put("/api/client/{client_id}")
def update_client(client_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    details = _parse(ClientDetails, payload)
    with _store_errors():
        document = get_store().update_client(client_id, details)
    return document.to_json()


@app.delete("/api/client/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: str) -> Response:
    with _store_errors():
        get_store().delete_client(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/api/client/{client_id}/reviews")
def list_reviews(client_id: str) -> Dict[str, List[str]]:
    with _store_errors():
        return {"reviews": get_store().list_reviews(client_id)}


@app.get("/api/client/{client_id}/random-review")
def random_review(client_id: str) -> Dict[str, str]:
    with _store_errors():
        return {"review": get_store().random_review(client_id)}


@app.post("/api/client/{client_id}/reviews", status_code=status.HTTP_201_CREATED)
def add_review(client_id: str, payload: Dict[str, Any]) -> Dict[str, str]:
    body = _parse(ReviewPayload, payload)
    with _store_errors():
        return {"review": get_store().add_review(client_id, body.review)}


@app.delete("/api/client/{client_id}/reviews")
def delete_review(
    client_id: str, payload: Optional[Dict[str, Any]] = Body(None)
) -> Dict[str, str]:
    review = (payload or {}).get("review")
    if not review or not isinstance(review, str):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Review text is required."
        )
    with _store_errors():
        get_store().delete_review(client_id, review)
    return {"message": "Review deleted."}


@app.post("/api/client/{client_id}/generate-qr")
def generate_qr(client_id: str) -> Dict[str, str]:
    with _store_errors():
        image = get_store().generate_qr(client_id)
    return {"qrDataUrl": image.data_url, "link": image.url}


if __name__ == "__main__":
    import uvicorn

    settings = server_settings()
    logging.basicConfig(level=settings.log_level.upper())
    uvicorn.run(
        "review_booster.server:app",
        host=settings.host,
        port=settings.port,
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
