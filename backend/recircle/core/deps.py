from functools import lru_cache

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from recircle.core.config import get_settings
from recircle.core.database import get_db
from recircle.core.session_store import session_store
from recircle.services.blob_store import BlobStore, HttpBlobStore, InMemoryBlobStore, LocalBlobStore
from recircle.services.listing_store import InMemoryListingStore, ListingStore, SqlListingStore

settings = get_settings()


@lru_cache
def memory_listing_store() -> InMemoryListingStore:
    return InMemoryListingStore()


@lru_cache
def _blob_store(kind: str) -> BlobStore:
    if kind == "local":
        return LocalBlobStore(
            media_root=settings.media_root,
            media_url=settings.media_url,
            public_base_url=settings.public_base_url,
            max_bytes=settings.max_image_bytes,
        )
    if kind == "http":
        return HttpBlobStore(
            upload_url=settings.object_storage_url,
            public_url=settings.object_storage_public_url,
            token=settings.object_storage_token,
            max_bytes=settings.max_image_bytes,
        )
    if kind == "memory":
        return InMemoryBlobStore(max_bytes=settings.max_image_bytes)
    raise RuntimeError(f"Unknown BLOB_STORE setting: {kind!r}")


def get_listing_store(db: Session = Depends(get_db)) -> ListingStore:
    if settings.listing_store == "memory":
        return memory_listing_store()
    if settings.listing_store == "sql":
        return SqlListingStore(db)
    raise RuntimeError(f"Unknown LISTING_STORE setting: {settings.listing_store!r}")


def get_blob_store() -> BlobStore:
    return _blob_store(settings.blob_store)


def get_session_id(request: Request, response: Response) -> str:
    """Session id from the cookie; starts a fresh session when missing or unknown."""
    session_id, _, created = session_store.get_or_create(
        request.cookies.get(settings.session_cookie_name)
    )
    if created:
        response.set_cookie(
            settings.session_cookie_name,
            session_id,
            httponly=True,
            samesite="lax",
        )
    return session_id
