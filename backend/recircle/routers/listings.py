from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from recircle.core.config import get_settings
from recircle.core.constants import ALL_CATEGORIES, CATEGORIES, CONDITIONS
from recircle.core.deps import get_blob_store, get_listing_store
from recircle.schemas.listing import ImageAttachment, ListingDraft, ListingRead
from recircle.services.blob_store import BlobStore
from recircle.services.catalog import filter_listings, normalize_category
from recircle.services.create_listing import create_listing as run_create_listing
from recircle.services.errors import (
    BlobRejected,
    BlobUnavailable,
    StoreUnavailable,
    ValidationError,
)
from recircle.services.listing_store import ListingStore

router = APIRouter(prefix="/listings", tags=["listings"])
meta_router = APIRouter(tags=["listings"])

settings = get_settings()


def _validation_error(e: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": str(e), "field": e.field},
    )


def _load_all(listing_store: ListingStore) -> List[ListingRead]:
    try:
        return listing_store.list_all_newest_first()
    except StoreUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


def read_upload(upload: Optional[UploadFile]) -> Optional[ImageAttachment]:
    # Browsers send an empty part when the file input is left blank
    if upload is None or not upload.filename:
        return None
    return ImageAttachment(
        filename=upload.filename,
        content=upload.file.read(),
        content_type=upload.content_type,
    )


@meta_router.get("/categories")
def list_categories():
    return {
        "categories": [ALL_CATEGORIES] + CATEGORIES,
        "conditions": CONDITIONS,
        "currency": settings.currency,
    }


@router.get("", response_model=List[ListingRead])
def list_listings(
    search: str = "",
    category: str = ALL_CATEGORIES,
    listing_store: ListingStore = Depends(get_listing_store),
):
    try:
        category = normalize_category(category)
    except ValidationError as e:
        raise _validation_error(e)

    return filter_listings(_load_all(listing_store), search, category)


@router.post("", response_model=ListingRead, status_code=status.HTTP_201_CREATED)
def create_listing(
    title: str = Form(""),
    price: str = Form(""),
    category: str = Form("Fashion"),
    condition: str = Form("Good"),
    location: str = Form(""),
    description: str = Form(""),
    image_url: str = Form(""),
    image: Optional[UploadFile] = File(None),
    listing_store: ListingStore = Depends(get_listing_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    draft = ListingDraft(
        title=title,
        price=price,
        category=category,
        condition=condition,
        location=location,
        description=description,
        image_url=image_url,
        image=read_upload(image),
    )

    try:
        return run_create_listing(draft, listing_store, blob_store, settings=settings)
    except ValidationError as e:
        raise _validation_error(e)
    except BlobRejected as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (BlobUnavailable, StoreUnavailable) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.get("/{listing_id}", response_model=ListingRead)
def get_listing(
    listing_id: int,
    listing_store: ListingStore = Depends(get_listing_store),
):
    for listing in _load_all(listing_store):
        if listing.id == listing_id:
            return listing
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Listing not found",
    )
