# recircle/services/create_listing.py
"""
Create-listing workflow

1. validate the draft (no network before this passes)
2. upload the attached image, if any
3. write the listing record (only after the upload succeeded)
4. re-fetch the whole catalog
"""
import logging
import math
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from recircle.core.config import Settings, get_settings
from recircle.core.constants import CATEGORIES, CONDITIONS
from recircle.schemas.listing import Category, Condition, ListingCreate, ListingDraft, ListingRead
from recircle.services.blob_store import BlobStore, make_image_key
from recircle.services.errors import StoreUnavailable, ValidationError
from recircle.services.listing_store import ListingStore

logger = logging.getLogger("recircle.create_listing")


class ValidatedDraft(BaseModel):
    title: str
    price: float
    category: Category
    condition: Condition
    location: str
    description: str
    image_url: str

    model_config = ConfigDict(frozen=True)


def parse_price(raw: str) -> float:
    text = (raw or "").strip()
    if not text:
        raise ValidationError("Price is required", field="price")
    try:
        price = float(text)
    except ValueError:
        raise ValidationError(f"Price must be a number, got {raw!r}", field="price")
    if not math.isfinite(price) or price < 0:
        raise ValidationError("Price must be a non-negative number", field="price")
    return price


def validate_draft(draft: ListingDraft) -> ValidatedDraft:
    title = draft.title.strip()
    location = draft.location.strip()

    if not title:
        raise ValidationError("Title is required", field="title")
    price = parse_price(draft.price)
    if not location:
        raise ValidationError("Location is required", field="location")

    if draft.category not in CATEGORIES:
        raise ValidationError(f"Unknown category: {draft.category}", field="category")
    if draft.condition not in CONDITIONS:
        raise ValidationError(f"Unknown condition: {draft.condition}", field="condition")

    return ValidatedDraft(
        title=title,
        price=price,
        category=Category(draft.category),
        condition=Condition(draft.condition),
        location=location,
        description=draft.description,
        image_url=draft.image_url.strip(),
    )


def create_listing(
    draft: ListingDraft,
    listing_store: ListingStore,
    blob_store: BlobStore,
    settings: Optional[Settings] = None,
    now: Optional[float] = None,
) -> ListingRead:
    """
    Steps 1-3. Raises ValidationError, BlobUnavailable or StoreUnavailable;
    nothing is written unless every earlier step succeeded.
    """
    settings = settings or get_settings()
    validated = validate_draft(draft)

    if draft.image is not None:
        key = make_image_key(draft.image.filename, now)
        logger.info("create_listing: uploading image %s for %r", key, validated.title)
        image = blob_store.upload(draft.image.content, key)
    else:
        image = validated.image_url or settings.placeholder_image_url

    listing_in = ListingCreate(
        title=validated.title,
        description=validated.description,
        price=validated.price,
        category=validated.category,
        condition=validated.condition,
        location=validated.location,
        image=image,
        seller=settings.current_user_seller,
        posted_date=settings.just_now_label,
    )
    return listing_store.create(listing_in)


def publish_draft(
    draft: ListingDraft,
    listing_store: ListingStore,
    blob_store: BlobStore,
    settings: Optional[Settings] = None,
    now: Optional[float] = None,
) -> Tuple[ListingRead, Optional[List[ListingRead]]]:
    """
    The full workflow. Returns the created listing and the re-fetched
    catalog, or None for the catalog when only the refresh failed.
    """
    created = create_listing(draft, listing_store, blob_store, settings=settings, now=now)

    try:
        catalog = listing_store.list_all_newest_first()
    except StoreUnavailable as e:
        logger.warning("create_listing: listing %s saved but refresh failed: %s", created.id, e)
        catalog = None

    return created, catalog
