# recircle/services/app_state.py
"""
Per-session UI state and the pure functions that move it forward.

Every function takes an AppState and returns a new one; nothing here mutates
its input. Functions that talk to a store (load_catalog, submit_draft) do the
I/O and fold the outcome into the returned state.
"""
import logging
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from recircle.core.config import Settings
from recircle.core.constants import ALL_CATEGORIES
from recircle.schemas.listing import DraftUpdate, ImageAttachment, ListingDraft, ListingRead
from recircle.services.blob_store import BlobStore
from recircle.services.catalog import filter_listings, normalize_category
from recircle.services.create_listing import publish_draft, validate_draft
from recircle.services.errors import (
    InvalidTransition,
    ListingNotFound,
    MarketplaceError,
    SubmissionInProgress,
)
from recircle.services.listing_store import ListingStore

logger = logging.getLogger("recircle.app_state")


class View(str, Enum):
    BROWSE = "browse"
    SELL = "sell"
    PRODUCT = "product"


class Notification(BaseModel):
    level: str  # info, success, warning, error
    message: str

    model_config = ConfigDict(frozen=True)


class AppState(BaseModel):
    view: View = View.BROWSE
    selected: Optional[ListingRead] = None

    catalog: Tuple[ListingRead, ...] = ()
    loading: bool = True
    # True once any full read of the store has succeeded
    loaded: bool = False
    search: str = ""
    category: str = ALL_CATEGORIES

    favorites: FrozenSet[int] = frozenset()

    draft: ListingDraft = ListingDraft()
    submitting: bool = False

    notification: Optional[Notification] = None

    model_config = ConfigDict(frozen=True)


class CatalogView(BaseModel):
    """What the browse screen renders."""
    loading: bool
    loaded: bool
    empty: bool
    search: str
    category: str
    listings: List[ListingRead]
    favorites: List[int]


def _update(state: AppState, **changes) -> AppState:
    return state.model_copy(update=changes)


def _notify(level: str, message: str) -> Notification:
    return Notification(level=level, message=message)


# --- Catalog loading ---

def start_loading(state: AppState) -> AppState:
    return _update(state, loading=True)


def catalog_loaded(state: AppState, listings: List[ListingRead]) -> AppState:
    return _update(state, catalog=tuple(listings), loading=False, loaded=True)


def catalog_failed(state: AppState, error: Exception) -> AppState:
    # Keep whatever catalog we had; only the loading flag and message change
    return _update(
        state,
        loading=False,
        notification=_notify("error", f"Could not load listings. {error}"),
    )


def load_catalog(state: AppState, listing_store: ListingStore) -> AppState:
    state = start_loading(state)
    try:
        listings = listing_store.list_all_newest_first()
    except MarketplaceError as e:
        logger.warning("app_state: catalog load failed: %s", e)
        return catalog_failed(state, e)
    return catalog_loaded(state, listings)


# --- Query ---

def set_search(state: AppState, term: str) -> AppState:
    return _update(state, search=term or "")


def set_category(state: AppState, category: str) -> AppState:
    return _update(state, category=normalize_category(category))


def catalog_view(state: AppState) -> CatalogView:
    if state.loading:
        listings = []
    else:
        listings = filter_listings(state.catalog, state.search, state.category)

    return CatalogView(
        loading=state.loading,
        loaded=state.loaded,
        empty=state.loaded and not state.loading and not listings,
        search=state.search,
        category=state.category,
        listings=listings,
        favorites=sorted(state.favorites),
    )


def find_listing(state: AppState, listing_id: int) -> ListingRead:
    for listing in state.catalog:
        if listing.id == listing_id:
            return listing
    raise ListingNotFound(f"Listing {listing_id} not found")


# --- Favorites ---

def toggle_favorite(state: AppState, listing_id: int) -> AppState:
    if listing_id in state.favorites:
        favorites = state.favorites - {listing_id}
    else:
        favorites = state.favorites | {listing_id}
    return _update(state, favorites=frozenset(favorites))


# --- View navigation ---
# browse -> sell, browse -> product, product -> browse.
# sell -> browse only happens through a successful submission.

def open_sell(state: AppState) -> AppState:
    if state.view != View.BROWSE:
        raise InvalidTransition(f"Cannot start a listing from the {state.view.value} view")
    return _update(state, view=View.SELL)


def open_product(state: AppState, listing: ListingRead) -> AppState:
    if state.view != View.BROWSE:
        raise InvalidTransition(f"Cannot open a listing from the {state.view.value} view")
    return _update(state, view=View.PRODUCT, selected=listing)


def back_to_browse(state: AppState) -> AppState:
    if state.view != View.PRODUCT:
        raise InvalidTransition(f"Cannot go back to browse from the {state.view.value} view")
    return _update(state, view=View.BROWSE, selected=None)


# --- Draft ---

def update_draft(state: AppState, changes: DraftUpdate) -> AppState:
    fields = changes.model_dump(exclude_none=True)
    return _update(state, draft=state.draft.model_copy(update=fields))


def attach_image(state: AppState, image: ImageAttachment) -> AppState:
    return _update(state, draft=state.draft.model_copy(update={"image": image}))


def detach_image(state: AppState) -> AppState:
    return _update(state, draft=state.draft.model_copy(update={"image": None}))


def notify(state: AppState, level: str, message: str) -> AppState:
    return _update(state, notification=_notify(level, message))


def clear_notification(state: AppState) -> AppState:
    return _update(state, notification=None)


# --- Submission ---

def begin_submit(state: AppState) -> AppState:
    """
    Marks the submission in flight. Raises SubmissionInProgress for a repeat
    activation and ValidationError for an incomplete draft; both leave the
    caller's state untouched.
    """
    if state.submitting:
        raise SubmissionInProgress("This listing is already being posted")
    if state.view != View.SELL:
        raise InvalidTransition(f"Nothing to submit from the {state.view.value} view")
    validate_draft(state.draft)
    return _update(state, submitting=True, notification=None)


def submission_succeeded(
    state: AppState,
    created: ListingRead,
    catalog: Optional[List[ListingRead]],
) -> AppState:
    loaded = state.loaded or catalog is not None
    if catalog is None:
        catalog = [created] + [l for l in state.catalog if l.id != created.id]
        notification = _notify("warning", "Your item was posted, but the list could not be refreshed.")
    else:
        notification = _notify("success", f"\"{created.title}\" is now listed.")

    return _update(
        state,
        draft=ListingDraft(),
        catalog=tuple(catalog),
        loading=False,
        loaded=loaded,
        view=View.BROWSE,
        selected=None,
        submitting=False,
        notification=notification,
    )


def submission_failed(state: AppState, error: Exception) -> AppState:
    # Draft is kept as-is so the user can retry
    return _update(
        state,
        submitting=False,
        notification=_notify("error", f"Could not post your item. {error}"),
    )


def submit_draft(
    state: AppState,
    listing_store: ListingStore,
    blob_store: BlobStore,
    settings: Optional[Settings] = None,
) -> AppState:
    """
    Whole submission in one call, for single-threaded callers. Validation
    failures come back as an error notification instead of an exception.
    """
    try:
        in_flight = begin_submit(state)
    except SubmissionInProgress:
        raise
    except MarketplaceError as e:
        return notify(state, "error", str(e))

    try:
        created, catalog = publish_draft(in_flight.draft, listing_store, blob_store, settings=settings)
    except MarketplaceError as e:
        logger.warning("app_state: submission failed: %s", e)
        return submission_failed(in_flight, e)

    return submission_succeeded(in_flight, created, catalog)
