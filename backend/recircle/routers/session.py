"""
Browser-session endpoints: the browse / sell / product screens, favorites and
the "Sell Item" draft. State lives in the in-memory session store; every
handler applies one of the pure update functions from services.app_state.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from recircle.core.config import get_settings
from recircle.core.deps import get_blob_store, get_listing_store, get_session_id
from recircle.core.session_store import session_store
from recircle.routers.listings import read_upload
from recircle.schemas.listing import DraftRead, DraftUpdate, ListingRead
from recircle.services import app_state
from recircle.services.app_state import AppState, CatalogView, Notification, View
from recircle.services.blob_store import BlobStore, check_image
from recircle.services.create_listing import publish_draft
from recircle.services.errors import (
    BlobRejected,
    InvalidTransition,
    ListingNotFound,
    MarketplaceError,
    StoreUnavailable,
    SubmissionInProgress,
    ValidationError,
)
from recircle.services.listing_store import ListingStore

router = APIRouter(prefix="/session", tags=["session"])

settings = get_settings()
logger = logging.getLogger("recircle.session")


class SearchIn(BaseModel):
    search: str = ""


class CategoryIn(BaseModel):
    category: str


class SessionRead(BaseModel):
    view: View
    selected: Optional[ListingRead] = None
    catalog: CatalogView
    draft: DraftRead
    submitting: bool
    notification: Optional[Notification] = None

    @classmethod
    def from_state(cls, state: AppState) -> "SessionRead":
        return cls(
            view=state.view,
            selected=state.selected,
            catalog=app_state.catalog_view(state),
            draft=DraftRead.from_draft(state.draft),
            submitting=state.submitting,
            notification=state.notification,
        )


def _apply(session_id: str, fn) -> SessionRead:
    try:
        state = session_store.update(session_id, fn)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "field": e.field})
    except ListingNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidTransition, SubmissionInProgress) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return SessionRead.from_state(state)


def _refresh(session_id: str, listing_store: ListingStore) -> AppState:
    # The fetch runs outside the store lock; only the results are folded in
    session_store.update(session_id, app_state.start_loading)
    try:
        listings = listing_store.list_all_newest_first()
    except StoreUnavailable as e:
        logger.warning("session: catalog load failed: %s", e)
        return session_store.update(session_id, lambda s: app_state.catalog_failed(s, e))
    return session_store.update(session_id, lambda s: app_state.catalog_loaded(s, listings))


@router.get("", response_model=SessionRead)
def read_session(
    session_id: str = Depends(get_session_id),
    listing_store: ListingStore = Depends(get_listing_store),
):
    state = session_store.get(session_id)
    if state is None or state.loading:
        state = _refresh(session_id, listing_store)
    return SessionRead.from_state(state)


@router.post("/refresh", response_model=SessionRead)
def refresh_catalog(
    session_id: str = Depends(get_session_id),
    listing_store: ListingStore = Depends(get_listing_store),
):
    return SessionRead.from_state(_refresh(session_id, listing_store))


@router.put("/search", response_model=SessionRead)
def set_search(body: SearchIn, session_id: str = Depends(get_session_id)):
    return _apply(session_id, lambda s: app_state.set_search(s, body.search))


@router.put("/category", response_model=SessionRead)
def set_category(body: CategoryIn, session_id: str = Depends(get_session_id)):
    return _apply(session_id, lambda s: app_state.set_category(s, body.category))


@router.post("/favorites/{listing_id}", response_model=SessionRead)
def toggle_favorite(listing_id: int, session_id: str = Depends(get_session_id)):
    return _apply(session_id, lambda s: app_state.toggle_favorite(s, listing_id))


# --- View navigation ---

@router.post("/view/sell", response_model=SessionRead)
def open_sell(session_id: str = Depends(get_session_id)):
    return _apply(session_id, app_state.open_sell)


@router.post("/view/product/{listing_id}", response_model=SessionRead)
def open_product(listing_id: int, session_id: str = Depends(get_session_id)):
    return _apply(
        session_id,
        lambda s: app_state.open_product(s, app_state.find_listing(s, listing_id)),
    )


@router.post("/view/browse", response_model=SessionRead)
def back_to_browse(session_id: str = Depends(get_session_id)):
    return _apply(session_id, app_state.back_to_browse)


# --- Draft ---

@router.patch("/draft", response_model=SessionRead)
def update_draft(changes: DraftUpdate, session_id: str = Depends(get_session_id)):
    return _apply(session_id, lambda s: app_state.update_draft(s, changes))


@router.put("/draft/image", response_model=SessionRead)
def attach_image(
    file: UploadFile = File(...),
    session_id: str = Depends(get_session_id),
):
    image = read_upload(file)
    if image is None:
        raise HTTPException(status_code=400, detail="No image file received")
    try:
        check_image(image.content, image.filename, settings.max_image_bytes)
    except BlobRejected as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _apply(session_id, lambda s: app_state.attach_image(s, image))


@router.delete("/draft/image", response_model=SessionRead)
def detach_image(session_id: str = Depends(get_session_id)):
    return _apply(session_id, app_state.detach_image)


@router.post("/draft/submit", response_model=SessionRead)
def submit_draft(
    session_id: str = Depends(get_session_id),
    listing_store: ListingStore = Depends(get_listing_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """
    Validation problems come back as 422 with the draft untouched. Upload or
    store failures come back as 200 with an error notification, the draft
    preserved and the view still on "sell".
    """
    try:
        in_flight = session_store.update(session_id, app_state.begin_submit)
    except SubmissionInProgress as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        session_store.update(session_id, lambda s: app_state.notify(s, "error", str(e)))
        raise HTTPException(status_code=422, detail={"message": str(e), "field": e.field})

    try:
        created, catalog = publish_draft(in_flight.draft, listing_store, blob_store, settings=settings)
    except MarketplaceError as e:
        logger.warning("session: submission failed: %s", e)
        state = session_store.update(session_id, lambda s: app_state.submission_failed(s, e))
        return SessionRead.from_state(state)
    except Exception as e:
        # submitting must be cleared on every exit path
        logger.exception("session: unexpected error while posting")
        session_store.update(session_id, lambda s: app_state.submission_failed(s, e))
        raise

    state = session_store.update(
        session_id,
        lambda s: app_state.submission_succeeded(s, created, catalog),
    )
    return SessionRead.from_state(state)


@router.delete("/notification", response_model=SessionRead)
def clear_notification(session_id: str = Depends(get_session_id)):
    return _apply(session_id, app_state.clear_notification)
