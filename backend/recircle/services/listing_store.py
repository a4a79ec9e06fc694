# recircle/services/listing_store.py
"""
Listing store backends.

The catalog only ever needs two operations: read everything newest first,
and create one record. Anything else (edit, delete) does not exist.
"""
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recircle.models.listing import Listing
from recircle.schemas.listing import ListingCreate, ListingRead
from recircle.services.errors import StoreUnavailable

logger = logging.getLogger("recircle.listing_store")


class ListingStore(ABC):
    @abstractmethod
    def list_all_newest_first(self) -> List[ListingRead]:
        ...

    @abstractmethod
    def create(self, listing_in: ListingCreate) -> ListingRead:
        ...


class SqlListingStore(ListingStore):
    """SQLAlchemy-backed store. Owns one Session for its lifetime."""

    def __init__(self, db: Session):
        self.db = db

    def list_all_newest_first(self) -> List[ListingRead]:
        try:
            rows = (
                self.db.query(Listing)
                .order_by(Listing.created_at.desc(), Listing.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.exception("listing_store: read failed")
            raise StoreUnavailable(f"Could not load listings: {e}") from e

        return [ListingRead.model_validate(row) for row in rows]

    def create(self, listing_in: ListingCreate) -> ListingRead:
        listing = Listing(**listing_in.model_dump(mode="json"))
        try:
            self.db.add(listing)
            self.db.commit()
            self.db.refresh(listing)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("listing_store: write failed for %r", listing_in.title)
            raise StoreUnavailable(f"Could not save listing: {e}") from e

        logger.info("listing_store: created listing %s (%s)", listing.id, listing.title)
        return ListingRead.model_validate(listing)


class InMemoryListingStore(ListingStore):
    """Process-local store, used by tests and LISTING_STORE=memory."""

    def __init__(
        self,
        listings: Optional[List[ListingRead]] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._listings: List[ListingRead] = list(listings or [])
        start = max((l.id for l in self._listings), default=0) + 1
        self._ids = itertools.count(start)
        self._clock = clock
        self._lock = threading.Lock()

    def list_all_newest_first(self) -> List[ListingRead]:
        with self._lock:
            return sorted(
                self._listings,
                key=lambda l: (l.created_at, l.id),
                reverse=True,
            )

    def create(self, listing_in: ListingCreate) -> ListingRead:
        with self._lock:
            listing = ListingRead(
                id=next(self._ids),
                created_at=self._clock(),
                **listing_in.model_dump(mode="json"),
            )
            self._listings.append(listing)
        return listing
