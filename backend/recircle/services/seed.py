import logging

from recircle.core.constants import DEMO_LISTINGS
from recircle.schemas.listing import ListingCreate
from recircle.services.listing_store import ListingStore

logger = logging.getLogger("recircle.seed")


def seed_demo_listings(listing_store: ListingStore) -> int:
    """
    Insert the demo catalog into an empty store. Returns the number of
    listings written (0 when the store already has data).
    """
    if listing_store.list_all_newest_first():
        return 0

    # Oldest first so the newest-first read matches the demo order
    for data in reversed(DEMO_LISTINGS):
        listing_store.create(ListingCreate(**data))

    logger.info("seed: inserted %d demo listings", len(DEMO_LISTINGS))
    return len(DEMO_LISTINGS)
