from datetime import datetime, timedelta

from recircle.services.blob_store import InMemoryBlobStore
from recircle.services.errors import BlobUnavailable, StoreUnavailable
from recircle.services.listing_store import InMemoryListingStore
from recircle.schemas.listing import ListingRead

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)


def make_listing(listing_id, title="Item", category="Fashion", description="", age_minutes=None, **extra):
    """Older ids get older timestamps unless age_minutes says otherwise."""
    if age_minutes is None:
        age_minutes = 1000 - listing_id
    data = dict(
        id=listing_id,
        title=title,
        description=description,
        price=10.0,
        category=category,
        condition="Good",
        location="Zürich",
        image="https://example.com/a.jpg",
        seller="Sarah M.",
        posted_date="2 days ago",
        created_at=BASE_TIME - timedelta(minutes=age_minutes),
    )
    data.update(extra)
    return ListingRead(**data)


class RecordingListingStore(InMemoryListingStore):
    def __init__(self, calls=None, listings=None, fail_create=False, fail_list=False):
        super().__init__(listings=listings)
        self.calls = calls if calls is not None else []
        self.fail_create = fail_create
        self.fail_list = fail_list
        self.created = []

    def list_all_newest_first(self):
        self.calls.append("list")
        if self.fail_list:
            raise StoreUnavailable("database offline")
        return super().list_all_newest_first()

    def create(self, listing_in):
        self.calls.append("create")
        if self.fail_create:
            raise StoreUnavailable("write rejected")
        listing = super().create(listing_in)
        self.created.append(listing)
        return listing


class RecordingBlobStore(InMemoryBlobStore):
    def __init__(self, calls=None, fail=False):
        super().__init__(base_url="https://cdn.example.com/listings")
        self.calls = calls if calls is not None else []
        self.fail = fail

    def _put(self, data, key):
        self.calls.append("upload")
        if self.fail:
            raise BlobUnavailable("storage offline")
        return super()._put(data, key)
