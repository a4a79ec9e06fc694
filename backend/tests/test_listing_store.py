import unittest
from datetime import datetime, timedelta
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fakes import make_listing
from recircle.core.database import Base
from recircle.models.listing import Listing
from recircle.schemas.listing import ListingCreate
from recircle.services.errors import StoreUnavailable
from recircle.services.listing_store import InMemoryListingStore, SqlListingStore


def lamp(**overrides):
    data = dict(
        title="Lamp",
        price=10.0,
        category="Furniture",
        condition="Good",
        location="Bern",
        image="https://example.com/lamp.jpg",
        seller="You",
        posted_date="Just now",
    )
    data.update(overrides)
    return ListingCreate(**data)


class SqlListingStoreTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(bind=self.engine)
        self.db = sessionmaker(bind=self.engine)()
        self.store = SqlListingStore(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_create_assigns_id_and_created_at(self):
        listing = self.store.create(lamp())

        self.assertIsNotNone(listing.id)
        self.assertIsInstance(listing.created_at, datetime)
        self.assertEqual(listing.category, "Furniture")
        self.assertEqual(listing.description, "")

    def test_list_is_newest_first(self):
        now = datetime.utcnow()
        for i, title in enumerate(["oldest", "middle", "newest"]):
            self.db.add(Listing(
                **lamp(title=title).model_dump(mode="json"),
                created_at=now - timedelta(days=3 - i),
            ))
        self.db.commit()

        titles = [l.title for l in self.store.list_all_newest_first()]
        self.assertEqual(titles, ["newest", "middle", "oldest"])

    def test_write_failure_rolls_back(self):
        db = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        store = SqlListingStore(db)

        with self.assertRaises(StoreUnavailable):
            store.create(lamp())
        db.rollback.assert_called_once()

    def test_read_failure(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        with self.assertRaises(StoreUnavailable):
            SqlListingStore(db).list_all_newest_first()


class InMemoryListingStoreTests(unittest.TestCase):
    def test_ids_continue_after_seed_data(self):
        store = InMemoryListingStore(listings=[make_listing(4), make_listing(9)])
        self.assertEqual(store.create(lamp()).id, 10)

    def test_newest_first(self):
        old = make_listing(1, age_minutes=60)
        new = make_listing(2, age_minutes=5)
        store = InMemoryListingStore(listings=[old, new])

        created = store.create(lamp())

        self.assertEqual(
            [l.id for l in store.list_all_newest_first()],
            [created.id, new.id, old.id],
        )
