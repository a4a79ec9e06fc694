import unittest

from fakes import make_listing
from recircle.services.listing_store import InMemoryListingStore
from recircle.services.seed import seed_demo_listings


class SeedTests(unittest.TestCase):
    def test_seeds_empty_store_in_demo_order(self):
        store = InMemoryListingStore()

        self.assertEqual(seed_demo_listings(store), 4)

        titles = [l.title for l in store.list_all_newest_first()]
        self.assertEqual(
            titles,
            ["Vintage Leather Jacket", "iPhone 12 Pro", "Mountain Bike", "Ikea Bookshelf"],
        )

    def test_leaves_existing_data_alone(self):
        store = InMemoryListingStore(listings=[make_listing(1)])

        self.assertEqual(seed_demo_listings(store), 0)
        self.assertEqual(len(store.list_all_newest_first()), 1)
