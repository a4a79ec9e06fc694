from typing import Iterable, List, Optional

from recircle.core.constants import ALL_CATEGORIES, CATEGORIES
from recircle.schemas.listing import ListingRead
from recircle.services.errors import ValidationError


def normalize_category(category: Optional[str]) -> str:
    """Blank means "All"; anything outside the enumerated set is rejected."""
    if not category:
        return ALL_CATEGORIES
    if category != ALL_CATEGORIES and category not in CATEGORIES:
        raise ValidationError(f"Unknown category: {category}", field="category")
    return category


def matches_search(listing: ListingRead, term: str) -> bool:
    if not term:
        return True

    needle = term.lower()
    for text in (getattr(listing, "title", None), getattr(listing, "description", None)):
        if isinstance(text, str) and needle in text.lower():
            return True
    return False


def matches_category(listing: ListingRead, category: str) -> bool:
    return category == ALL_CATEGORIES or getattr(listing, "category", None) == category


def filter_listings(
    listings: Iterable[ListingRead],
    search: str = "",
    category: str = ALL_CATEGORIES,
) -> List[ListingRead]:
    """Visible subset of the catalog, in the catalog's own (newest first) order."""
    return [
        l for l in listings
        if matches_search(l, search) and matches_category(l, category)
    ]
