"""
Error taxonomy shared by the catalog services.

None of these are fatal: every failure hands control back to an interactive
state and the user decides whether to retry.
"""
from typing import Optional


class MarketplaceError(Exception):
    pass


class ValidationError(MarketplaceError):
    """Draft or query input rejected before any network call."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class StoreUnavailable(MarketplaceError):
    """Listing store read or write failed."""
    pass


class BlobUnavailable(MarketplaceError):
    """Image upload failed."""
    pass


class BlobRejected(BlobUnavailable):
    """Blob store refused the content (size or type)."""
    pass


class ListingNotFound(MarketplaceError):
    pass


class InvalidTransition(MarketplaceError):
    pass


class SubmissionInProgress(MarketplaceError):
    pass
