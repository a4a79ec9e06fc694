from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    FASHION = "Fashion"
    ELECTRONICS = "Electronics"
    SPORTS = "Sports"
    FURNITURE = "Furniture"
    BOOKS = "Books"
    TOYS = "Toys"


class Condition(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"


class ListingBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    price: float = Field(ge=0)
    category: Category
    condition: Condition
    location: str = Field(min_length=1, max_length=255)
    image: str
    seller: str
    posted_date: str


class ListingCreate(ListingBase):
    """A listing that has not been stored yet (no id, no created_at)."""

    model_config = ConfigDict(frozen=True)


class ListingRead(BaseModel):
    # Text fields may be missing on stored rows
    id: int
    title: Optional[str] = None
    description: Optional[str] = ""
    price: float
    category: str
    condition: str
    location: Optional[str] = None
    image: str
    seller: str
    posted_date: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)


# --- Draft (the in-progress "Sell Item" form) ---

class ImageAttachment(BaseModel):
    filename: str
    content: bytes = Field(repr=False)
    content_type: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class ListingDraft(BaseModel):
    # Raw form values; price stays a string until submission
    title: str = ""
    price: str = ""
    category: str = Category.FASHION.value
    condition: str = Condition.GOOD.value
    location: str = ""
    description: str = ""
    image_url: str = ""
    image: Optional[ImageAttachment] = None

    model_config = ConfigDict(frozen=True)


class DraftUpdate(BaseModel):
    title: Optional[str] = None
    price: Optional[str] = None
    category: Optional[str] = None
    condition: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class DraftRead(BaseModel):
    title: str
    price: str
    category: str
    condition: str
    location: str
    description: str
    image_url: str
    image_filename: Optional[str] = None

    @classmethod
    def from_draft(cls, draft: ListingDraft) -> "DraftRead":
        return cls(
            **draft.model_dump(exclude={"image"}),
            image_filename=draft.image.filename if draft.image else None,
        )
