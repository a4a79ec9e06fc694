"""
Application-wide constants
"""

# Filter-only category value; never stored on a listing
ALL_CATEGORIES = "All"

CATEGORIES = ["Fashion", "Electronics", "Sports", "Furniture", "Books", "Toys"]
CONDITIONS = ["Excellent", "Good", "Fair"]

PLACEHOLDER_IMAGE_URL = "https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=400"

# No identity system: every listing posted from this app belongs to "You"
CURRENT_USER_SELLER = "You"
JUST_NOW_LABEL = "Just now"

ALLOWED_IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp", ".gif"]

# Demo catalog inserted when SEED_DEMO_LISTINGS is on
DEMO_LISTINGS = [
    {
        "title": "Vintage Leather Jacket",
        "price": 45,
        "category": "Fashion",
        "condition": "Good",
        "seller": "Sarah M.",
        "location": "Zürich",
        "image": "https://images.unsplash.com/photo-1551028719-00167b16eac5?w=400",
        "description": "Classic brown leather jacket, barely worn. Size M.",
        "posted_date": "2 days ago",
    },
    {
        "title": "iPhone 12 Pro",
        "price": 380,
        "category": "Electronics",
        "condition": "Excellent",
        "seller": "Mike T.",
        "location": "Geneva",
        "image": "https://images.unsplash.com/photo-1591337676887-a217a6970a8a?w=400",
        "description": "128GB, works perfectly, includes charger and case.",
        "posted_date": "1 day ago",
    },
    {
        "title": "Mountain Bike",
        "price": 250,
        "category": "Sports",
        "condition": "Good",
        "seller": "Anna K.",
        "location": "Bern",
        "image": "https://images.unsplash.com/photo-1576435728678-68d0fbf94e91?w=400",
        "description": '26" wheels, 21 speeds, great for trails.',
        "posted_date": "5 days ago",
    },
    {
        "title": "Ikea Bookshelf",
        "price": 30,
        "category": "Furniture",
        "condition": "Fair",
        "seller": "John D.",
        "location": "Zürich",
        "image": "https://images.unsplash.com/photo-1594620302200-9a762244a156?w=400",
        "description": "White Billy bookshelf, some scratches but sturdy.",
        "posted_date": "1 week ago",
    },
]
