from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)

from recircle.core.database import Base


class Listing(Base):
    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")

    price = Column(Float, nullable=False, default=0)

    category = Column(String(50), nullable=False, index=True)  # Fashion, Electronics, ...
    condition = Column(String(50), nullable=False)  # Excellent, Good, Fair
    location = Column(String(255), nullable=False)

    image = Column(String(1000), nullable=False)
    seller = Column(String(255), nullable=False)

    # Static label ("Just now", "2 days ago"), never recomputed
    posted_date = Column(String(50), nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
