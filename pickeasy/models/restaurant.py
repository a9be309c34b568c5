# pickeasy/models/restaurant.py
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from pickeasy.database import Base
from pickeasy.utils.ids import new_object_id

CUISINES = (
    "Mexican",
    "Italian",
    "American",
    "Thai",
    "Japanese",
    "Chinese",
    "Indian",
    "French",
    "Brazilian",
    "Greek",
    "Korean",
)


# Restaurant managed by a staff user.
# Cost is a tier from 1 (cheap) to 4 (expensive); the image column holds the stored upload filename.
class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(String(24), primary_key=True, default=new_object_id)
    owner_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)

    # Text is HTML-escaped before storage; one input character can become up to 6
    restaurant_name = Column(String(30 * 6), nullable=False, index=True)
    restaurant_description = Column(String(250 * 6), nullable=False)
    restaurant_cost = Column(
        Integer,
        CheckConstraint("restaurant_cost >= 1 AND restaurant_cost <= 4"),
        nullable=False,
    )
    restaurant_cuisine = Column(String(20), nullable=False)
    restaurant_image = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="restaurants")
