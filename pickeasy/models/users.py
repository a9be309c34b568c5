# pickeasy/models/users.py
from sqlalchemy import Boolean, Column, DateTime, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from pickeasy.database import Base
from pickeasy.utils.ids import new_object_id


# Represents a customer or restaurant staff account; usernames are unique per role
class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", "is_restaurant_staff", name="uq_users_username_role"),
    )

    id = Column(String(24), primary_key=True, default=new_object_id)
    first_name = Column(String(20), nullable=False)
    last_name = Column(String(20), nullable=False)
    username = Column(String(20), nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    is_restaurant_staff = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    restaurants = relationship("Restaurant", back_populates="owner")
