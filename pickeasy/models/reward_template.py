# pickeasy/models/reward_template.py
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, func

from pickeasy.database import Base
from pickeasy.utils.ids import new_object_id


class RewardTemplate(Base):
    __tablename__ = "reward_templates"

    id = Column(String(24), primary_key=True, default=new_object_id)
    restaurant_id = Column(String(24), ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    description = Column(String(250), nullable=True)
    points = Column(Integer, CheckConstraint("points >= 0"), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
