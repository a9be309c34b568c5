# pickeasy/models/achievement_template.py
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, func

from pickeasy.database import Base
from pickeasy.utils.ids import new_object_id


# Achievement a restaurant offers to customers, e.g. "visit 5 times"
class AchievementTemplate(Base):
    __tablename__ = "achievement_templates"

    id = Column(String(24), primary_key=True, default=new_object_id)
    restaurant_id = Column(String(24), ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    description = Column(String(250), nullable=True)
    goal = Column(Integer, CheckConstraint("goal >= 1"), nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
