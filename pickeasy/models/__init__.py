# Import every model so Base.metadata knows all tables
from pickeasy.models.users import User
from pickeasy.models.restaurant import Restaurant, CUISINES
from pickeasy.models.achievement_template import AchievementTemplate
from pickeasy.models.reward_template import RewardTemplate
from pickeasy.models.log import Log

__all__ = ["User", "Restaurant", "CUISINES", "AchievementTemplate", "RewardTemplate", "Log"]
