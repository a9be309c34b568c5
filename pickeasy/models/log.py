# pickeasy/models/log.py
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from pickeasy.database import Base


# Audit trail of sign-up, sign-in, token refresh and restaurant changes.
# user_id is empty for events without a known account (e.g. a duplicate sign-up).
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    user_id = Column(String(24), ForeignKey("users.id"), nullable=True)
    # SIGNUP, SIGNIN, TOKEN_REFRESH, RESTAURANT_CREATE, RESTAURANT_UPDATE
    action = Column(String(50), index=True)
    # "users" or "restaurants"
    resource = Column(String(50), index=True)
    status = Column(String(20), index=True)
    ip = Column(String(64), nullable=True)

    # Event details: usernames, restaurant ids, failure reasons
    meta = Column(JSON, nullable=True)

    user = relationship("User", lazy="joined", uselist=False)

    def __repr__(self):
        return f"<Log {self.resource}/{self.action} {self.status} user={self.user_id}>"
