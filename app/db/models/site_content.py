from sqlalchemy import Column, Integer, String, Text, DateTime
from app.db.session import Base
from app.utils.business_time import business_now

class SiteContent(Base):
    __tablename__ = "site_content"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False, index=True)
    value = Column(Text, nullable=True)
    # business-local wall time, same clock as orders.created_at
    updated_at = Column(DateTime, default=business_now, onupdate=business_now)

    def __repr__(self):
        return f"<SiteContent(key={self.key})>"
