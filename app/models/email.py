"""
Outbound email model
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from app.db.base import Base
from app.utils.datetime_utils import utcnow


class Email(Base):
    __tablename__ = "emails"

    id = Column(Integer, primary_key=True, index=True)
    to = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    body = Column(Text, nullable=False)
    template = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending", index=True)
    sent_at = Column(DateTime, nullable=True)
    opened_at = Column(DateTime, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
