"""
Documentation page model
"""
from sqlalchemy import Column, Integer, String, DateTime, Text
from app.db.base import Base
from app.utils.datetime_utils import utcnow


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    content = Column(Text, nullable=False)
    author = Column(String, nullable=False)
    status = Column(String, nullable=False, default="draft")
    file_path = Column(String, nullable=True)
    published_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
