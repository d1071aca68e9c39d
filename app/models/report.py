"""
Generated report record
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, ForeignKey
from app.db.base import Base
from app.utils.datetime_utils import utcnow


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    type = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    # pending -> processing -> completed | failed
    status = Column(String, nullable=False, default="pending", index=True)
    parameters = Column(JSON, nullable=True)
    file_path = Column(String, nullable=True)
    page_count = Column(Integer, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    completed_at = Column(DateTime, nullable=True)
