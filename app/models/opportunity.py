"""
Sales opportunity model
"""
from sqlalchemy import Column, Integer, String, DateTime, Date, Float, Text, ForeignKey
from app.db.base import Base
from app.utils.datetime_utils import utcnow


class Opportunity(Base):
    __tablename__ = "opportunities"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    company_name = Column(String, nullable=True)
    value = Column(Float, nullable=False, default=0.0)
    status = Column(String, nullable=False, default="open", index=True)
    stage = Column(String, nullable=False, default="prospecting")
    assigned_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    estimated_ship_date = Column(Date, nullable=True)
    actual_close_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
