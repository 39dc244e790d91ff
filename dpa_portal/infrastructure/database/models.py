"""SQLAlchemy ORM models for locally persisted portal configuration"""

from sqlalchemy import Column, Date, DateTime, Integer, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class FinancialYearSetting(Base):
    """Admin-configured current financial year; the newest row wins"""

    __tablename__ = "financial_year_setting"

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    updated_by = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
