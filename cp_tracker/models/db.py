"""SQLAlchemy database models for platform statistics and daily activity"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, JSON
from sqlalchemy.ext.declarative import declarative_base

Base = declarative_base()

class PlatformStats(Base):
    """
    Latest known statistics per platform.
    Exactly one row per platform, updated in place on every run.
    """
    __tablename__ = 'platform_stats'

    id = Column(Integer, primary_key=True)
    platform = Column(String, unique=True, nullable=False, index=True)
    username = Column(String, nullable=True)
    total_solved = Column(Integer, nullable=False, default=0)
    total_submissions = Column(Integer, nullable=False, default=0)
    easy_solved = Column(Integer, nullable=True)
    medium_solved = Column(Integer, nullable=True)
    hard_solved = Column(Integer, nullable=True)
    rating = Column(Integer, nullable=True)
    max_rating = Column(Integer, nullable=True)
    rank = Column(String, nullable=True)
    rating_history = Column(JSON, nullable=True)
    ranking = Column(Integer, nullable=True)
    global_rank = Column(Integer, nullable=True)
    country_rank = Column(Integer, nullable=True)
    institution_rank = Column(Integer, nullable=True)
    coding_score = Column(Integer, nullable=True)
    monthly_score = Column(Integer, nullable=True)
    stars = Column(Integer, nullable=True)
    attended_contests = Column(Integer, nullable=True)
    top_percentage = Column(Float, nullable=True)
    acceptance_rate = Column(Float, nullable=True)
    streak = Column(Integer, nullable=True)
    last_fetched = Column(DateTime, default=datetime.now)
    fetch_status = Column(String, nullable=False, default='success')
    error_message = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

class DailyActivity(Base):
    """
    Combined submissions for one calendar date.
    Date is stored at midnight and unique.
    """
    __tablename__ = 'daily_activity'

    id = Column(Integer, primary_key=True)
    date = Column(DateTime, unique=True, nullable=False, index=True)
    total_submissions = Column(Integer, nullable=False, default=0)
    breakdown = Column(JSON, nullable=False)
    intensity_level = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
