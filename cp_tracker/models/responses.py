"""Read API response models"""
from datetime import date, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel

from cp_tracker.models.platform import DailyActivityRecord, PlatformRecord

class RatingPoint(BaseModel):
    """One contest in a rating history"""
    contest_id: Optional[int] = None
    contest_name: Optional[str] = None
    rating: int
    ranking: Optional[int] = None
    date: Optional[datetime] = None

class PlatformStatsResponse(BaseModel):
    """
    Public view of a stored platform record.

    Fields that do not apply to a platform are null rather than zero.
    fetch_status "partial" means the data came from a scraped page.
    """
    platform: str
    username: Optional[str] = None
    total_solved: int = 0
    total_submissions: int = 0
    easy_solved: Optional[int] = None
    medium_solved: Optional[int] = None
    hard_solved: Optional[int] = None
    rating: Optional[int] = None
    max_rating: Optional[int] = None
    rank: Optional[str] = None
    ranking: Optional[int] = None
    stars: Optional[int] = None
    global_rank: Optional[int] = None
    country_rank: Optional[int] = None
    institution_rank: Optional[int] = None
    coding_score: Optional[int] = None
    monthly_score: Optional[int] = None
    attended_contests: Optional[int] = None
    top_percentage: Optional[float] = None
    acceptance_rate: Optional[float] = None
    streak: Optional[int] = None
    rating_history: List[RatingPoint] = []
    fetch_status: str
    last_fetched: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: PlatformRecord) -> 'PlatformStatsResponse':
        return cls(
            platform=record.platform.value,
            username=record.username,
            total_solved=record.total_solved or 0,
            total_submissions=record.total_submissions or 0,
            easy_solved=record.easy_solved,
            medium_solved=record.medium_solved,
            hard_solved=record.hard_solved,
            rating=record.rating,
            max_rating=record.max_rating,
            rank=record.rank,
            ranking=record.ranking,
            stars=record.stars,
            global_rank=record.global_rank,
            country_rank=record.country_rank,
            institution_rank=record.institution_rank,
            coding_score=record.coding_score,
            monthly_score=record.monthly_score,
            attended_contests=record.attended_contests,
            top_percentage=record.top_percentage,
            acceptance_rate=record.acceptance_rate,
            streak=record.streak,
            rating_history=[RatingPoint(**entry.__dict__) for entry in record.rating_history],
            fetch_status=record.fetch_status.value,
            last_fetched=record.last_fetched
        )

class HeatmapDay(BaseModel):
    """One heatmap cell"""
    date: date
    count: int
    level: int
    breakdown: Dict[str, int]

    @classmethod
    def from_record(cls, record: DailyActivityRecord) -> 'HeatmapDay':
        return cls(
            date=record.date,
            count=record.total_submissions,
            level=record.intensity_level,
            breakdown={platform.value: count for platform, count in record.breakdown.items()}
        )

class StatsResponse(BaseModel):
    success: bool = True
    last_updated: Optional[datetime] = None
    data: Dict[str, PlatformStatsResponse]

class PlatformDetailResponse(BaseModel):
    success: bool = True
    last_updated: Optional[datetime] = None
    data: PlatformStatsResponse

class HeatmapResponse(BaseModel):
    success: bool = True
    year: Optional[int] = None
    data: List[HeatmapDay]

class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    last_data_update: Optional[datetime] = None
