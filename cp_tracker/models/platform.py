"""Domain models for platform statistics and daily activity"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

class Platform(str, Enum):
    """Supported competitive programming platforms"""
    LEETCODE = "leetcode"
    CODEFORCES = "codeforces"
    CODECHEF = "codechef"
    GEEKSFORGEEKS = "geeksforgeeks"

class FetchStatus(str, Enum):
    """Outcome of a platform fetch"""
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"

@dataclass
class RatingEntry:
    """One contest result in a rating history"""
    rating: int
    date: Optional[datetime]
    contest_id: Optional[int] = None
    contest_name: Optional[str] = None
    ranking: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'contest_id': self.contest_id,
            'contest_name': self.contest_name,
            'rating': self.rating,
            'ranking': self.ranking,
            'date': self.date.isoformat() if self.date else None
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'RatingEntry':
        raw_date = data.get('date')
        return cls(
            rating=data.get('rating') or 0,
            date=datetime.fromisoformat(raw_date) if raw_date else None,
            contest_id=data.get('contest_id'),
            contest_name=data.get('contest_name'),
            ranking=data.get('ranking')
        )

@dataclass
class PlatformRecord:
    """
    Canonical statistics for one platform.

    Optional fields left as None mean "not applicable to this platform",
    not zero. submission_calendar and submissions_by_date carry the native
    per-day signal of a fresh fetch and are never persisted.
    """
    platform: Platform
    fetch_status: FetchStatus = FetchStatus.SUCCESS
    username: Optional[str] = None
    total_solved: int = 0
    total_submissions: int = 0

    # Difficulty breakdown
    easy_solved: Optional[int] = None
    medium_solved: Optional[int] = None
    hard_solved: Optional[int] = None

    # Contest ratings
    rating: Optional[int] = None
    max_rating: Optional[int] = None
    rank: Optional[str] = None
    rating_history: List[RatingEntry] = field(default_factory=list)

    # Platform extras
    ranking: Optional[int] = None
    global_rank: Optional[int] = None
    country_rank: Optional[int] = None
    institution_rank: Optional[int] = None
    coding_score: Optional[int] = None
    monthly_score: Optional[int] = None
    stars: Optional[int] = None
    attended_contests: Optional[int] = None
    top_percentage: Optional[float] = None
    acceptance_rate: Optional[float] = None
    streak: Optional[int] = None

    last_fetched: Optional[datetime] = None
    error_message: Optional[str] = None

    # Native per-day signals
    submission_calendar: Dict[int, int] = field(default_factory=dict)
    submissions_by_date: Dict[str, int] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.fetch_status == FetchStatus.FAILED

    @classmethod
    def failure(cls, platform: Platform, message: str) -> 'PlatformRecord':
        """Build a failed record carrying only the error"""
        return cls(
            platform=platform,
            fetch_status=FetchStatus.FAILED,
            error_message=message,
            last_fetched=datetime.now()
        )

@dataclass
class DailyActivityRecord:
    """Unified submission counts for one calendar date"""
    date: date
    breakdown: Dict[Platform, int]
    total_submissions: int
    intensity_level: int

@dataclass
class RunSummary:
    """What a single aggregation run did"""
    started_at: datetime
    results: Dict[Platform, FetchStatus] = field(default_factory=dict)
    persisted: List[Platform] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    activity: Optional[DailyActivityRecord] = None
