"""Application configuration and environment settings"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cp_tracker.models.platform import Platform

class ScheduleSettings(BaseModel):
    """Daily run schedule"""
    hour: int = Field(..., ge=0, le=23, description="Wall-clock hour of the daily run")
    minute: int = Field(..., ge=0, le=59, description="Wall-clock minute of the daily run")
    timezone: str = Field(..., description="IANA timezone the schedule is expressed in")

class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    # Storage
    DATABASE_URL: str = Field("sqlite:///cp_tracker.db", description="SQLAlchemy database URL")

    # Platform usernames, a platform without one is skipped
    LEETCODE_USERNAME: Optional[str] = Field(None, description="LeetCode username")
    CODEFORCES_USERNAME: Optional[str] = Field(None, description="Codeforces handle")
    CODECHEF_USERNAME: Optional[str] = Field(None, description="CodeChef username")
    GFG_USERNAME: Optional[str] = Field(None, description="GeeksforGeeks username")

    # HTTP settings
    REQUEST_TIMEOUT: float = Field(10.0, description="Timeout for primary API calls in seconds")
    LONG_REQUEST_TIMEOUT: float = Field(15.0, description="Timeout for mirrors and large payloads in seconds")
    REQUEST_ATTEMPTS: int = Field(1, description="Attempts per HTTP call before a strategy gives up")
    USER_AGENT: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        description="User-Agent sent to endpoints that reject bare clients"
    )

    # LeetCode endpoints
    LEETCODE_GRAPHQL_URL: str = "https://leetcode.com/graphql"

    # Codeforces endpoints
    CODEFORCES_API_URL: str = "https://codeforces.com/api"

    # CodeChef endpoints, tried in order
    CODECHEF_API_URL: str = "https://codechef-api.vercel.app/handle/{username}"
    CODECHEF_ALT_API_URL: str = "https://competitive-coding-api.herokuapp.com/api/codechef/{username}"
    CODECHEF_STATS_API_URL: str = "https://codechef-stats-api.vercel.app/user/{username}"
    CODECHEF_PROFILE_URL: str = "https://www.codechef.com/users/{username}"

    # GeeksforGeeks endpoints, tried in order
    GFG_API_URL: str = "https://www.geeksforgeeks.org/api/vr/auth/user-stats/{username}"
    GFG_PROFILE_API_URL: str = "https://geeksforgeeks-profile-api.vercel.app/api/{username}"
    GFG_STATS_API_URL: str = "https://gfg-stats-api.vercel.app/?userName={username}"
    GFG_PROFILE_URL: str = "https://www.geeksforgeeks.org/user/{username}/"

    # Aggregation settings
    PLATFORM_DELAY_SECONDS: float = Field(1.0, description="Pause between platforms during a run")

    # Scheduler settings
    SCHEDULE_HOUR: int = Field(2, description="Hour of the daily run")
    SCHEDULE_MINUTE: int = Field(0, description="Minute of the daily run")
    SCHEDULE_TIMEZONE: str = Field("Asia/Kolkata", description="Timezone of the daily run")
    STARTUP_DELAY_SECONDS: float = Field(5.0, description="Delay before the run triggered at start")

    # Read API settings
    CACHE_TTL_SECONDS: float = Field(300.0, description="Lifetime of cached read payloads")
    HEATMAP_MIN_YEAR: int = 2000
    HEATMAP_MAX_YEAR: int = 2100
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:5500", "http://127.0.0.1:5500"],
        description="Origins allowed to call the read API"
    )
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    @property
    def schedule(self) -> ScheduleSettings:
        """Get schedule settings as a separate model"""
        return ScheduleSettings(
            hour=self.SCHEDULE_HOUR,
            minute=self.SCHEDULE_MINUTE,
            timezone=self.SCHEDULE_TIMEZONE
        )

    @property
    def platform_usernames(self) -> Dict[Platform, Optional[str]]:
        """Configured username per platform, in fetch order"""
        return {
            Platform.LEETCODE: self.LEETCODE_USERNAME,
            Platform.CODEFORCES: self.CODEFORCES_USERNAME,
            Platform.CODECHEF: self.CODECHEF_USERNAME,
            Platform.GEEKSFORGEEKS: self.GFG_USERNAME,
        }

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True
    )

settings = Settings()
