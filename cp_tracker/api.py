"""Read-only HTTP API over stored platform stats and daily activity"""
import logging
from datetime import date, datetime, timedelta
from typing import Generator, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cp_tracker.cache import TTLCache
from cp_tracker.config import Settings, settings as default_settings
from cp_tracker.db import db
from cp_tracker.models.platform import Platform
from cp_tracker.models.responses import (
    HealthResponse, HeatmapDay, HeatmapResponse, PlatformDetailResponse,
    PlatformStatsResponse, StatsResponse
)
from cp_tracker.services.storage import StorageError, StorageService

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
STATS_SLOT = "stats"
HEATMAP_SLOT = "heatmap"
HEATMAP_DAYS = 365

def get_storage() -> Generator[StorageService, None, None]:
    """Storage service bound to a request-scoped session"""
    session = db.get_session()
    try:
        yield StorageService(session)
    finally:
        session.close()

def _cache_header(response: Response, hit: bool) -> None:
    response.headers["X-Cache"] = "HIT" if hit else "MISS"

def build_router(settings: Settings, cache: TTLCache) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["stats"])

    @router.get("/health", response_model=HealthResponse)
    def health(storage: StorageService = Depends(get_storage)):
        try:
            last_update = storage.latest_fetch_time()
        except StorageError:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"status": "error", "message": "Storage unavailable"}
            )
        return HealthResponse(status="ok", timestamp=datetime.now(), last_data_update=last_update)

    @router.get("/stats")
    def all_stats(response: Response, storage: StorageService = Depends(get_storage)):
        """
        All platform statistics.

        Served from the cache for up to CACHE_TTL_SECONDS after the first
        read; the X-Cache header tells whether this response was cached.
        """
        def load() -> dict:
            records = storage.find_all_platform_stats()
            fetched = [r.last_fetched for r in records if r.last_fetched]
            return StatsResponse(
                last_updated=max(fetched) if fetched else None,
                data={r.platform.value: PlatformStatsResponse.from_record(r) for r in records}
            ).model_dump(mode="json")

        payload, hit = cache.get_or_load(STATS_SLOT, load)
        _cache_header(response, hit)
        return payload

    @router.get("/stats/{platform}", response_model=PlatformDetailResponse)
    def platform_stats(platform: str, storage: StorageService = Depends(get_storage)):
        try:
            key = Platform(platform)
        except ValueError:
            valid = ", ".join(p.value for p in Platform)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid platform. Use: {valid}"
            )

        record = storage.find_platform_stats(key)
        if not record:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Platform data not found")

        return PlatformDetailResponse(
            last_updated=record.last_fetched,
            data=PlatformStatsResponse.from_record(record)
        )

    @router.get("/heatmap")
    def heatmap(response: Response, storage: StorageService = Depends(get_storage)):
        """Combined heatmap for the last 365 days, oldest first"""
        def load() -> dict:
            today = date.today()
            days = storage.find_daily_activity_in_range(today - timedelta(days=HEATMAP_DAYS), today)
            return HeatmapResponse(data=[HeatmapDay.from_record(d) for d in days]).model_dump(mode="json")

        payload, hit = cache.get_or_load(HEATMAP_SLOT, load)
        _cache_header(response, hit)
        return payload

    @router.get("/heatmap/{year}", response_model=HeatmapResponse)
    def heatmap_for_year(year: int, storage: StorageService = Depends(get_storage)):
        if year < settings.HEATMAP_MIN_YEAR or year > settings.HEATMAP_MAX_YEAR:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid year, expected {settings.HEATMAP_MIN_YEAR}-{settings.HEATMAP_MAX_YEAR}"
            )

        days = storage.find_daily_activity_in_range(date(year, 1, 1), date(year, 12, 31))
        return HeatmapResponse(year=year, data=[HeatmapDay.from_record(d) for d in days])

    return router

def create_app(settings: Optional[Settings] = None, cache: Optional[TTLCache] = None) -> FastAPI:
    """Build the read API"""
    settings = settings or default_settings
    cache = cache or TTLCache(settings.CACHE_TTL_SECONDS)

    app = FastAPI(title="Coding Profile Analytics API", version=VERSION)
    app.state.cache = cache

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage error serving {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Internal server error"}
        )

    @app.get("/")
    def index():
        return {
            "name": app.title,
            "version": VERSION,
            "endpoints": {
                "health": "/api/health",
                "stats": "/api/stats",
                "platformStats": "/api/stats/{platform}",
                "heatmap": "/api/heatmap",
                "yearHeatmap": "/api/heatmap/{year}",
            }
        }

    app.include_router(build_router(settings, cache))
    return app

app = create_app()
