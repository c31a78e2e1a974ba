"""Codeforces official API integration service"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from cp_tracker.config import settings
from cp_tracker.models.platform import Platform, PlatformRecord, RatingEntry
from cp_tracker.services.base import FetchError, PlatformClient, Strategy

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20
SUBMISSION_LIMIT = 10000

class CodeforcesAPI(PlatformClient):
    """Handles Codeforces API calls and maps them to the canonical record"""

    platform = Platform.CODEFORCES

    def __init__(self, *args, base_url: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = base_url or settings.CODEFORCES_API_URL

    def strategies(self) -> List[Strategy]:
        return [Strategy("official-api", self.get_profile)]

    def _call(self, method: str, params: dict, timeout: Optional[float] = None) -> list:
        """Call an API method and unwrap its result"""
        response = self._make_request(
            'GET', f'{self.base_url}/{method}', params=params, timeout=timeout
        )
        payload = response.json()
        if payload.get('status') != 'OK':
            raise FetchError(payload.get('comment') or f"Codeforces {method} returned HTTP {response.status_code}")
        return payload.get('result') or []

    def get_profile(self, handle: str) -> PlatformRecord:
        """Fetch user info, rating history and submissions concurrently"""
        with ThreadPoolExecutor(max_workers=3) as pool:
            info_future = pool.submit(self._call, 'user.info', {'handles': handle})
            rating_future = pool.submit(self._call, 'user.rating', {'handle': handle})
            status_future = pool.submit(
                self._call, 'user.status',
                {'handle': handle, 'from': 1, 'count': SUBMISSION_LIMIT},
                self.long_timeout
            )
            users = info_future.result()
            rating_changes = rating_future.result()
            submissions = status_future.result()

        if not users:
            raise FetchError(f'Codeforces user "{handle}" not found')

        return self._format_profile(users[0], rating_changes, submissions, handle)

    @staticmethod
    def _problem_key(problem: dict) -> Tuple:
        return problem.get('contestId') or problem.get('name'), problem.get('index')

    @classmethod
    def summarize_submissions(cls, submissions: List[dict]) -> Tuple[int, Dict[str, int]]:
        """
        Distinct accepted problems and submissions per local calendar day.

        Every verdict counts toward the daily totals, only OK verdicts
        count toward solved problems.
        """
        solved = set()
        by_date: Dict[str, int] = {}

        for sub in submissions:
            if sub.get('verdict') == 'OK':
                solved.add(cls._problem_key(sub.get('problem') or {}))

            created = sub.get('creationTimeSeconds')
            if created is None:
                continue
            day = datetime.fromtimestamp(created).date().isoformat()
            by_date[day] = by_date.get(day, 0) + 1

        return len(solved), by_date

    def _format_profile(self, user: dict, rating_changes: List[dict],
                        submissions: List[dict], handle: str) -> PlatformRecord:
        total_solved, by_date = self.summarize_submissions(submissions)

        history = [
            RatingEntry(
                contest_id=change.get('contestId'),
                contest_name=change.get('contestName'),
                rating=change.get('newRating') or 0,
                ranking=change.get('rank'),
                date=datetime.fromtimestamp(change['ratingUpdateTimeSeconds'])
                if change.get('ratingUpdateTimeSeconds') else None
            )
            for change in rating_changes[-HISTORY_LIMIT:]
        ]

        return PlatformRecord(
            platform=self.platform,
            username=user.get('handle') or handle,
            rating=user.get('rating') or 0,
            max_rating=user.get('maxRating') or 0,
            rank=user.get('rank') or 'unrated',
            total_solved=total_solved,
            total_submissions=len(submissions),
            rating_history=history,
            submissions_by_date=by_date
        )
