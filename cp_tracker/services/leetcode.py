"""LeetCode GraphQL integration service"""
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Dict, List, Optional

from cp_tracker.config import settings
from cp_tracker.models.platform import Platform, PlatformRecord, RatingEntry
from cp_tracker.services.base import FetchError, PlatformClient, Strategy, to_int

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10

PROFILE_QUERY = """
query userProfile($username: String!) {
  matchedUser(username: $username) {
    username
    profile {
      ranking
    }
    submitStats {
      acSubmissionNum {
        difficulty
        count
        submissions
      }
      totalSubmissionNum {
        difficulty
        count
        submissions
      }
    }
    submissionCalendar
  }
}
"""

CONTEST_QUERY = """
query userContestRankingInfo($username: String!) {
  userContestRanking(username: $username) {
    rating
    globalRanking
    attendedContestsCount
    topPercentage
  }
  userContestRankingHistory(username: $username) {
    attended
    contest {
      title
      startTime
    }
    rating
    ranking
  }
}
"""

class LeetCodeAPI(PlatformClient):
    """Handles LeetCode GraphQL queries and maps them to the canonical record"""

    platform = Platform.LEETCODE

    def __init__(self, *args, graphql_url: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.graphql_url = graphql_url or settings.LEETCODE_GRAPHQL_URL

    def strategies(self) -> List[Strategy]:
        return [Strategy("graphql", self.get_profile)]

    def _query(self, query: str, username: str) -> dict:
        """Run one GraphQL query"""
        return self._post_json(
            self.graphql_url,
            {'query': query, 'variables': {'username': username}},
            headers={'Content-Type': 'application/json', 'Referer': 'https://leetcode.com'}
        )

    def get_profile(self, username: str) -> PlatformRecord:
        """Fetch profile and contest data concurrently, contest data is optional"""
        with ThreadPoolExecutor(max_workers=2) as pool:
            profile_future = pool.submit(self._query, PROFILE_QUERY, username)
            contest_future = pool.submit(self._query, CONTEST_QUERY, username)

            profile = profile_future.result()
            try:
                contest = contest_future.result()
            except Exception as e:
                logger.warning(f"Failed to fetch LeetCode contest data: {e}")
                contest = {}

        user = (profile.get('data') or {}).get('matchedUser')
        if not user:
            raise FetchError(f'LeetCode user "{username}" not found')

        record = self._format_profile(user)
        self._apply_contest(record, contest.get('data') or {})
        return record

    @staticmethod
    def _difficulty_counts(entries: List[dict], key: str) -> Dict[str, int]:
        return {e.get('difficulty'): e.get(key) or 0 for e in entries or []}

    @staticmethod
    def parse_calendar(raw: Optional[str]) -> Dict[int, int]:
        """Submission calendar with integer day-start timestamps as keys"""
        try:
            calendar = json.loads(raw or '{}')
            return {int(day): int(count) for day, count in calendar.items()}
        except (AttributeError, TypeError, ValueError):
            logger.warning("Failed to parse LeetCode submission calendar")
            return {}

    def _format_profile(self, user: dict) -> PlatformRecord:
        stats = user.get('submitStats') or {}
        solved = self._difficulty_counts(stats.get('acSubmissionNum'), 'count')
        accepted = self._difficulty_counts(stats.get('acSubmissionNum'), 'submissions')
        submitted = self._difficulty_counts(stats.get('totalSubmissionNum'), 'submissions')

        total_submissions = submitted.get('All', 0)
        acceptance_rate = None
        if total_submissions:
            acceptance_rate = round(accepted.get('All', 0) / total_submissions * 100, 2)

        return PlatformRecord(
            platform=self.platform,
            username=user.get('username'),
            total_solved=solved.get('All', 0),
            total_submissions=total_submissions,
            easy_solved=solved.get('Easy', 0),
            medium_solved=solved.get('Medium', 0),
            hard_solved=solved.get('Hard', 0),
            ranking=to_int((user.get('profile') or {}).get('ranking')),
            acceptance_rate=acceptance_rate,
            submission_calendar=self.parse_calendar(user.get('submissionCalendar'))
        )

    def _apply_contest(self, record: PlatformRecord, data: dict) -> None:
        """Add contest rating fields when the contest query answered"""
        ranking = data.get('userContestRanking')
        if ranking:
            record.rating = to_int(ranking.get('rating')) or None
            record.global_rank = to_int(ranking.get('globalRanking'))
            record.attended_contests = ranking.get('attendedContestsCount') or 0
            record.top_percentage = ranking.get('topPercentage')

        history = [h for h in data.get('userContestRankingHistory') or [] if h.get('attended', True)]
        if history:
            record.max_rating = max(to_int(h.get('rating')) or 0 for h in history)
        record.rating_history = [self._format_history_entry(h) for h in history[-HISTORY_LIMIT:]]

    @staticmethod
    def _format_history_entry(entry: dict) -> RatingEntry:
        contest = entry.get('contest') or {}
        start_time = contest.get('startTime')
        return RatingEntry(
            rating=to_int(entry.get('rating')) or 0,
            ranking=entry.get('ranking'),
            contest_name=contest.get('title'),
            date=datetime.fromtimestamp(start_time) if start_time else None
        )
