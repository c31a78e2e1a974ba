"""GeeksforGeeks integration service with mirror and profile page fallbacks"""
import logging
from typing import List

from bs4 import BeautifulSoup

from cp_tracker.config import settings
from cp_tracker.models.platform import Platform, PlatformRecord
from cp_tracker.services.base import FetchError, PlatformClient, Strategy, to_int

logger = logging.getLogger(__name__)

# Score card values on the profile page, in page order
SCORE_CARD_SELECTOR = '[class*="scoreCard_head_left--score"]'
SCORE_CARD_FIELDS = ('coding_score', 'total_solved', 'monthly_score')

class GeeksforGeeksAPI(PlatformClient):
    """
    Fetches GeeksforGeeks practice stats.

    GFG difficulty levels are folded into three buckets: school problems
    count as easy, basic and easy as medium, medium and hard as hard.
    """

    platform = Platform.GEEKSFORGEEKS

    def strategies(self) -> List[Strategy]:
        return [
            Strategy("user-stats-api", self.get_from_api),
            Strategy("profile-api", self.get_from_profile_api),
            Strategy("stats-api", self.get_from_stats_api, accepts=lambda record: record.total_solved > 0),
            Strategy("profile-page", self.get_from_profile_page, degraded=True,
                     accepts=lambda record: record.coding_score is not None or record.total_solved > 0),
        ]

    @staticmethod
    def _sum(*values) -> int:
        return sum(to_int(v) or 0 for v in values)

    def get_from_api(self, username: str) -> PlatformRecord:
        payload = self._get_json(
            settings.GFG_API_URL.format(username=username),
            timeout=self.long_timeout,
            headers={'Accept': 'application/json, text/plain, */*'}
        )
        data = (payload or {}).get('data')
        if not data:
            raise FetchError("GeeksforGeeks user stats API returned no data")
        return PlatformRecord(
            platform=self.platform,
            username=username,
            total_solved=to_int(data.get('total_problems_solved')) or 0,
            easy_solved=to_int(data.get('school_solved')) or 0,
            medium_solved=self._sum(data.get('basic_solved'), data.get('easy_solved')),
            hard_solved=self._sum(data.get('medium_solved'), data.get('hard_solved')),
            coding_score=to_int(data.get('score')) or 0,
            monthly_score=to_int(data.get('monthly_score')) or 0,
            institution_rank=to_int(data.get('institute_rank')),
            streak=to_int(data.get('pod_solved_longest_streak'))
        )

    def get_from_profile_api(self, username: str) -> PlatformRecord:
        data = self._get_json(settings.GFG_PROFILE_API_URL.format(username=username), timeout=self.long_timeout)
        if not data or data.get('error'):
            raise FetchError(f"GeeksforGeeks profile API error: {(data or {}).get('error') or 'empty response'}")
        return PlatformRecord(
            platform=self.platform,
            username=username,
            total_solved=to_int(data.get('totalProblemsSolved') or data.get('problemsSolved')) or 0,
            easy_solved=to_int(data.get('school')) or 0,
            medium_solved=self._sum(data.get('basic'), data.get('easy')),
            hard_solved=self._sum(data.get('medium'), data.get('hard')),
            coding_score=to_int(data.get('codingScore')) or 0
        )

    def get_from_stats_api(self, username: str) -> PlatformRecord:
        data = self._get_json(settings.GFG_STATS_API_URL.format(username=username), timeout=self.long_timeout)
        return PlatformRecord(
            platform=self.platform,
            username=username,
            total_solved=to_int(data.get('totalProblemsSolved')) or 0,
            easy_solved=to_int(data.get('School') or data.get('school')) or 0,
            medium_solved=self._sum(data.get('Basic'), data.get('Easy')),
            hard_solved=self._sum(data.get('Medium'), data.get('Hard')),
            coding_score=to_int(data.get('codingScore')) or 0,
            institution_rank=to_int(data.get('instituteRank'))
        )

    def get_from_profile_page(self, username: str) -> PlatformRecord:
        html = self._get_text(
            settings.GFG_PROFILE_URL.format(username=username),
            timeout=self.long_timeout,
            headers={'Accept': 'text/html'}
        )
        return self.parse_profile_page(html, username)

    def parse_profile_page(self, html: str, username: str) -> PlatformRecord:
        """
        Read the score card by position.

        The Nth matched element is taken to be the Nth entry of
        SCORE_CARD_FIELDS, so any change to the card layout shifts values.
        """
        soup = BeautifulSoup(html, 'html.parser')
        values = [to_int(node.get_text()) for node in soup.select(SCORE_CARD_SELECTOR)]
        fields = dict(zip(SCORE_CARD_FIELDS, values))

        return PlatformRecord(
            platform=self.platform,
            username=username,
            coding_score=fields.get('coding_score'),
            total_solved=fields.get('total_solved') or 0,
            monthly_score=fields.get('monthly_score')
        )
