"""CodeChef integration service with mirror and profile page fallbacks"""
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from cp_tracker.config import settings
from cp_tracker.models.platform import Platform, PlatformRecord
from cp_tracker.services.base import FetchError, PlatformClient, Strategy, to_int

logger = logging.getLogger(__name__)

class CodeChefAPI(PlatformClient):
    """
    Fetches CodeChef stats.

    CodeChef has no official public API, so three community mirrors are
    tried in turn before falling back to reading the public profile page.
    """

    platform = Platform.CODECHEF

    def strategies(self) -> List[Strategy]:
        return [
            Strategy("codechef-api", self.get_from_api),
            Strategy("competitive-coding-api", self.get_from_alt_api),
            Strategy("codechef-stats-api", self.get_from_stats_api, accepts=lambda record: True),
            Strategy("profile-page", self.get_from_profile_page, degraded=True),
        ]

    def is_plausible(self, record: PlatformRecord) -> bool:
        return bool(record.rating)

    def get_from_api(self, username: str) -> PlatformRecord:
        data = self._get_json(settings.CODECHEF_API_URL.format(username=username), timeout=self.long_timeout)
        return PlatformRecord(
            platform=self.platform,
            username=data.get('name') or username,
            rating=to_int(data.get('currentRating')) or 0,
            max_rating=to_int(data.get('highestRating')) or 0,
            stars=to_int(data.get('stars')) or 0,
            global_rank=to_int(data.get('globalRank')),
            country_rank=to_int(data.get('countryRank')),
            total_solved=to_int(data.get('fullySolvedCount')) or 0
        )

    def get_from_alt_api(self, username: str) -> PlatformRecord:
        data = self._get_json(settings.CODECHEF_ALT_API_URL.format(username=username), timeout=self.long_timeout)
        return PlatformRecord(
            platform=self.platform,
            username=username,
            rating=to_int(data.get('currentRating') or data.get('rating')) or 0,
            max_rating=to_int(data.get('highestRating') or data.get('maxRating')) or 0,
            stars=to_int(data.get('stars')) or 0,
            total_solved=to_int(data.get('fullySolvedCount') or data.get('problemsSolved')) or 0
        )

    def get_from_stats_api(self, username: str) -> PlatformRecord:
        data = self._get_json(settings.CODECHEF_STATS_API_URL.format(username=username), timeout=self.long_timeout)
        if not data or data.get('error'):
            raise FetchError(f"CodeChef stats API error: {(data or {}).get('error') or 'empty response'}")
        return PlatformRecord(
            platform=self.platform,
            username=username,
            rating=to_int(data.get('currentRating') or data.get('rating')) or 0,
            max_rating=to_int(data.get('highestRating')) or 0,
            stars=to_int(data.get('stars')) or 0,
            total_solved=to_int(data.get('problemsSolved') or data.get('fullySolvedCount')) or 0
        )

    def get_from_profile_page(self, username: str) -> PlatformRecord:
        html = self._get_text(
            settings.CODECHEF_PROFILE_URL.format(username=username),
            timeout=self.long_timeout,
            headers={'Accept': 'text/html'}
        )
        return self.parse_profile_page(html, username)

    @staticmethod
    def _extract_total_solved(text: str) -> Optional[int]:
        match = re.search(r'Total Problems Solved:?\s*(\d+)', text)
        return int(match.group(1)) if match else None

    def parse_profile_page(self, html: str, username: str) -> PlatformRecord:
        """
        Read rating fields from the profile page markup.

        A missing total solved count is tolerated and left at 0.
        """
        soup = BeautifulSoup(html, 'html.parser')
        text = soup.get_text(' ', strip=True)

        rating_node = soup.select_one('.rating-number')
        rating = to_int(rating_node.get_text()) if rating_node else None
        rating = rating or 0

        highest = re.search(r'Highest Rating\D*(\d+)', text)
        max_rating = int(highest.group(1)) if highest else rating

        star_node = soup.select_one('.rating-star')
        stars = len(star_node.find_all('span')) if star_node else 0

        total_solved = self._extract_total_solved(text)
        if total_solved is None:
            logger.warning(f"Could not read total solved for CodeChef user {username}")
            total_solved = 0

        return PlatformRecord(
            platform=self.platform,
            username=username,
            rating=rating,
            max_rating=max_rating,
            stars=stars,
            total_solved=total_solved
        )
