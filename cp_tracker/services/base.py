"""Shared fallback-chain machinery for platform clients"""
import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional

import requests

from cp_tracker.config import settings
from cp_tracker.models.platform import FetchStatus, Platform, PlatformRecord

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "All API methods failed"

class FetchError(Exception):
    """A strategy got an answer that holds no usable profile data"""
    pass

@dataclass
class Strategy:
    """
    One way of acquiring a platform profile.

    fetch returns a canonical record, or None when the source answered
    without meaningful data. accepts overrides the client's plausibility
    check for this strategy. Degraded strategies (HTML scraping) mark
    their results partial.
    """
    name: str
    fetch: Callable[[str], Optional[PlatformRecord]]
    degraded: bool = False
    accepts: Optional[Callable[[PlatformRecord], bool]] = None

def to_int(value: Any) -> Optional[int]:
    """Best-effort integer from the loosely typed values mirrors return"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(round(value))
    match = re.search(r'-?\d+', str(value).replace(',', ''))
    return int(match.group()) if match else None

class PlatformClient:
    """
    Base class for the per-platform clients.

    Subclasses list their strategies in priority order. fetch() never
    raises: every failure ends up in the returned record's status.
    """

    platform: Platform

    def __init__(self, http: Optional[requests.Session] = None,
                 timeout: Optional[float] = None, long_timeout: Optional[float] = None,
                 attempts: Optional[int] = None):
        self.http = http or requests.Session()
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.long_timeout = long_timeout or settings.LONG_REQUEST_TIMEOUT
        self.attempts = max(attempts or settings.REQUEST_ATTEMPTS, 1)

    def strategies(self) -> List[Strategy]:
        """Acquisition strategies in the order they are tried"""
        raise NotImplementedError

    def is_plausible(self, record: PlatformRecord) -> bool:
        """Whether a strategy's result carries meaningful data"""
        return bool(record.username)

    def fetch(self, username: str) -> PlatformRecord:
        """
        Run the fallback chain for a username.

        Returns:
            PlatformRecord: first plausible result, or a failed record holding
            the error of the first strategy that raised
        """
        first_error = None

        for strategy in self.strategies():
            try:
                record = strategy.fetch(username)
            except Exception as e:
                logger.warning(f"{self.platform.value} {strategy.name} failed: {e}")
                if first_error is None:
                    first_error = str(e)
                continue

            accepts = strategy.accepts or self.is_plausible
            if record is None or not accepts(record):
                logger.warning(f"{self.platform.value} {strategy.name} returned no usable data")
                continue

            record.platform = self.platform
            record.username = record.username or username
            record.fetch_status = FetchStatus.PARTIAL if strategy.degraded else FetchStatus.SUCCESS
            record.error_message = None
            record.last_fetched = datetime.now()
            logger.info(f"{self.platform.value} fetched via {strategy.name} ({record.fetch_status.value})")
            return record

        logger.error(f"All {self.platform.value} fetch methods failed")
        return PlatformRecord.failure(self.platform, first_error or GENERIC_FAILURE)

    def _make_request(self, method: str, url: str, timeout: Optional[float] = None,
                      **kwargs) -> requests.Response:
        """Make an HTTP request with the configured number of attempts"""
        headers = {'User-Agent': settings.USER_AGENT, **kwargs.pop('headers', {})}

        for attempt in range(self.attempts):
            try:
                return self.http.request(
                    method,
                    url,
                    headers=headers,
                    timeout=timeout or self.timeout,
                    **kwargs
                )
            except requests.RequestException as e:
                if attempt == self.attempts - 1:
                    raise
                logger.warning(f"Retrying request to {url} after error: {e}")
                time.sleep(1)

    def _get_json(self, url: str, timeout: Optional[float] = None, **kwargs) -> Any:
        response = self._make_request('GET', url, timeout=timeout, **kwargs)
        response.raise_for_status()
        return response.json()

    def _post_json(self, url: str, payload: dict, timeout: Optional[float] = None, **kwargs) -> Any:
        response = self._make_request('POST', url, timeout=timeout, json=payload, **kwargs)
        response.raise_for_status()
        return response.json()

    def _get_text(self, url: str, timeout: Optional[float] = None, **kwargs) -> str:
        response = self._make_request('GET', url, timeout=timeout, **kwargs)
        response.raise_for_status()
        return response.text
