"""
Pytest configuration and fixtures

HTTP is never hit: clients get a FakeSession that answers from a route
table. Databases are in-memory SQLite, created fresh per test.
"""
import pytest
import requests

from cp_tracker.db import Database, db as global_db


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, json_data=None, status_code=200, text=''):
        self._json = json_data
        self.status_code = status_code
        self.text = text

    def json(self):
        if self._json is None:
            raise ValueError("Response is not JSON")
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """
    Answers requests from (method, url fragment, outcome) routes, first match wins.

    An outcome is a FakeResponse, an exception to raise, or a callable
    taking the request kwargs and returning either.
    """

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        for route_method, fragment, outcome in self.routes:
            if route_method == method and fragment in url:
                if callable(outcome) and not isinstance(outcome, (FakeResponse, Exception)):
                    outcome = outcome(kwargs)
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise requests.ConnectionError(f"No route for {method} {url}")

    def urls(self):
        return [url for _, url, _ in self.calls]


@pytest.fixture
def database():
    """Fresh in-memory database"""
    database = Database()
    database.init("sqlite://")
    yield database
    database.dispose()


@pytest.fixture
def app_db():
    """The module-level database the API reads from, in memory"""
    global_db.init("sqlite://")
    yield global_db
    global_db.dispose()
