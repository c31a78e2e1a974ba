"""Tests for the CodeChef client and its fallbacks"""
import requests

from conftest import FakeResponse, FakeSession
from cp_tracker.models.platform import FetchStatus
from cp_tracker.services.codechef import CodeChefAPI

PRIMARY = "codechef-api.vercel.app"
ALTERNATE = "competitive-coding-api.herokuapp.com"
STATS = "codechef-stats-api.vercel.app"
PROFILE = "www.codechef.com/users"

PROFILE_HTML = """
<html><body>
  <div class="rating-header">
    <div class="rating-number">1875</div>
    <div class="rating-star"><span>&#9733;</span><span>&#9733;</span><span>&#9733;</span><span>&#9733;</span></div>
    <small>(Highest Rating 1942)</small>
  </div>
  <section class="rating-data-section problems-solved">
    <h3>Total Problems Solved: 412</h3>
  </section>
</body></html>
"""


def down(message="unreachable"):
    return requests.ConnectionError(message)


def test_primary_api_wins():
    session = FakeSession([
        ("GET", PRIMARY, FakeResponse({
            "success": True, "name": "chef_one", "currentRating": 1875, "highestRating": 1942,
            "stars": "4★", "globalRank": 8123, "countryRank": 6012, "fullySolvedCount": 412,
        })),
    ])

    result = CodeChefAPI(http=session).fetch("chef_one")

    assert result.fetch_status == FetchStatus.SUCCESS
    assert (result.rating, result.max_rating, result.stars) == (1875, 1942, 4)
    assert (result.global_rank, result.country_rank) == (8123, 6012)
    assert result.total_solved == 412
    assert len(session.calls) == 1


def test_zero_rating_from_primary_falls_through_to_alternate():
    session = FakeSession([
        ("GET", PRIMARY, FakeResponse({"success": False, "currentRating": 0})),
        ("GET", ALTERNATE, FakeResponse({"rating": "1650", "maxRating": "1700",
                                         "stars": "3★", "problemsSolved": "120"})),
    ])

    result = CodeChefAPI(http=session).fetch("chef_one")

    assert result.fetch_status == FetchStatus.SUCCESS
    assert (result.rating, result.max_rating, result.stars, result.total_solved) == (1650, 1700, 3, 120)


def test_stats_api_accepted_without_rating():
    session = FakeSession([
        ("GET", PRIMARY, down()),
        ("GET", ALTERNATE, down()),
        ("GET", STATS, FakeResponse({"rating": 0, "problemsSolved": 15})),
    ])

    result = CodeChefAPI(http=session).fetch("newchef")

    assert result.fetch_status == FetchStatus.SUCCESS
    assert result.total_solved == 15


def test_profile_page_is_partial():
    session = FakeSession([
        ("GET", PRIMARY, down()),
        ("GET", ALTERNATE, FakeResponse(status_code=503)),
        ("GET", STATS, FakeResponse({"error": "user not found"})),
        ("GET", PROFILE, FakeResponse(text=PROFILE_HTML)),
    ])

    result = CodeChefAPI(http=session).fetch("chef_one")

    assert result.fetch_status == FetchStatus.PARTIAL
    assert (result.rating, result.max_rating, result.stars) == (1875, 1942, 4)
    assert result.total_solved == 412
    assert result.username == "chef_one"


def test_profile_page_without_solved_count_keeps_zero():
    html = '<div class="rating-number">1500</div><div class="rating-star"><span>&#9733;</span></div>'
    record = CodeChefAPI(http=object()).parse_profile_page(html, "chef_two")

    assert record.rating == 1500
    assert record.max_rating == 1500
    assert record.stars == 1
    assert record.total_solved == 0


def test_all_methods_failing_reports_first_error():
    session = FakeSession([
        ("GET", PRIMARY, down("primary mirror down")),
        ("GET", ALTERNATE, down()),
        ("GET", STATS, down()),
        ("GET", PROFILE, FakeResponse(text="<html><body>No such user</body></html>")),
    ])

    result = CodeChefAPI(http=session).fetch("ghost")

    assert result.fetch_status == FetchStatus.FAILED
    assert result.error_message == "primary mirror down"


def test_mirror_error_reported_when_other_sources_are_empty():
    session = FakeSession([
        ("GET", PRIMARY, FakeResponse({"currentRating": None})),
        ("GET", ALTERNATE, FakeResponse({})),
        ("GET", STATS, FakeResponse({"error": "not found"})),
        ("GET", PROFILE, FakeResponse(text="<html></html>")),
    ])

    result = CodeChefAPI(http=session).fetch("ghost")

    assert result.failed
    assert result.error_message == "CodeChef stats API error: not found"


def test_strategies_run_in_order():
    session = FakeSession([])

    CodeChefAPI(http=session).fetch("ghost")

    hosts = session.urls()
    assert PRIMARY in hosts[0]
    assert ALTERNATE in hosts[1]
    assert STATS in hosts[2]
    assert PROFILE in hosts[3]
