from datetime import datetime, timezone

import httpx
import pytest

from portal.domain.gawk import metrics
from portal.domain.gawk.service import GawkService
from portal.domain.map.service import MapService
from portal.domain.profiles.models import CountBucket, Profile, ProfileHistory, UserActivity
from portal.domain.profiles.models import ProfileHistoryStats
from portal.infra import geocoding
from tests.stubs import db_error, install_pool


def _ts(month, day=1):
    return datetime(2024, month, day, tzinfo=timezone.utc)


PROFILES = [
    Profile(id="p1", user_id="u1", full_name="Ada", city="London", country="UK", company="Stripe",
            job_title="Engineer", professional_status="employed", cohort=1, msc=True, is_ise_champion=True,
            updated_at=_ts(5)),
    Profile(id="p2", user_id="u2", full_name="Alan", city="Dublin", country="Ireland", company="Intercom",
            job_title="Engineer", professional_status="entrepreneur", cohort=1),
    Profile(id="p3", user_id="u3", full_name="Grace", job_title="Founder", professional_status="open_to_work",
            cohort=2),
]

HISTORY = [
    ProfileHistory(id="h1", profile_id="p1", city="Dublin", country="Ireland", company="Intercom", changed_at=_ts(1)),
    ProfileHistory(id="h2", profile_id="p1", city="Paris", country="France", company="Stripe", changed_at=_ts(3)),
    ProfileHistory(id="h3", profile_id="p3", city="Cork", country="Ireland", changed_at=_ts(2)),
]


def test_location_label():
    assert metrics.location_label("Cork", "Ireland") == "Cork, Ireland"
    assert metrics.location_label("Cork", None) == "Cork"
    assert metrics.location_label(None, "Ireland") == "Ireland"
    assert metrics.location_label(None, None) is None


def test_employment_breakdown_segments():
    overall, bsc, msc = metrics.employment_breakdown(PROFILES)
    assert (overall.employed, overall.entrepreneur, overall.open, overall.unknown, overall.total) == (1, 1, 1, 0, 3)
    assert bsc.total == 2
    assert msc.total == 1


def test_rankings():
    assert metrics.top_job_titles(PROFILES)[0] == CountBucket("Engineer", 2)
    assert metrics.location_leaders(PROFILES, HISTORY)[0] == CountBucket("Dublin, Ireland", 2)
    assert metrics.champion_companies(PROFILES) == [CountBucket("Stripe", 1)]
    destinations = {b.key: b.count for b in metrics.destination_cities(PROFILES, HISTORY)}
    assert destinations == {"London, UK": 1, "Dublin, Ireland": 1, "Cork, Ireland": 1}


def test_recent_movers_follow_history_then_current_city():
    movers = metrics.recent_movers(PROFILES, HISTORY)
    assert [m.id for m in movers] == ["p1"]
    mover = movers[0]
    assert [s.city_label for s in mover.path] == ["Dublin, Ireland", "Paris, France", "London, UK"]
    assert mover.city_count == 3


def test_cohort_breakdowns():
    rows = metrics.cohort_breakdown(PROFILES)
    assert [(r.cohort, r.total, r.employed_rate, r.entrepreneur_rate) for r in rows] == [("1", 2, 50, 50), ("2", 1, 0, 0)]
    programs = metrics.cohort_program_breakdown(PROFILES)
    assert (programs[0].msc_count, programs[0].bsc_rate) == (1, 50)


def test_cohorts_order_numerically_with_unknown_last():
    profiles = [Profile(id=str(c), user_id=str(c), cohort=c) for c in (10, None, 9, 2)]
    assert [r.cohort for r in metrics.cohort_breakdown(profiles)] == ["2", "9", "10", "Unknown"]


def test_leaderboards():
    boards = metrics.leaderboards(PROFILES, HISTORY)
    assert boards.history_counts[0].id == "p1"
    assert boards.history_counts[0].count == 2
    assert boards.jetsetters[0].count == 3
    assert boards.employer_hoppers[0].count == 2


@pytest.mark.asyncio
async def test_gawk_report_excludes_staff(monkeypatch):
    staff = Profile(id="s1", user_id="s1", full_name="Sam", job_title="Coordinator", user_type="Staff")

    class FakeProfiles:
        async def get_sign_ins_over_time(self, days):
            return [CountBucket("2024-06-01", 2), CountBucket("2024-06-02", 1)]

        async def get_profile_history(self):
            return HISTORY + [ProfileHistory(id="hs", profile_id="s1", city="Oslo", changed_at=_ts(6))]

        async def get_user_activity(self):
            return [
                UserActivity("u1", "u1", "a@x.io", _ts(6), _ts(1), profile=PROFILES[0]),
                UserActivity("s1", "s1", "s@x.io", _ts(6), _ts(1), profile=staff),
            ]

        async def get_profiles(self):
            return PROFILES + [staff]

        async def get_profile_history_stats(self):
            return ProfileHistoryStats(3, [], [], [])

    class FakeResidency:
        async def get_residency_partners(self):
            return []

    report = await GawkService(FakeProfiles(), FakeResidency()).build_report()

    assert report.total_profiles == 3
    assert report.total_sign_ins == 3
    assert report.unique_recent_users == 1
    assert all(h.profile_id != "s1" for h in report.recent_history)
    assert "Coordinator" not in [b.key for b in report.top_job_titles]


@pytest.mark.asyncio
async def test_map_overtime_formats_timestamps(monkeypatch):
    conn = install_pool(monkeypatch, MapService)
    conn.fetch_rets = [[{"profile_id": "p1", "full_name": "Ada", "timestamps": [_ts(1)], "lats": [1.0], "lngs": [2.0]}]]

    tracks = await MapService().get_map_data_overtime()

    assert tracks[0].timestamps == ["2024-01-01T00:00:00+00:00"]
    assert conn.queries[0][1] == ("overtime",)


@pytest.mark.asyncio
async def test_map_current_returns_empty_on_db_error(monkeypatch):
    conn = install_pool(monkeypatch, MapService)
    conn.fetch_rets = [db_error()]
    assert await MapService().get_map_data_current() == []


@pytest.mark.asyncio
async def test_geocode_hit_and_miss():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.params["q"] == "Dublin, Ireland":
            return httpx.Response(200, json=[{"lat": "53.35", "lon": "-6.26"}])
        return httpx.Response(200, json=[])

    transport = httpx.MockTransport(handler)

    hit = await geocoding.geocode("Dublin", "Ireland", transport=transport)
    miss = await geocoding.geocode("Atlantis", None, transport=transport)

    assert hit == geocoding.Coordinates(lat=53.35, lon=-6.26)
    assert miss is None
    assert seen[0].url.params["limit"] == "1"
    assert seen[0].headers["User-Agent"]


@pytest.mark.asyncio
async def test_geocode_errors_return_none():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    assert await geocoding.geocode("Dublin", None, transport=transport) is None
    assert await geocoding.geocode(" ", "", transport=transport) is None
