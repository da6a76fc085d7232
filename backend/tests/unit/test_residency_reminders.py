from datetime import datetime, timezone

import pytest

from portal.domain.profiles.models import Profile
from portal.domain.reminders.schemas import ReminderCreateRequest
from portal.domain.reminders.service import ReminderService, calculate_reminder_time
from portal.domain.residency.logos import build_company_logo_map, get_company_logo_url
from portal.domain.residency.models import ResidencyPartner
from portal.domain.residency.schemas import ResidencyPartnerUpdateRequest
from portal.domain.residency.service import ResidencyService, compute_residency_stats, match_partner
from tests.stubs import install_pool

DUE = datetime(2024, 8, 31, 9, 0, tzinfo=timezone.utc)

PARTNERS = [
    ResidencyPartner(id="r1", name="Stripe", logo_url="https://logo/stripe.png"),
    ResidencyPartner(id="r2", name="Intercom", logo_url=None),
]


def test_match_partner_checks_containment_both_ways():
    assert match_partner("Stripe Inc", PARTNERS).id == "r1"
    assert match_partner("inter", PARTNERS).id == "r2"
    assert match_partner("", PARTNERS) is None
    assert match_partner("Google", PARTNERS) is None


def test_residency_stats_ignore_staff_for_percentages():
    profiles = [
        Profile(id="1", user_id="1", company="Stripe", msc=True, user_type="Alum"),
        Profile(id="2", user_id="2", company="stripe", user_type="Admin"),
        Profile(id="3", user_id="3", company="Google", user_type="Alum"),
        Profile(id="4", user_id="4", company="Stripe", user_type="Staff"),
    ]

    stats = compute_residency_stats(profiles, PARTNERS)

    assert stats.total_profiles == 4
    assert stats.at_residency_partner == 2
    assert stats.not_at_residency_partner == 1
    assert stats.residency_percentage == 67
    assert len(stats.partners) == 1
    partner = stats.partners[0]
    assert (partner.name, partner.count, partner.msc_count, partner.bsc_count) == ("Stripe", 2, 1, 1)


def test_logo_lookup_prefers_exact_match():
    logos = build_company_logo_map(PARTNERS + [ResidencyPartner(id="r3", name=" stripe ", logo_url="dup")])
    assert logos["stripe"] == "https://logo/stripe.png"
    assert get_company_logo_url("STRIPE", logos) == "https://logo/stripe.png"
    assert get_company_logo_url("Stripe Payments", logos) == "https://logo/stripe.png"
    assert get_company_logo_url("Intercom", logos) is None
    assert get_company_logo_url(None, logos) is None


@pytest.mark.asyncio
async def test_partner_update_only_writes_sent_fields(monkeypatch):
    conn = install_pool(monkeypatch, ResidencyService)
    conn.fetchrow_rets = [{"id": "r1", "name": "Stripe", "is_active": False}]

    partner = await ResidencyService().update_residency_partner("r1", ResidencyPartnerUpdateRequest(is_active=False))

    query, args = conn.queries[0]
    assert "is_active = $2" in query
    assert "name =" not in query
    assert args == ("r1", False)
    assert partner.is_active is False


def test_reminder_time_is_nine_utc_the_day_before():
    start = datetime(2024, 9, 1, 18, 30, tzinfo=timezone.utc)
    assert calculate_reminder_time("event", start) == datetime(2024, 8, 31, 9, 0, tzinfo=timezone.utc)
    assert calculate_reminder_time("announcement", "2024-03-01T00:00:00Z") == datetime(
        2024, 2, 29, 9, 0, tzinfo=timezone.utc
    )
    assert calculate_reminder_time("event", None) is None


@pytest.mark.asyncio
async def test_create_reminder_derives_time_from_target(monkeypatch):
    conn = install_pool(monkeypatch, ReminderService)
    conn.fetchval_rets = [datetime(2024, 9, 1, 18, 0, tzinfo=timezone.utc)]
    conn.fetchrow_rets = [
        {
            "id": "rem1",
            "user_id": "u1",
            "target_type": "event",
            "target_id": "e1",
            "reminder_at": datetime(2024, 8, 31, 9, 0, tzinfo=timezone.utc),
            "status": "pending",
        }
    ]

    reminder = await ReminderService().create_reminder("u1", ReminderCreateRequest(target_type="event", target_id="e1"))

    assert reminder.id == "rem1"
    assert "FROM events" in conn.queries[0][0]
    assert conn.queries[1][1][3] == datetime(2024, 8, 31, 9, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_create_reminder_without_target_date_fails(monkeypatch):
    conn = install_pool(monkeypatch, ReminderService)
    conn.fetchval_rets = [None]
    request = ReminderCreateRequest(target_type="announcement", target_id="a1")
    assert await ReminderService().create_reminder("u1", request) is None
    assert len(conn.queries) == 1


@pytest.mark.asyncio
async def test_user_reminders_carry_target_details(monkeypatch):
    conn = install_pool(monkeypatch, ReminderService)
    conn.fetch_rets = [
        [
            {"id": "r1", "user_id": "u1", "target_type": "event", "target_id": "e1", "reminder_at": DUE, "status": "pending"},
            {"id": "r2", "user_id": "u1", "target_type": "announcement", "target_id": "a1", "reminder_at": DUE, "status": "pending"},
        ],
        [{"id": "e1", "title": "Mixer", "start_at": None, "location": "Dublin"}],
        [{"id": "a1", "title": "Mentors", "deadline": None}],
    ]

    reminders = await ReminderService().fetch_user_reminders("u1")

    assert reminders[0].event.title == "Mixer"
    assert reminders[0].announcement is None
    assert reminders[1].announcement.title == "Mentors"


@pytest.mark.asyncio
async def test_reminder_counts_split_by_target(monkeypatch):
    conn = install_pool(monkeypatch, ReminderService)
    conn.fetch_rets = [
        [
            {"target_type": "event", "target_id": "e1", "total": 3},
            {"target_type": "announcement", "target_id": "a1", "total": 1},
        ]
    ]
    counts = await ReminderService().get_reminder_counts()
    assert counts.events == {"e1": 3}
    assert counts.announcements == {"a1": 1}


def test_partner_update_rejects_explicit_nulls():
    with pytest.raises(ValueError):
        ResidencyPartnerUpdateRequest(name=None)
    with pytest.raises(ValueError):
        ResidencyPartnerUpdateRequest(is_active=None)
    assert ResidencyPartnerUpdateRequest(website=None).model_dump(exclude_unset=True) == {"website": None}


def test_reminder_time_given_without_offset_is_utc():
    request = ReminderCreateRequest(target_type="event", target_id="e1", reminder_at="2024-08-31T09:00:00")
    assert request.reminder_at == DUE
