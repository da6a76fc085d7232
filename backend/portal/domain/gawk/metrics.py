"""Pure aggregations behind the Gawk report.

Inputs are already restricted to non-staff profiles and their history.
Rankings break ties by first appearance.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from portal.domain.common.dates import parse_datetime
from portal.domain.common.stats import percent
from portal.domain.gawk import models
from portal.domain.profiles.models import CountBucket, Profile, ProfileHistory

TOP_N = 5
MOVERS_LIMIT = 8
RECENT_HISTORY_LIMIT = 8
LEADERBOARD_SIZE = 3


def _ts(value) -> float:
    when = parse_datetime(value)
    return when.timestamp() if when else float("-inf")


def _top(counts: Dict[str, int], limit: int = TOP_N) -> List[CountBucket]:
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [CountBucket(key, count) for key, count in ranked[:limit]]


def _bump(counts: Dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1


def location_label(city: Optional[str], country: Optional[str]) -> Optional[str]:
    """``City, Country``, or whichever half is known."""
    if city:
        return f"{city}, {country}" if country else city
    return country or None


def _history_by_profile(history: Iterable[ProfileHistory]) -> Dict[str, List[ProfileHistory]]:
    grouped: Dict[str, List[ProfileHistory]] = {}
    for entry in history:
        grouped.setdefault(entry.profile_id, []).append(entry)
    return grouped


def _is_entrepreneur(profile: Profile) -> bool:
    return profile.professional_status == "entrepreneur" or bool(profile.is_entrepreneur)


def _cohort_key(profile: Profile) -> str:
    return str(profile.cohort) if profile.cohort else "Unknown"


def _cohort_order(key: str) -> Tuple[int, int]:
    # numeric cohorts ascending, "Unknown" last
    return (1, 0) if key == "Unknown" else (0, int(key))


def employment_segment(segment: str, profiles: Sequence[Profile]) -> models.EmploymentSegment:
    employed = sum(1 for p in profiles if p.professional_status == "employed")
    entrepreneur = sum(1 for p in profiles if _is_entrepreneur(p))
    open_to_work = sum(1 for p in profiles if p.professional_status == "open_to_work")
    return models.EmploymentSegment(
        segment=segment,
        employed=employed,
        entrepreneur=entrepreneur,
        open=open_to_work,
        unknown=max(len(profiles) - (employed + entrepreneur + open_to_work), 0),
        total=len(profiles),
    )


def employment_breakdown(profiles: Sequence[Profile]) -> List[models.EmploymentSegment]:
    return [
        employment_segment("Overall", profiles),
        employment_segment("BSc", [p for p in profiles if not p.msc]),
        employment_segment("MSc", [p for p in profiles if p.msc]),
    ]


def top_job_titles(profiles: Iterable[Profile]) -> List[CountBucket]:
    counts: Dict[str, int] = {}
    for profile in profiles:
        if profile.job_title and profile.job_title.strip():
            _bump(counts, profile.job_title.strip())
    return _top(counts)


def location_leaders(profiles: Iterable[Profile], history: Iterable[ProfileHistory]) -> List[CountBucket]:
    """Cities weighted by current residents plus every recorded stay."""
    counts: Dict[str, int] = {}
    for item in list(profiles) + list(history):
        if item.city:
            _bump(counts, location_label(item.city, item.country))
    return _top(counts)


def recent_movers(profiles: Sequence[Profile], history: Iterable[ProfileHistory]) -> List[models.Mover]:
    """Profiles that have lived in more than one place, most recent move first."""
    by_id = {p.id: p for p in profiles}
    grouped = _history_by_profile(history)
    if not grouped or not by_id:
        return []

    movers = []
    for profile_id, entries in grouped.items():
        steps: List[models.MoveStep] = []
        last_label: Optional[str] = None
        for entry in sorted(entries, key=lambda e: _ts(e.changed_at)):
            label = location_label(entry.city, entry.country)
            if label is None or label == last_label:
                continue
            last_label = label
            steps.append(models.MoveStep(label, entry.changed_at))

        profile = by_id.get(profile_id)
        if profile is not None:
            label = location_label(profile.city, profile.country)
            if label is not None and label != last_label:
                steps.append(models.MoveStep(label, profile.updated_at))

        city_count = len({s.city_label for s in steps})
        if city_count > 1:
            movers.append(
                models.Mover(
                    id=profile_id,
                    name=(profile.full_name if profile else None) or "Unknown user",
                    path=steps,
                    city_count=city_count,
                    last_changed_at=steps[-1].changed_at,
                )
            )
    movers.sort(key=lambda m: _ts(m.last_changed_at), reverse=True)
    return movers[:MOVERS_LIMIT]


def champion_companies(profiles: Iterable[Profile]) -> List[CountBucket]:
    counts: Dict[str, int] = {}
    for profile in profiles:
        company = (profile.company or "").strip()
        if profile.is_ise_champion and company:
            _bump(counts, company)
    return _top(counts)


def destination_cities(profiles: Sequence[Profile], history: Iterable[ProfileHistory]) -> List[CountBucket]:
    """Where each profile lives now, falling back to its latest history entry."""
    grouped = _history_by_profile(history)
    counts: Dict[str, int] = {}
    for profile in profiles:
        label = location_label(profile.city, profile.country)
        if label is None:
            entries = grouped.get(profile.id)
            if entries:
                last = max(entries, key=lambda e: _ts(e.changed_at))
                label = location_label(last.city, last.country)
        if label is not None:
            _bump(counts, label)
    return _top(counts)


def _by_cohort(profiles: Iterable[Profile]) -> Dict[str, List[Profile]]:
    grouped: Dict[str, List[Profile]] = {}
    for profile in profiles:
        grouped.setdefault(_cohort_key(profile), []).append(profile)
    return dict(sorted(grouped.items(), key=lambda item: _cohort_order(item[0])))


def cohort_breakdown(profiles: Iterable[Profile]) -> List[models.CohortEmployment]:
    rows = []
    for cohort, members in _by_cohort(profiles).items():
        total = len(members)
        rows.append(
            models.CohortEmployment(
                cohort=cohort,
                employed_rate=percent(sum(1 for p in members if p.professional_status == "employed"), total),
                entrepreneur_rate=percent(sum(1 for p in members if _is_entrepreneur(p)), total),
                open_rate=percent(sum(1 for p in members if p.professional_status == "open_to_work"), total),
                total=total,
            )
        )
    return rows


def cohort_program_breakdown(profiles: Iterable[Profile]) -> List[models.CohortProgram]:
    rows = []
    for cohort, members in _by_cohort(profiles).items():
        total = len(members)
        msc = sum(1 for p in members if p.msc)
        rows.append(
            models.CohortProgram(
                cohort=cohort,
                bsc_count=total - msc,
                msc_count=msc,
                bsc_rate=percent(total - msc, total),
                msc_rate=percent(msc, total),
                total=total,
            )
        )
    return rows


def leaderboards(profiles: Sequence[Profile], history: Iterable[ProfileHistory]) -> models.Leaderboards:
    by_id = {p.id: p for p in profiles}
    grouped = _history_by_profile(history)

    def entry(profile_id: str, count: int) -> models.LeaderboardEntry:
        profile = by_id.get(profile_id)
        return models.LeaderboardEntry(
            id=profile_id,
            name=(profile.full_name if profile else None) or "Unknown user",
            avatar_url=profile.avatar_url if profile else None,
            count=count,
        )

    def ranked(entries: List[models.LeaderboardEntry]) -> List[models.LeaderboardEntry]:
        return sorted(entries, key=lambda e: e.count, reverse=True)[:LEADERBOARD_SIZE]

    history_counts = [entry(pid, len(items)) for pid, items in grouped.items()]

    jetsetters = []
    hoppers = []
    for pid, items in grouped.items():
        profile = by_id.get(pid)
        cities = {location_label(e.city, e.country) for e in items if e.city}
        if profile is not None and profile.city:
            cities.add(location_label(profile.city, profile.country))
        companies = {e.company for e in items if e.company}
        if profile is not None and profile.company:
            companies.add(profile.company)
        jetsetters.append(entry(pid, len(cities)))
        hoppers.append(entry(pid, len(companies)))

    return models.Leaderboards(
        history_counts=ranked(history_counts),
        jetsetters=ranked(jetsetters),
        employer_hoppers=ranked(hoppers),
    )


def recent_history(history: Iterable[ProfileHistory]) -> List[ProfileHistory]:
    return sorted(history, key=lambda h: _ts(h.changed_at), reverse=True)[:RECENT_HISTORY_LIMIT]
