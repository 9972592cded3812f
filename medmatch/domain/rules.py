from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from .models import AvailabilityWindow, DoctorGender, DoctorRecord, FilterCriteria, SortOption


def availability_bounds(window: AvailabilityWindow, now: datetime) -> Optional[Tuple[datetime, datetime]]:
    """Half-open [start, end) interval a slot must fall in for ``window``.

    Returns None for ``anytime``. Weeks run Monday to Sunday.
    """
    if window == AvailabilityWindow.ANYTIME:
        return None

    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    tomorrow = midnight + timedelta(days=1)
    next_monday = midnight + timedelta(days=7 - midnight.weekday())

    if window == AvailabilityWindow.TODAY:
        return now, tomorrow
    if window == AvailabilityWindow.TOMORROW:
        return tomorrow, tomorrow + timedelta(days=1)
    if window == AvailabilityWindow.THIS_WEEK:
        return now, next_monday
    return next_monday, next_monday + timedelta(days=7)


def _has_slot_in(doctor: DoctorRecord, bounds: Tuple[datetime, datetime]) -> bool:
    start, end = bounds[0].timestamp(), bounds[1].timestamp()
    return any(start <= t.timestamp() < end for t in doctor.available_times)


def _speaks_any(doctor: DoctorRecord, languages: Sequence[str]) -> bool:
    spoken = {lang.strip().lower() for lang in doctor.languages}
    return any(lang.strip().lower() in spoken for lang in languages)


def filter_doctors(
    candidates: Sequence[DoctorRecord],
    criteria: FilterCriteria,
    now: Optional[datetime] = None,
) -> List[DoctorRecord]:
    filtered = list(candidates)

    if criteria.gender != DoctorGender.ANY:
        # unknown gender never matches a specific preference
        filtered = [d for d in filtered if d.gender == criteria.gender]

    if criteria.minimum_rating > 0:
        filtered = [d for d in filtered if d.rating >= criteria.minimum_rating]

    wanted_languages = [lang for lang in criteria.languages if lang.strip()]
    if wanted_languages:
        filtered = [d for d in filtered if _speaks_any(d, wanted_languages)]

    bounds = availability_bounds(criteria.availability, now or datetime.now())
    if bounds is not None:
        filtered = [d for d in filtered if _has_slot_in(d, bounds)]

    # maximum_distance is not applied: records carry no coordinates
    return filtered


def _availability_key(doctor: DoctorRecord) -> Tuple[int, float]:
    earliest = doctor.earliest_available
    if earliest is None:
        return (1, 0.0)
    return (0, earliest.timestamp())


def sort_doctors(filtered: Sequence[DoctorRecord], sort_option: SortOption) -> List[DoctorRecord]:
    # sorted() is stable, so ties keep the order the catalog returned
    if sort_option == SortOption.RATING:
        return sorted(filtered, key=lambda d: -d.rating)
    if sort_option == SortOption.AVAILABILITY:
        return sorted(filtered, key=_availability_key)
    # recommended keeps catalog order; distance needs coordinates we don't have
    return list(filtered)
