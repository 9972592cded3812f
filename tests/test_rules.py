"""Unit tests for the doctor filter and sort rules."""
from datetime import datetime, timedelta

import pytest

from medmatch.domain.models import AvailabilityWindow, DoctorGender, FilterCriteria, SortOption
from medmatch.domain.rules import availability_bounds, filter_doctors, sort_doctors


@pytest.fixture
def candidates(make_doctor):
    return [
        make_doctor("a", rating=4.8, days=(1, 2), gender=DoctorGender.MALE, languages=["English", "Spanish"]),
        make_doctor("b", rating=4.9, days=(3, 4), gender=DoctorGender.MALE, languages=["Spanish"]),
        make_doctor("c", rating=4.2, days=(), gender=DoctorGender.FEMALE, languages=["English"]),
        make_doctor("d", rating=4.9, days=(2,), gender=None, languages=["Mandarin"]),
        make_doctor("e", rating=3.5, days=(6,), gender=DoctorGender.FEMALE),
    ]


class TestFilterDoctors:
    """Test the filter predicates."""

    def test_default_criteria_keeps_everything(self, candidates, now):
        assert filter_doctors(candidates, FilterCriteria(), now=now) == candidates

    @pytest.mark.parametrize("threshold", [0.5, 3.5, 4.2, 4.85, 4.9, 5.0])
    def test_minimum_rating_is_inclusive(self, candidates, now, threshold):
        result = filter_doctors(candidates, FilterCriteria(minimum_rating=threshold), now=now)
        assert all(d.rating >= threshold for d in result)
        assert len(result) == sum(1 for d in candidates if d.rating >= threshold)

    def test_minimum_rating_keeps_input_order(self, candidates, now):
        result = filter_doctors(candidates, FilterCriteria(minimum_rating=4.5), now=now)
        assert [d.id for d in result] == ["a", "b", "d"]

    def test_gender_uses_record_attribute(self, candidates, now):
        female = filter_doctors(candidates, FilterCriteria(gender=DoctorGender.FEMALE), now=now)
        male = filter_doctors(candidates, FilterCriteria(gender=DoctorGender.MALE), now=now)
        assert [d.id for d in female] == ["c", "e"]
        assert [d.id for d in male] == ["a", "b"]

    def test_unknown_gender_excluded_by_specific_preference(self, candidates, now):
        for gender in (DoctorGender.MALE, DoctorGender.FEMALE):
            result = filter_doctors(candidates, FilterCriteria(gender=gender), now=now)
            assert "d" not in [d.id for d in result]

    def test_languages_match_any_case_insensitive(self, candidates, now):
        result = filter_doctors(candidates, FilterCriteria(languages=["spanish", "MANDARIN"]), now=now)
        assert [d.id for d in result] == ["a", "b", "d"]

    def test_blank_languages_ignored(self, candidates, now):
        result = filter_doctors(candidates, FilterCriteria(languages=["  "]), now=now)
        assert result == candidates

    def test_predicates_combine(self, candidates, now):
        criteria = FilterCriteria(gender=DoctorGender.MALE, minimum_rating=4.85, languages=["Spanish"])
        assert [d.id for d in filter_doctors(candidates, criteria, now=now)] == ["b"]

    def test_maximum_distance_has_no_effect(self, candidates, now):
        result = filter_doctors(candidates, FilterCriteria(maximum_distance=0.1), now=now)
        assert result == candidates

    def test_nothing_matches_returns_empty(self, candidates, now):
        assert filter_doctors(candidates, FilterCriteria(minimum_rating=5.0), now=now) == []
        assert filter_doctors([], FilterCriteria(minimum_rating=4.0), now=now) == []


class TestAvailabilityWindow:
    """Test filtering by appointment window."""

    def test_bounds(self, now):
        assert availability_bounds(AvailabilityWindow.ANYTIME, now) is None
        assert availability_bounds(AvailabilityWindow.TODAY, now) == (now, datetime(2026, 10, 15))
        assert availability_bounds(AvailabilityWindow.TOMORROW, now) == (datetime(2026, 10, 15), datetime(2026, 10, 16))
        assert availability_bounds(AvailabilityWindow.THIS_WEEK, now) == (now, datetime(2026, 10, 19))
        assert availability_bounds(AvailabilityWindow.NEXT_WEEK, now) == (datetime(2026, 10, 19), datetime(2026, 10, 26))

    def test_today_excludes_past_slots(self, make_doctor, now):
        later = make_doctor("later", slots=[now + timedelta(hours=2)])
        earlier = make_doctor("earlier", slots=[now - timedelta(hours=1)])
        result = filter_doctors([later, earlier], FilterCriteria(availability=AvailabilityWindow.TODAY), now=now)
        assert [d.id for d in result] == ["later"]

    def test_tomorrow(self, make_doctor, now):
        tomorrow = make_doctor("tomorrow", slots=[datetime(2026, 10, 15, 8, 0)])
        today = make_doctor("today", slots=[datetime(2026, 10, 14, 16, 0)])
        result = filter_doctors([tomorrow, today], FilterCriteria(availability=AvailabilityWindow.TOMORROW), now=now)
        assert [d.id for d in result] == ["tomorrow"]

    def test_this_week_ends_sunday(self, make_doctor, now):
        sunday = make_doctor("sunday", slots=[datetime(2026, 10, 18, 23, 0)])
        monday = make_doctor("monday", slots=[datetime(2026, 10, 19, 9, 0)])
        result = filter_doctors([sunday, monday], FilterCriteria(availability=AvailabilityWindow.THIS_WEEK), now=now)
        assert [d.id for d in result] == ["sunday"]

    def test_next_week(self, make_doctor, now):
        monday = make_doctor("monday", slots=[datetime(2026, 10, 19, 9, 0)])
        too_late = make_doctor("late", slots=[datetime(2026, 10, 26, 9, 0)])
        none = make_doctor("none")
        result = filter_doctors(
            [monday, too_late, none], FilterCriteria(availability=AvailabilityWindow.NEXT_WEEK), now=now
        )
        assert [d.id for d in result] == ["monday"]


class TestSortDoctors:
    """Test the sort strategies."""

    def test_recommended_keeps_order(self, candidates):
        assert sort_doctors(candidates, SortOption.RECOMMENDED) == candidates

    def test_distance_is_passthrough(self, candidates):
        assert sort_doctors(candidates, SortOption.DISTANCE) == candidates

    def test_rating_descending_and_stable(self, candidates):
        result = sort_doctors(candidates, SortOption.RATING)
        ratings = [d.rating for d in result]
        assert ratings == sorted(ratings, reverse=True)
        # b and d tie at 4.9 and keep their input order
        assert [d.id for d in result] == ["b", "d", "a", "c", "e"]

    def test_availability_ascending_with_empty_last(self, candidates):
        result = sort_doctors(candidates, SortOption.AVAILABILITY)
        assert [d.id for d in result] == ["a", "d", "b", "e", "c"]
        earliest = [d.earliest_available for d in result if d.earliest_available is not None]
        assert earliest == sorted(earliest)

    def test_availability_uses_earliest_slot_not_first(self, make_doctor):
        unsorted_slots = make_doctor("x", days=(5, 1))
        steady = make_doctor("y", days=(2,))
        result = sort_doctors([steady, unsorted_slots], SortOption.AVAILABILITY)
        assert [d.id for d in result] == ["x", "y"]

    def test_availability_ties_and_empties_stable(self, make_doctor):
        docs = [
            make_doctor("n1"),
            make_doctor("t1", days=(3,)),
            make_doctor("n2"),
            make_doctor("t2", days=(3,)),
        ]
        result = sort_doctors(docs, SortOption.AVAILABILITY)
        assert [d.id for d in result] == ["t1", "t2", "n1", "n2"]

    def test_sort_does_not_mutate_input(self, candidates):
        before = list(candidates)
        sort_doctors(candidates, SortOption.RATING)
        assert candidates == before
