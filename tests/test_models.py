from datetime import datetime

import pytest
from pydantic import ValidationError

from medmatch.domain.catalog import ALL_SPECIALTIES, DENTISTRY, demo_doctors, specialty_by_id
from medmatch.domain.models import AvailabilityWindow, DoctorGender, FilterCriteria, Insurance, SearchQuery, Specialty
from medmatch.domain.rules import filter_doctors


def test_specialty_equality_by_id():
    renamed = Specialty(id="dentist", name="Odontología", icon="tooth")
    assert renamed == DENTISTRY
    assert hash(renamed) == hash(DENTISTRY)
    assert len({renamed, DENTISTRY}) == 1


def test_specialty_catalog_includes_ob_gyn():
    assert len(ALL_SPECIALTIES) == 7
    assert specialty_by_id("ob-gyn").name == "OB-GYN"
    assert specialty_by_id("cardiology") is None


def test_doctor_rating_bounds(make_doctor):
    with pytest.raises(ValidationError):
        make_doctor("bad", rating=5.5)
    with pytest.raises(ValidationError):
        make_doctor("bad", rating=-0.1)


def test_doctor_is_immutable(make_doctor):
    doctor = make_doctor("a")
    with pytest.raises(ValidationError):
        doctor.rating = 1.0


def test_doctor_any_gender_stored_as_unknown(make_doctor):
    assert make_doctor("a", gender=DoctorGender.ANY).gender is None


def test_earliest_available(make_doctor, now):
    assert make_doctor("a").earliest_available is None
    assert make_doctor("b", days=(4, 1, 3)).earliest_available == datetime(2026, 10, 15, 10, 0)


def test_address_formatted(make_doctor):
    assert make_doctor("a").address.formatted == "1 Test St, San Francisco, CA 94102"


def test_insurance_ids_are_unique():
    assert Insurance(name="Humana").id != Insurance(name="Humana").id
    with pytest.raises(ValidationError):
        Insurance(name="   ")


def test_search_query_defaults():
    query = SearchQuery(text="  knee pain ")
    assert query.text == "knee pain"
    assert query.location == "Near me"
    assert query.specialty is None


def test_filter_criteria_validation():
    assert FilterCriteria().minimum_rating == 0.0
    assert FilterCriteria().maximum_distance == 50.0
    with pytest.raises(ValidationError):
        FilterCriteria(minimum_rating=6)


def test_demo_doctors_pages(now):
    first = demo_doctors(page=1, page_size=8, now=now)
    second = demo_doctors(page=2, page_size=8, now=now)
    assert [d.id for d in first] == [f"doctor{i}" for i in range(1, 9)]
    assert [d.id for d in second] == [f"doctor{i}" for i in range(9, 17)]
    assert first[0].name == "Dr. Miguel De Jesús"
    assert first[1].name == "Dr. José López"
    assert first[0].rating == 4.8
    assert demo_doctors(page=0) == []


def test_demo_same_day_slot_is_in_today_window(now):
    doctors = demo_doctors(page=1, page_size=8, now=now)
    today = filter_doctors(doctors, FilterCriteria(availability=AvailabilityWindow.TODAY), now=now)
    assert [d.name for d in today] == ["Dr. Emily Rivera"]
