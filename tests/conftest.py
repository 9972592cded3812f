"""Shared fixtures for the doctor search tests."""
from datetime import datetime, timedelta

import pytest

from medmatch.domain.catalog import PRIMARY_CARE
from medmatch.domain.models import Address, DoctorRecord


# A Wednesday; the following Monday is 2026-10-19.
NOW = datetime(2026, 10, 14, 10, 0)


def build_doctor(doctor_id, rating=4.0, days=(), gender=None, languages=(), now=NOW, slots=None):
    if slots is None:
        slots = [now + timedelta(days=d) for d in days]
    return DoctorRecord(
        id=doctor_id,
        name=f"Dr. {doctor_id.title()}",
        specialty=PRIMARY_CARE,
        rating=rating,
        review_count=10,
        address=Address(street="1 Test St", city="San Francisco", state="CA", zip_code="94102"),
        available_times=slots,
        gender=gender,
        languages=list(languages),
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_doctor():
    return build_doctor
