from datetime import datetime, timedelta
from typing import Dict, List, Optional

from .models import Address, DoctorGender, DoctorRecord, Insurance, Specialty


PRIMARY_CARE = Specialty(id="primary-care", name="Primary Care", icon="heart.fill")
DERMATOLOGY = Specialty(id="dermatologist", name="Dermatology", icon="allergens")
DENTISTRY = Specialty(id="dentist", name="Dentist", icon="staroflife.fill")
ENT = Specialty(id="ent", name="Ear, Nose & Throat", icon="ear.fill")
OPHTHALMOLOGY = Specialty(id="eye-doctor", name="Ophthalmology", icon="eye.fill")
PSYCHIATRY = Specialty(id="psychiatrist", name="Psychiatry", icon="brain.head.profile")
OB_GYN = Specialty(id="ob-gyn", name="OB-GYN", icon="figure.and.child.holdinghands")

ALL_SPECIALTIES: List[Specialty] = [
    PRIMARY_CARE,
    DERMATOLOGY,
    DENTISTRY,
    ENT,
    OPHTHALMOLOGY,
    PSYCHIATRY,
    OB_GYN,
]

_SPECIALTIES_BY_ID: Dict[str, Specialty] = {s.id: s for s in ALL_SPECIALTIES}


def specialty_by_id(specialty_id: str) -> Optional[Specialty]:
    return _SPECIALTIES_BY_ID.get(specialty_id)


def popular_insurances() -> List[Insurance]:
    # Fresh instances every call: insurance ids are generated
    return [
        Insurance(name="Triple-S", plan_type="PPO"),
        Insurance(name="MCS", plan_type="EPO"),
        Insurance(name="First MEDICAL", plan_type="HMO"),
        Insurance(name="Humana", plan_type="PPO"),
    ]


# name, gender, specialty, rating, reviews, street, zip, days until free slots (0.25 = later today), languages
_DEMO_SEEDS = [
    ("Dr. Miguel De Jesús", DoctorGender.MALE, PRIMARY_CARE, 4.8, 153, "123 Medical Plaza", "94102", (1, 2), ["English", "Spanish"]),
    ("Dr. José López", DoctorGender.MALE, DENTISTRY, 4.9, 208, "456 Dental Suite", "94103", (3, 4), ["Spanish"]),
    ("Dr. Sarah Chen", DoctorGender.FEMALE, DERMATOLOGY, 4.7, 96, "789 Skin Care Ave", "94104", (2, 5), ["English", "Mandarin"]),
    ("Dr. Emily Rivera", DoctorGender.FEMALE, OB_GYN, 4.6, 121, "12 Women's Health Blvd", "94105", (0.25, 6), ["English", "Spanish"]),
    ("Dr. David Okafor", DoctorGender.MALE, ENT, 4.3, 47, "35 Hearing Way", "94107", (), ["English"]),
    ("Dr. Ana Morales", DoctorGender.FEMALE, OPHTHALMOLOGY, 4.5, 88, "88 Vision Center", "94108", (7, 9), ["Spanish"]),
    ("Dr. Robert Kim", DoctorGender.MALE, PSYCHIATRY, 4.1, 39, "900 Mind St", "94109", (5,), ["English", "Korean"]),
    ("Dr. Laura Santiago", DoctorGender.FEMALE, PRIMARY_CARE, 4.9, 264, "17 Family Clinic Rd", "94110", (1, 8), ["English", "Spanish"]),
]


def demo_doctors(page: int = 1, page_size: int = 8, now: Optional[datetime] = None) -> List[DoctorRecord]:
    """Build one page of the demonstration catalog.

    Records are generated deterministically from a fixed seed list, so page N
    always yields the same ids. Appointment slots are relative to ``now``.
    """
    if page < 1 or page_size < 1:
        return []
    now = now or datetime.now()
    start = (page - 1) * page_size

    doctors: List[DoctorRecord] = []
    for offset in range(start, start + page_size):
        name, gender, specialty, rating, reviews, street, zip_code, days, languages = _DEMO_SEEDS[offset % len(_DEMO_SEEDS)]
        doctors.append(
            DoctorRecord(
                id=f"doctor{offset + 1}",
                name=name,
                specialty=specialty,
                rating=rating,
                review_count=reviews,
                address=Address(street=street, city="San Francisco", state="CA", zip_code=zip_code),
                available_times=[now + timedelta(days=d) for d in days],
                gender=gender,
                languages=list(languages),
            )
        )
    return doctors
