import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SortOption(str, Enum):
    RECOMMENDED = "recommended"
    AVAILABILITY = "availability"
    RATING = "rating"
    DISTANCE = "distance"


class AvailabilityWindow(str, Enum):
    ANYTIME = "anytime"
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this_week"
    NEXT_WEEK = "next_week"


class DoctorGender(str, Enum):
    ANY = "any"
    MALE = "male"
    FEMALE = "female"


class Specialty(BaseModel):
    """Medical specialty. Two specialties are the same if their ids match."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str = ""

    def __eq__(self, other):
        if not isinstance(other, Specialty):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


class Address(BaseModel):
    model_config = ConfigDict(frozen=True)

    street: str
    city: str
    state: str
    zip_code: str

    @property
    def formatted(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.zip_code}"


class DoctorRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    specialty: Specialty
    profile_image_url: Optional[str] = None
    rating: float = Field(0.0, ge=0.0, le=5.0)
    review_count: int = Field(0, ge=0)
    address: Address
    available_times: List[datetime] = []
    gender: Optional[DoctorGender] = None
    languages: List[str] = []

    @field_validator("gender")
    @classmethod
    def validate_gender(cls, v: Optional[DoctorGender]):
        # "any" is a search preference, not something a doctor can be
        if v == DoctorGender.ANY:
            return None
        return v

    @property
    def earliest_available(self) -> Optional[datetime]:
        if not self.available_times:
            return None
        return min(self.available_times, key=lambda t: t.timestamp())


class Insurance(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    plan_type: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str):
        v = v.strip()
        if len(v) == 0:
            raise ValueError("Insurance name must not be empty")
        return v


class SearchQuery(BaseModel):
    text: str = ""
    location: str = "Near me"
    specialty: Optional[Specialty] = None
    insurance: Optional[Insurance] = None

    @field_validator("text", "location")
    @classmethod
    def strip_text(cls, v: str):
        return v.strip()


class FilterCriteria(BaseModel):
    sort_option: SortOption = SortOption.RECOMMENDED
    availability: AvailabilityWindow = AvailabilityWindow.ANYTIME
    gender: DoctorGender = DoctorGender.ANY
    languages: List[str] = []
    minimum_rating: float = Field(0.0, ge=0.0, le=5.0)
    # miles; accepted but not applied, records carry no coordinates
    maximum_distance: float = Field(50.0, gt=0.0)
