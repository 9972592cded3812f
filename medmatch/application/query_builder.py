from enum import Enum
from typing import Optional, Union

from medmatch.domain.catalog import popular_insurances, specialty_by_id
from medmatch.domain.models import Insurance, SearchQuery, Specialty


DEFAULT_LOCATION = "Near me"


class CareType(str, Enum):
    ANNUAL_PHYSICAL = "annual_physical"
    SPECIFIC_ISSUE = "specific_issue"


def resolve_insurance(value: Union[Insurance, str, None]) -> Optional[Insurance]:
    """Turn a picker selection or free text into an Insurance.

    Free text matching a popular insurer (case-insensitive) reuses its plan type.
    """
    if value is None or isinstance(value, Insurance):
        return value
    name = value.strip()
    if not name:
        return None
    for known in popular_insurances():
        if known.name.lower() == name.lower():
            return known
    return Insurance(name=name)


def resolve_specialty(value: Union[Specialty, str, None]) -> Optional[Specialty]:
    if value is None or isinstance(value, Specialty):
        return value
    return specialty_by_id(value.strip())


def care_type_text(care_type: CareType, specialty: Optional[Specialty] = None) -> str:
    if care_type == CareType.ANNUAL_PHYSICAL:
        subject = specialty.name if specialty else "Primary Care Doctor"
        return f"{subject} • Annual Physical"
    subject = specialty.name if specialty else "Doctor"
    return f"{subject} • Consultation"


def build_search_query(
    text: str = "",
    location: Optional[str] = None,
    specialty: Union[Specialty, str, None] = None,
    insurance: Union[Insurance, str, None] = None,
    care_type: Optional[CareType] = None,
) -> SearchQuery:
    resolved_specialty = resolve_specialty(specialty)
    if care_type is not None and not text.strip():
        text = care_type_text(care_type, resolved_specialty)

    return SearchQuery(
        text=text,
        location=(location or "").strip() or DEFAULT_LOCATION,
        specialty=resolved_specialty,
        insurance=resolve_insurance(insurance),
    )
