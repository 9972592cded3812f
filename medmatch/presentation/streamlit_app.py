import asyncio
import logging
import os

import streamlit as st

from medmatch.application.query_builder import CareType, build_search_query
from medmatch.application.search_session import SearchSession
from medmatch.domain.catalog import ALL_SPECIALTIES, popular_insurances
from medmatch.domain.models import (
    AvailabilityWindow,
    DoctorGender,
    DoctorRecord,
    FilterCriteria,
    SortOption,
)
from medmatch.infrastructure.analytics.logging_analytics import LoggingAnalyticsAdapter
from medmatch.infrastructure.catalog.http_catalog import HttpDoctorCatalogAdapter
from medmatch.infrastructure.catalog.mock_catalog import MockDoctorCatalogAdapter
from medmatch.infrastructure.config import Settings


logger = logging.getLogger(__name__)


SORT_LABELS = {
    SortOption.RECOMMENDED: "Recommended",
    SortOption.AVAILABILITY: "Soonest Available",
    SortOption.RATING: "Highest Rated",
    SortOption.DISTANCE: "Closest",
}

AVAILABILITY_LABELS = {
    AvailabilityWindow.ANYTIME: "Any time",
    AvailabilityWindow.TODAY: "Today",
    AvailabilityWindow.TOMORROW: "Tomorrow",
    AvailabilityWindow.THIS_WEEK: "This week",
    AvailabilityWindow.NEXT_WEEK: "Next week",
}

CARE_TYPE_LABELS = {
    None: "Not sure",
    CareType.ANNUAL_PHYSICAL: "Annual physical / checkup",
    CareType.SPECIFIC_ISSUE: "Issue, condition or problem",
}

LANGUAGES = ["English", "Spanish", "Mandarin", "Korean"]


def build_session(settings: Settings) -> SearchSession:
    if settings.api_base_url:
        catalog = HttpDoctorCatalogAdapter(settings=settings)
    else:
        catalog = MockDoctorCatalogAdapter(settings=settings)
    return SearchSession(
        catalog=catalog,
        analytics=LoggingAnalyticsAdapter(),
        ceiling=settings.result_ceiling,
        fetch_timeout=settings.fetch_timeout,
    )


def _init_session_state(settings: Settings):
    if "search_session" not in st.session_state:
        st.session_state.search_session = build_session(settings)


def format_doctor_card(doctor: DoctorRecord) -> str:
    lines = [f"**{doctor.name}** · {doctor.specialty.name}"]
    lines.append(f"- ⭐ {doctor.rating:.1f} ({doctor.review_count} reviews)")
    lines.append(f"- 📍 {doctor.address.formatted}")
    if doctor.earliest_available:
        lines.append(f"- 🗓️ Next available: {doctor.earliest_available.strftime('%a %b %d, %I:%M %p')}")
    else:
        lines.append("- 🗓️ No upcoming availability")
    if doctor.languages:
        lines.append(f"- 💬 {', '.join(doctor.languages)}")
    return "\n".join(lines)


def format_error(error) -> str:
    return f"❌ **Could not load doctors:** {error.message}\n\nShowing your previous results."


def _render_search_form(session: SearchSession):
    st.sidebar.title("🔎 Find a doctor")
    text = st.sidebar.text_input("Condition, procedure or doctor", value=session.query.text)
    location = st.sidebar.text_input("Location", value=session.query.location)

    specialty_names = ["Any specialty"] + [s.name for s in ALL_SPECIALTIES]
    specialty_choice = st.sidebar.selectbox("Specialty", specialty_names)
    specialty = next((s for s in ALL_SPECIALTIES if s.name == specialty_choice), None)

    insurance_names = ["I'll choose later"] + [i.name for i in popular_insurances()]
    insurance_choice = st.sidebar.selectbox("Insurance", insurance_names)
    insurance_text = st.sidebar.text_input("Other insurance", placeholder="Type your carrier")
    insurance = insurance_text or (insurance_choice if insurance_choice != insurance_names[0] else None)

    care_type = st.sidebar.radio(
        "Type of care",
        list(CARE_TYPE_LABELS.keys()),
        format_func=lambda c: CARE_TYPE_LABELS[c],
    )

    if st.sidebar.button("Find care", use_container_width=True):
        query = build_search_query(
            text=text,
            location=location,
            specialty=specialty,
            insurance=insurance,
            care_type=care_type,
        )
        asyncio.run(session.search(query))
        st.rerun()


def _render_filters(session: SearchSession):
    current = session.criteria
    with st.expander("Filters"):
        sort_option = st.selectbox(
            "Sort by",
            list(SortOption),
            index=list(SortOption).index(current.sort_option),
            format_func=lambda s: SORT_LABELS[s],
        )
        availability = st.selectbox(
            "Availability",
            list(AvailabilityWindow),
            index=list(AvailabilityWindow).index(current.availability),
            format_func=lambda a: AVAILABILITY_LABELS[a],
        )
        gender = st.radio(
            "Doctor gender",
            list(DoctorGender),
            index=list(DoctorGender).index(current.gender),
            format_func=lambda g: g.value.title(),
            horizontal=True,
        )
        languages = st.multiselect("Languages", LANGUAGES, default=[l for l in current.languages if l in LANGUAGES])
        minimum_rating = st.slider("Minimum rating", 0.0, 5.0, current.minimum_rating, 0.5)

        if st.button("Apply filters"):
            criteria = FilterCriteria(
                sort_option=sort_option,
                availability=availability,
                gender=gender,
                languages=languages,
                minimum_rating=minimum_rating,
                maximum_distance=current.maximum_distance,
            )
            asyncio.run(session.apply_filters(criteria))
            st.rerun()


def main():
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

    st.set_page_config(
        page_title="MedMatch",
        page_icon="🩺",
        layout="centered",
    )

    settings = Settings()
    _init_session_state(settings)
    session: SearchSession = st.session_state.search_session

    if not settings.api_base_url:
        st.sidebar.warning("⚠️ Using demo doctors (MEDMATCH_API_BASE_URL not set)")

    _render_search_form(session)

    st.markdown("# 🩺 MedMatch")
    _render_filters(session)

    if session.last_error is not None:
        st.error(format_error(session.last_error))

    if not session.results:
        st.info("Search for a doctor to see results.")
        return

    st.caption(f"{len(session.results)} doctors · page {session.page}")
    for doctor in session.results:
        st.markdown(format_doctor_card(doctor))
        st.divider()

    if session.can_load_more and st.button("Load more", use_container_width=True):
        with st.spinner("Loading more doctors..."):
            asyncio.run(session.load_more())
        st.rerun()


if __name__ == "__main__":
    main()
