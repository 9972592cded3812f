import asyncio
import logging

from medmatch.application.ports import DoctorCatalogPort, DoctorPage
from medmatch.domain.catalog import demo_doctors
from medmatch.domain.models import SearchQuery
from medmatch.infrastructure.config import Settings


logger = logging.getLogger(__name__)


class MockDoctorCatalogAdapter(DoctorCatalogPort):
    """In-memory catalog that answers after a fake network delay and never fails.

    The query is ignored: every page holds the unfiltered demonstration doctors.
    No paging signals are sent, so the session falls back to its result ceiling.
    """

    def __init__(self, settings: Settings | None = None, latency: float | None = None, page_size: int | None = None):
        self.settings = settings or Settings()
        self.latency = self.settings.simulated_latency if latency is None else latency
        self.page_size = page_size or self.settings.page_size

    async def fetch_doctors(self, query: SearchQuery, page: int = 1) -> DoctorPage:
        logger.debug("Mock catalog fetch: query=%r location=%r page=%s", query.text, query.location, page)
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        return DoctorPage(doctors=demo_doctors(page=page, page_size=self.page_size), page=page)
