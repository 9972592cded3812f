from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from medmatch.domain.models import DoctorRecord, SearchQuery


class DoctorPage(BaseModel):
    doctors: List[DoctorRecord] = []
    page: int = Field(1, ge=1)
    # Server pagination signals. None means the backend didn't say.
    total_pages: Optional[int] = Field(None, ge=0)
    has_more: Optional[bool] = None


class DoctorCatalogPort(Protocol):
    async def fetch_doctors(self, query: SearchQuery, page: int = 1) -> DoctorPage:
        """
        Returns the unfiltered candidates for ``query``. Raises FetchError on failure.
        """
        ...


class AnalyticsEvent(str, Enum):
    SEARCH = "search"
    APPLY_FILTERS = "apply_filters"
    LOAD_MORE = "load_more"
    ERROR = "error"


class AnalyticsPort(Protocol):
    def log_event(self, event: AnalyticsEvent, parameters: Optional[Dict[str, Any]] = None) -> None:
        ...
