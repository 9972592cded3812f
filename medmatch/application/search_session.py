import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from medmatch.application.errors import FetchError, FetchErrorKind
from medmatch.application.pagination import DEFAULT_RESULT_CEILING, PaginationController
from medmatch.application.ports import AnalyticsEvent, AnalyticsPort, DoctorCatalogPort, DoctorPage
from medmatch.domain.models import DoctorRecord, FilterCriteria, SearchQuery
from medmatch.domain.rules import filter_doctors, sort_doctors


logger = logging.getLogger(__name__)


Listener = Callable[[str, Any], None]

OBSERVABLE_FIELDS = (
    "results",
    "is_loading",
    "is_loading_more",
    "last_error",
    "can_load_more",
    "query",
    "criteria",
)


class SearchSession:
    """Search state for one results screen: query, filters, pages and errors.

    Commands are coroutines and must all run on the same event loop. Every
    fetch is stamped with the session generation at the time it was issued;
    ``search`` and ``apply_filters`` start a new generation, and completions
    from older generations are dropped instead of overwriting newer results.
    """

    def __init__(
        self,
        catalog: DoctorCatalogPort,
        analytics: Optional[AnalyticsPort] = None,
        ceiling: int = DEFAULT_RESULT_CEILING,
        fetch_timeout: Optional[float] = 15.0,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.catalog = catalog
        self.analytics = analytics
        self.fetch_timeout = fetch_timeout
        self.clock = clock
        self._pagination = PaginationController(ceiling=ceiling)
        self._generation = 0
        self._listeners: List[Listener] = []

        self._results: List[DoctorRecord] = []
        self._is_loading = False
        self._is_loading_more = False
        self._last_error: Optional[FetchError] = None
        self._can_load_more = False
        self._query = SearchQuery()
        self._criteria = FilterCriteria()

    # Observable state

    @property
    def results(self) -> List[DoctorRecord]:
        return list(self._results)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def is_loading_more(self) -> bool:
        return self._is_loading_more

    @property
    def last_error(self) -> Optional[FetchError]:
        return self._last_error

    @property
    def can_load_more(self) -> bool:
        return self._can_load_more

    @property
    def query(self) -> SearchQuery:
        return self._query

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def page(self) -> int:
        return self._pagination.page

    @property
    def total_pages(self) -> int:
        return self._pagination.total_pages

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(field, value)`` whenever an observable field changes."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, field: str, value: Any) -> None:
        attr = "_" + field
        if getattr(self, attr) == value:
            return
        setattr(self, attr, value)
        for listener in list(self._listeners):
            try:
                listener(field, value)
            except Exception as e:
                logger.exception("Listener failed for %s: %s", field, e)

    # Commands

    async def search(self, query: SearchQuery, criteria: Optional[FilterCriteria] = None) -> None:
        self._set("query", query)
        if criteria is not None:
            self._set("criteria", criteria)
        self._track(AnalyticsEvent.SEARCH, {
            "query": query.text,
            "location": query.location,
            "specialty": query.specialty.id if query.specialty else None,
            "insurance": query.insurance.name if query.insurance else None,
        })
        await self._run_first_page()

    async def apply_filters(self, criteria: FilterCriteria) -> None:
        self._set("criteria", criteria)
        self._track(AnalyticsEvent.APPLY_FILTERS, criteria.model_dump(mode="json"))
        await self._run_first_page()

    async def load_more(self) -> None:
        if self._is_loading or self._is_loading_more or not self._pagination.can_advance:
            return

        generation = self._generation
        page = self._pagination.advance()
        self._set("is_loading_more", True)
        self._set("last_error", None)
        self._track(AnalyticsEvent.LOAD_MORE, {"page": page})

        try:
            doctors, fetched = await self._fetch(self._query, self._criteria, page)
        except FetchError as e:
            if self._is_stale(generation, page):
                return
            self._pagination.rollback()
            self._fail(e)
            self._set("is_loading_more", False)
            return
        except (Exception, asyncio.CancelledError):
            if generation == self._generation:
                self._pagination.rollback()
                self._set("is_loading_more", False)
            raise

        if self._is_stale(generation, page):
            return
        self._pagination.merge(fetched, doctors, append=True)
        self._publish_results()
        self._set("is_loading_more", False)

    # Pipeline

    async def _run_first_page(self) -> None:
        self._generation += 1
        generation = self._generation
        self._pagination.reset()
        # a load-more from the previous generation no longer counts
        self._set("is_loading_more", False)
        self._set("can_load_more", False)
        self._set("is_loading", True)
        self._set("last_error", None)

        try:
            doctors, fetched = await self._fetch(self._query, self._criteria, 1)
        except FetchError as e:
            if self._is_stale(generation, 1):
                return
            self._fail(e)
            self._set("is_loading", False)
            return
        except (Exception, asyncio.CancelledError):
            if generation == self._generation:
                self._set("is_loading", False)
            raise

        if self._is_stale(generation, 1):
            return
        self._pagination.merge(fetched, doctors, append=False)
        self._publish_results()
        self._set("is_loading", False)

    async def _fetch(
        self, query: SearchQuery, criteria: FilterCriteria, page: int
    ) -> Tuple[List[DoctorRecord], DoctorPage]:
        try:
            if self.fetch_timeout:
                fetched = await asyncio.wait_for(self.catalog.fetch_doctors(query, page), self.fetch_timeout)
            else:
                fetched = await self.catalog.fetch_doctors(query, page)
        except asyncio.TimeoutError as e:
            raise FetchError(
                FetchErrorKind.TRANSPORT_FAILURE,
                f"Doctor catalog did not answer within {self.fetch_timeout}s",
            ) from e

        filtered = filter_doctors(fetched.doctors, criteria, now=self.clock())
        return sort_doctors(filtered, criteria.sort_option), fetched

    def _is_stale(self, generation: int, page: int) -> bool:
        if generation == self._generation:
            return False
        logger.debug(
            "Dropping page %s from generation %s (current generation %s)",
            page,
            generation,
            self._generation,
        )
        return True

    def _publish_results(self) -> None:
        self._set("results", list(self._pagination.results))
        self._set("can_load_more", self._pagination.can_advance)

    def _fail(self, error: FetchError) -> None:
        logger.warning("Doctor search failed (%s): %s", error.kind.value, error.message)
        self._set("last_error", error)
        self._track(AnalyticsEvent.ERROR, {"kind": error.kind.value, "message": error.message})

    def _track(self, event: AnalyticsEvent, parameters: Dict[str, Any]) -> None:
        if self.analytics is None:
            return
        try:
            self.analytics.log_event(event, parameters)
        except Exception as e:
            logger.warning("Analytics event %s not recorded: %s", event.value, e)
