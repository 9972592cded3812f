import logging
from typing import List, Sequence

from medmatch.application.ports import DoctorPage
from medmatch.domain.models import DoctorRecord


logger = logging.getLogger(__name__)


# Used only when the catalog sends no paging signals (the mock catalog).
DEMO_TOTAL_PAGES = 3
DEFAULT_RESULT_CEILING = 20


class PaginationController:
    """Tracks the page cursor and the accumulated results of one search."""

    def __init__(self, ceiling: int = DEFAULT_RESULT_CEILING):
        self.ceiling = ceiling
        self.page = 1
        self.total_pages = 1
        self.results: List[DoctorRecord] = []
        self.can_load_more = False

    def reset(self) -> None:
        # Results stay until the next successful merge replaces them, so a
        # failed search keeps what the user was already looking at.
        self.page = 1
        self.total_pages = 1
        self.can_load_more = False

    @property
    def can_advance(self) -> bool:
        return self.can_load_more and self.page < self.total_pages

    def advance(self) -> int:
        self.page += 1
        return self.page

    def rollback(self) -> None:
        self.page = max(1, self.page - 1)

    def merge(self, fetched: DoctorPage, doctors: Sequence[DoctorRecord], append: bool) -> None:
        if append:
            self.results = self.results + list(doctors)
        else:
            self.results = list(doctors)

        if fetched.total_pages is None and fetched.has_more is None:
            self.total_pages = DEMO_TOTAL_PAGES
            self.can_load_more = len(self.results) < self.ceiling
            return

        has_more = fetched.has_more
        if fetched.total_pages is not None:
            self.total_pages = fetched.total_pages
            if has_more is None:
                has_more = self.page < fetched.total_pages
        elif has_more:
            self.total_pages = self.page + 1
        else:
            self.total_pages = self.page

        if has_more and self.total_pages <= self.page:
            logger.warning(
                "Catalog reported more results but total_pages=%s at page %s; trusting has_more",
                fetched.total_pages,
                self.page,
            )
            self.total_pages = self.page + 1
        self.can_load_more = bool(has_more)
