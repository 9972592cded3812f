import asyncio
import logging
from typing import Any, Dict

import requests
from pydantic import ValidationError

from medmatch.application.errors import FetchError, FetchErrorKind
from medmatch.application.ports import DoctorCatalogPort, DoctorPage
from medmatch.domain.models import SearchQuery
from medmatch.infrastructure.config import Settings


logger = logging.getLogger(__name__)


def error_kind_for_status(status_code: int) -> FetchErrorKind:
    if status_code == 400:
        return FetchErrorKind.INVALID_REQUEST
    if status_code in (401, 403):
        return FetchErrorKind.UNAUTHORIZED
    if status_code == 404:
        return FetchErrorKind.NOT_FOUND
    return FetchErrorKind.SERVER_ERROR


def build_params(query: SearchQuery, page: int) -> Dict[str, Any]:
    params: Dict[str, Any] = {"page": page}
    if query.text:
        params["q"] = query.text
    if query.location:
        params["location"] = query.location
    if query.specialty:
        params["specialty"] = query.specialty.id
    if query.insurance:
        params["insurance"] = query.insurance.name
        if query.insurance.plan_type:
            params["plan_type"] = query.insurance.plan_type
    return params


class HttpDoctorCatalogAdapter(DoctorCatalogPort):
    """Doctor catalog backed by the MedMatch REST API (``GET /doctors``)."""

    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None):
        self.settings = settings or Settings()
        self.base_url = (self.settings.api_base_url or "").rstrip("/")
        self.api_key = self.settings.api_key
        self.timeout = self.settings.fetch_timeout
        self.session = session or requests.Session()

    async def fetch_doctors(self, query: SearchQuery, page: int = 1) -> DoctorPage:
        # requests is blocking; keep the event loop free
        return await asyncio.to_thread(self._fetch_page, query, page)

    def _fetch_page(self, query: SearchQuery, page: int) -> DoctorPage:
        if not self.base_url:
            raise FetchError(FetchErrorKind.INVALID_REQUEST, "MEDMATCH_API_BASE_URL is not configured")

        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            resp = self.session.get(
                f"{self.base_url}/doctors",
                params=build_params(query, page),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.exception("Doctor catalog request failed: %s", e)
            raise FetchError(FetchErrorKind.TRANSPORT_FAILURE, str(e)) from e

        if not 200 <= resp.status_code < 300:
            kind = error_kind_for_status(resp.status_code)
            logger.warning("Doctor catalog answered %s (%s)", resp.status_code, kind.value)
            raise FetchError(kind, f"HTTP {resp.status_code}")

        try:
            data = resp.json()
            return DoctorPage(
                doctors=data.get("doctors", []),
                page=data.get("page", page),
                total_pages=data.get("total_pages"),
                has_more=data.get("has_more"),
            )
        except (ValueError, AttributeError, ValidationError) as e:
            logger.warning("Doctor catalog sent an unreadable body: %s", e)
            raise FetchError(FetchErrorKind.SERVER_ERROR, "Malformed doctor catalog response") from e
