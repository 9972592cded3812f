import logging
from typing import Any, Dict, Optional

from medmatch.application.ports import AnalyticsEvent, AnalyticsPort


logger = logging.getLogger(__name__)


class LoggingAnalyticsAdapter(AnalyticsPort):
    """Writes analytics events to the application log instead of a vendor SDK."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id

    def log_event(self, event: AnalyticsEvent, parameters: Optional[Dict[str, Any]] = None) -> None:
        params = dict(parameters or {})
        if self.user_id:
            params["user_id"] = self.user_id
        logger.info("Analytics event: %s, parameters: %s", event.value, params)
