from enum import Enum
from typing import Optional


class FetchErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    TRANSPORT_FAILURE = "transport_failure"


class FetchError(Exception):
    """Raised by a catalog adapter when a doctor fetch cannot be completed."""

    def __init__(self, kind: FetchErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.value.replace("_", " ")
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"FetchError(kind={self.kind.value!r}, message={self.message!r})"
