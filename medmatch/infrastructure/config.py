import os
import logging

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


def _streamlit_secret(name: str) -> str | None:
    if not _HAS_STREAMLIT:
        return None
    try:
        value = st.secrets.get(name)
    except Exception as e:
        logger.debug("Streamlit secrets unavailable for %s: %s", name, e)
        return None
    return None if value is None else str(value)


def get_secret(name: str, default: str | None = None) -> str | None:
    """secrets.toml wins over the environment."""
    value = _streamlit_secret(name)
    if value is not None:
        return value
    return os.environ.get(name, default)


def _get_number(name: str, default: float, cast=float):
    raw = get_secret(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default


class Settings:
    @property
    def api_base_url(self) -> str | None:
        return get_secret("MEDMATCH_API_BASE_URL")

    @property
    def api_key(self) -> str | None:
        return get_secret("MEDMATCH_API_KEY")

    @property
    def simulated_latency(self) -> float:
        return max(0.0, _get_number("MEDMATCH_SIMULATED_LATENCY", 1.0))

    @property
    def fetch_timeout(self) -> float:
        return _get_number("MEDMATCH_FETCH_TIMEOUT", 15.0)

    @property
    def result_ceiling(self) -> int:
        return _get_number("MEDMATCH_RESULT_CEILING", 20, cast=int)

    @property
    def page_size(self) -> int:
        return max(1, _get_number("MEDMATCH_PAGE_SIZE", 8, cast=int))
