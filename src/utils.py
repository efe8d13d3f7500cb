"""
Utility functions and constants for the movie tracker.
"""

import hashlib
import logging
import os
import re
from datetime import date, datetime

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

# Global configuration constants
DEFAULT_SETTINGS = {
    "MOVIE_TRACKER_URL": "",
    "SPREADSHEET_ID": "",
    "LOCAL_CACHE_FILE": "movies_cache.json",
    "HTTP_TIMEOUT_SECONDS": 20,
    "LOG_LEVEL": "INFO",
}

SORT_OPTIONS = {
    "date-desc": "Newest first",
    "date-asc": "Oldest first",
    "score-desc": "Highest score",
    "score-asc": "Lowest score",
    "title": "Title (A-Z)",
}
DEFAULT_SORT = "date-desc"
ALL = "all"

SHEET_HEADER_ROW = ["Title", "Score", "Notes"]
YEAR_TAB_PATTERN = re.compile(r"^\d{4}$")
SUGGESTION_LIMIT = 5

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] %(message)s"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_YEAR = re.compile(r"^\s*(\d{4})")

logger = logging.getLogger(__name__)


def get_setting(key, default=None):
    """
    Look up a configuration value.

    Streamlit secrets win, then environment variables, then the built-in default.

    Args:
        key: Setting name
        default: Value used when the setting is not configured anywhere

    Returns:
        The configured value
    """
    if default is None:
        default = DEFAULT_SETTINGS.get(key)

    try:
        if key in st.secrets:
            return st.secrets[key]
    except Exception as e:
        # No secrets.toml outside `streamlit run`
        logger.debug("Streamlit secrets unavailable for %s: %s", key, e)

    value = os.environ.get(key)
    if value is not None and value != "":
        return value
    return default


def configure_logging(level=None):
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    level = level or get_setting("LOG_LEVEL")
    root.setLevel(str(level).upper())

    if getattr(root, "_movie_tracker_configured", False):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    setattr(root, "_movie_tracker_configured", True)


def parse_score(value):
    """
    Parse a score the way a spreadsheet cell or form field hands it over.

    Args:
        value: int, float, numeric string or anything else

    Returns:
        Integer score, 0 when nothing numeric can be read
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value)

    match = _LEADING_INT.match(str(value))
    if match:
        return int(match.group(1))
    return 0


def parse_date(value):
    """Parse an ISO date string (or date/datetime) into a date, None if it can't."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def resolve_year(movie):
    """
    Resolve the year a movie belongs to.

    An explicit, non-zero ``year`` wins; otherwise the year is read from ``date``.

    Args:
        movie: Movie dictionary

    Returns:
        Integer year or None when neither field yields one
    """
    explicit = movie.get("year")
    if explicit and not isinstance(explicit, bool):
        try:
            year = int(str(explicit).strip())
            if year:
                return year
        except ValueError:
            pass

    raw_date = movie.get("date")
    parsed = parse_date(raw_date)
    if parsed:
        return parsed.year
    if isinstance(raw_date, str):
        match = _LEADING_YEAR.match(raw_date)
        if match:
            return int(match.group(1))
    return None


def default_date_for_year(year):
    """January 1st of the given year as an ISO string."""
    return f"{int(year):04d}-01-01"


def stable_movie_id(title, year):
    """Deterministic id for a (title, year) pair."""
    digest = hashlib.sha1(f"{year}:{title}".encode("utf-8")).hexdigest()
    return digest[:12]
