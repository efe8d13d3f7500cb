"""
Clients for the remote movie store.

Two interchangeable backends answer the same two calls:

- WebAppRemoteStore talks HTTP to a deployed spreadsheet web app
  (GET reads everything, POST appends one movie).
- SheetRemoteStore opens the spreadsheet directly with gspread.

fetch_movies() returns the movie rows or raises RemoteStoreError;
append_movie() always returns a {"success": ...} envelope.
"""

import functools
import logging

import requests

import sheet_store
from utils import get_setting

logger = logging.getLogger(__name__)


class RemoteStoreError(Exception):
    """The remote store could not be reached or answered with a failure."""


def validate_envelope(payload):
    """
    Check a full-read response envelope.

    Args:
        payload: Decoded JSON response

    Returns:
        List of raw movie rows
    """
    if not isinstance(payload, dict):
        raise RemoteStoreError("Malformed response: expected a JSON object")
    if payload.get("success") is not True:
        raise RemoteStoreError(payload.get("error") or "Remote store reported a failure")

    movies = payload.get("movies")
    if not isinstance(movies, list):
        raise RemoteStoreError("Malformed response: 'movies' is not a list")
    return movies


class WebAppRemoteStore:
    """Spreadsheet web app reached over HTTP."""

    def __init__(self, url, timeout=None):
        self.url = url
        self.timeout = float(timeout or get_setting("HTTP_TIMEOUT_SECONDS"))

    def fetch_movies(self):
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise RemoteStoreError(f"Could not load movies from {self.url}: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteStoreError(f"Malformed JSON from {self.url}: {e}") from e

        return validate_envelope(payload)

    def append_movie(self, movie):
        try:
            response = requests.post(self.url, json=movie, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Error saving '%s' to remote store: %s", movie.get("title"), e)
            return {"success": False, "error": str(e)}

        if not isinstance(payload, dict):
            return {"success": False, "error": "Malformed response: expected a JSON object"}
        return payload

    def __repr__(self):
        return f"WebAppRemoteStore({self.url!r})"


class SheetRemoteStore:
    """Spreadsheet opened in-process through gspread."""

    def __init__(self, open_spreadsheet):
        self._open_spreadsheet = open_spreadsheet

    def _spreadsheet(self):
        try:
            spreadsheet = self._open_spreadsheet()
        except Exception as e:
            raise RemoteStoreError(f"Could not open spreadsheet: {e}") from e
        if spreadsheet is None:
            raise RemoteStoreError("Google Sheets credentials are not configured")
        return spreadsheet

    def fetch_movies(self):
        return validate_envelope(sheet_store.read_all_movies(self._spreadsheet()))

    def append_movie(self, movie):
        try:
            spreadsheet = self._spreadsheet()
        except RemoteStoreError as e:
            logger.warning("Error saving '%s' to spreadsheet: %s", movie.get("title"), e)
            return {"success": False, "error": str(e)}
        return sheet_store.append_movie(spreadsheet, movie)

    def __repr__(self):
        return "SheetRemoteStore()"


def build_remote_store(url=None, spreadsheet_id=None):
    """
    Pick the remote store backend from configuration.

    Returns:
        WebAppRemoteStore, SheetRemoteStore, or None when neither is configured
    """
    url = url if url is not None else get_setting("MOVIE_TRACKER_URL")
    if url:
        return WebAppRemoteStore(url)

    spreadsheet_id = spreadsheet_id if spreadsheet_id is not None else get_setting("SPREADSHEET_ID")
    if spreadsheet_id:
        return SheetRemoteStore(functools.partial(sheet_store.open_spreadsheet, spreadsheet_id))

    logger.info("No remote store configured, running from the local cache only")
    return None
