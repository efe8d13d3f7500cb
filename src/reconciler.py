"""
Reconciliation of remote movie rows into the local collection.

The remote store is authoritative: a successful read replaces the cached
collection wholesale. Any failure leaves the cache and the collection as
they were.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from remote_store import RemoteStoreError
from utils import default_date_for_year, parse_date, parse_score, resolve_year, stable_movie_id

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    kept: int = 0
    duplicates: int = 0
    invalid: int = 0


@dataclass
class SyncResult:
    source: str  # "remote" | "cache"
    report: Optional[ReconcileReport] = None
    error: Optional[str] = None

    @property
    def from_remote(self):
        return self.source == "remote"


def normalize_movie(row):
    """
    Turn one raw row into a movie dictionary.

    Args:
        row: Raw dictionary from the remote store or the cache

    Returns:
        Movie dictionary, or None when the row has no title or no resolvable year
    """
    if not isinstance(row, dict):
        return None

    title = str(row.get("title") or "").strip()
    if not title:
        return None

    year = resolve_year(row)
    if year is None:
        return None

    parsed_date = parse_date(row.get("date"))
    notes = row.get("notes")

    return {
        "id": stable_movie_id(title, year),
        "title": title,
        "score": parse_score(row.get("score")),
        "notes": str(notes).strip() if notes else "",
        "year": year,
        "date": parsed_date.isoformat() if parsed_date else default_date_for_year(year),
        "dateAdded": row.get("dateAdded") or None,
    }


def dedupe_movies(rows):
    """
    Normalize rows and keep the first movie for each (title, year).

    Args:
        rows: Iterable of raw rows in arrival order

    Returns:
        Tuple of (list of movies, ReconcileReport)
    """
    report = ReconcileReport()
    seen = set()
    movies = []

    for index, row in enumerate(rows):
        movie = normalize_movie(row)
        if movie is None:
            report.invalid += 1
            logger.debug("Dropping invalid row %d: %r", index, row)
            continue

        key = (movie["title"], movie["year"])
        if key in seen:
            report.duplicates += 1
            logger.debug("Dropping duplicate row %d: %s (%s)", index, movie["title"], movie["year"])
            continue

        seen.add(key)
        movies.append(movie)

    report.kept = len(movies)
    return movies, report


class Reconciler:
    """Sole writer of a MovieCollection."""

    def __init__(self, collection, cache, remote_store=None):
        self.collection = collection
        self.cache = cache
        self.remote_store = remote_store
        self.last_report = None

    def reconcile(self, remote_rows):
        """
        Replace the collection (and the cache) with the deduplicated rows.

        Returns:
            The updated MovieCollection
        """
        movies, report = dedupe_movies(remote_rows)

        try:
            self.cache.save(movies)
        except OSError as e:
            logger.error("Could not write movie cache: %s", e)

        self.collection.replace_all(movies)
        self.last_report = report
        logger.info(
            "Reconciled %d movies (%d duplicates, %d invalid rows dropped)",
            report.kept, report.duplicates, report.invalid,
        )
        return self.collection

    def sync(self):
        """
        Fetch from the remote store and reconcile; fall back to the cache on failure.

        Returns:
            SyncResult telling whether the collection now reflects remote data
        """
        if self.remote_store is None:
            return SyncResult(source="cache", error="No remote store configured")

        try:
            rows = self.remote_store.fetch_movies()
        except RemoteStoreError as e:
            logger.warning("Failed to load from remote store, using local data: %s", e)
            return SyncResult(source="cache", error=str(e))

        self.reconcile(rows)
        logger.info("Successfully loaded movies from remote store")
        return SyncResult(source="remote", report=self.last_report)
