"""
Derived views over the movie collection: filtering, sorting and the
per-year grouping with net scores.

Everything here is a pure function of its inputs; nothing touches the
remote store or the cache.
"""

import unicodedata
from dataclasses import dataclass, field

import pandas as pd

from movie_search import filter_by_search
from utils import ALL, parse_date, parse_score, resolve_year


@dataclass
class YearGroup:
    year: int
    movies: list = field(default_factory=list)

    @property
    def net_score(self):
        return sum(parse_score(movie.get("score")) for movie in self.movies)

    @property
    def is_positive(self):
        return self.net_score >= 0


def _is_all(selection):
    return selection is None or str(selection).strip().lower() in (ALL, "")


def _selected_int(selection):
    try:
        return int(str(selection).strip())
    except ValueError:
        return None


def filter_movies(movies, search_term="", score_filter=ALL, year_filter=ALL):
    """
    Apply search, score and year filters (all must match).

    Args:
        movies: Movies in collection order
        search_term: Case-insensitive title substring
        score_filter: "all" or a score
        year_filter: "all" or a year

    Returns:
        Filtered list in the original order
    """
    filtered = filter_by_search(movies, search_term)

    if not _is_all(score_filter):
        wanted = _selected_int(score_filter)
        filtered = [m for m in filtered if wanted is not None and parse_score(m.get("score")) == wanted]

    if not _is_all(year_filter):
        wanted = _selected_int(year_filter)
        filtered = [m for m in filtered if wanted is not None and resolve_year(m) == wanted]

    return filtered


def title_sort_key(title):
    """Accent-insensitive, case-insensitive key with the raw title as tie-break."""
    decomposed = unicodedata.normalize("NFKD", str(title))
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), str(title))


def sort_movies(movies, sort_key):
    """
    Sort movies by one of the SORT_OPTIONS keys.

    Sorts are stable. Movies with an unreadable date go last for both date orders.
    An unknown key leaves the order unchanged.
    """
    movies = list(movies)

    if sort_key in ("date-desc", "date-asc"):
        dated = [m for m in movies if parse_date(m.get("date"))]
        undated = [m for m in movies if not parse_date(m.get("date"))]
        dated.sort(key=lambda m: parse_date(m.get("date")), reverse=sort_key == "date-desc")
        return dated + undated

    if sort_key in ("score-desc", "score-asc"):
        return sorted(movies, key=lambda m: parse_score(m.get("score")), reverse=sort_key == "score-desc")

    if sort_key == "title":
        return sorted(movies, key=lambda m: title_sort_key(m.get("title", "")))

    return movies


def derive(movies, search_term="", score_filter=ALL, year_filter=ALL, sort_key=None):
    """Filtered then sorted view of the collection."""
    return sort_movies(filter_movies(movies, search_term, score_filter, year_filter), sort_key)


def group_by_year(movies):
    """
    Group movies by resolved year, newest year first.

    Movies keep their relative order inside each group; movies without a
    resolvable year are left out.
    """
    groups = {}
    for movie in movies:
        year = resolve_year(movie)
        if year is None:
            continue
        groups.setdefault(year, YearGroup(year=year)).movies.append(movie)

    return [groups[year] for year in sorted(groups, reverse=True)]


def available_years(movies):
    """Distinct resolved years, newest first."""
    return sorted({year for year in map(resolve_year, movies) if year is not None}, reverse=True)


def available_scores(movies):
    """Distinct scores, highest first."""
    return sorted({parse_score(movie.get("score")) for movie in movies}, reverse=True)


def keep_selection(current, options):
    """Keep a filter selection only if it is still one of the options."""
    if _is_all(current):
        return ALL
    wanted = _selected_int(current)
    return wanted if wanted in options else ALL


def year_summary_frame(groups):
    """One row per year group: Year, Movies, Net Score."""
    return pd.DataFrame(
        [[group.year, len(group.movies), group.net_score] for group in groups],
        columns=["Year", "Movies", "Net Score"],
    )


def format_date(value):
    """'2019-05-01' -> 'May 1, 2019'."""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def format_date_short(value):
    """'2019-05-01' -> 'May 1'."""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed:%b} {parsed.day}"
