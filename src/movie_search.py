"""
Title search and typeahead suggestions.
"""

from utils import SUGGESTION_LIMIT


def normalize_term(term):
    """Case-folded, trimmed search term ('' for None)."""
    return (term or "").strip().casefold()


def title_matches(movie, term):
    """
    Case-insensitive substring match on a movie title.

    Args:
        movie: Movie dictionary
        term: Search term, already normalized or not

    Returns:
        Boolean, always True for an empty term
    """
    needle = normalize_term(term)
    if not needle:
        return True
    return needle in str(movie.get("title", "")).casefold()


def filter_by_search(movies, term):
    """Movies whose title contains ``term``; the input order is kept."""
    if not normalize_term(term):
        return list(movies)
    return [movie for movie in movies if title_matches(movie, term)]


def suggest(movies, term, limit=SUGGESTION_LIMIT):
    """
    Typeahead suggestions for the search box.

    Args:
        movies: Movies in collection order
        term: Text typed so far
        limit: Maximum number of suggestions

    Returns:
        List of unique matching titles in first-seen order
    """
    if not normalize_term(term):
        return []

    suggestions = []
    seen = set()
    for movie in movies:
        if not title_matches(movie, term):
            continue
        title = movie.get("title")
        if title in seen:
            continue
        seen.add(title)
        suggestions.append(title)
        if len(suggestions) >= limit:
            break

    return suggestions
