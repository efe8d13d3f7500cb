"""
The in-memory movie collection owned by one app session.
"""


class MovieCollection:
    """
    Ordered collection of movie dictionaries.

    Only the reconciler replaces the contents (``replace_all``); everything
    else reads through ``movies`` and gets its own copies back.
    """

    def __init__(self, movies=None):
        self._movies = tuple(dict(movie) for movie in (movies or ()))
        self.version = 0

    @property
    def movies(self):
        return [dict(movie) for movie in self._movies]

    def replace_all(self, movies):
        self._movies = tuple(dict(movie) for movie in movies)
        self.version += 1

    def titles(self):
        return [movie["title"] for movie in self._movies]

    def __len__(self):
        return len(self._movies)

    def __iter__(self):
        return iter(self.movies)

    def __eq__(self, other):
        if not isinstance(other, MovieCollection):
            return NotImplemented
        return self._movies == other._movies

    def __repr__(self):
        return f"MovieCollection({len(self._movies)} movies, version={self.version})"
