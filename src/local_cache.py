"""
Durable local copy of the movie collection.

A single JSON file plays the part of the browser's storage slot: it is read
once when the app starts and overwritten after every successful sync.
"""

import json
import logging
import os
import tempfile

from utils import get_setting

logger = logging.getLogger(__name__)


class LocalCache:
    """One JSON file holding the whole serialized collection."""

    def __init__(self, path=None):
        self.path = path or get_setting("LOCAL_CACHE_FILE")

    def load(self):
        """
        Read the cached collection.

        Returns:
            List of movie dictionaries, empty when there is no usable cache
        """
        if not os.path.exists(self.path):
            return []

        try:
            with open(self.path, mode="r", encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, ValueError) as e:
            logger.warning("Could not read movie cache %s: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning("Ignoring movie cache %s: expected a list, got %s", self.path, type(data).__name__)
            return []
        return [movie for movie in data if isinstance(movie, dict)]

    def save(self, movies):
        """Replace the cached collection with ``movies``."""
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=".movies-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, mode="w", encoding="utf-8") as file:
                json.dump(list(movies), file, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.debug("Wrote %d movies to %s", len(movies), self.path)
