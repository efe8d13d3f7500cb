"""
Movie Tracker - Source Package

This package contains the core functionality for the movie tracker:
- movie_collection: In-memory collection owned by one app session
- local_cache: JSON file cache used when the sheet can't be reached
- sheet_store: Google Sheets storage, one tab per year
- remote_store: HTTP and gspread clients for the remote store
- reconciler: Remote-to-local sync with de-duplication
- movie_search: Title search and typeahead suggestions
- view_model: Filtering, sorting and per-year net scores
- utils: Utility functions and configuration constants
"""
