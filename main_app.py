"""
Movie Tracker - Streamlit front end
Keeps a yearly list of rated movies backed by a Google Sheet, with a local cache
"""

import html
import os
import sys
from datetime import date

import streamlit as st

# =============================================================================
# IMPORTS AND SETUP
# =============================================================================

# Add src directory to path for imports
current_dir = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(current_dir, 'src')

if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from local_cache import LocalCache
from movie_collection import MovieCollection
from movie_search import suggest
from reconciler import Reconciler, dedupe_movies
from remote_store import build_remote_store
from utils import ALL, DEFAULT_SORT, SORT_OPTIONS, configure_logging
from view_model import (
    available_scores,
    available_years,
    derive,
    format_date_short,
    group_by_year,
    keep_selection,
    year_summary_frame,
)

configure_logging()

# =============================================================================
# SESSION STATE MANAGEMENT
# =============================================================================

def initialize_session_state():
    """Initialize all required session state variables."""

    if "cache" not in st.session_state:
        st.session_state.cache = LocalCache()

    # Cached copy first so something is on screen even if the sync fails
    if "collection" not in st.session_state:
        cached, _ = dedupe_movies(st.session_state.cache.load())
        st.session_state.collection = MovieCollection(cached)

    if "reconciler" not in st.session_state:
        st.session_state.reconciler = Reconciler(
            st.session_state.collection,
            st.session_state.cache,
            build_remote_store(),
        )

    if "last_sync" not in st.session_state:
        st.session_state.last_sync = None

    # Filter state
    if "sort_by" not in st.session_state:
        st.session_state.sort_by = DEFAULT_SORT
    if "score_filter" not in st.session_state:
        st.session_state.score_filter = ALL
    if "year_filter" not in st.session_state:
        st.session_state.year_filter = ALL
    if "movie_search" not in st.session_state:
        st.session_state.movie_search = ""

# =============================================================================
# UI STYLING
# =============================================================================

def inject_custom_css():
    """Inject custom CSS for the year tables."""
    st.markdown("""
    <style>
    .year-header {
        display: flex;
        justify-content: space-between;
        align-items: baseline;
        border-bottom: 2px solid #e50914;
        margin-top: 1.5rem;
    }

    .net-score {
        font-size: 1rem;
        color: #666;
    }

    .score-value.positive {
        color: #28a745;
        font-weight: bold;
    }

    .score-value.negative {
        color: #dc3545;
        font-weight: bold;
    }

    .table-row {
        display: flex;
        justify-content: space-between;
        padding: 0.5rem 0;
        border-bottom: 1px solid #eee;
    }

    .movie-title {
        font-weight: bold;
    }

    .movie-notes {
        font-size: 0.85rem;
        color: #666;
    }

    .movie-date {
        font-size: 0.75rem;
        color: #999;
    }

    .score-badge {
        display: inline-block;
        min-width: 2rem;
        text-align: center;
        border-radius: 12px;
        padding: 0.1rem 0.5rem;
        background: #f0f0f0;
    }

    .empty-state {
        text-align: center;
        padding: 3rem;
        color: #666;
    }
    </style>
    """, unsafe_allow_html=True)

# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def sync_movies():
    """Pull the latest movies from the remote store into the session collection."""
    with st.spinner("Loading movies..."):
        st.session_state.last_sync = st.session_state.reconciler.sync()


def add_movie(title, score, notes, watched_on):
    """
    Save a new movie to the remote store, then re-sync.

    Returns:
        Boolean indicating success
    """
    remote_store = st.session_state.reconciler.remote_store
    if remote_store is None:
        st.error("No remote store configured - set MOVIE_TRACKER_URL or SPREADSHEET_ID.")
        return False

    result = remote_store.append_movie({
        "title": title.strip(),
        "score": int(score),
        "notes": notes.strip(),
        "date": watched_on.isoformat(),
        "year": watched_on.year,
    })

    if not result.get("success"):
        st.error(f"Could not save movie: {result.get('error', 'unknown error')}")
        return False

    sync_movies()
    return True

# =============================================================================
# UI COMPONENTS
# =============================================================================

def render_sidebar(movies):
    """Render sort and filter controls."""
    st.sidebar.header("Filters")

    st.sidebar.selectbox(
        "Sort by",
        options=list(SORT_OPTIONS),
        format_func=SORT_OPTIONS.get,
        key="sort_by",
    )

    scores = available_scores(movies)
    st.session_state.score_filter = keep_selection(st.session_state.score_filter, scores)
    st.sidebar.selectbox(
        "Score",
        options=[ALL] + scores,
        format_func=lambda value: "All Scores" if value == ALL else str(value),
        key="score_filter",
    )

    # Restore the year selection only if it still exists
    years = available_years(movies)
    st.session_state.year_filter = keep_selection(st.session_state.year_filter, years)
    st.sidebar.selectbox(
        "Year",
        options=[ALL] + years,
        format_func=lambda value: "All Years" if value == ALL else str(value),
        key="year_filter",
    )

    if st.sidebar.button("🔄 Refresh from sheet"):
        sync_movies()
        st.rerun()

    last_sync = st.session_state.last_sync
    if last_sync is not None and not last_sync.from_remote:
        st.sidebar.caption(f"Showing cached movies ({last_sync.error})")


def render_search(movies):
    """Render the search box with typeahead suggestions."""
    search_term = st.text_input("Search movies", key="movie_search")

    suggestions = suggest(movies, search_term)
    # Hide the suggestion row once a suggestion has been picked
    if suggestions and suggestions != [search_term]:
        cols = st.columns(len(suggestions))
        for idx, title in enumerate(suggestions):
            with cols[idx]:
                st.button(title, key=f"suggestion_{idx}", on_click=pick_suggestion, args=(title,))

    return search_term


def pick_suggestion(title):
    """Button callback: runs before the rerun, so the search widget can still be set."""
    st.session_state.movie_search = title


def render_add_form():
    """Render the form for recording a new movie."""
    with st.expander("➕ Add movie"):
        with st.form("add_movie", clear_on_submit=True):
            title = st.text_input("Title")
            score = st.number_input("Score", step=1, value=0)
            notes = st.text_area("Notes")
            watched_on = st.date_input("Date", value=date.today())
            submitted = st.form_submit_button("Save")

        if submitted:
            if not title.strip():
                st.warning("Please enter a title.")
            elif add_movie(title, score, notes, watched_on):
                st.success(f"✅ Added {title.strip()}")
                st.rerun()


def render_movies_list(movies_to_show):
    """Render movies grouped by year with each year's net score."""
    if not movies_to_show:
        st.markdown('''
        <div class="empty-state">
            <h3>No movies yet!</h3>
            <p>Add your first movie above to get started.</p>
        </div>
        ''', unsafe_allow_html=True)
        return

    for group in group_by_year(movies_to_show):
        score_class = "positive" if group.is_positive else "negative"
        st.markdown(f'''
        <div class="year-header">
            <h3>{group.year}</h3>
            <div class="net-score">Net Score: <span class="score-value {score_class}">{group.net_score}</span></div>
        </div>
        ''', unsafe_allow_html=True)

        rows = []
        for movie in group.movies:
            notes = f'<div class="movie-notes">{html.escape(movie["notes"])}</div>' if movie.get("notes") else ''
            rows.append(f'''
            <div class="table-row">
                <div class="col-title">
                    <div class="movie-title">{html.escape(movie["title"])}</div>
                    {notes}
                    <div class="movie-date">{html.escape(str(format_date_short(movie.get("date"))))}</div>
                </div>
                <div class="col-score"><span class="score-badge score-{movie["score"]}">{movie["score"]}</span></div>
            </div>
            ''')
        st.markdown("".join(rows), unsafe_allow_html=True)


def render_stats(movies):
    """Render the per-year summary table."""
    groups = group_by_year(movies)
    if not groups:
        return
    with st.expander("📊 Yearly summary"):
        st.dataframe(year_summary_frame(groups), hide_index=True, use_container_width=True)

# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application function."""
    st.set_page_config(
        page_title="Movie Tracker",
        page_icon="🎬",
        layout="wide",
    )

    initialize_session_state()
    inject_custom_css()

    st.title("🎬 Movie Tracker")

    # Load from the sheet once per session
    if st.session_state.last_sync is None:
        sync_movies()

    movies = st.session_state.collection.movies

    render_sidebar(movies)
    render_add_form()
    search_term = render_search(movies)

    movies_to_show = derive(
        movies,
        search_term=search_term,
        score_filter=st.session_state.score_filter,
        year_filter=st.session_state.year_filter,
        sort_key=st.session_state.sort_by,
    )

    render_movies_list(movies_to_show)
    render_stats(movies)


if __name__ == "__main__":
    main()
