"""
ReelSearch — Movie Store

In-memory store for movies the user chose to keep. Keyed by IMDb id with
replace-on-conflict inserts; supports lookup by id and by cast member.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from reelsearch.clients import omdb
from reelsearch.models import (
    UNKNOWN,
    ActorSearchResult,
    DetailedRecord,
    SaveMoviesResponse,
    StoredMovie,
)

logger = logging.getLogger(__name__)

EMPTY_ACTOR_MESSAGE = "Please enter an actor name"
NO_ACTOR_MATCH_MESSAGE = "No movies found with actor matching: {name}"
SEEDED_MESSAGE = "Movies added to database"

# ── In-memory store ───────────────────────────────────────

_movies: Dict[str, StoredMovie] = {}


def _value(text: str) -> str:
    return "" if text == UNKNOWN else text


def to_stored_movie(record: DetailedRecord) -> StoredMovie:
    """Map an enriched record onto the stored row shape."""
    return StoredMovie(
        imdb_id=record.imdb_id or "tt0000000",
        title=record.title,
        year=record.year,
        rated=_value(record.rated),
        released=_value(record.released),
        runtime=_value(record.runtime),
        genre=_value(record.genre),
        director=_value(record.director),
        writer=_value(record.writer),
        actors=_value(record.actors),
        plot=_value(record.plot),
        language=_value(record.language),
        country=_value(record.country),
        awards=_value(record.awards),
        poster=_value(record.poster),
        ratings=_value(record.imdb_rating),
        type=_value(record.type) or "movie",
    )


def save_movie(record: DetailedRecord) -> StoredMovie:
    movie = to_stored_movie(record)
    _movies[movie.imdb_id] = movie
    return movie


def save_movies(records: Iterable[DetailedRecord]) -> int:
    """Upsert every record. Returns how many were written."""
    count = 0
    for record in records:
        save_movie(record)
        count += 1
    return count


def get_movie(imdb_id: str) -> Optional[StoredMovie]:
    return _movies.get(imdb_id)


def _year_key(movie: StoredMovie) -> str:
    return movie.year[:4]


def find_movies_by_actor(name: str) -> List[StoredMovie]:
    """Movies whose cast contains ``name`` (case-insensitive), newest first."""
    needle = name.strip().lower()
    if not needle:
        return []
    found = [m for m in _movies.values() if needle in m.actors.lower()]
    return sorted(found, key=_year_key, reverse=True)


def search_by_actor(name: str) -> ActorSearchResult:
    """Cast lookup with a user-facing message for blank or unmatched input."""
    if not name or not name.strip():
        return ActorSearchResult(error_message=EMPTY_ACTOR_MESSAGE)
    found = find_movies_by_actor(name)
    if not found:
        return ActorSearchResult(error_message=NO_ACTOR_MATCH_MESSAGE.format(name=name.strip()))
    return ActorSearchResult(results=found)


def all_movies() -> List[StoredMovie]:
    return list(_movies.values())


def clear() -> None:
    _movies.clear()


async def save_selected(imdb_ids: List[str]) -> SaveMoviesResponse:
    """
    Fetch full details for each selected id and store them.

    Ids whose details cannot be fetched are skipped and reported.
    """
    unique_ids = list(dict.fromkeys(i.strip() for i in imdb_ids if i.strip()))
    records = await asyncio.gather(*[omdb.fetch_detail(i) for i in unique_ids])

    saved = [r for r in records if not r.is_placeholder]
    skipped = [r.imdb_id for r in records if r.is_placeholder]
    count = save_movies(saved)

    if skipped:
        logger.warning("Skipped %d movies without details: %s", len(skipped), skipped)
    logger.info("Saved %d movies to the store", count)
    return SaveMoviesResponse(
        saved=count,
        skipped=skipped,
        message=f"{count} movies saved to database successfully!",
    )


# ── Starter data ──────────────────────────────────────────

DEFAULT_MOVIES = (
    StoredMovie(
        imdb_id="tt0111161",
        title="The Shawshank Redemption",
        year="1994",
        rated="R",
        released="14 Oct 1994",
        runtime="142 min",
        genre="Drama",
        director="Frank Darabont",
        writer="Stephen King, Frank Darabont",
        actors="Tim Robbins, Morgan Freeman, Bob Gunton",
        plot=(
            "Two imprisoned men bond over a number of years, finding solace and "
            "eventual redemption through acts of common decency."
        ),
        language="English",
        country="USA",
        awards="Nominated for 7 Oscars. 21 wins & 43 nominations total",
        poster=(
            "https://m.media-amazon.com/images/M/MV5BMDFkYTc0MGEtZmNhMC00ZDIzLWFmNTEt"
            "ODM1ZmRlYWMwMWFmXkEyXkFqcGdeQXVyMTMxODk2OTU@._V1_SX300.jpg"
        ),
        ratings="9.3",
    ),
    StoredMovie(
        imdb_id="tt0068646",
        title="The Godfather",
        year="1972",
        rated="R",
        released="24 Mar 1972",
        runtime="175 min",
        genre="Crime, Drama",
        director="Francis Ford Coppola",
        writer="Mario Puzo, Francis Ford Coppola",
        actors="Marlon Brando, Al Pacino, James Caan",
        plot=(
            "The aging patriarch of an organized crime dynasty transfers control "
            "of his clandestine empire to his reluctant son."
        ),
        language="English, Italian, Latin",
        country="USA",
        awards="Won 3 Oscars. 31 wins & 30 nominations total",
        poster=(
            "https://m.media-amazon.com/images/M/MV5BM2MyNjYxNmUtYTAwNi00MTYxLWJmNWYt"
            "YzZlODY3ZTk3OTFlXkEyXkFqcGdeQXVyNzkwMjQ5NzM@._V1_SX300.jpg"
        ),
        ratings="9.2",
    ),
    StoredMovie(
        imdb_id="tt0468569",
        title="The Dark Knight",
        year="2008",
        rated="PG-13",
        released="18 Jul 2008",
        runtime="152 min",
        genre="Action, Crime, Drama",
        director="Christopher Nolan",
        writer="Jonathan Nolan, Christopher Nolan, David S. Goyer",
        actors="Christian Bale, Heath Ledger, Aaron Eckhart",
        plot=(
            "When the menace known as the Joker wreaks havoc and chaos on the people "
            "of Gotham, Batman must accept one of the greatest psychological and "
            "physical tests of his ability to fight injustice."
        ),
        language="English, Mandarin",
        country="USA, UK",
        awards="Won 2 Oscars. 159 wins & 163 nominations total",
        poster=(
            "https://m.media-amazon.com/images/M/MV5BMTMxNTMwODM0NF5BMl5BanBnXkFtZTcw"
            "ODAyMTk2Mw@@._V1_SX300.jpg"
        ),
        ratings="9.0",
    ),
)


def seed_defaults() -> SaveMoviesResponse:
    """Upsert the bundled starter movies. Safe to call repeatedly."""
    for movie in DEFAULT_MOVIES:
        _movies[movie.imdb_id] = movie.model_copy()
    logger.info("Seeded %d starter movies", len(DEFAULT_MOVIES))
    return SaveMoviesResponse(saved=len(DEFAULT_MOVIES), message=SEEDED_MESSAGE)
