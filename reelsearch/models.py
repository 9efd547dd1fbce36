"""
ReelSearch — Pydantic Models

Shared data models used across the search pipeline.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

UNKNOWN = "N/A"


# ── Remote records ───────────────────────────────────────


class SearchSummary(BaseModel):
    """One row of an OMDb search page, before enrichment."""

    imdb_id: str = Field(..., min_length=1)
    title: str = ""
    year: str = ""


class DetailedRecord(BaseModel):
    """A fully-enriched movie as returned by the OMDb detail endpoint."""

    imdb_id: str
    title: str
    year: str
    rated: str = UNKNOWN
    released: str = UNKNOWN
    runtime: str = UNKNOWN
    genre: str = UNKNOWN
    director: str = UNKNOWN
    writer: str = UNKNOWN
    actors: str = UNKNOWN
    plot: str = UNKNOWN
    language: str = UNKNOWN
    country: str = UNKNOWN
    awards: str = UNKNOWN
    poster: str = UNKNOWN
    imdb_rating: str = UNKNOWN
    type: str = UNKNOWN

    @classmethod
    def placeholder(cls, imdb_id: str) -> "DetailedRecord":
        """Record for an id whose details could not be fetched."""
        return cls(imdb_id=imdb_id, title=UNKNOWN, year=UNKNOWN)

    @property
    def is_placeholder(self) -> bool:
        return self.title == UNKNOWN and self.year == UNKNOWN


class SearchPage(BaseModel):
    """Outcome of one search call. ``error`` is set when the page is empty because of a failure."""

    summaries: List[SearchSummary] = Field(default_factory=list)
    total_results: int = Field(default=0, ge=0)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def empty(cls, error: Optional[str] = None) -> "SearchPage":
        return cls(summaries=[], total_results=0, error=error)


# ── Fallback search ──────────────────────────────────────


class FallbackState(BaseModel):
    """Working state of one fallback search invocation."""

    query: str
    attempted: List[str] = Field(default_factory=list)
    results: List[DetailedRecord] = Field(default_factory=list)


class FallbackResult(BaseModel):
    results: List[DetailedRecord] = Field(default_factory=list)
    error_message: str = ""
    attempted: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.error_message


# ── Paginated title search ───────────────────────────────


class SearchSession(BaseModel):
    """Per-user state of the paginated title search."""

    session_id: str
    query: str = ""
    page: int = 1
    items: List[DetailedRecord] = Field(default_factory=list)
    total_results: int = 0
    token: int = 0
    busy: bool = False
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def has_more(self) -> bool:
        return len(self.items) < self.total_results


class PageResult(BaseModel):
    session_id: str
    query: str
    page: int
    items: List[DetailedRecord] = Field(default_factory=list)
    total_results: int = 0
    has_more: bool = False
    error_message: str = ""
    stale: bool = False


# ── Persistence ──────────────────────────────────────────


class StoredMovie(BaseModel):
    """Row shape accepted by the movie store."""

    imdb_id: str = "tt0000000"
    title: str = ""
    year: str = ""
    rated: str = ""
    released: str = ""
    runtime: str = ""
    genre: str = ""
    director: str = ""
    writer: str = ""
    actors: str = ""
    plot: str = ""
    language: str = ""
    country: str = ""
    awards: str = ""
    poster: str = ""
    ratings: str = ""
    type: str = "movie"


class ActorSearchResult(BaseModel):
    """Outcome of a cast lookup; ``error_message`` is empty on success."""

    results: List[StoredMovie] = Field(default_factory=list)
    error_message: str = ""


# ── API Contract ─────────────────────────────────────────


class SearchRequest(BaseModel):
    query: str = Field(..., max_length=200)

    @field_validator("query")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be blank")
        return value


class TitleSearchRequest(SearchRequest):
    session_id: Optional[str] = None


class SaveMoviesRequest(BaseModel):
    imdb_ids: List[str] = Field(..., min_length=1)


class SaveMoviesResponse(BaseModel):
    saved: int
    skipped: List[str] = Field(default_factory=list)
    message: str
