"""
ReelSearch — FastAPI Application

REST endpoints over the search pipeline and the movie store.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from reelsearch import clients, sessions, store
from reelsearch.clients import omdb
from reelsearch.config import settings
from reelsearch.models import (
    ActorSearchResult,
    FallbackResult,
    PageResult,
    SaveMoviesRequest,
    SaveMoviesResponse,
    SearchRequest,
    StoredMovie,
    TitleSearchRequest,
)
from reelsearch.pipeline import search_with_fallback

logger = logging.getLogger(__name__)


# ── Lifespan: startup/shutdown ────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize and tear down shared resources."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    )
    logger.info("ReelSearch starting up…")
    logger.info("   OMDb: %s", settings.omdb_base_url)
    if not settings.has_omdb_key:
        logger.warning("   OMDB_API_KEY is not set; every search will come back empty")

    yield  # app runs here

    logger.info("ReelSearch shutting down…")
    await clients.close_clients()


# ── App instance ──────────────────────────────────────────

app = FastAPI(
    title="ReelSearch",
    version="1.0.0",
    description="Movie title search with fallback strategies, pagination and a local store",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    t0 = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - t0) * 1000
    logger.info(
        "%s %s → %d (%.0f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed,
    )
    return response


# ── Health endpoint ───────────────────────────────────────


@app.get("/api/health")
async def health():
    """Health check — verifies the OMDb key and connectivity."""
    status = {"status": "ok", "omdb": "unknown", "api_key": settings.has_omdb_key}
    try:
        await omdb.check_health()
        status["omdb"] = "ok"
    except Exception as exc:
        status["omdb"] = f"error: {exc}"

    status["status"] = "ok" if status["omdb"] == "ok" else "degraded"
    return status


# ── Search endpoints ──────────────────────────────────────


@app.post("/api/search", response_model=FallbackResult)
async def search(body: SearchRequest):
    """Title search that broadens the query until something matches."""
    return await search_with_fallback(body.query)


@app.post("/api/search/title", response_model=PageResult)
async def title_search(body: TitleSearchRequest):
    """Start (or restart) a paginated title search."""
    return await sessions.new_search(body.query, session_id=body.session_id)


@app.post("/api/search/title/{session_id}/more", response_model=PageResult)
async def title_search_more(session_id: str):
    """Append the next page to a paginated title search."""
    session = sessions.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail=sessions.NOT_FOUND_MESSAGE)
    if session.busy:
        raise HTTPException(status_code=409, detail=sessions.BUSY_MESSAGE)
    return await sessions.load_more(session_id)


@app.delete("/api/search/title/{session_id}")
async def delete_title_search(session_id: str):
    """Drop a paginated search session."""
    if not sessions.delete_session(session_id):
        raise HTTPException(status_code=404, detail=sessions.NOT_FOUND_MESSAGE)
    return {"status": "deleted"}


@app.post("/api/sessions/cleanup")
async def cleanup_sessions():
    """Remove expired sessions."""
    return {"removed": sessions.cleanup_expired()}


# ── Movie store endpoints ─────────────────────────────────


@app.post("/api/movies", response_model=SaveMoviesResponse)
async def save_movies(body: SaveMoviesRequest):
    """Fetch and store the selected movies."""
    return await store.save_selected(body.imdb_ids)


@app.post("/api/movies/seed", response_model=SaveMoviesResponse)
async def seed_movies():
    """Add the bundled starter movies to the store."""
    return store.seed_defaults()


@app.get("/api/movies", response_model=List[StoredMovie])
async def list_movies():
    return store.all_movies()


@app.get("/api/movies/actor", response_model=ActorSearchResult)
async def movies_by_actor(name: str = ""):
    """Stored movies featuring ``name``, newest first."""
    return store.search_by_actor(name)


@app.get("/api/movies/{imdb_id}", response_model=StoredMovie)
async def get_movie(imdb_id: str):
    movie = store.get_movie(imdb_id)
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    return movie
