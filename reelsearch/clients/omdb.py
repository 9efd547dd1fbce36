"""
ReelSearch — OMDb Client

Two-phase access to the Open Movie Database API:
  - search():       ?s=<query>&page=<n>  → one page of summaries + total count
  - fetch_detail(): ?i=<imdb id>         → one fully-detailed record

Both calls fail soft: transport errors, non-2xx statuses, malformed bodies
and OMDb's own ``"Response": "False"`` payloads are logged and turned into an
empty SearchPage / placeholder DetailedRecord. Nothing raises past this module.

Design patterns:
  - Repository: abstracts OMDb API behind clean interface
  - Adapter: normalizes OMDb's capitalised JSON into our models
  - Singleton: shared httpx client with connection pooling
  - Semaphore: bounded concurrent requests
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from reelsearch.config import settings
from reelsearch.models import UNKNOWN, DetailedRecord, SearchPage, SearchSummary

logger = logging.getLogger(__name__)

# OMDb detail field → DetailedRecord attribute
_DETAIL_FIELDS: Dict[str, str] = {
    "Rated": "rated",
    "Released": "released",
    "Runtime": "runtime",
    "Genre": "genre",
    "Director": "director",
    "Writer": "writer",
    "Actors": "actors",
    "Plot": "plot",
    "Language": "language",
    "Country": "country",
    "Awards": "awards",
    "Poster": "poster",
    "imdbRating": "imdb_rating",
    "Type": "type",
}


# ── Shared client ─────────────────────────────────────────

_client: Optional[httpx.AsyncClient] = None
_semaphore: Optional[asyncio.Semaphore] = None


async def _get_client() -> httpx.AsyncClient:
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            base_url=settings.omdb_base_url,
            timeout=httpx.Timeout(settings.omdb_timeout, connect=5.0),
        )
    return _client


def _get_semaphore() -> asyncio.Semaphore:
    global _semaphore
    if _semaphore is None:
        _semaphore = asyncio.Semaphore(max(1, settings.omdb_max_concurrency))
    return _semaphore


async def close_client() -> None:
    global _client, _semaphore
    if _client and not _client.is_closed:
        await _client.aclose()
    _client = None
    _semaphore = None


async def _get_json(params: Dict[str, Any]) -> Any:
    """GET / with the API key attached. Raises on transport or HTTP errors."""
    client = await _get_client()
    query = {**params, "apikey": settings.omdb_api_key}
    async with _get_semaphore():
        resp = await client.get("/", params=query)
    resp.raise_for_status()
    return resp.json()


# ── Parsing helpers ───────────────────────────────────────


def _is_success(data: Dict[str, Any]) -> bool:
    return "Error" not in data and str(data.get("Response", "False")).lower() == "true"


def _is_failure(data: Dict[str, Any]) -> bool:
    # Detail bodies report missing data by omitting fields, so only an
    # explicit failure counts.
    return "Error" in data or str(data.get("Response", "")).lower() == "false"


def _to_int(value: Any) -> int:
    try:
        return max(0, int(str(value).replace(",", "")))
    except (TypeError, ValueError):
        return 0


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def parse_search_page(data: Any) -> SearchPage:
    """Convert an OMDb search body into a SearchPage."""
    if not isinstance(data, dict):
        return SearchPage.empty(error="Malformed search response")
    if not _is_success(data):
        return SearchPage.empty(error=_text(data.get("Error"), "Search unsuccessful"))

    rows = data.get("Search")
    if not isinstance(rows, list):
        return SearchPage.empty(error="Malformed search response")

    summaries: List[SearchSummary] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        imdb_id = _text(row.get("imdbID"), "")
        if not imdb_id:
            continue
        summaries.append(
            SearchSummary(
                imdb_id=imdb_id,
                title=_text(row.get("Title"), ""),
                year=_text(row.get("Year"), ""),
            )
        )

    return SearchPage(summaries=summaries, total_results=_to_int(data.get("totalResults")))


def parse_detail(data: Dict[str, Any], imdb_id: str) -> DetailedRecord:
    """Convert a successful OMDb detail body into a DetailedRecord."""
    fields = {attr: _text(data.get(key), UNKNOWN) for key, attr in _DETAIL_FIELDS.items()}
    return DetailedRecord(
        imdb_id=_text(data.get("imdbID"), imdb_id),
        title=_text(data.get("Title"), ""),
        year=_text(data.get("Year"), ""),
        **fields,
    )


# ── Public API ────────────────────────────────────────────


async def search(query: str, page: int = 1) -> SearchPage:
    """Fetch one page of title summaries. Never raises."""
    term = query.strip()
    page = max(1, page)
    if not term:
        return SearchPage.empty(error="Empty query")

    try:
        data = await _get_json({"s": term, "page": page})
    except Exception as exc:
        logger.warning("OMDb search failed for %r page %d: %s", term, page, exc)
        return SearchPage.empty(error=str(exc) or exc.__class__.__name__)

    try:
        result = parse_search_page(data)
    except Exception as exc:
        logger.warning("OMDb search response for %r could not be parsed: %s", term, exc)
        return SearchPage.empty(error="Malformed search response")

    if result.ok:
        logger.debug(
            "OMDb search %r page %d: %d rows of %d",
            term, page, len(result.summaries), result.total_results,
        )
    else:
        logger.debug("OMDb search %r page %d: %s", term, page, result.error)
    return result


async def fetch_detail(imdb_id: str) -> DetailedRecord:
    """Fetch full details for one title. Returns a placeholder on any failure."""
    try:
        data = await _get_json({"i": imdb_id})
        if not isinstance(data, dict):
            raise ValueError("detail body is not an object")
        if _is_failure(data):
            logger.warning("OMDb: no details for %s (%s)", imdb_id, data.get("Error", "no response"))
            return DetailedRecord.placeholder(imdb_id)
        return parse_detail(data, imdb_id)
    except Exception as exc:
        logger.warning("OMDb detail request failed for %s: %s", imdb_id, exc)
        return DetailedRecord.placeholder(imdb_id)


async def check_health() -> Dict[str, Any]:
    """Fetch a known title to confirm OMDb is reachable. Raises on failure."""
    data = await _get_json({"i": "tt0133093"})
    if not isinstance(data, dict) or _is_failure(data):
        raise RuntimeError(data.get("Error", "unexpected response") if isinstance(data, dict) else "unexpected response")
    return {"title": data.get("Title")}
