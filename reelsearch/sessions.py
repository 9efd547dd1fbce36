"""
ReelSearch — Paginated Title Search Sessions

In-memory session store for the primary title search. Each session owns
its query, current page and accumulated results; "load more" appends the
next page in order.

Every fetch is tagged with the session's current token. A new search bumps
the token, so any response still in flight for the previous query is
dropped instead of overwriting newer results. Only one fetch per session
may be outstanding; a "load more" issued while busy is rejected.

Unlike the fallback search, this flow shows OMDb's rows as they come,
without the client-side title filter.
"""

from __future__ import annotations

import itertools
import logging
import uuid
from datetime import datetime, timedelta
from typing import Dict, Optional

from reelsearch.config import settings
from reelsearch.models import PageResult, SearchSession
from reelsearch.stages.enrichment import fetch_page

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Please enter a movie title"
BUSY_MESSAGE = "A search is already in progress"
NOT_FOUND_MESSAGE = "Search session not found"

# ── In-memory store ───────────────────────────────────────

_sessions: Dict[str, SearchSession] = {}
_tokens = itertools.count(1)


def get_or_create_session(session_id: Optional[str] = None) -> SearchSession:
    """Return existing session or create a new one, pruning expired ones first."""
    if session_id and session_id in _sessions:
        session = _sessions[session_id]
        session.updated_at = datetime.utcnow()
        return session

    removed = cleanup_expired()
    if removed:
        logger.info("Pruned %d expired search sessions", removed)

    new_id = session_id or str(uuid.uuid4())
    session = SearchSession(session_id=new_id)
    _sessions[new_id] = session
    return session


def get_session(session_id: str) -> Optional[SearchSession]:
    """Get a session by ID."""
    return _sessions.get(session_id)


def delete_session(session_id: str) -> bool:
    """Delete a session. Returns True if it existed."""
    return _sessions.pop(session_id, None) is not None


def cleanup_expired() -> int:
    """Remove sessions idle longer than the TTL. Returns count removed."""
    cutoff = datetime.utcnow() - timedelta(minutes=settings.session_ttl_minutes)
    expired = [sid for sid, s in _sessions.items() if s.updated_at < cutoff and not s.busy]
    for sid in expired:
        _sessions.pop(sid, None)
    return len(expired)


def _result(session: SearchSession, *, error_message: str = "", stale: bool = False) -> PageResult:
    return PageResult(
        session_id=session.session_id,
        query=session.query,
        page=session.page,
        items=list(session.items),
        total_results=session.total_results,
        has_more=session.has_more,
        error_message=error_message,
        stale=stale,
    )


# ── Pagination ────────────────────────────────────────────


async def new_search(query: str, session_id: Optional[str] = None) -> PageResult:
    """
    Start a fresh title search, resetting the session to page 1.

    A search already running for this session is superseded: its response
    will be discarded when it arrives.
    """
    if not query or not query.strip():
        return PageResult(
            session_id=session_id or "",
            query=query or "",
            page=1,
            error_message=EMPTY_QUERY_MESSAGE,
        )

    session = get_or_create_session(session_id)
    token = next(_tokens)
    session.query = query.strip()
    session.page = 1
    session.items = []
    session.total_results = 0
    session.token = token
    session.busy = True
    logger.info("Session %s — new search %r", session.session_id, session.query)

    try:
        records, total, error = await fetch_page(session.query, 1)
    except Exception as exc:
        logger.exception("Title search failed for %r", session.query)
        if session.token != token:
            return _result(session, stale=True)
        return _result(session, error_message=f"Error: {str(exc) or 'Unknown error occurred'}")
    finally:
        if session.token == token:
            session.busy = False

    if session.token != token:
        logger.info("Session %s — dropping stale page 1 for %r", session.session_id, query.strip())
        return _result(session, stale=True)

    session.items = records
    session.total_results = total
    session.updated_at = datetime.utcnow()
    if error:
        logger.warning("Session %s — page 1 failed for %r: %s", session.session_id, session.query, error)
        return _result(session, error_message=f"Error: {error}")
    logger.info(
        "Session %s — page 1: %d of %d results",
        session.session_id, len(records), total,
    )
    return _result(session)


async def load_more(session_id: str) -> PageResult:
    """
    Fetch the next page and append it to the session's results.

    Rejected without any network call when another fetch for the same
    session is still outstanding.
    """
    session = get_session(session_id)
    if session is None:
        return PageResult(session_id=session_id, query="", page=0, error_message=NOT_FOUND_MESSAGE)
    if not session.query:
        return _result(session, error_message=EMPTY_QUERY_MESSAGE)
    if session.busy:
        logger.info("Session %s — load more rejected, fetch in flight", session_id)
        return _result(session, error_message=BUSY_MESSAGE)

    token = session.token
    next_page = session.page + 1
    session.busy = True

    try:
        records, total, error = await fetch_page(session.query, next_page)
    except Exception as exc:
        logger.exception("Loading page %d failed for %r", next_page, session.query)
        if session.token != token:
            return _result(session, stale=True)
        return _result(
            session,
            error_message=f"Error loading more results: {str(exc) or 'Unknown error occurred'}",
        )
    finally:
        if session.token == token:
            session.busy = False

    if session.token != token:
        logger.info("Session %s — dropping stale page %d", session_id, next_page)
        return _result(session, stale=True)

    if error:
        # Page stays put so the next call retries the same page.
        logger.warning("Session %s — page %d failed: %s", session_id, next_page, error)
        session.updated_at = datetime.utcnow()
        return _result(session, error_message=f"Error loading more results: {error}")

    session.page = next_page
    session.items.extend(records)
    if not session.total_results:
        session.total_results = total
    session.updated_at = datetime.utcnow()
    logger.info(
        "Session %s — page %d: +%d, %d of %d loaded",
        session_id, next_page, len(records), len(session.items), session.total_results,
    )
    return _result(session)
