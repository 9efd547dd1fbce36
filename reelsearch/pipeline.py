"""
ReelSearch — Fallback Search Orchestrator

Design patterns:
  - Chain of Responsibility: phases execute sequentially, the first one
    with results ends the chain
  - Strategy: each phase is a (name, query transform, trigger) descriptor
  - Facade: search_with_fallback() is the single entry point

Phase order:
  direct → wildcard (query of 3+ chars) → "the " prefix → "a " prefix → bare query
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Tuple

from reelsearch.models import FallbackResult, FallbackState
from reelsearch.stages.matcher import WILDCARD, match_partial_title

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Please enter a movie title"
NO_MATCH_MESSAGE = "No movies found matching: {query}"
WILDCARD_MIN_LEN = 3
PREFIXES: Tuple[str, ...] = ("the ", "a ", "")


@dataclass(frozen=True)
class SearchPhase:
    """One fallback strategy: how to rewrite the query and when to try it."""

    name: str
    transform: Callable[[str], str]
    applies: Callable[[str], bool] = lambda query: True


def _prefix_phase(prefix: str) -> SearchPhase:
    return SearchPhase(
        name=f"prefix:{prefix.strip()}" if prefix else "prefix:none",
        transform=lambda query: f"{prefix}{query}",
    )


PHASES: Tuple[SearchPhase, ...] = (
    SearchPhase(name="direct", transform=lambda query: query),
    SearchPhase(
        name="wildcard",
        transform=lambda query: f"{query}{WILDCARD}",
        applies=lambda query: len(query) >= WILDCARD_MIN_LEN,
    ),
    *(_prefix_phase(p) for p in PREFIXES),
)


async def _run_phases(state: FallbackState) -> None:
    for phase in PHASES:
        if not phase.applies(state.query):
            logger.debug("Phase %s skipped for %r", phase.name, state.query)
            continue

        term = phase.transform(state.query)
        state.attempted.append(phase.name)
        logger.info("Phase %s — searching %r", phase.name, term)
        state.results = await match_partial_title(term, state.query)

        if state.results:
            logger.info("Phase %s found %d movies", phase.name, len(state.results))
            return


async def search_with_fallback(query: str) -> FallbackResult:
    """
    Find movies whose title contains ``query``, broadening the search
    phase by phase until something matches.

    Returns either results with an empty error message, or no results
    with a human-readable message. Never raises.
    """
    if not query or not query.strip():
        return FallbackResult(error_message=EMPTY_QUERY_MESSAGE)

    t0 = time.perf_counter()
    state = FallbackState(query=query.strip())

    try:
        await _run_phases(state)
    except Exception as exc:
        logger.exception("Fallback search failed for %r", state.query)
        return FallbackResult(
            error_message=f"Error: {str(exc) or 'Unknown error occurred'}",
            attempted=state.attempted,
        )

    elapsed = int((time.perf_counter() - t0) * 1000)
    if not state.results:
        logger.info("No matches for %r after %s (%d ms)", state.query, state.attempted, elapsed)
        return FallbackResult(
            error_message=NO_MATCH_MESSAGE.format(query=state.query),
            attempted=state.attempted,
        )

    logger.info("Fallback search for %r complete in %d ms", state.query, elapsed)
    return FallbackResult(results=state.results, attempted=state.attempted)
