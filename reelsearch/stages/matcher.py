"""
ReelSearch — Partial-Title Matcher

Runs one search pass, keeps the rows whose title actually contains what the
user typed, and enriches only those.

OMDb's ``s=`` search is loose; a client-side substring pass tightens the
result without another round trip.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import List, Optional, Sequence

from reelsearch.clients import omdb
from reelsearch.config import settings
from reelsearch.models import DetailedRecord, SearchSummary
from reelsearch.stages.enrichment import enrich

logger = logging.getLogger(__name__)

WILDCARD = "*"
_MIN_TYPO_KEY_LEN = 4


def filter_key(raw_query: str) -> str:
    """Lowercased query with wildcard markers removed."""
    return raw_query.lower().replace(WILDCARD, "").strip()


@lru_cache(maxsize=256)
def _missing_letter_pattern(key: str) -> Optional[re.Pattern[str]]:
    """
    Regex matching ``key`` with one letter inserted somewhere inside it,
    so "godfther" matches "the godfather".
    """
    if len(key) < _MIN_TYPO_KEY_LEN:
        return None
    variants = [
        re.escape(key[:i]) + r"[^\W_]" + re.escape(key[i:])
        for i in range(1, len(key))
    ]
    return re.compile("|".join(variants))


def title_matches(title: str, key: str, *, missing_letter: bool = False) -> bool:
    low = title.lower()
    if key in low:
        return True
    if missing_letter:
        pattern = _missing_letter_pattern(key)
        return bool(pattern and pattern.search(low))
    return False


def filter_summaries(
    summaries: Sequence[SearchSummary],
    raw_query: str,
    *,
    missing_letter: Optional[bool] = None,
) -> List[SearchSummary]:
    """Keep summaries whose title contains the filter key, in remote order."""
    if missing_letter is None:
        missing_letter = settings.match_missing_letter
    key = filter_key(raw_query)
    return [s for s in summaries if title_matches(s.title, key, missing_letter=missing_letter)]


async def match_partial_title(term: str, raw_query_for_filter: str) -> List[DetailedRecord]:
    """
    Search ``term`` (page 1), filter titles against ``raw_query_for_filter``
    and return the enriched matches.

    No detail calls are made when the search comes back empty or nothing
    survives the filter.
    """
    page = await omdb.search(term, 1)
    if not page.summaries:
        logger.debug("No search rows for %r", term)
        return []

    kept = filter_summaries(page.summaries, raw_query_for_filter)
    logger.info(
        "Search %r: %d rows, %d match %r",
        term, len(page.summaries), len(kept), filter_key(raw_query_for_filter),
    )
    if not kept:
        return []
    return await enrich(kept)
