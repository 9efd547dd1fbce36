"""
ReelSearch — Result Enrichment

Design patterns:
  - Parallel Aggregator: fetches details for every summary concurrently
  - Order-preserving fan-out: results come back in summary order

Second phase of the search-then-detail protocol: each SearchSummary is
turned into a DetailedRecord with one OMDb detail call.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from reelsearch.clients import omdb
from reelsearch.models import DetailedRecord, SearchSummary

logger = logging.getLogger(__name__)


async def _enrich_one(summary: SearchSummary) -> DetailedRecord:
    try:
        return await omdb.fetch_detail(summary.imdb_id)
    except Exception as exc:
        logger.warning("Enrichment failed for %s: %s", summary.imdb_id, exc)
        return DetailedRecord.placeholder(summary.imdb_id)


async def enrich(summaries: Sequence[SearchSummary]) -> List[DetailedRecord]:
    """
    Fetch details for every summary in parallel.

    The result has one record per summary, in the same order. A failed
    detail call yields a placeholder for that item only.
    """
    if not summaries:
        return []

    records = await asyncio.gather(*[_enrich_one(s) for s in summaries])

    failed = sum(1 for r in records if r.is_placeholder)
    if failed:
        logger.info("Enriched %d / %d movies", len(records) - failed, len(records))
    else:
        logger.debug("Enriched %d movies", len(records))
    return list(records)


async def fetch_page(
    query: str, page: int = 1
) -> Tuple[List[DetailedRecord], int, Optional[str]]:
    """
    Search one page and enrich every row.

    Returns (records, total_results, error). ``error`` is the search
    failure reported by the client, or None when the page came back.
    """
    result = await omdb.search(query, page)
    if not result.summaries:
        return [], result.total_results, result.error
    records = await enrich(result.summaries)
    return records, result.total_results, None
