"""
Shared fixtures: an in-memory stand-in for the OMDb client.
"""

from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest

from reelsearch import sessions, store
from reelsearch.models import DetailedRecord, SearchPage, SearchSummary


class FakeOmdb:
    """Scripted OMDb: pages keyed by (query, page), details keyed by id."""

    def __init__(self) -> None:
        self.pages: Dict[Tuple[str, int], SearchPage] = {}
        self.details: Dict[str, DetailedRecord] = {}
        self.failing: Set[str] = set()
        self.raising: Set[str] = set()
        self.gates: Dict[Tuple[str, int], asyncio.Event] = {}
        self.detail_delays: Dict[str, float] = {}
        self.search_calls: List[Tuple[str, int]] = []
        self.detail_calls: List[str] = []

    def add_page(
        self,
        query: str,
        rows: Iterable[Tuple[str, str]],
        *,
        page: int = 1,
        total: Optional[int] = None,
    ) -> None:
        summaries = [SearchSummary(imdb_id=i, title=t, year="2000") for i, t in rows]
        for s in summaries:
            self.details.setdefault(
                s.imdb_id,
                DetailedRecord(
                    imdb_id=s.imdb_id,
                    title=s.title,
                    year=s.year,
                    genre="Drama",
                    actors="Keanu Reeves, Carrie-Anne Moss",
                    plot=f"Plot of {s.title}",
                ),
            )
        self.pages[(query, page)] = SearchPage(
            summaries=summaries,
            total_results=len(summaries) if total is None else total,
        )

    async def search(self, query: str, page: int = 1) -> SearchPage:
        self.search_calls.append((query, page))
        gate = self.gates.get((query, page))
        if gate is not None:
            await gate.wait()
        return self.pages.get((query, page), SearchPage.empty(error="Movie not found!"))

    async def fetch_detail(self, imdb_id: str) -> DetailedRecord:
        self.detail_calls.append(imdb_id)
        delay = self.detail_delays.get(imdb_id)
        if delay:
            await asyncio.sleep(delay)
        if imdb_id in self.raising:
            raise RuntimeError(f"unexpected failure for {imdb_id}")
        if imdb_id in self.failing or imdb_id not in self.details:
            return DetailedRecord.placeholder(imdb_id)
        return self.details[imdb_id]

    @property
    def searched_terms(self) -> List[str]:
        return [q for q, _ in self.search_calls]


@pytest.fixture
def fake_omdb(monkeypatch) -> FakeOmdb:
    """Patch the OMDb client functions with a scripted fake."""
    fake = FakeOmdb()
    monkeypatch.setattr("reelsearch.clients.omdb.search", fake.search)
    monkeypatch.setattr("reelsearch.clients.omdb.fetch_detail", fake.fetch_detail)
    return fake


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch):
    monkeypatch.setattr(sessions, "_sessions", {})
    store.clear()
    yield
    store.clear()
