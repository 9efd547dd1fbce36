"""
Tests for the fallback search orchestrator.
"""

from __future__ import annotations

import pytest

from reelsearch import pipeline
from reelsearch.pipeline import PHASES, search_with_fallback


def test_phase_order():
    assert [p.name for p in PHASES] == ["direct", "wildcard", "prefix:the", "prefix:a", "prefix:none"]
    assert [p.transform("heat") for p in PHASES] == ["heat", "heat*", "the heat", "a heat", "heat"]


@pytest.mark.asyncio
async def test_direct_hit_stops_the_chain(fake_omdb):
    fake_omdb.add_page("Matrix", [("tt0133093", "The Matrix"), ("tt0111257", "Speed")])

    result = await search_with_fallback("Matrix")

    assert result.error_message == ""
    assert [r.title for r in result.results] == ["The Matrix"]
    assert fake_omdb.searched_terms == ["Matrix"]
    assert result.attempted == ["direct"]


@pytest.mark.asyncio
async def test_misspelled_query_recovers_with_article_prefix(fake_omdb):
    fake_omdb.add_page("the godfther", [("tt0068646", "The Godfather")])

    result = await search_with_fallback("godfther")

    assert result.error_message == ""
    assert len(result.results) == 1
    assert result.results[0].title == "The Godfather"
    assert result.results[0].plot == "Plot of The Godfather"
    assert fake_omdb.searched_terms == ["godfther", "godfther*", "the godfther"]
    assert fake_omdb.detail_calls == ["tt0068646"]


@pytest.mark.asyncio
async def test_wildcard_before_prefixes(fake_omdb):
    fake_omdb.add_page("alie*", [("tt0078748", "Alien")])

    result = await search_with_fallback("alie")

    assert [r.title for r in result.results] == ["Alien"]
    assert fake_omdb.searched_terms == ["alie", "alie*"]


@pytest.mark.asyncio
async def test_short_query_skips_wildcard(fake_omdb):
    result = await search_with_fallback("up")

    assert fake_omdb.searched_terms == ["up", "the up", "a up", "up"]
    assert "wildcard" not in result.attempted
    assert result.results == []
    assert result.error_message == "No movies found matching: up"


@pytest.mark.asyncio
async def test_all_phases_exhausted(fake_omdb):
    result = await search_with_fallback("qwxz")

    assert result.results == []
    assert result.error_message == "No movies found matching: qwxz"
    assert fake_omdb.searched_terms == ["qwxz", "qwxz*", "the qwxz", "a qwxz", "qwxz"]
    assert fake_omdb.detail_calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
async def test_blank_query_makes_no_calls(fake_omdb, query):
    result = await search_with_fallback(query)

    assert result.results == []
    assert result.error_message == pipeline.EMPTY_QUERY_MESSAGE
    assert fake_omdb.search_calls == []
    assert fake_omdb.detail_calls == []


@pytest.mark.asyncio
async def test_unexpected_failure_becomes_message(fake_omdb, monkeypatch):
    async def _explode(term, raw):
        raise RuntimeError("matcher exploded")

    monkeypatch.setattr(pipeline, "match_partial_title", _explode)

    result = await search_with_fallback("heat")

    assert result.results == []
    assert result.error_message == "Error: matcher exploded"


@pytest.mark.asyncio
async def test_results_and_error_are_exclusive(fake_omdb):
    fake_omdb.add_page("heat", [("tt0113277", "Heat")])
    for query in ("heat", "cold"):
        result = await search_with_fallback(query)
        assert bool(result.results) != bool(result.error_message)


@pytest.mark.asyncio
async def test_repeat_search_is_deterministic(fake_omdb):
    fake_omdb.add_page("the heat", [("tt0113277", "Heat"), ("tt2404463", "The Heat")])

    first = await search_with_fallback("heat")
    second = await search_with_fallback("heat")

    assert first == second
    assert [r.title for r in first.results] == ["Heat", "The Heat"]
