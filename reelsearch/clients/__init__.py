"""
ReelSearch — HTTP clients for external services.

Each client module owns a lazily created shared ``httpx.AsyncClient``;
close_clients() releases all of them on shutdown.
"""

from __future__ import annotations

from reelsearch.clients import omdb


async def close_clients() -> None:
    """Clean up any open HTTP connections."""
    await omdb.close_client()
