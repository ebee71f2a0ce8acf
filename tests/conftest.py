"""
Shared pytest fixtures for the palbot test suite.

Provides:
    - pal_payload: one Pal entry as the Pal API returns it (camelCase)
    - envelope: builds the paginated {content, page, limit, count, total} wrapper
    - pal_api: runs a coroutine against a local aiohttp server standing in
      for the Pal API
"""

import asyncio
import sys
from pathlib import Path

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

# ---------------------------------------------------------------------------
# Ensure the top-level packages are importable regardless of where pytest runs
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from providers.palworld import PalworldClient  # noqa: E402


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def pal_payload():
    """Return a complete Pal entry, shaped like the upstream JSON."""
    return {
        "id": 12,
        "key": "012",
        "image": "/public/images/pals/chillet.png",
        "name": "Chillet",
        "wiki": "https://palworld.fandom.com/wiki/Chillet",
        "types": ["ice", "dragon"],
        "imageWiki": "https://static.wikia.nocookie.net/palworld/images/chillet.png",
        "suitability": [
            {"type": "cooling", "level": 1},
            {"type": "gathering", "level": 1},
        ],
        "drops": ["chillet_meat", "ice_organ"],
        "aura": {"name": "cheek_pouch", "description": "Increases the player's max carrying capacity."},
        "description": "It gets excited when it sees something round.",
    }


@pytest.fixture
def envelope():
    """Return a builder for the paginated response wrapper."""

    def _build(content, **meta):
        body = {"content": content, "page": 1, "limit": 10, "count": len(content), "total": len(content)}
        body.update(meta)
        return body

    return _build


@pytest.fixture
def pal_api():
    """Return ``run(handler, fn)``.

    ``handler`` is an aiohttp request handler mounted at ``/api/pals``;
    ``fn`` is an async callable receiving a PalworldClient pointed at it.
    Every request seen by the server is appended to ``run.requests``.
    """

    requests = []

    async def _serve(handler, fn, base_path, timeout):
        async def recording(request):
            requests.append(request)
            return await handler(request)

        app = web.Application()
        app.router.add_get("/api/pals", recording)
        async with TestServer(app) as server:
            async with aiohttp.ClientSession() as session:
                client = PalworldClient(session, str(server.make_url(base_path)), timeout=timeout)
                return await fn(client)

    def run(handler, fn, base_path="/api/pals", timeout=5):
        return asyncio.run(_serve(handler, fn, base_path, timeout))

    run.requests = requests
    return run
