"""
Tests for utils/healthcheck.py
"""

import asyncio

from aiohttp import test_utils

from utils.healthcheck import healthcheck_app


def _get(path, status):
    async def scenario():
        async with test_utils.TestClient(test_utils.TestServer(healthcheck_app(status))) as client:
            resp = await client.get(path)
            return resp.status, await resp.json()

    return asyncio.run(scenario())


class TestHealthcheck:
    def test_reports_status(self):
        code, body = _get("/health", lambda: {"ready": True, "pal_names": 137})
        assert code == 200
        assert body == {"status": "ok", "service": "palbot", "ready": True, "pal_names": 137}

    def test_root_path(self):
        code, body = _get("/", lambda: {"pal_names": 0})
        assert code == 200
        assert body["pal_names"] == 0
