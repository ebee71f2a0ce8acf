from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from aiohttp import web

logger = logging.getLogger("palbot.healthcheck")


def healthcheck_app(status: Callable[[], Dict[str, Any]]) -> web.Application:
    async def handle(request: web.Request) -> web.Response:
        return web.json_response({"status": "ok", "service": "palbot", **status()})

    app = web.Application()
    app.router.add_get("/", handle)
    app.router.add_get("/health", handle)
    return app


async def start_healthcheck_server(port: int, status: Callable[[], Dict[str, Any]]) -> Optional[web.AppRunner]:
    """Serve the healthcheck app on ``port``. Returns the runner, or None if it failed to bind."""
    runner = web.AppRunner(healthcheck_app(status))
    await runner.setup()
    try:
        site = web.TCPSite(runner, "0.0.0.0", port)
        await site.start()
    except OSError as e:
        logger.warning("Healthcheck server did not start: %s", e)
        await runner.cleanup()
        return None
    logger.info("Healthcheck server listening on port %s", port)
    return runner
